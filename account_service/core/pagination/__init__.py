"""Offset pagination."""

from account_service.core.pagination.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    Page,
    PageParams,
)

__all__ = ["DEFAULT_LIMIT", "DEFAULT_PAGE", "MAX_LIMIT", "Page", "PageParams"]
