"""Offset pagination schemas.

``Page`` mirrors the envelope GraphQL clients of this service expect:
docs plus totals and navigation hints, computed from page/limit/total.
"""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class PageParams(BaseModel):
    """Requested page (1-based) and page size."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, description="1-based page number")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    """One page of results with navigation metadata.

    Attributes:
        docs: Items on this page.
        total_docs: Items across all pages.
        limit: Page size.
        page: Current page (1-based).
        total_pages: Number of pages (at least 1).
        offset: Items skipped before this page.
        paging_counter: 1-based index of the first item on this page.
        has_prev_page: Whether a previous page exists.
        has_next_page: Whether a next page exists.
        prev_page: Previous page number or None.
        next_page: Next page number or None.
    """

    docs: list[T] = Field(default_factory=list)
    total_docs: int = 0
    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE
    total_pages: int = 1
    offset: int = 0
    paging_counter: int = 1
    has_prev_page: bool = False
    has_next_page: bool = False
    prev_page: int | None = None
    next_page: int | None = None

    @classmethod
    def build(cls, docs: list[T], total_docs: int, params: PageParams) -> Page[T]:
        """Assemble a page from the fetched docs and the total count."""
        total_pages = max(1, math.ceil(total_docs / params.limit))
        has_prev = params.page > 1
        has_next = params.page < total_pages
        return cls(
            docs=docs,
            total_docs=total_docs,
            limit=params.limit,
            page=params.page,
            total_pages=total_pages,
            offset=params.offset,
            paging_counter=params.offset + 1,
            has_prev_page=has_prev,
            has_next_page=has_next,
            prev_page=params.page - 1 if has_prev else None,
            next_page=params.page + 1 if has_next else None,
        )
