"""Core service base classes."""

from account_service.core.services.base import BaseService

__all__ = ["BaseService"]
