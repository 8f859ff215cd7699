"""Permission classes for field-level authentication in GraphQL.

Usage:
    @strawberry.field(permission_classes=[IsAuthenticated])
    async def me(self, info: Info[GraphQLContext, None]) -> UserType:
        ...
"""

from __future__ import annotations

import logging
from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from account_service.core.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

__all__ = ["IsAuthenticated"]


class IsAuthenticated(BasePermission):
    """Require a valid access token.

    Expired and invalid tokens leave the context without a user, so they
    are rejected the same way as a missing token.
    """

    message = "Authentication required"
    error_extensions = {"code": UnauthorizedException.code}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        context = info.context
        if getattr(context, "user", None) is not None:
            return True

        logger.warning(
            "Unauthenticated access attempt",
            extra={
                "field": info.field_name,
                "parent_type": info.parent_type.name if info.parent_type else None,
                "reason": getattr(getattr(context, "auth_error", None), "type", "missing-token"),
            },
        )
        return False
