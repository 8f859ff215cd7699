"""Strawberry extensions for the account GraphQL API.

- Query depth limiting
- Per-client operation throttling
- Request-context binding for the activity log
- Internal error masking (production)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from strawberry.extensions import MaskErrors, QueryDepthLimiter

from account_service.features.graphql.error_handler import INTERNAL_SERVER_ERROR, is_user_facing_error
from account_service.features.graphql.extensions.request_context import (
    RequestContextExtension,
    build_request_context,
)
from account_service.features.graphql.extensions.throttle import (
    OperationThrottle,
    ThrottleExtension,
    client_key,
)

if TYPE_CHECKING:
    from account_service.core.settings import GraphQLSettings

logger = logging.getLogger(__name__)

__all__ = [
    "OperationThrottle",
    "RequestContextExtension",
    "ThrottleExtension",
    "build_request_context",
    "client_key",
    "get_extensions",
]


def get_extensions(settings: GraphQLSettings, *, mask_errors: bool = False) -> list[Any]:
    """Strawberry extensions for the schema, in execution order."""
    extensions: list[Any] = [
        QueryDepthLimiter(max_depth=settings.max_query_depth),
        RequestContextExtension,
    ]
    if settings.throttle_enabled:
        extensions.append(ThrottleExtension)
    if mask_errors:
        extensions.append(
            MaskErrors(
                should_mask_error=lambda error: not is_user_facing_error(error),
                error_message=f"Unexpected error ({INTERNAL_SERVER_ERROR})",
            )
        )

    logger.debug(
        "GraphQL extensions configured",
        extra={
            "max_depth": settings.max_query_depth,
            "throttle": settings.throttle_enabled,
            "mask_errors": mask_errors,
        },
    )
    return extensions
