"""GraphQL schema assembly.

Combines the Query and Mutation root types into one schema with the
configured extensions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry

from account_service.core.settings import get_app_settings, get_graphql_settings
from account_service.features.graphql.error_handler import is_user_facing_error
from account_service.features.graphql.extensions import get_extensions
from account_service.features.graphql.resolvers import Mutation, Query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

    from account_service.core.settings import GraphQLSettings

logger = logging.getLogger(__name__)


class AccountSchema(strawberry.Schema):
    """Schema that logs client errors quietly and internal errors loudly."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        operation_name = execution_context.operation_name if execution_context else None
        for error in errors:
            if is_user_facing_error(error):
                logger.info(
                    "GraphQL client error: %s",
                    error.message,
                    extra={
                        "operation_name": operation_name,
                        "code": (error.extensions or {}).get("code"),
                        "path": error.path,
                    },
                )
            else:
                logger.error(
                    "GraphQL internal error: %s",
                    error.message,
                    exc_info=error.original_error,
                    extra={"operation_name": operation_name, "path": error.path},
                )


def create_schema(
    settings: GraphQLSettings | None = None,
    *,
    mask_errors: bool | None = None,
) -> AccountSchema:
    """Build the schema; internal errors are masked in production by default."""
    settings = settings or get_graphql_settings()
    if mask_errors is None:
        mask_errors = get_app_settings().environment == "production"
    schema = AccountSchema(
        query=Query,
        mutation=Mutation,
        extensions=get_extensions(settings, mask_errors=mask_errors),
    )
    logger.info("GraphQL schema created")
    return schema


__all__ = ["AccountSchema", "create_schema"]
