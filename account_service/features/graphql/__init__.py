"""GraphQL feature module using Strawberry.

This module provides the account GraphQL API with:
- user queries and mutations with offset pagination
- signup, login and token refresh
- depth limiting, per-client throttling and activity-log context binding
"""

from __future__ import annotations

from typing import Any

__all__ = ["create_graphql_router", "create_schema"]


def __getattr__(name: str) -> Any:
    if name == "create_graphql_router":
        from account_service.features.graphql.router import create_graphql_router

        return create_graphql_router
    if name == "create_schema":
        from account_service.features.graphql.schema import create_schema

        return create_schema
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
