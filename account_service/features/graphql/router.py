"""GraphQL router for FastAPI integration.

Provides:
- the GraphQL endpoint (mounted at ``GRAPHQL_PATH`` by app/router.py)
- the configured GraphQL IDE
- request context with the shared services and the bearer-token user
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from fastapi import Request, Response
from strawberry.fastapi import GraphQLRouter

from account_service.core.exceptions import UnauthorizedException
from account_service.core.settings import get_auth_settings, get_graphql_settings
from account_service.features.graphql.context import GraphQLContext
from account_service.features.graphql.schema import create_schema

if TYPE_CHECKING:
    from account_service.core.settings import GraphQLSettings

logger = logging.getLogger(__name__)


async def get_graphql_context(request: Request, response: Response) -> GraphQLContext:
    """Create the GraphQL context for one request.

    A missing token yields an anonymous context. A rejected token also
    yields one, with the reason kept on ``auth_error``; protected fields
    then refuse the operation.
    """
    services = request.app.state.services
    header = request.headers.get(get_auth_settings().token_header)
    token = services.auth.tokens.extract_bearer(header)

    user = None
    auth_error = None
    if token:
        try:
            user = await services.auth.authenticate(token)
        except UnauthorizedException as exc:
            auth_error = exc
            logger.info("Bearer token rejected", extra={"reason": exc.type})

    return GraphQLContext(
        request=request,
        response=response,
        services=services,
        user=user,
        auth_error=auth_error,
    )


def create_graphql_router(settings: GraphQLSettings | None = None) -> GraphQLRouter:
    """Create the GraphQL router with settings-based configuration.

    Routes are registered at the router root; the app mounts it under
    ``settings.path``.
    """
    settings = settings or get_graphql_settings()

    return GraphQLRouter(
        create_schema(settings),
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
    )


__all__ = ["create_graphql_router", "get_graphql_context"]
