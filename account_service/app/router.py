"""Router setup: GraphQL endpoint plus a health probe."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request

from account_service.core.settings import get_app_settings, get_graphql_settings
from account_service.features.graphql.router import create_graphql_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from account_service.core.settings import AppSettings, GraphQLSettings

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Liveness plus MongoDB reachability."""
    app_settings = get_app_settings()
    mongo = getattr(request.app.state, "mongo", None)
    database = "disabled"
    if mongo is not None:
        database = "ok" if await mongo.ping() else "unreachable"
    return {
        "status": "ok",
        "service": app_settings.service_name,
        "version": app_settings.version,
        "database": database,
    }


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings | None = None,
    graphql_settings: GraphQLSettings | None = None,
) -> None:
    """Register the health probe and the GraphQL endpoint."""
    app_settings = app_settings or get_app_settings()
    graphql_settings = graphql_settings or get_graphql_settings()

    app.include_router(health_router, tags=["health"])
    app.include_router(
        create_graphql_router(graphql_settings),
        prefix=graphql_settings.path,
        tags=["graphql"],
    )
    logger.info(
        "Routers registered",
        extra={"graphql_path": graphql_settings.path, "service": app_settings.service_name},
    )
