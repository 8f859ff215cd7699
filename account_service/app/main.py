"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from account_service.app.exception_handlers import configure_exception_handlers
from account_service.app.lifespan import lifespan
from account_service.app.middleware import configure_middleware
from account_service.app.router import setup_routers
from account_service.core.settings import get_app_settings, get_graphql_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are loaded once and cached via LRU cache.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        docs_url=app_settings.docs_url,
        redoc_url=None,
        openapi_url=app_settings.openapi_url,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Exception handlers before middleware
    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app, app_settings, get_graphql_settings())
    return app


# Application instance for uvicorn
app = create_app()
