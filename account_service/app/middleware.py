"""Middleware configuration for FastAPI application."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from account_service.core.settings import get_app_settings
from account_service.infra.logging import clear_log_context, set_log_context

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, in the log context and the response.

    The id is taken from ``X-Request-ID`` when the client sends one.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        set_log_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def configure_middleware(app: FastAPI) -> None:
    """Install CORS and request-id middleware."""
    app_settings = get_app_settings()

    cors_origins = app_settings.cors_origins or ["*"]
    logger.info("Configuring CORS", extra={"origins": cors_origins})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    app.add_middleware(RequestIDMiddleware)
