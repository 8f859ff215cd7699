"""Global exception handlers for FastAPI application.

GraphQL errors are reported inside the GraphQL response; these handlers
cover the plain HTTP routes with RFC 7807 problem details.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from account_service.core.exceptions import AppException

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an ``AppException`` as problem details."""
    request_id = _get_request_id(request)
    logger.warning(
        "Application exception occurred",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    body = exc.to_problem()
    body.setdefault("instance", str(request.url))
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(status_code=exc.status_code, content=body, media_type=PROBLEM_JSON)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    body = {
        "type": "validation-error",
        "title": "Validation Error",
        "status": status.HTTP_422_UNPROCESSABLE_ENTITY,
        "detail": "Request validation failed",
        "instance": str(request.url),
        "errors": errors,
    }
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body, media_type=PROBLEM_JSON,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer with an opaque 500."""
    request_id = _get_request_id(request)
    logger.exception(
        "Unhandled exception",
        extra={"request_id": request_id, "path": request.url.path, "method": request.method},
    )
    body = {
        "type": "internal-error",
        "title": "Internal Server Error",
        "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "detail": "An unexpected error occurred",
    }
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body, media_type=PROBLEM_JSON,
    )


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
