"""Tests for application exception handlers."""

from __future__ import annotations

import json

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from account_service.app.exception_handlers import (
    PROBLEM_JSON,
    app_exception_handler,
    configure_exception_handlers,
    unhandled_exception_handler,
)
from account_service.core.exceptions import NotFoundException


def _build_request(path: str = "/test") -> Request:
    """Create a minimal ASGI request for handler tests."""
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": [],
        "query_string": b"",
        "client": ("test", 1234),
        "server": ("test", 80),
        "scheme": "http",
    }
    return Request(scope)


async def test_app_exception_handler_renders_problem_details():
    request = _build_request()
    request.state.request_id = "req-1"

    response = await app_exception_handler(
        request, NotFoundException(detail="User not found", extra={"user_id": "1"}),
    )

    assert response.status_code == 404
    assert response.media_type == PROBLEM_JSON
    body = json.loads(response.body)
    assert body["type"] == "not-found"
    assert body["detail"] == "User not found"
    assert body["user_id"] == "1"
    assert body["request_id"] == "req-1"
    assert body["instance"] == "http://test/test"


async def test_unhandled_exception_is_opaque():
    response = await unhandled_exception_handler(_build_request(), RuntimeError("secret detail"))

    body = json.loads(response.body)
    assert response.status_code == 500
    assert "secret detail" not in response.body.decode()
    assert body["detail"] == "An unexpected error occurred"


@pytest.mark.parametrize(("path", "status"), [("/missing", 404), ("/items/abc", 422)])
async def test_handlers_are_registered(path, status):
    app = FastAPI()
    configure_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundException(detail="nope")

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"id": item_id}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(path)

    assert response.status_code == status
    assert response.headers["content-type"] == PROBLEM_JSON
