"""GraphQL error translation and production masking.

Resolvers run their service calls inside ``translate_errors()``; any
``AppException`` or pydantic ``ValidationError`` leaving the block becomes a
``GraphQLError`` whose ``extensions.code`` clients can switch on.

Usage:
    with translate_errors():
        user = await services.users.get_user(input.id)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from graphql import GraphQLError
from pydantic import ValidationError

from account_service.core.exceptions import AppException

logger = logging.getLogger(__name__)

__all__ = [
    "BAD_USER_INPUT",
    "INTERNAL_SERVER_ERROR",
    "app_error_to_graphql",
    "is_user_facing_error",
    "translate_errors",
    "validation_error_to_graphql",
]

BAD_USER_INPUT = "BAD_USER_INPUT"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

# Codes that are safe to show verbatim
USER_FACING_CODES = frozenset(
    {
        BAD_USER_INPUT,
        "UNAUTHENTICATED",
        "FORBIDDEN",
        "NOT_FOUND",
        "CONFLICT",
        "TOO_MANY_REQUESTS",
        "GRAPHQL_VALIDATION_FAILED",
    }
)


def app_error_to_graphql(exc: AppException) -> GraphQLError:
    extensions: dict[str, Any] = {"code": exc.code, "status": exc.status_code}
    extensions.update({k: v for k, v in exc.extra.items() if v is not None})
    return GraphQLError(exc.detail, extensions=extensions, original_error=exc)


def validation_error_to_graphql(exc: ValidationError) -> GraphQLError:
    """One GraphQL error listing every failing field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors(include_url=False, include_input=False)
    ]
    return GraphQLError(
        "Invalid input",
        extensions={"code": BAD_USER_INPUT, "errors": errors},
        original_error=exc,
    )


@contextmanager
def translate_errors() -> Iterator[None]:
    try:
        yield
    except AppException as exc:
        logger.debug("Application error in resolver: %s", exc.detail, extra={"code": exc.code})
        raise app_error_to_graphql(exc) from exc
    except ValidationError as exc:
        raise validation_error_to_graphql(exc) from exc


def is_user_facing_error(error: GraphQLError) -> bool:
    """Errors carrying a known client code, or raised by graphql-core validation."""
    code = (error.extensions or {}).get("code")
    if code in USER_FACING_CODES:
        return True
    # Parse and validation errors have no original exception
    return error.original_error is None
