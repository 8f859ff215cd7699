"""Per-request ambient context.

The GraphQL layer binds a ``RequestContext`` for the duration of each
operation. Code that runs outside a request (background jobs, CLI) sees an
empty context: no body, no user.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class RequestUser:
    """The authenticated caller, reduced to what auditing needs."""

    id: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Raw request body and acting user of the in-flight request.

    ``body`` holds the GraphQL envelope (``query``, ``operationName``,
    ``variables``) as received. Consumers must treat it as read-only.

    ``operation_fields`` names the root fields of the executed operation and
    ``arguments`` holds their argument values with variables substituted, so
    literals written inline in the query are visible without the query text.
    """

    body: Mapping[str, Any] = field(default_factory=dict)
    user: RequestUser | None = None
    operation_fields: tuple[str, ...] = ()
    arguments: Mapping[str, Any] = field(default_factory=dict)

    @property
    def variables(self) -> Mapping[str, Any] | None:
        variables = self.body.get("variables")
        if isinstance(variables, Mapping):
            return variables
        return None


EMPTY_CONTEXT = RequestContext()

_request_context: ContextVar[RequestContext] = ContextVar(
    "request_context", default=EMPTY_CONTEXT
)


def get_request_context() -> RequestContext:
    """Return the context bound for the current task, or an empty one."""
    return _request_context.get()


@contextmanager
def bind_request_context(context: RequestContext) -> Iterator[RequestContext]:
    """Bind ``context`` for the enclosed block, restoring the previous one after.

    Tasks created inside the block inherit a copy of the binding.
    """
    token = _request_context.set(context)
    try:
        yield context
    finally:
        _request_context.reset(token)


__all__ = [
    "EMPTY_CONTEXT",
    "RequestContext",
    "RequestUser",
    "bind_request_context",
    "get_request_context",
]
