"""Per-client operation throttling.

``OperationThrottle`` counts operations per client key in fixed windows and
lives for the lifetime of the app; ``ThrottleExtension`` consults it once per
operation and rejects the operation with ``TOO_MANY_REQUESTS`` when the
client is over budget. Operations executed without an HTTP request (tests,
in-process calls) are not throttled.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from account_service.core.exceptions import RateLimitException

logger = logging.getLogger(__name__)

__all__ = ["OperationThrottle", "ThrottleExtension", "client_key"]


@dataclass(slots=True)
class _Window:
    started_at: float
    count: int


class OperationThrottle:
    """Fixed-window counter keyed by client.

    Example:
        throttle = OperationThrottle(limit=10, window_seconds=60)
        retry_after = throttle.hit("ip:10.0.0.1")
        if retry_after is not None:
            ...  # over budget for ``retry_after`` more seconds
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> float | None:
        """Count one operation for ``key``; seconds to wait when over the limit, else None."""
        now = self._clock()
        with self._lock:
            self._evict(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = _Window(started_at=now, count=0)
                self._windows[key] = window
            if window.count >= self.limit:
                return max(0.0, window.started_at + self.window_seconds - now)
            window.count += 1
            return None

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


def client_key(context: object) -> str | None:
    """Throttle key for a GraphQL context; None when there is no HTTP request.

    Authenticated callers are keyed by user id, others by client address.
    """
    request = getattr(context, "request", None)
    if request is None:
        return None
    user = getattr(context, "user", None)
    if user is not None:
        return f"user:{user.id}"
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"
    if request.client:
        return f"ip:{request.client.host}"
    return "anonymous"


class ThrottleExtension(SchemaExtension):
    """Reject operations from clients that exhausted their window budget.

    Reads the shared ``OperationThrottle`` from ``context.services.throttle``.
    """

    def on_execute(self) -> Iterator[None]:
        context = self.execution_context.context
        services = getattr(context, "services", None)
        throttle = getattr(services, "throttle", None)
        key = client_key(context)
        if throttle is not None and key is not None:
            retry_after = throttle.hit(key)
            if retry_after is not None:
                logger.warning(
                    "GraphQL throttle limit exceeded",
                    extra={
                        "client": key,
                        "limit": throttle.limit,
                        "window_seconds": throttle.window_seconds,
                        "operation_name": self.execution_context.operation_name,
                    },
                )
                exc = RateLimitException(
                    detail=(
                        f"Too many requests. Limit: {throttle.limit} per "
                        f"{throttle.window_seconds:g} seconds"
                    ),
                )
                raise GraphQLError(
                    exc.detail,
                    extensions={
                        "code": exc.code,
                        "limit": throttle.limit,
                        "window_seconds": throttle.window_seconds,
                        "retry_after": math.ceil(retry_after),
                    },
                )
        yield
