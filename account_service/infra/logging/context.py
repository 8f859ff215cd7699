"""Context injection for structured logging.

Request-scoped fields (request id, user id, operation name) live in a
ContextVar, so every log call made while serving a request carries them
without passing them around explicitly.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        set_log_context(request_id="abc-123")
        logger.info("Processing request")  # record carries request_id
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop all logging context for the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the ContextVar log context onto every record.

    ``configure_logging`` installs it on the root queue handler, so every
    application logger benefits. Existing record attributes win.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
