"""Logging infrastructure.

Structured logging with:
- JSONL output with OpenTelemetry trace correlation
- automatic context injection (request_id, user_id, ...)
- QueueHandler + QueueListener for non-blocking I/O
- lazy evaluation for expensive debug output

Basic usage:
    import logging
    from account_service.infra.logging import set_log_context

    logger = logging.getLogger(__name__)
    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # includes request_id
"""

from account_service.infra.logging.config import configure_logging, setup_logging, shutdown
from account_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from account_service.infra.logging.formatters import JSONFormatter
from account_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
