"""Logging configuration setup.

- dictConfig for the root logger and its filters
- QueueHandler + QueueListener so handlers never block the event loop
- ContextInjectingFilter for automatic context propagation
- JSONL or plain text output, console and optional rotating file
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from account_service.infra.logging.context import ContextInjectingFilter
from account_service.infra.logging.formatters import DEFAULT_FMT_KEYS, JSONFormatter

if TYPE_CHECKING:
    from account_service.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records.

    Registered with atexit; safe to call more than once.
    """
    global _log_queue, _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging once across entrypoints.

    Args:
        log_settings: Logging settings; loaded with get_logging_settings() if omitted.
        force: Reconfigure even if logging was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from account_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **configure_kwargs})
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    service_name: str = "account-service",
    json_logs: bool = True,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    capture_warnings: bool = True,
    logger_levels: dict[str, str] | None = None,
    **kwargs: Any,
) -> None:
    """Configure the root logger with dictConfig and a queue handler.

    All handlers hang off a QueueListener; the root logger only gets a
    QueueHandler, and application loggers propagate up to it.

    Args:
        log_level: Root logger level.
        service_name: Static ``service`` field on JSON records.
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Log to stderr.
        file_path: Rotating log file, or None to disable file logging.
        file_max_bytes: Size at which the log file rotates.
        file_backup_count: Number of rotated files kept.
        include_context: Inject the ContextVar log context into records.
        capture_warnings: Route ``warnings`` through logging.
        logger_levels: Per-logger level overrides, e.g. {"pymongo": "WARNING"}.
    """
    global _log_queue, _listener

    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs)))

    shutdown()

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {
                "level": log_level.upper(),
                "handlers": [],
            },
            "loggers": {
                name: {"level": level.upper()} for name, level in (logger_levels or {}).items()
            },
        }
    )

    if json_logs:
        formatter: logging.Formatter = JSONFormatter(
            fmt_keys=dict(DEFAULT_FMT_KEYS),
            static={"service": service_name},
        )
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    handlers: list[logging.Handler] = []
    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)
    if path:
        file_handler = RotatingFileHandler(
            path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    _log_queue = Queue()
    _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    # Logger filters do not see propagated records; the handler filter
    # runs in the caller's context, where the ContextVar is set.
    queue_handler = QueueHandler(_log_queue)
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(queue_handler)
