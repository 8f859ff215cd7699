"""Main entry point for account-service.

Runs the FastAPI application under uvicorn with settings from configuration.
"""

from __future__ import annotations

import sys
from typing import NoReturn


def run_fastapi_server() -> NoReturn:
    """Run the FastAPI application server."""
    import uvicorn

    from account_service.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "account_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )
    sys.exit(0)


def main() -> NoReturn:
    run_fastapi_server()


if __name__ == "__main__":
    main()
