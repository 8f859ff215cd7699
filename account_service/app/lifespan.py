"""Application lifespan: logging, MongoDB and service wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from pymongo.errors import PyMongoError

from account_service.app.container import build_services
from account_service.core.settings import get_app_settings, get_logging_settings, get_mongo_settings
from account_service.infra.database import MongoManager
from account_service.infra.logging import setup_logging

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect to MongoDB and build the services on startup; drain and close on shutdown.

    Services already present on ``app.state`` (tests) are left in place.
    """
    app_settings = get_app_settings()
    mongo_settings = get_mongo_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app_settings.service_name, "environment": app_settings.environment},
    )

    mongo: MongoManager | None = None
    if getattr(app.state, "services", None) is None:
        if not mongo_settings.enabled:
            logger.warning("MongoDB disabled; GraphQL operations will fail until services are set")
        else:
            mongo = MongoManager(mongo_settings)
            db = await mongo.connect()
            if mongo_settings.ensure_indexes:
                try:
                    await mongo.ensure_indexes()
                except PyMongoError:
                    logger.exception("Index creation failed, continuing without it")
            app.state.mongo = mongo
            app.state.services = build_services(db)

    try:
        yield
    finally:
        services = getattr(app.state, "services", None)
        if services is not None:
            await services.shutdown()
        if mongo is not None:
            await mongo.close()
        logger.info("Application stopped", extra={"service": app_settings.service_name})
