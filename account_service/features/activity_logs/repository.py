"""Storage sink for activity log records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from account_service.infra.database import to_object_id

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

    from .models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogRepository:
    """Append-only writer for the activity log collection.

    Must be given the raw collection: writes here are never intercepted.
    """

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def create(self, record: ActivityLog) -> Any:
        """Insert ``record`` and return its new ``_id``."""
        document = record.to_document()
        document["user"] = to_object_id(document.get("user"))
        document["documentId"] = to_object_id(document.get("documentId"))
        result = await self.collection.insert_one(document)
        logger.debug("Activity log stored", extra={"activity_log_id": str(result.inserted_id)})
        return result.inserted_id
