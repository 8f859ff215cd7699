"""MongoDB connection manager built on motor."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import OperationFailure, PyMongoError

from .schema import COLLECTION_SPECS

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

    from account_service.core.settings.mongo import MongoSettings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """UTC timestamp helper."""
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> Any:
    """ObjectId for valid 24-hex strings; anything else unchanged."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class MongoManager:
    """Async MongoDB manager using motor.

    Example:
        manager = MongoManager(get_mongo_settings())
        await manager.connect()
        users = manager.collection("users")
        ...
        await manager.close()
    """

    def __init__(self, settings: MongoSettings) -> None:
        self.settings = settings
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    async def connect(self) -> AsyncIOMotorDatabase:
        """Connect (lazily) and return the database handle."""
        if self.client is None:
            self.client = AsyncIOMotorClient(self.settings.uri, **self.settings.client_kwargs())
            self.db = self.client[self.settings.database]
            logger.info(
                "MongoDB client created",
                extra={"database": self.settings.database},
            )
        if self.db is None:
            msg = "MongoManager failed to connect."
            raise RuntimeError(msg)
        return self.db

    async def close(self) -> None:
        """Close client and clear handles."""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB client closed")
        self.client = None
        self.db = None

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection handle (requires connect)."""
        if self.db is None:
            msg = "MongoManager not connected. Call await connect()."
            raise RuntimeError(msg)
        return self.db[name]

    async def ping(self) -> bool:
        """Round-trip to the server; False when unreachable."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed", extra={"error": str(exc)})
            return False
        return True

    async def ensure_indexes(self) -> None:
        """Create the indexes declared in schema.py.

        Conflicting existing indexes are logged and left alone.
        """
        await self.connect()
        for spec in COLLECTION_SPECS.values():
            col = self.collection(spec.name)
            for index in spec.indexes:
                options: dict[str, Any] = {}
                if index.unique:
                    options["unique"] = True
                if index.sparse:
                    options["sparse"] = True
                try:
                    await col.create_index(list(index.keys), **options)
                except OperationFailure as exc:
                    logger.warning(
                        "Index creation skipped",
                        extra={"collection": spec.name, "keys": list(index.keys), "error": str(exc)},
                    )
