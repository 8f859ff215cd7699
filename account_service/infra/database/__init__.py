"""MongoDB access layer."""

from account_service.infra.database.mongo import MongoManager, to_object_id, utc_now
from account_service.infra.database.schema import (
    ACTIVITY_LOGS,
    COLLECTION_SPECS,
    USERS,
    CollectionSpec,
    IndexSpec,
)

__all__ = [
    "ACTIVITY_LOGS",
    "COLLECTION_SPECS",
    "USERS",
    "CollectionSpec",
    "IndexSpec",
    "MongoManager",
    "to_object_id",
    "utc_now",
]
