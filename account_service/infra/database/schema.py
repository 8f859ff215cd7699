"""MongoDB collection names and index specs.

Specs are descriptors consumed by ``MongoManager.ensure_indexes``; the
documents themselves stay schemaless at the database level.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pymongo import ASCENDING, DESCENDING

IndexKeys = Sequence[tuple[str, int]]

USERS = "users"
ACTIVITY_LOGS = "activitylogs"


@dataclass(frozen=True)
class IndexSpec:
    keys: IndexKeys
    unique: bool = False
    sparse: bool = False


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    indexes: Sequence[IndexSpec] = field(default_factory=tuple)


COLLECTION_SPECS: dict[str, CollectionSpec] = {
    USERS: CollectionSpec(
        name=USERS,
        indexes=(
            IndexSpec((("email", ASCENDING),), unique=True),
            IndexSpec((("username", ASCENDING),), unique=True, sparse=True),
            IndexSpec((("phone", ASCENDING),), unique=True, sparse=True),
            IndexSpec((("status", ASCENDING), ("createdAt", DESCENDING))),
        ),
    ),
    ACTIVITY_LOGS: CollectionSpec(
        name=ACTIVITY_LOGS,
        indexes=(
            IndexSpec((("collectionName", ASCENDING), ("documentId", ASCENDING))),
            IndexSpec((("user", ASCENDING), ("createdAt", DESCENDING))),
            IndexSpec((("createdAt", DESCENDING),)),
        ),
    ),
}
