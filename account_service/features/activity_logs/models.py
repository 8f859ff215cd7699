"""Activity log data model.

``MutationEvent`` is the ephemeral description of one intercepted write;
``ActivityLog`` is the append-only record persisted for it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from account_service.infra.database import utc_now


class LogActionType(StrEnum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeSource(StrEnum):
    """How ``changes`` was obtained.

    DOCUMENT: the full created or deleted document.
    DIFF: computed against a pre-write snapshot.
    REQUESTED: no snapshot was available; the raw requested update.
    """

    DOCUMENT = "document"
    DIFF = "diff"
    REQUESTED = "requested"


@dataclass(frozen=True, slots=True)
class MutationEvent:
    """One committed write, as seen by the post-write hook.

    Attributes:
        action: Kind of write.
        collection_name: Name of the collection the write was bound to.
        document: Resulting document (created/replaced/deleted), or None when
            the driver returned none.
        before: Pre-write snapshot values; None when no snapshot exists.
        after: Post-write values of the affected keys.
        document_id: Id of the written document; read from ``document`` when None.
        requested: Values the write asked for, before any operator ran.
    """

    action: LogActionType
    collection_name: str | None
    document: Mapping[str, Any] | None
    before: Mapping[str, Any] | None
    after: Mapping[str, Any]
    document_id: Any = None
    requested: Mapping[str, Any] | None = None

    @property
    def target_id(self) -> Any:
        if self.document_id is not None:
            return self.document_id
        return self.document.get("_id") if self.document else None


class ActivityLog(BaseModel):
    """Persisted audit record, stored with camelCase keys."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True,
    )

    collection_name: str = Field(alias="collectionName")
    action: LogActionType
    user: Any = None
    document_id: Any = Field(default=None, alias="documentId")
    payload: dict[str, Any] | None = None
    changes: dict[str, Any] | None = None
    change_source: ChangeSource = Field(alias="changeSource")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    def to_document(self) -> dict[str, Any]:
        """Mongo document for this record (camelCase keys, enum values)."""
        document = self.model_dump(by_alias=True)
        document["action"] = self.action.value
        document["changeSource"] = self.change_source.value
        return document
