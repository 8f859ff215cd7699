"""Write interception for motor collections.

``ActivityLogTracker.track(collection)`` returns a ``TrackedCollection``
whose single-document write methods snapshot the affected fields before
the write and hand a ``MutationEvent`` to the recorder after it commits.
Every other attribute is the underlying collection's.

The wrapped call returns exactly what the driver returned and raises
exactly what the driver raised; nothing in the hooks reaches the caller.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pymongo import ReturnDocument

from account_service.infra.logging import get_lazy_logger

from .models import LogActionType, MutationEvent
from .snapshots import Snapshot, SnapshotCache, filter_key, id_key

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection
    from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

    from .recorder import ActivityLogRecorder

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)

_MISSING = object()


def touched_keys(update: Mapping[str, Any]) -> list[str]:
    """Keys an update writes: plain keys plus the keys under each operator."""
    keys: list[str] = []
    for key, value in update.items():
        if key.startswith("$"):
            if isinstance(value, Mapping):
                keys.extend(k for k in value if not k.startswith("$"))
        else:
            keys.append(key)
    return [key for key in dict.fromkeys(keys) if key != "_id"]


def requested_changes(update: Mapping[str, Any]) -> dict[str, Any]:
    """Values an update asks for: plain keys, ``$set`` values, ``$unset`` as None."""
    changes: dict[str, Any] = {}
    for key, value in update.items():
        if key == "$set" and isinstance(value, Mapping):
            changes.update(value)
        elif key == "$unset" and isinstance(value, Mapping):
            changes.update(dict.fromkeys(value))
        elif not key.startswith("$"):
            changes[key] = value
    changes.pop("_id", None)
    return changes


def upsert_seed(filter: Mapping[str, Any], update: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Best guess at a document created by an upsert.

    MongoDB seeds it with the filter's equality fields, then applies
    ``$setOnInsert``, ``$set`` and plain keys.
    """
    seed = {
        key: value for key, value in filter.items()
        if not key.startswith("$")
        and not (isinstance(value, Mapping) and any(str(k).startswith("$") for k in value))
    }
    if update:
        for operator in ("$setOnInsert", "$set"):
            if isinstance(update.get(operator), Mapping):
                seed.update(update[operator])
        seed.update({key: value for key, value in update.items() if not key.startswith("$")})
    return seed


def get_path(document: Mapping[str, Any], path: str) -> Any:
    """Value at a dotted path, or ``_MISSING``."""
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def pick(document: Mapping[str, Any], keys: list[str]) -> dict[str, Any]:
    picked = {}
    for key in keys:
        value = get_path(document, key)
        if value is not _MISSING:
            picked[key] = value
    return picked


def without_id(document: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in document.items() if key != "_id"}


def previous_values(snapshot: Snapshot | None, changes: Mapping[str, Any]) -> dict[str, Any] | None:
    """Snapshot values of the keys an update reports, or None without a snapshot.

    Keys written by operators whose result is unknown ($inc on update_one)
    are left out instead of showing up as removed.
    """
    if snapshot is None:
        return None
    return {key: value for key, value in snapshot.values.items() if key in changes}


class ActivityLogTracker:
    """Owns the snapshot cache and the recorder; wraps collections.

    Example:
        tracker = ActivityLogTracker(recorder)
        users = tracker.track(db["users"])
        await users.update_one({"_id": oid}, {"$set": {"firstName": "Bob"}})
    """

    def __init__(
        self,
        recorder: ActivityLogRecorder,
        cache: SnapshotCache | None = None,
    ) -> None:
        self.recorder = recorder
        self.cache = cache or SnapshotCache(recorder.settings.snapshot_ttl_seconds)
        self._tracked: dict[str, TrackedCollection] = {}

    @property
    def enabled(self) -> bool:
        return self.recorder.enabled

    @property
    def timestamp_field(self) -> str:
        return self.recorder.settings.timestamp_field

    def track(self, collection: AsyncIOMotorCollection | TrackedCollection) -> TrackedCollection:
        """Wrap ``collection``; repeated calls for the same collection return one wrapper."""
        if isinstance(collection, TrackedCollection):
            return collection
        name = getattr(collection, "full_name", None) or collection.name
        tracked = self._tracked.get(name)
        if tracked is None or tracked.collection is not collection:
            tracked = TrackedCollection(collection, self)
            self._tracked[name] = tracked
        return tracked


class TrackedCollection:
    """Motor collection proxy with audited single-document writes."""

    def __init__(self, collection: AsyncIOMotorCollection, tracker: ActivityLogTracker) -> None:
        self.collection = collection
        self._tracker = tracker

    def __getattr__(self, name: str) -> Any:
        return getattr(self.collection, name)

    def __repr__(self) -> str:
        return f"TrackedCollection({self.collection.name!r})"

    @property
    def name(self) -> str:
        return self.collection.name

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def _take_snapshot(
        self,
        filter: Mapping[str, Any],
        keys: list[str] | None,
        *,
        key: str | None = None,
        sort: Any = None,
        session: Any = None,
    ) -> tuple[str | None, bool | None]:
        """Read the current values of ``keys`` (all fields when None) and cache them.

        Returns the cache key and whether a document matched (None when the
        read failed). Failures store "no snapshot" and never abort the write.
        """
        cache_key = key
        found: bool | None = None
        snapshot: Snapshot | None = None
        try:
            if cache_key is None:
                cache_key = filter_key(self.name, filter)
            projection = None
            if keys is not None:
                projection = dict.fromkeys([*keys, self._tracker.timestamp_field], 1)
            document = await self.collection.find_one(
                filter, projection, sort=sort, session=session,
            )
            found = document is not None
            if document is not None:
                values = dict(document) if keys is None else pick(
                    document, [*keys, self._tracker.timestamp_field],
                )
                snapshot = Snapshot(document_id=document.get("_id"), values=values)
        except Exception:
            logger.warning(
                "Snapshot read failed; recording without previous state",
                exc_info=True,
                extra={"collection": self.name},
            )
        if cache_key is not None:
            self._tracker.cache.put(cache_key, snapshot)
        return cache_key, found

    def _release(self, cache_key: str | None) -> Snapshot | None:
        if cache_key is None:
            return None
        return self._tracker.cache.pop(cache_key)

    async def _read_created(
        self,
        filter: Mapping[str, Any],
        seed: dict[str, Any],
        *,
        sort: Any = None,
        session: Any = None,
    ) -> dict[str, Any]:
        """The document an upsert inserted, or ``seed`` when it cannot be read back."""
        try:
            document = await self.collection.find_one(filter, sort=sort, session=session)
        except Exception:
            logger.warning(
                "Upserted document read failed; recording the requested values",
                exc_info=True,
                extra={"collection": self.name},
            )
            return seed
        return dict(document) if document is not None else seed

    def _emit(
        self,
        action: LogActionType,
        document: Mapping[str, Any] | None,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any],
        *,
        document_id: Any = None,
        requested: Mapping[str, Any] | None = None,
    ) -> None:
        if document_id is None and document:
            document_id = document.get("_id")
        # Events never share mutable state with the caller
        document, before, after, requested = copy.deepcopy((document, before, after, requested))
        event = MutationEvent(
            action=action,
            collection_name=self.name,
            document=document,
            before=before,
            after=after,
            document_id=document_id,
            requested=requested,
        )
        _lazy.debug(lambda: f"{action} observed on {self.name!r}")
        self._tracker.recorder.schedule(event)

    def _post_write_failed(self, operation: str) -> None:
        logger.warning(
            "Activity log post-write hook failed",
            exc_info=True,
            extra={"collection": self.name, "operation": operation},
        )

    # ------------------------------------------------------------------
    # Creates
    # ------------------------------------------------------------------

    async def insert_one(self, document: dict[str, Any], *args: Any, **kwargs: Any) -> InsertOneResult:
        result = await self.collection.insert_one(document, *args, **kwargs)
        if not self._tracker.enabled:
            return result
        try:
            created = {**document, "_id": result.inserted_id}
            self._emit(LogActionType.CREATE, created, None, created)
        except Exception:
            self._post_write_failed("insert_one")
        return result

    async def save(self, document: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        """Insert a document without ``_id``; otherwise upsert-replace it by id.

        Returns the document, which carries its ``_id`` after an insert.
        """
        if "_id" not in document:
            await self.insert_one(document, **kwargs)
            return document
        if not self._tracker.enabled:
            await self.collection.replace_one({"_id": document["_id"]}, document, upsert=True, **kwargs)
            return document

        id_filter = {"_id": document["_id"]}
        cache_key, _ = await self._take_snapshot(
            id_filter, None, key=id_key(self.name, document["_id"]), session=kwargs.get("session"),
        )
        try:
            result = await self.collection.replace_one(id_filter, document, upsert=True, **kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            if result.upserted_id is not None:
                self._emit(LogActionType.CREATE, document, None, dict(document))
            else:
                before = without_id(snapshot.values) if snapshot else None
                self._emit(
                    LogActionType.UPDATE, document, before, without_id(document),
                    requested=without_id(document),
                )
        except Exception:
            self._post_write_failed("save")
        return document

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update_one(
        self,
        filter: Mapping[str, Any],
        update: Any,
        upsert: bool = False,
        **kwargs: Any,
    ) -> UpdateResult:
        if not self._tracker.enabled or not isinstance(update, Mapping):
            # Aggregation pipeline updates are not diffed
            return await self.collection.update_one(filter, update, upsert=upsert, **kwargs)

        cache_key, _ = await self._take_snapshot(
            filter, touched_keys(update), session=kwargs.get("session"),
        )
        try:
            result = await self.collection.update_one(filter, update, upsert=upsert, **kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            changes = requested_changes(update)
            if result.upserted_id is not None:
                created = await self._read_created(
                    {"_id": result.upserted_id},
                    {**upsert_seed(filter, update), "_id": result.upserted_id},
                    session=kwargs.get("session"),
                )
                self._emit(LogActionType.CREATE, created, None, created, requested=changes)
            elif result.matched_count:
                self._emit(
                    LogActionType.UPDATE,
                    None,
                    previous_values(snapshot, changes),
                    changes,
                    document_id=snapshot.document_id if snapshot else filter.get("_id"),
                    requested=changes,
                )
        except Exception:
            self._post_write_failed("update_one")
        return result

    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Any,
        projection: Any = None,
        sort: Any = None,
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
        **kwargs: Any,
    ) -> dict[str, Any] | None:
        call_kwargs = {
            "projection": projection,
            "sort": sort,
            "upsert": upsert,
            "return_document": return_document,
            **kwargs,
        }
        if not self._tracker.enabled or not isinstance(update, Mapping):
            return await self.collection.find_one_and_update(filter, update, **call_kwargs)

        keys = touched_keys(update)
        cache_key, found = await self._take_snapshot(
            filter, keys, sort=sort, session=kwargs.get("session"),
        )
        try:
            document = await self.collection.find_one_and_update(filter, update, **call_kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            changes = requested_changes(update)
            returns_after = return_document == ReturnDocument.AFTER
            # Without a pre-read, only an empty pre-image proves an insert
            inserted = upsert and (found is False or (found is None and document is None and not returns_after))
            if inserted:
                if document is not None and returns_after and projection is None:
                    created = dict(document)
                else:
                    seed = upsert_seed(filter, update)
                    created = await self._read_created(
                        {"_id": document["_id"]} if document is not None and "_id" in document else filter,
                        seed,
                        sort=sort,
                        session=kwargs.get("session"),
                    )
                self._emit(LogActionType.CREATE, created, None, created, requested=changes)
            elif document is not None:
                after = changes
                if returns_after:
                    # Operator results ($inc, $push, ...) are only known from the post-image
                    after = {**pick(document, keys), **changes}
                self._emit(
                    LogActionType.UPDATE,
                    document,
                    previous_values(snapshot, after),
                    after,
                    requested=changes,
                )
        except Exception:
            self._post_write_failed("find_one_and_update")
        return document

    # ------------------------------------------------------------------
    # Replacements
    # ------------------------------------------------------------------

    async def replace_one(
        self,
        filter: Mapping[str, Any],
        replacement: Mapping[str, Any],
        upsert: bool = False,
        **kwargs: Any,
    ) -> UpdateResult:
        if not self._tracker.enabled:
            return await self.collection.replace_one(filter, replacement, upsert=upsert, **kwargs)

        # A replacement drops every field it omits, so the whole document is read
        cache_key, _ = await self._take_snapshot(filter, None, session=kwargs.get("session"))
        try:
            result = await self.collection.replace_one(filter, replacement, upsert=upsert, **kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            if result.upserted_id is not None:
                created = await self._read_created(
                    {"_id": result.upserted_id},
                    {**replacement, "_id": result.upserted_id},
                    session=kwargs.get("session"),
                )
                self._emit(LogActionType.CREATE, created, None, created)
            elif result.matched_count:
                self._emit(
                    LogActionType.UPDATE,
                    None,
                    without_id(snapshot.values) if snapshot else None,
                    without_id(replacement),
                    document_id=snapshot.document_id if snapshot else filter.get("_id"),
                    requested=without_id(replacement),
                )
        except Exception:
            self._post_write_failed("replace_one")
        return result

    async def find_one_and_replace(
        self,
        filter: Mapping[str, Any],
        replacement: Mapping[str, Any],
        projection: Any = None,
        sort: Any = None,
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
        **kwargs: Any,
    ) -> dict[str, Any] | None:
        call_kwargs = {
            "projection": projection,
            "sort": sort,
            "upsert": upsert,
            "return_document": return_document,
            **kwargs,
        }
        if not self._tracker.enabled:
            return await self.collection.find_one_and_replace(filter, replacement, **call_kwargs)

        cache_key, found = await self._take_snapshot(
            filter, None, sort=sort, session=kwargs.get("session"),
        )
        try:
            document = await self.collection.find_one_and_replace(filter, replacement, **call_kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            returns_after = return_document == ReturnDocument.AFTER
            inserted = upsert and (found is False or (found is None and document is None and not returns_after))
            if inserted:
                if document is not None and returns_after and projection is None:
                    created = dict(document)
                else:
                    seed = {**replacement}
                    if "_id" in filter and not isinstance(filter["_id"], Mapping):
                        seed.setdefault("_id", filter["_id"])
                    created = await self._read_created(
                        {"_id": seed["_id"]} if "_id" in seed else replacement,
                        seed,
                        session=kwargs.get("session"),
                    )
                self._emit(LogActionType.CREATE, created, None, created)
            elif document is not None:
                self._emit(
                    LogActionType.UPDATE,
                    document,
                    without_id(snapshot.values) if snapshot else None,
                    without_id(replacement),
                    requested=without_id(replacement),
                )
        except Exception:
            self._post_write_failed("find_one_and_replace")
        return document

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    async def delete_one(self, filter: Mapping[str, Any], **kwargs: Any) -> DeleteResult:
        if not self._tracker.enabled:
            return await self.collection.delete_one(filter, **kwargs)

        # The driver returns no document, so the before-state is read first
        cache_key, _ = await self._take_snapshot(filter, None, session=kwargs.get("session"))
        try:
            result = await self.collection.delete_one(filter, **kwargs)
        except Exception:
            self._release(cache_key)
            raise
        try:
            snapshot = self._release(cache_key)
            if result.deleted_count:
                if snapshot:
                    deleted = dict(snapshot.values)
                else:
                    deleted = {"_id": filter["_id"]} if "_id" in filter else {}
                self._emit(LogActionType.DELETE, deleted, deleted, {})
        except Exception:
            self._post_write_failed("delete_one")
        return result

    async def find_one_and_delete(
        self,
        filter: Mapping[str, Any],
        projection: Any = None,
        sort: Any = None,
        **kwargs: Any,
    ) -> dict[str, Any] | None:
        document = await self.collection.find_one_and_delete(
            filter, projection=projection, sort=sort, **kwargs,
        )
        if not self._tracker.enabled:
            return document
        try:
            if document is not None:
                self._emit(LogActionType.DELETE, document, dict(document), {})
        except Exception:
            self._post_write_failed("find_one_and_delete")
        return document
