"""Audit recorder: decide, shape, sanitize and persist activity logs.

Persistence is fire-and-forget. ``schedule`` captures the request context
of the caller and hands the event to a background task; failures there are
logged and dropped, never retried and never raised into the write path.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from account_service.core.context import RequestContext, get_request_context
from account_service.core.services import BaseService
from account_service.core.settings import get_activity_log_settings

from .diff import compute_diff
from .models import ActivityLog, ChangeSource, LogActionType

if TYPE_CHECKING:
    from account_service.core.settings.activity_log import ActivityLogSettings

    from .models import MutationEvent
    from .repository import ActivityLogRepository

REFRESH_TOKEN_FIELD = "refreshToken"


class RecordOutcome(StrEnum):
    SKIPPED = "skipped"
    RECORDED = "recorded"
    RECORD_FAILED = "record_failed"


def extract_document_id(document: Mapping[str, Any] | None) -> str | None:
    """Read ``_id`` as a string.

    Accepts plain strings, extended JSON ``{"$oid": ...}`` wrappers and
    driver objects such as ObjectId (via ``str``), in that order.
    """
    if not document:
        return None
    raw = document.get("_id")
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("$oid"), str):
        return raw["$oid"]
    return str(raw)


def extract_collection_name(
    bound_name: str | None,
    document: Mapping[str, Any] | None,
) -> str:
    if bound_name:
        return bound_name
    if document and isinstance(document.get("collectionName"), str):
        return document["collectionName"]
    return ""


def redact(values: Mapping[str, Any], fields: frozenset[str], marker: str) -> dict[str, Any]:
    """Shallow copy of ``values`` with every secret field replaced by ``marker``."""
    return {key: marker if key in fields else value for key, value in values.items()}


def sanitize_variables(
    variables: Mapping[str, Any],
    fields: frozenset[str],
    marker: str,
) -> dict[str, Any]:
    """Redact secret fields of every variable that is itself a mapping.

    A variable that is itself named like a secret field is redacted whole.
    The input and its nested mappings are left untouched.
    """
    sanitized: dict[str, Any] = {}
    for name, value in variables.items():
        if name in fields:
            sanitized[name] = marker
        elif isinstance(value, Mapping) and fields.intersection(value):
            sanitized[name] = redact(value, fields, marker)
        else:
            sanitized[name] = value
    return sanitized


class ActivityLogRecorder(BaseService):
    """Turn mutation events into persisted ``ActivityLog`` records.

    Example:
        recorder = ActivityLogRecorder(ActivityLogRepository(raw_collection))
        recorder.schedule(event)      # returns immediately
        await recorder.drain()        # shutdown / tests
    """

    def __init__(
        self,
        repository: ActivityLogRepository,
        settings: ActivityLogSettings | None = None,
    ) -> None:
        super().__init__()
        self.repository = repository
        self.settings = settings or get_activity_log_settings()
        self._secret_fields = frozenset(self.settings.redacted_fields)
        self._tasks: set[asyncio.Task[RecordOutcome]] = set()

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def is_audit_collection(self, collection_name: str) -> bool:
        return collection_name.lower() == self.settings.collection_name.lower()

    def is_refresh_request(self, context: RequestContext) -> bool:
        """Refresh operations are recognised by root field, variable name or argument shape."""
        if any(name in self.settings.refresh_token_operations for name in context.operation_fields):
            return True
        variables = context.variables or {}
        if any(name in variables for name in self.settings.refresh_token_variables):
            return True
        return any(
            isinstance(value, Mapping) and REFRESH_TOKEN_FIELD in value
            for value in [*variables.values(), *context.arguments.values()]
        )

    def skip_reason(self, collection_name: str, context: RequestContext) -> str | None:
        if self.is_audit_collection(collection_name):
            return "audit collection"
        if self.is_refresh_request(context):
            return "refresh token request"
        return None

    # ------------------------------------------------------------------
    # Shaping
    # ------------------------------------------------------------------

    def build_payload(self, context: RequestContext) -> dict[str, Any] | None:
        """Sanitized variables, else sanitized root-field arguments, else the body.

        The query text is never stored: inline literals may hold secrets.
        """
        marker = self.settings.redaction_marker
        variables = context.variables
        if variables:
            return sanitize_variables(variables, self._secret_fields, marker)
        if context.arguments:
            return sanitize_variables(context.arguments, self._secret_fields, marker)
        body = {key: value for key, value in context.body.items() if key not in ("query", "variables")}
        return body or None

    def build_changes(
        self, event: MutationEvent,
    ) -> tuple[dict[str, Any], ChangeSource] | None:
        """Before/after pair for ``event``; None when nothing discernible changed."""
        if event.action is LogActionType.CREATE:
            before: dict[str, Any] = {}
            after = dict(event.after)
            source = ChangeSource.DOCUMENT
        elif event.action is LogActionType.DELETE:
            before = dict(event.before or {})
            after = {}
            source = ChangeSource.DOCUMENT
        elif event.before is None:
            before = {}
            after = dict(event.requested if event.requested is not None else event.after)
            source = ChangeSource.REQUESTED
        else:
            # The last-modified key is captured for drift detection only
            timestamp = self.settings.timestamp_field
            snapshot = {k: v for k, v in event.before.items() if k != timestamp}
            requested = {k: v for k, v in event.after.items() if k != timestamp}
            diff = compute_diff(snapshot, requested)
            before, after = diff.restrict(snapshot, requested)
            source = ChangeSource.DIFF

        if not before and not after:
            return None

        marker = self.settings.redaction_marker
        changes = {
            "before": redact(before, self._secret_fields, marker),
            "after": redact(after, self._secret_fields, marker),
        }
        return changes, source

    def build_record(
        self, event: MutationEvent, context: RequestContext,
    ) -> ActivityLog | None:
        collection_name = extract_collection_name(event.collection_name, event.document)
        reason = self.skip_reason(collection_name, context)
        if reason is not None:
            self._lazy.debug(
                lambda: f"Activity log skipped ({reason}) for {event.action} on {collection_name!r}"
            )
            return None

        shaped = self.build_changes(event)
        if shaped is None:
            self._lazy.debug(lambda: f"No discernible change for {event.action} on {collection_name!r}")
            return None
        changes, source = shaped

        return ActivityLog(
            collection_name=collection_name,
            action=event.action,
            user=context.user.id if context.user else None,
            document_id=extract_document_id({"_id": event.target_id}),
            payload=self.build_payload(context),
            changes=changes,
            change_source=source,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def record(
        self, event: MutationEvent, context: RequestContext | None = None,
    ) -> RecordOutcome:
        """Build and persist the record for ``event``. Never raises."""
        if context is None:
            context = get_request_context()
        try:
            record = self.build_record(event, context)
            if record is None:
                return RecordOutcome.SKIPPED
            await self.repository.create(record)
        except Exception:
            self.logger.exception(
                "Failed to record activity log",
                extra={"action": str(event.action), "collection": event.collection_name},
            )
            return RecordOutcome.RECORD_FAILED
        self.logger.debug(
            "Activity log recorded",
            extra={"action": str(event.action), "collection": record.collection_name},
        )
        return RecordOutcome.RECORDED

    def schedule(
        self, event: MutationEvent, context: RequestContext | None = None,
    ) -> asyncio.Task[RecordOutcome] | None:
        """Record ``event`` in the background with an explicit copy of the context."""
        if not self.enabled:
            return None
        if context is None:
            context = get_request_context()
        task = asyncio.get_running_loop().create_task(self.record(event, context))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled record to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
