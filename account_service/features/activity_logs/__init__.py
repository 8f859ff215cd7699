"""Activity log capture.

Every single-document write that goes through a tracked collection leaves
one append-only record in ``activitylogs`` describing who changed what,
with a before/after diff.

Usage:
    from account_service.features.activity_logs import (
        ActivityLogRecorder,
        ActivityLogRepository,
        ActivityLogTracker,
    )

    recorder = ActivityLogRecorder(ActivityLogRepository(db["activitylogs"]))
    tracker = ActivityLogTracker(recorder)
    users = tracker.track(db["users"])
"""

from __future__ import annotations

from .diff import Diff, compute_diff
from .interception import ActivityLogTracker, TrackedCollection
from .models import ActivityLog, ChangeSource, LogActionType, MutationEvent
from .recorder import ActivityLogRecorder, RecordOutcome
from .repository import ActivityLogRepository
from .snapshots import Snapshot, SnapshotCache

__all__ = [
    "ActivityLog",
    "ActivityLogRecorder",
    "ActivityLogRepository",
    "ActivityLogTracker",
    "ChangeSource",
    "Diff",
    "LogActionType",
    "MutationEvent",
    "RecordOutcome",
    "Snapshot",
    "SnapshotCache",
    "TrackedCollection",
    "compute_diff",
]
