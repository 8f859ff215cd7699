"""Short-lived cache of pre-write snapshots.

A pre-write hook stores what it read under a key derived from the
operation's filter (or the document id for saves); the matching post-write
hook pops it. The cache is never a source of truth: an expired, clobbered
or missing entry only degrades the audit record to the requested payload.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from bson import json_util


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Field values of one document captured before a write."""

    document_id: Any
    values: Mapping[str, Any] = field(default_factory=dict)


def filter_key(collection_name: str, filter: Mapping[str, Any]) -> str:
    """Deterministic key for a filter: sorted keys, BSON values as extended JSON."""
    return f"{collection_name}:{json_util.dumps(filter, sort_keys=True)}"


def id_key(collection_name: str, document_id: Any) -> str:
    return f"{collection_name}:{document_id}"


class SnapshotCache:
    """Snapshot store with a maximum lifetime per entry.

    ``put`` accepts ``None`` as an explicit "no snapshot" marker. Expired
    entries are evicted on every ``put`` and ``pop`` and never returned.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Snapshot | None]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def put(self, key: str, snapshot: Snapshot | None) -> None:
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (now + self.ttl_seconds, snapshot)

    def pop(self, key: str) -> Snapshot | None:
        """Read and evict ``key``; None when absent, expired or marked empty."""
        now = self._clock()
        self._evict_expired(now)
        entry = self._entries.pop(key, None)
        if entry is None:
            return None
        return entry[1]

    def clear(self) -> None:
        self._entries.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (deadline, _) in self._entries.items() if deadline <= now]
        for key in expired:
            del self._entries[key]
