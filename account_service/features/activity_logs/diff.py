"""Top-level key diff between two document states."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Diff:
    """Keys added to, updated in, or removed from a document.

    Values are compared with ``==``, which is structural for nested
    mappings and lists.
    """

    added: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def changed_keys(self) -> tuple[str, ...]:
        return self.added + self.updated + self.removed

    def __bool__(self) -> bool:
        return bool(self.added or self.updated or self.removed)

    def restrict(
        self,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Minimal before/after pair holding only the changed keys."""
        keys = self.changed_keys
        return (
            {key: before[key] for key in keys if key in before},
            {key: after[key] for key in keys if key in after},
        )


def compute_diff(before: Mapping[str, Any], after: Mapping[str, Any]) -> Diff:
    """Classify every top-level key of ``before`` and ``after``.

    Example:
        >>> compute_diff({"a": 1, "b": 2}, {"a": 1, "b": 3, "c": 4})
        Diff(added=('c',), updated=('b',), removed=())
    """
    added = tuple(key for key in after if key not in before)
    updated = tuple(key for key in after if key in before and before[key] != after[key])
    removed = tuple(key for key in before if key not in after)
    return Diff(added=added, updated=updated, removed=removed)
