"""Common validator utilities.

Plain functions usable as pydantic ``AfterValidator``/``BeforeValidator``
callables; each raises ``ValueError`` so pydantic reports a field error.
"""

from __future__ import annotations

import re
from typing import Any

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 32

_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"\d"), "a digit"),
    (re.compile(r"[^A-Za-z0-9]"), "a symbol"),
)


def trim_string(value: Any) -> Any:
    """Strip surrounding whitespace from strings; other values pass through."""
    if isinstance(value, str):
        return value.strip()
    return value


def ensure_not_blank(value: str) -> str:
    """Reject strings that are empty once whitespace is removed."""
    if not value.strip():
        msg = "must not be blank"
        raise ValueError(msg)
    return value


def ensure_strong_password(value: str) -> str:
    """Require 8-32 characters with lower, upper, digit and symbol."""
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        msg = f"must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        raise ValueError(msg)
    missing = [label for pattern, label in _PASSWORD_RULES if not pattern.search(value)]
    if missing:
        msg = "must contain " + ", ".join(missing)
        raise ValueError(msg)
    return value


__all__ = [
    "PASSWORD_MAX_LENGTH",
    "PASSWORD_MIN_LENGTH",
    "ensure_not_blank",
    "ensure_strong_password",
    "trim_string",
]
