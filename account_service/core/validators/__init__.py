"""Reusable input validators."""

from account_service.core.validators.common import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    ensure_not_blank,
    ensure_strong_password,
    trim_string,
)

__all__ = [
    "PASSWORD_MAX_LENGTH",
    "PASSWORD_MIN_LENGTH",
    "ensure_not_blank",
    "ensure_strong_password",
    "trim_string",
]
