"""Password hashing with passlib."""

from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from account_service.core.settings import get_auth_settings


@lru_cache(maxsize=1)
def get_password_context() -> CryptContext:
    """CryptContext built from the configured schemes.

    The first scheme hashes new passwords; the rest are accepted for
    verification and flagged for re-hashing.
    """
    return CryptContext(schemes=get_auth_settings().password_schemes, deprecated="auto")


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    """Check ``password`` against a stored hash; a missing hash never matches."""
    if not hashed:
        return False
    try:
        return get_password_context().verify(password, hashed)
    except ValueError:
        # Stored value is not a hash any configured scheme recognizes
        return False
