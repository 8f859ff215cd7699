"""Password hashing and JWT issuance."""

from account_service.infra.auth.passwords import (
    get_password_context,
    hash_password,
    verify_password,
)
from account_service.infra.auth.tokens import TokenClaims, TokenPair, TokenService, TokenType

__all__ = [
    "TokenClaims",
    "TokenPair",
    "TokenService",
    "TokenType",
    "get_password_context",
    "hash_password",
    "verify_password",
]
