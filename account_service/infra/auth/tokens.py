"""JWT access and refresh tokens signed with python-jose.

Access and refresh tokens use separate secrets and carry a ``type`` claim,
so one can never be replayed as the other.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from jose import ExpiredSignatureError, JWTError, jwt

from account_service.core.exceptions import TokenExpiredError, TokenInvalidError
from account_service.core.settings import get_auth_settings

if TYPE_CHECKING:
    from account_service.core.settings.auth import AuthSettings


class TokenType(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Verified claims of a decoded token."""

    sub: str
    email: str | None
    type: TokenType
    iat: int
    exp: int


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """Issue and verify tokens according to ``AuthSettings``."""

    def __init__(self, settings: AuthSettings | None = None) -> None:
        self.settings = settings or get_auth_settings()

    def _secret(self, token_type: TokenType) -> str:
        if token_type is TokenType.ACCESS:
            return self.settings.access_token_secret.get_secret_value()
        return self.settings.refresh_token_secret.get_secret_value()

    def _ttl(self, token_type: TokenType) -> int:
        if token_type is TokenType.ACCESS:
            return self.settings.access_token_ttl_seconds
        return self.settings.refresh_token_ttl_seconds

    def encode(self, subject: str, email: str | None, token_type: TokenType) -> str:
        now = int(time.time())
        claims: dict[str, Any] = {
            "sub": subject,
            "email": email,
            "type": token_type.value,
            "iat": now,
            "exp": now + self._ttl(token_type),
        }
        return jwt.encode(claims, self._secret(token_type), algorithm=self.settings.algorithm)

    def issue_pair(self, subject: str, email: str | None) -> TokenPair:
        return TokenPair(
            access_token=self.encode(subject, email, TokenType.ACCESS),
            refresh_token=self.encode(subject, email, TokenType.REFRESH),
        )

    def decode(self, token: str, token_type: TokenType) -> TokenClaims:
        """Verify signature, expiry and ``type``.

        Raises:
            TokenExpiredError: The token is past its ``exp``.
            TokenInvalidError: Bad signature, malformed token or wrong type.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret(token_type),
                algorithms=[self.settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError from exc
        except JWTError as exc:
            raise TokenInvalidError from exc

        if payload.get("type") != token_type.value or not payload.get("sub"):
            raise TokenInvalidError
        return TokenClaims(
            sub=str(payload["sub"]),
            email=payload.get("email"),
            type=token_type,
            iat=int(payload.get("iat", 0)),
            exp=int(payload.get("exp", 0)),
        )

    def extract_bearer(self, header_value: str | None) -> str | None:
        """Return the token from an ``Authorization: Bearer <token>`` value."""
        if not header_value:
            return None
        scheme, _, token = header_value.partition(" ")
        if scheme.lower() != self.settings.token_scheme.lower() or not token.strip():
            return None
        return token.strip()
