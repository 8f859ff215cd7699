"""Authentication flows."""

from __future__ import annotations

from .schemas import AuthResult, LoginInput, RefreshTokenInput
from .service import AuthService

__all__ = ["AuthResult", "AuthService", "LoginInput", "RefreshTokenInput"]
