"""Pydantic schemas for authentication flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from account_service.core.validators import ensure_not_blank, trim_string

if TYPE_CHECKING:
    from account_service.features.users import User


class LoginInput(BaseModel):
    """Email and password; the password is not strength-checked on login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        v = trim_string(v)
        return v.lower() if isinstance(v, str) else v


class RefreshTokenInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    refresh_token: str = Field(..., alias="refreshToken")

    @field_validator("refresh_token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        return ensure_not_blank(v).strip()


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Authenticated user plus a fresh token pair."""

    user: User
    access_token: str
    refresh_token: str
