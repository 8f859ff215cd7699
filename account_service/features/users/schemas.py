"""Pydantic input schemas for the users feature.

Field names are snake_case with camelCase aliases, matching the stored
documents and the GraphQL inputs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from account_service.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from account_service.core.validators import ensure_not_blank, ensure_strong_password, trim_string

from .models import Gender, UserStatus

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 20


class _UserInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return trim_string(v)


class UserCreate(_UserInput):
    """Fields accepted when creating an account."""

    first_name: str = Field(..., alias="firstName", min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., alias="lastName", min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str
    username: str | None = Field(default=None, min_length=3, max_length=30)
    phone: str | None = Field(default=None, min_length=5, max_length=20)
    gender: Gender | None = None
    status: UserStatus | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return ensure_not_blank(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return ensure_strong_password(v)

    def to_document(self) -> dict[str, Any]:
        """Mongo field names and values; unset optionals are left out."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class UserUpdate(_UserInput):
    """Partial update; only the fields given are written."""

    first_name: str | None = Field(
        default=None, alias="firstName", min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH,
    )
    last_name: str | None = Field(
        default=None, alias="lastName", min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH,
    )
    email: EmailStr | None = None
    password: str | None = None
    username: str | None = Field(default=None, min_length=3, max_length=30)
    phone: str | None = Field(default=None, min_length=5, max_length=20)
    gender: Gender | None = None
    status: UserStatus | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else ensure_not_blank(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return None if v is None else v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return None if v is None else ensure_strong_password(v)

    def to_changes(self) -> dict[str, Any]:
        """Fields explicitly set on this input, keyed by their Mongo name."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, mode="json")


class UserListParams(_UserInput):
    """Filters and paging for the user listing."""

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    search: str | None = Field(default=None, max_length=100)
    status: UserStatus | None = None
    gender: Gender | None = None
