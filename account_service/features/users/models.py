"""User document model."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(StrEnum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class UserStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BANNED = "BANNED"
    DELETED = "DELETED"
    PENDING = "PENDING"


class User(BaseModel):
    """A user account as stored in the ``users`` collection.

    ``password`` holds the hash and is excluded from dumps.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    username: str | None = None
    phone: str | None = None
    password: str | None = Field(default=None, exclude=True, repr=False)
    gender: Gender | None = None
    status: UserStatus = UserStatus.PENDING
    created_by: str | None = Field(default=None, alias="createdBy")
    last_active_at: datetime | None = Field(default=None, alias="lastActiveAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("id", "created_by", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> User:
        return cls.model_validate(dict(document))

    @property
    def is_deleted(self) -> bool:
        return self.status is UserStatus.DELETED
