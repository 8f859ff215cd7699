"""User accounts."""

from __future__ import annotations

from .models import Gender, User, UserStatus
from .repository import UserRepository
from .schemas import UserCreate, UserListParams, UserUpdate
from .service import UserService

__all__ = [
    "Gender",
    "User",
    "UserCreate",
    "UserListParams",
    "UserRepository",
    "UserService",
    "UserStatus",
    "UserUpdate",
]
