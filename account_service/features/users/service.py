"""Service layer for user account management."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from account_service.core.exceptions import ConflictException, NotFoundException, ValidationException
from account_service.core.services import BaseService
from account_service.infra.auth import hash_password
from account_service.infra.database import to_object_id

if TYPE_CHECKING:
    from account_service.core.pagination import Page

    from .models import User
    from .repository import UserRepository
    from .schemas import UserCreate, UserListParams, UserUpdate


def ensure_object_id(user_id: str) -> str:
    """Reject ids that cannot be a stored user id."""
    if not ObjectId.is_valid(user_id):
        raise ValidationException(detail="Invalid user id", extra={"field": "id"})
    return user_id


def raise_conflict(exc: DuplicateKeyError) -> NoReturn:
    key_value = (exc.details or {}).get("keyValue") or {}
    field = next(iter(key_value), None)
    detail = f"A user with this {field} already exists" if field else "User already exists"
    raise ConflictException(detail=detail, type="duplicate-key", extra={"field": field}) from exc


class UserService(BaseService):
    """Orchestrates user operations on top of the repository."""

    def __init__(self, repository: UserRepository) -> None:
        super().__init__()
        self.repository = repository

    async def create_user(self, payload: UserCreate, *, created_by: str | None = None) -> User:
        """Persist a new user with a hashed password."""
        document = payload.to_document()
        document["password"] = hash_password(payload.password)
        if created_by:
            document["createdBy"] = to_object_id(created_by)
        try:
            user = await self.repository.create(document)
        except DuplicateKeyError as exc:
            raise_conflict(exc)

        # INFO level - business event
        self.logger.info(
            "User created",
            extra={"user_id": user.id, "operation": "service.create_user"},
        )
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self.repository.get_by_id(ensure_object_id(user_id))
        if user is None:
            raise NotFoundException(detail="User not found", extra={"user_id": user_id})
        self._lazy.debug(lambda: f"service.get_user({user_id}) -> found")
        return user

    async def list_users(self, params: UserListParams) -> Page[User]:
        page = await self.repository.paginate(params)
        self._lazy.debug(
            lambda: f"service.list_users(page={params.page}, limit={params.limit}) -> "
            f"{len(page.docs)}/{page.total_docs}"
        )
        return page

    async def update_user(self, user_id: str, payload: UserUpdate) -> User:
        """Apply the fields set on ``payload``; a new password is re-hashed."""
        ensure_object_id(user_id)
        changes = payload.to_changes()
        if not changes:
            raise ValidationException(detail="No fields to update")
        if payload.password is not None:
            changes["password"] = hash_password(payload.password)
        try:
            user = await self.repository.update_by_id(user_id, changes)
        except DuplicateKeyError as exc:
            raise_conflict(exc)
        if user is None:
            raise NotFoundException(detail="User not found", extra={"user_id": user_id})

        self.logger.info(
            "User updated",
            extra={"user_id": user_id, "fields": sorted(changes), "operation": "service.update_user"},
        )
        return user

    async def soft_delete_user(self, user_id: str) -> User:
        user = await self.repository.soft_delete(ensure_object_id(user_id))
        if user is None:
            raise NotFoundException(detail="User not found", extra={"user_id": user_id})
        self.logger.info(
            "User soft-deleted",
            extra={"user_id": user_id, "operation": "service.soft_delete_user"},
        )
        return user

    async def delete_user(self, user_id: str) -> User:
        user = await self.repository.delete(ensure_object_id(user_id))
        if user is None:
            raise NotFoundException(detail="User not found", extra={"user_id": user_id})
        self.logger.info(
            "User deleted",
            extra={"user_id": user_id, "operation": "service.delete_user"},
        )
        return user
