"""Data access for user documents.

All writes go through the tracked collection handed in at construction,
so each one leaves an activity log record.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pymongo import DESCENDING, ReturnDocument

from account_service.core.pagination import Page, PageParams
from account_service.infra.database import to_object_id, utc_now

from .models import User, UserStatus

if TYPE_CHECKING:
    from account_service.features.activity_logs import TrackedCollection

    from .schemas import UserListParams

SEARCH_FIELDS = ("firstName", "lastName", "email", "username")


class UserRepository:
    """CRUD over the ``users`` collection.

    Methods:
        - create(document) -> User
        - get(filter) -> User | None
        - get_by_id(user_id) -> User | None
        - get_by_email(email) -> User | None
        - paginate(params) -> Page[User]
        - update_by_id(user_id, changes) -> User | None
        - soft_delete(user_id) -> User | None
        - delete(user_id) -> User | None
        - touch_last_active(user_id) -> None
    """

    def __init__(self, collection: TrackedCollection) -> None:
        self.collection = collection

    async def create(self, document: dict[str, Any]) -> User:
        now = utc_now()
        document = {
            "status": UserStatus.PENDING.value,
            **document,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return User.from_document(document)

    async def get(self, filter: dict[str, Any]) -> User | None:
        document = await self.collection.find_one(filter)
        return User.from_document(document) if document else None

    async def get_by_id(self, user_id: str) -> User | None:
        return await self.get({"_id": to_object_id(user_id)})

    async def get_by_email(self, email: str) -> User | None:
        return await self.get({"email": email.lower()})

    @staticmethod
    def build_filter(params: UserListParams) -> dict[str, Any]:
        """Status filter (deleted users hidden by default) plus text search."""
        filter: dict[str, Any] = {}
        if params.status is not None:
            filter["status"] = params.status.value
        else:
            filter["status"] = {"$ne": UserStatus.DELETED.value}
        if params.gender is not None:
            filter["gender"] = params.gender.value
        if params.search:
            pattern = re.escape(params.search)
            filter["$or"] = [
                {field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS
            ]
        return filter

    async def paginate(self, params: UserListParams) -> Page[User]:
        page = PageParams(page=params.page, limit=params.limit)
        filter = self.build_filter(params)
        total = await self.collection.count_documents(filter)
        cursor = (
            self.collection.find(filter)
            .sort("createdAt", DESCENDING)
            .skip(page.offset)
            .limit(page.limit)
        )
        documents = await cursor.to_list(length=page.limit)
        return Page[User].build([User.from_document(d) for d in documents], total, page)

    async def update_by_id(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """``$set`` the given fields plus ``updatedAt``; returns the updated user."""
        document = await self.collection.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$set": {**changes, "updatedAt": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        return User.from_document(document) if document else None

    async def soft_delete(self, user_id: str) -> User | None:
        return await self.update_by_id(user_id, {"status": UserStatus.DELETED.value})

    async def delete(self, user_id: str) -> User | None:
        document = await self.collection.find_one_and_delete({"_id": to_object_id(user_id)})
        return User.from_document(document) if document else None

    async def touch_last_active(self, user_id: str) -> None:
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"lastActiveAt": utc_now()}},
        )
