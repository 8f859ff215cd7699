"""GraphQL types for the users feature.

Provides:
- UserType: GraphQL representation of a User (never exposes the password)
- PaginatedUser: offset-paginated user listing
- Input types: CreateUserInput, UpdateUserInput, GetUserInput, PaginateUserInput
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import strawberry

from account_service.core.pagination import Page
from account_service.features.users.models import Gender, User, UserStatus

GenderType = strawberry.enum(Gender, name="Gender", description="User gender")
UserStatusType = strawberry.enum(UserStatus, name="UserStatus", description="Account lifecycle status")


def input_to_dict(value: Any) -> dict[str, Any]:
    """Fields the client actually supplied on a Strawberry input object."""
    return {
        key: item
        for key, item in vars(value).items()
        if item is not None and item is not strawberry.UNSET
    }


@strawberry.type(name="User", description="A user account")
class UserType:
    id: strawberry.ID = strawberry.field(name="_id", description="Unique identifier (ObjectId)")
    first_name: str
    last_name: str
    email: str
    username: str | None = None
    phone: str | None = None
    gender: GenderType | None = None
    status: UserStatusType = UserStatus.PENDING
    created_by: strawberry.ID | None = None
    last_active_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserType:
        return cls(
            id=strawberry.ID(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            username=user.username,
            phone=user.phone,
            gender=user.gender,
            status=user.status,
            created_by=strawberry.ID(user.created_by) if user.created_by else None,
            last_active_at=user.last_active_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@strawberry.type(description="One page of users")
class PaginatedUser:
    docs: list[UserType]
    total_docs: int
    limit: int
    page: int | None
    total_pages: int
    offset: int | None
    paging_counter: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: int | None
    next_page: int | None

    @classmethod
    def from_page(cls, page: Page[User]) -> PaginatedUser:
        return cls(
            docs=[UserType.from_model(user) for user in page.docs],
            total_docs=page.total_docs,
            limit=page.limit,
            page=page.page,
            total_pages=page.total_pages,
            offset=page.offset,
            paging_counter=page.paging_counter,
            has_prev_page=page.has_prev_page,
            has_next_page=page.has_next_page,
            prev_page=page.prev_page,
            next_page=page.next_page,
        )


# --- Input Types ---


@strawberry.input(description="Select one user by id")
class GetUserInput:
    id: strawberry.ID = strawberry.field(name="_id")


@strawberry.input(description="Filters and paging for getUsers")
class PaginateUserInput:
    search: str | None = None
    page: int | None = None
    limit: int | None = None
    gender: GenderType | None = None
    status: UserStatusType | None = None


@strawberry.input(description="Input for creating a user")
class CreateUserInput:
    first_name: str
    last_name: str
    email: str
    password: str
    username: str | None = None
    phone: str | None = None
    gender: GenderType | None = None
    status: UserStatusType | None = None


@strawberry.input(description="Partial update of a user; omitted fields are unchanged")
class UpdateUserInput:
    id: strawberry.ID = strawberry.field(name="_id")
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    username: str | None = None
    phone: str | None = None
    gender: GenderType | None = None
    status: UserStatusType | None = None
