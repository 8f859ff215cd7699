"""Query resolvers for the GraphQL API.

- hello: liveness greeting
- me: the authenticated user
- getUser(input): one user by id
- getUsers(input): paginated, searchable user listing
"""

from __future__ import annotations

import strawberry
from strawberry.types import Info

from account_service.features.graphql.context import GraphQLContext
from account_service.features.graphql.error_handler import translate_errors
from account_service.features.graphql.permissions import IsAuthenticated
from account_service.features.graphql.types import (
    GetUserInput,
    PaginatedUser,
    PaginateUserInput,
    UserType,
    input_to_dict,
)
from account_service.features.users import UserListParams

HELLO = "Hello World!"


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    @strawberry.field(description="Liveness greeting")
    def hello(self) -> str:
        return HELLO

    @strawberry.field(description="The authenticated user", permission_classes=[IsAuthenticated])
    def me(self, info: Info[GraphQLContext, None]) -> UserType:
        return UserType.from_model(info.context.user)

    @strawberry.field(description="Get a single user by id", permission_classes=[IsAuthenticated])
    async def get_user(self, info: Info[GraphQLContext, None], input: GetUserInput) -> UserType:
        with translate_errors():
            user = await info.context.services.users.get_user(str(input.id))
        return UserType.from_model(user)

    @strawberry.field(
        description="List users with search and offset pagination",
        permission_classes=[IsAuthenticated],
    )
    async def get_users(
        self,
        info: Info[GraphQLContext, None],
        input: PaginateUserInput | None = None,
    ) -> PaginatedUser:
        with translate_errors():
            params = UserListParams.model_validate(input_to_dict(input) if input else {})
            page = await info.context.services.users.list_users(params)
        return PaginatedUser.from_page(page)
