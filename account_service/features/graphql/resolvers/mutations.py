"""Mutation resolvers for the GraphQL API.

Authentication (public):
- signup, login, refreshToken

User management (authenticated):
- createUser, updateUser, softDeleteUser, deleteUser

Every user write goes through the tracked collection, so each mutation
leaves an activity log record without doing anything here.
"""

from __future__ import annotations

import strawberry
from strawberry.types import Info

from account_service.features.auth import schemas as auth_schemas
from account_service.features.graphql.context import GraphQLContext
from account_service.features.graphql.error_handler import translate_errors
from account_service.features.graphql.permissions import IsAuthenticated
from account_service.features.graphql.types import (
    CreateUserInput,
    GetUserInput,
    LoginInput,
    LoginResponse,
    RefreshTokenInput,
    SignupInput,
    UpdateUserInput,
    UserType,
    input_to_dict,
)
from account_service.features.users import UserCreate, UserUpdate


@strawberry.type(description="Root mutation type")
class Mutation:
    """GraphQL Mutation resolvers."""

    @strawberry.mutation(description="Create an account and sign in")
    async def signup(self, info: Info[GraphQLContext, None], input: SignupInput) -> LoginResponse:
        with translate_errors():
            payload = UserCreate.model_validate(input_to_dict(input))
            result = await info.context.services.auth.signup(payload)
        return LoginResponse.from_result(result)

    @strawberry.mutation(description="Login and get JWT tokens")
    async def login(self, info: Info[GraphQLContext, None], input: LoginInput) -> LoginResponse:
        with translate_errors():
            payload = auth_schemas.LoginInput.model_validate(input_to_dict(input))
            result = await info.context.services.auth.login(payload)
        return LoginResponse.from_result(result)

    @strawberry.mutation(description="Exchange a refresh token for a new token pair")
    async def refresh_token(
        self, info: Info[GraphQLContext, None], input: RefreshTokenInput,
    ) -> LoginResponse:
        with translate_errors():
            payload = auth_schemas.RefreshTokenInput.model_validate(input_to_dict(input))
            result = await info.context.services.auth.refresh_token(payload)
        return LoginResponse.from_result(result)

    @strawberry.mutation(description="Create a user", permission_classes=[IsAuthenticated])
    async def create_user(
        self, info: Info[GraphQLContext, None], input: CreateUserInput,
    ) -> UserType:
        ctx = info.context
        with translate_errors():
            payload = UserCreate.model_validate(input_to_dict(input))
            user = await ctx.services.users.create_user(payload, created_by=ctx.user.id)
        return UserType.from_model(user)

    @strawberry.mutation(description="Update a user", permission_classes=[IsAuthenticated])
    async def update_user(
        self, info: Info[GraphQLContext, None], input: UpdateUserInput,
    ) -> UserType:
        data = input_to_dict(input)
        user_id = str(data.pop("id"))
        with translate_errors():
            payload = UserUpdate.model_validate(data)
            user = await info.context.services.users.update_user(user_id, payload)
        return UserType.from_model(user)

    @strawberry.mutation(
        description="Mark a user as DELETED without removing it",
        permission_classes=[IsAuthenticated],
    )
    async def soft_delete_user(
        self, info: Info[GraphQLContext, None], input: GetUserInput,
    ) -> UserType:
        with translate_errors():
            user = await info.context.services.users.soft_delete_user(str(input.id))
        return UserType.from_model(user)

    @strawberry.mutation(description="Remove a user permanently", permission_classes=[IsAuthenticated])
    async def delete_user(
        self, info: Info[GraphQLContext, None], input: GetUserInput,
    ) -> UserType:
        with translate_errors():
            user = await info.context.services.users.delete_user(str(input.id))
        return UserType.from_model(user)
