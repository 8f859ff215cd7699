"""GraphQL type definitions.

This package contains Strawberry types for:
- Users (UserType, PaginatedUser and their inputs)
- Authentication (LoginResponse and its inputs)
"""

from __future__ import annotations

from account_service.features.graphql.types.auth import (
    LoginInput,
    LoginResponse,
    RefreshTokenInput,
    SignupInput,
)
from account_service.features.graphql.types.users import (
    CreateUserInput,
    GenderType,
    GetUserInput,
    PaginatedUser,
    PaginateUserInput,
    UpdateUserInput,
    UserStatusType,
    UserType,
    input_to_dict,
)

__all__ = [
    "CreateUserInput",
    "GenderType",
    "GetUserInput",
    "LoginInput",
    "LoginResponse",
    "PaginateUserInput",
    "PaginatedUser",
    "RefreshTokenInput",
    "SignupInput",
    "UpdateUserInput",
    "UserStatusType",
    "UserType",
    "input_to_dict",
]
