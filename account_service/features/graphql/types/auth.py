"""GraphQL types for signup, login and token refresh."""

from __future__ import annotations

import strawberry

from account_service.features.auth import AuthResult
from account_service.features.graphql.types.users import GenderType, UserType


@strawberry.type(description="Token pair plus the signed-in user")
class LoginResponse:
    access_token: str
    refresh_token: str
    user: UserType

    @classmethod
    def from_result(cls, result: AuthResult) -> LoginResponse:
        return cls(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            user=UserType.from_model(result.user),
        )


@strawberry.input(description="Credentials for login")
class LoginInput:
    email: str
    password: str


@strawberry.input(description="New account details")
class SignupInput:
    first_name: str
    last_name: str
    email: str
    password: str
    username: str | None = None
    phone: str | None = None
    gender: GenderType | None = None


@strawberry.input(description="Refresh token to exchange for a new pair")
class RefreshTokenInput:
    refresh_token: str
