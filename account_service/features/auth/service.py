"""Signup, login, token refresh and bearer-token authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING

from account_service.core.exceptions import (
    ForbiddenException,
    InvalidCredentialsError,
    TokenInvalidError,
)
from account_service.core.services import BaseService
from account_service.features.users import UserStatus
from account_service.infra.auth import TokenService, TokenType, verify_password

from .schemas import AuthResult

if TYPE_CHECKING:
    from account_service.features.users import User, UserCreate, UserRepository, UserService

    from .schemas import LoginInput, RefreshTokenInput

BLOCKED_STATUSES = frozenset({UserStatus.BANNED, UserStatus.DELETED})


class AuthService(BaseService):
    """Issues token pairs and resolves tokens back to users.

    Example:
        auth = AuthService(user_service, user_repository)
        result = await auth.login(LoginInput(email="a@b.co", password="..."))
        user = await auth.authenticate(result.access_token)
    """

    def __init__(
        self,
        users: UserService,
        repository: UserRepository,
        tokens: TokenService | None = None,
    ) -> None:
        super().__init__()
        self.users = users
        self.repository = repository
        self.tokens = tokens or TokenService()

    def _issue(self, user: User) -> AuthResult:
        pair = self.tokens.issue_pair(user.id, user.email)
        return AuthResult(user=user, access_token=pair.access_token, refresh_token=pair.refresh_token)

    async def signup(self, payload: UserCreate) -> AuthResult:
        """Create a PENDING account and sign it in."""
        user = await self.users.create_user(payload.model_copy(update={"status": None}))
        self.logger.info("User signed up", extra={"user_id": user.id, "operation": "service.signup"})
        return self._issue(user)

    async def login(self, payload: LoginInput) -> AuthResult:
        user = await self.repository.get_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password):
            self.logger.warning("Login failed", extra={"operation": "service.login"})
            raise InvalidCredentialsError
        if user.status in BLOCKED_STATUSES:
            raise ForbiddenException(detail=f"Account is {user.status.value.lower()}")
        await self.repository.touch_last_active(user.id)
        self.logger.info("User logged in", extra={"user_id": user.id, "operation": "service.login"})
        return self._issue(user)

    async def refresh_token(self, payload: RefreshTokenInput) -> AuthResult:
        """Exchange a valid refresh token for a new pair."""
        claims = self.tokens.decode(payload.refresh_token, TokenType.REFRESH)
        user = await self.repository.get_by_id(claims.sub)
        if user is None or user.status in BLOCKED_STATUSES:
            raise TokenInvalidError
        await self.repository.touch_last_active(user.id)
        self._lazy.debug(lambda: f"service.refresh_token({user.id}) -> issued")
        return self._issue(user)

    async def authenticate(self, token: str) -> User:
        """Resolve an access token to its user.

        Raises:
            TokenExpiredError: The token is past its expiry.
            TokenInvalidError: Bad token, or the user no longer exists or is blocked.
        """
        claims = self.tokens.decode(token, TokenType.ACCESS)
        user = await self.repository.get_by_id(claims.sub)
        if user is None or user.status in BLOCKED_STATUSES:
            raise TokenInvalidError
        return user
