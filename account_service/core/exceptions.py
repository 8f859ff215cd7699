"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    Follows RFC 7807 Problem Details; ``code`` is the machine-readable
    identifier surfaced in GraphQL ``extensions.code``.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (RFC 7807 problem type).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=404,
            detail="User not found",
            type="user-not-found",
            extra={"user_id": "64b7f0c2e4b0a1a2b3c4d5e6"},
        )
    """

    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            429: "Too Many Requests",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")

    def to_problem(self) -> dict[str, Any]:
        """Render as an RFC 7807 problem details body."""
        body: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
        }
        if self.instance:
            body["instance"] = self.instance
        body.update(self.extra)
        return body


class NotFoundException(AppException):
    """Exception raised when a resource is not found.

    Example:
        raise NotFoundException(detail="User not found", extra={"user_id": user_id})
    """

    code = "NOT_FOUND"

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=404,
            detail=detail,
            type=type,
            title="Not Found",
            instance=instance,
            extra=extra,
        )


class ValidationException(AppException):
    """Exception raised for invalid input.

    Example:
        raise ValidationException(detail="Invalid user id", extra={"field": "id"})
    """

    code = "BAD_USER_INPUT"

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            instance=instance,
            extra=extra,
        )


class UnauthorizedException(AppException):
    """Exception raised for authentication failures."""

    code = "UNAUTHENTICATED"

    def __init__(
        self,
        detail: str,
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


class ForbiddenException(AppException):
    """Exception raised when an authenticated user may not act."""

    code = "FORBIDDEN"

    def __init__(
        self,
        detail: str,
        type: str = "forbidden",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=403,
            detail=detail,
            type=type,
            title="Forbidden",
            instance=instance,
            extra=extra,
        )


class ConflictException(AppException):
    """Exception raised for resource conflicts.

    Example:
        raise ConflictException(
            detail="A user with this email already exists",
            type="duplicate-key",
            extra={"field": "email"},
        )
    """

    code = "CONFLICT"

    def __init__(
        self,
        detail: str,
        type: str = "conflict",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=409,
            detail=detail,
            type=type,
            title="Conflict",
            instance=instance,
            extra=extra,
        )


class RateLimitException(AppException):
    """Exception raised when a client exceeds its operation budget.

    ``extra`` should carry ``retry_after`` in seconds.
    """

    code = "TOO_MANY_REQUESTS"

    def __init__(
        self,
        detail: str = "Too many requests",
        type: str = "rate-limit-exceeded",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=429,
            detail=detail,
            type=type,
            title="Too Many Requests",
            instance=instance,
            extra=extra,
        )


class TokenExpiredError(UnauthorizedException):
    """Exception raised when a JWT has expired."""

    def __init__(self, detail: str = "Token has expired") -> None:
        super().__init__(detail=detail, type="token-expired")


class TokenInvalidError(UnauthorizedException):
    """Exception raised when a JWT fails signature or claim checks."""

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(detail=detail, type="token-invalid")


class InvalidCredentialsError(UnauthorizedException):
    """Exception raised when a login/password pair does not match.

    The message never says which half was wrong.
    """

    def __init__(self, detail: str = "Invalid credentials") -> None:
        super().__init__(detail=detail, type="invalid-credentials")


__all__ = [
    "AppException",
    "ConflictException",
    "ForbiddenException",
    "InvalidCredentialsError",
    "NotFoundException",
    "RateLimitException",
    "TokenExpiredError",
    "TokenInvalidError",
    "UnauthorizedException",
    "ValidationException",
]
