"""JWT authentication settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_auth_yaml_source


class AuthSettings(BaseSettings):
    """Token signing and password hashing settings.

    Environment variables use AUTH_ prefix.
    Example: AUTH_ACCESS_TOKEN_SECRET=..., AUTH_REFRESH_TOKEN_TTL_SECONDS=604800
    """

    # Token signing
    access_token_secret: SecretStr = Field(
        default=SecretStr("change-me-access-secret"),
        description="HMAC secret used to sign access tokens.",
    )
    refresh_token_secret: SecretStr = Field(
        default=SecretStr("change-me-refresh-secret"),
        description="HMAC secret used to sign refresh tokens.",
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm.",
    )
    access_token_ttl_seconds: int = Field(
        default=86_400,
        ge=60,
        description="Access token lifetime in seconds (1 day).",
    )
    refresh_token_ttl_seconds: int = Field(
        default=604_800,
        ge=60,
        description="Refresh token lifetime in seconds (7 days).",
    )

    # Header parsing
    token_header: str = Field(
        default="Authorization",
        description="HTTP header containing the token",
    )
    token_scheme: str = Field(
        default="Bearer",
        description="Token authentication scheme",
    )

    # Password hashing
    password_schemes: list[str] = Field(
        default_factory=lambda: ["pbkdf2_sha256"],
        min_length=1,
        description="passlib schemes; the first one hashes new passwords.",
    )

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> AuthSettings:
        """Access and refresh tokens must not share a signing secret."""
        if self.access_token_secret.get_secret_value() == self.refresh_token_secret.get_secret_value():
            msg = "access_token_secret and refresh_token_secret must differ"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_auth_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
