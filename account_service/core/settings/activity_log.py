"""Activity log capture settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_activity_log_yaml_source


class ActivityLogSettings(BaseSettings):
    """Settings for the write-interception audit trail.

    Environment variables use ACTIVITY_LOG_ prefix.
    Example: ACTIVITY_LOG_ENABLED=false, ACTIVITY_LOG_SNAPSHOT_TTL_SECONDS=10
    """

    enabled: bool = Field(
        default=True,
        description="Record an activity log entry for every tracked write",
    )
    collection_name: str = Field(
        default="activitylogs",
        min_length=1,
        description="Collection holding activity log records (never itself audited)",
    )
    snapshot_ttl_seconds: float = Field(
        default=30.0,
        gt=0,
        le=3600,
        description="Maximum lifetime of a pre-write snapshot awaiting its post-write hook",
    )
    redaction_marker: str = Field(
        default="*****",
        description="Replacement value for secret fields",
    )
    redacted_fields: list[str] = Field(
        default_factory=lambda: ["password"],
        description="Document and variable fields replaced by the redaction marker",
    )
    refresh_token_variables: list[str] = Field(
        default_factory=lambda: ["refreshTokenInput"],
        description="GraphQL variable names that mark a token refresh (not audited)",
    )
    refresh_token_operations: list[str] = Field(
        default_factory=lambda: ["refreshToken"],
        description="GraphQL root fields that mark a token refresh (not audited)",
    )
    timestamp_field: str = Field(
        default="updatedAt",
        description="Last-modified field captured in snapshots for drift detection",
    )

    @field_validator("collection_name")
    @classmethod
    def normalize_collection_name(cls, v: str) -> str:
        """Collection comparison is case-insensitive."""
        return v.strip()

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_LOG_",
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
            create_activity_log_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
