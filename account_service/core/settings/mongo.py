"""MongoDB connection settings for the motor client."""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_mongo_yaml_source


class MongoSettings(BaseSettings):
    """MongoDB connection settings.

    Environment variables use MONGO_ prefix.
    Example: MONGO_URI="mongodb://localhost:27017", MONGO_DATABASE=accounts
    """

    enabled: bool = Field(
        default=True,
        description="Connect to MongoDB on startup. Set to False for tests or stateless runs.",
    )
    uri: str = Field(
        default="mongodb://localhost:27017",
        min_length=1,
        description="MongoDB connection string.",
    )
    database: str = Field(
        default="accounts",
        min_length=1,
        max_length=64,
        description="Database name.",
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        ge=100,
        le=120_000,
        description="Server selection timeout in milliseconds.",
    )
    connect_timeout_ms: int = Field(
        default=10_000,
        ge=100,
        le=120_000,
        description="Socket connect timeout in milliseconds.",
    )
    max_pool_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum connections in the client pool.",
    )
    ensure_indexes: bool = Field(
        default=True,
        description="Create collection indexes at startup.",
    )

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
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
            create_mongo_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``AsyncIOMotorClient``."""
        return {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
            "maxPoolSize": self.max_pool_size,
            "tz_aware": True,
        }
