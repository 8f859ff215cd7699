"""GraphQL server configuration settings.

Controls the GraphQL endpoint, IDE, query depth and per-client throttling.
Environment variables use GRAPHQL_ prefix.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_graphql_yaml_source

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """GraphQL server configuration.

    Environment variables use GRAPHQL_ prefix.
    Example: GRAPHQL_PATH=/graphql, GRAPHQL_THROTTLE_LIMIT=10
    """

    # Endpoint configuration
    path: str = Field(
        default="/graphql",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="GraphQL endpoint path",
    )
    graphql_ide: GraphQLIDE = Field(
        default="graphiql",
        description="GraphQL IDE to use: graphiql, apollo-sandbox, pathfinder, or false to disable",
    )

    # Query limits for security
    max_query_depth: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum query nesting depth",
    )

    # Throttling
    throttle_enabled: bool = Field(
        default=True,
        description="Enable per-client operation throttling",
    )
    throttle_limit: int = Field(
        default=10,
        ge=1,
        le=10_000,
        description="Operations allowed per client within one window",
    )
    throttle_window_seconds: float = Field(
        default=60.0,
        gt=0,
        le=3600,
        description="Throttle window length in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
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
            create_graphql_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
