"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of
the process.

Usage:
    from account_service.core.settings import get_mongo_settings

    settings = get_mongo_settings()

Testing:
    Clear the cache to force a reload after changing the environment:
    get_mongo_settings.cache_clear()

    Or build an instance directly:
    settings = MongoSettings(database="accounts_test")
"""

from __future__ import annotations

from functools import lru_cache

from .activity_log import ActivityLogSettings
from .app import AppSettings
from .auth import AuthSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings
from .mongo import MongoSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_mongo_settings() -> MongoSettings:
    """Get cached MongoDB settings."""
    return MongoSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached token and password hashing settings."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_graphql_settings() -> GraphQLSettings:
    """Get cached GraphQL settings."""
    return GraphQLSettings()


@lru_cache(maxsize=1)
def get_activity_log_settings() -> ActivityLogSettings:
    """Get cached activity log settings."""
    return ActivityLogSettings()


def clear_all_caches() -> None:
    """Clear every settings cache (tests, reloads)."""
    get_app_settings.cache_clear()
    get_mongo_settings.cache_clear()
    get_auth_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_graphql_settings.cache_clear()
    get_activity_log_settings.cache_clear()
