"""Modular Pydantic Settings v2 configuration.

One frozen settings class per domain, each with its own env prefix:
APP_, MONGO_, AUTH_, LOG_, GRAPHQL_, ACTIVITY_LOG_.

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (conf/<domain>.yaml, conf/<domain>.d/*.yaml)
    3. Environment variables
    4. .env file
    5. secrets_dir
"""

from __future__ import annotations

from .activity_log import ActivityLogSettings
from .app import AppSettings
from .auth import AuthSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_all_caches,
    get_activity_log_settings,
    get_app_settings,
    get_auth_settings,
    get_graphql_settings,
    get_logging_settings,
    get_mongo_settings,
)
from .logs import LoggingSettings
from .mongo import MongoSettings

__all__ = [
    "ActivityLogSettings",
    "AppSettings",
    "AuthSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "MongoSettings",
    "clear_all_caches",
    "get_activity_log_settings",
    "get_app_settings",
    "get_auth_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_mongo_settings",
]
