"""Unit tests for modular Pydantic Settings v2."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from account_service.core.settings import (
    ActivityLogSettings,
    AppSettings,
    AuthSettings,
    GraphQLSettings,
    LoggingSettings,
    clear_all_caches,
    get_activity_log_settings,
    get_graphql_settings,
)


@pytest.mark.unit
class TestAppSettings:
    """Test suite for AppSettings."""

    def test_environment_from_env(self):
        """The test environment is set by conftest."""
        assert AppSettings().environment == "test"

    def test_debug_is_refused_in_production(self):
        with pytest.raises(ValidationError, match="Debug mode cannot be enabled"):
            AppSettings(environment="production", debug=True)

    def test_settings_are_frozen(self):
        settings = AppSettings()

        with pytest.raises(ValidationError):
            settings.port = 1


@pytest.mark.unit
class TestActivityLogSettings:
    """Test suite for ActivityLogSettings."""

    def test_defaults(self):
        settings = ActivityLogSettings()

        assert settings.enabled is True
        assert settings.collection_name == "activitylogs"
        assert settings.snapshot_ttl_seconds == 30.0
        assert settings.redaction_marker == "*****"
        assert settings.redacted_fields == ["password"]
        assert settings.refresh_token_variables == ["refreshTokenInput"]
        assert settings.refresh_token_operations == ["refreshToken"]

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ACTIVITY_LOG_ENABLED", "false")
        monkeypatch.setenv("ACTIVITY_LOG_SNAPSHOT_TTL_SECONDS", "5")

        settings = ActivityLogSettings()

        assert settings.enabled is False
        assert settings.snapshot_ttl_seconds == 5.0

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            ActivityLogSettings(snapshot_ttl_seconds=0)

    def test_loader_is_cached_until_cleared(self, monkeypatch):
        first = get_activity_log_settings()
        assert get_activity_log_settings() is first

        monkeypatch.setenv("ACTIVITY_LOG_COLLECTION_NAME", "audit")
        clear_all_caches()

        assert get_activity_log_settings().collection_name == "audit"


@pytest.mark.unit
class TestGraphQLSettings:
    def test_throttle_defaults(self):
        settings = get_graphql_settings()

        assert settings.throttle_enabled is True
        assert settings.throttle_limit == 10
        assert settings.throttle_window_seconds == 60.0
        assert settings.path == "/graphql"

    def test_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            GraphQLSettings(path="graphql")


@pytest.mark.unit
class TestAuthSettings:
    def test_token_lifetimes(self):
        settings = AuthSettings()

        assert settings.access_token_ttl_seconds == 86_400
        assert settings.refresh_token_ttl_seconds == 604_800
        assert settings.password_schemes == ["pbkdf2_sha256"]

    def test_secrets_are_hidden_in_repr(self):
        assert "change-me-access-secret" not in repr(AuthSettings())


@pytest.mark.unit
class TestLoggingSettings:
    def test_level_is_normalized(self):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_file_path_only_when_enabled(self):
        assert LoggingSettings(file_enabled=False).to_logging_kwargs()["file_path"] is None
        kwargs = LoggingSettings(file_enabled=True, file_path="logs/x.jsonl").to_logging_kwargs()
        assert kwargs["file_path"] == "logs/x.jsonl"
