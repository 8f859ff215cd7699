"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings isolated from the developer's shell and .env
    - Database: in-memory motor-like collections (tests/fakes.py)
    - Activity log: recorder, tracker and a tracked users collection
    - Services and application: wired services, FastAPI app, HTTP client
    - Authentication: a persisted user and its bearer header
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from account_service.core.settings import (
    ActivityLogSettings,
    AuthSettings,
    GraphQLSettings,
    clear_all_caches,
)
from account_service.infra.auth import get_password_context
from tests.fakes import FakeDatabase

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("MONGO_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

STRONG_PASSWORD = "Sup3r$ecret"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    """Reload settings for every test so env changes do not leak."""
    clear_all_caches()
    get_password_context.cache_clear()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase("accounts_test")


@pytest.fixture
def activity_logs(db: FakeDatabase):
    """Raw audit collection, for asserting on stored records."""
    return db["activitylogs"]


# ============================================================================
# Activity Log Fixtures
# ============================================================================


@pytest.fixture
def activity_log_settings() -> ActivityLogSettings:
    return ActivityLogSettings()


@pytest.fixture
def recorder(activity_logs, activity_log_settings):
    from account_service.features.activity_logs import ActivityLogRecorder, ActivityLogRepository

    return ActivityLogRecorder(ActivityLogRepository(activity_logs), activity_log_settings)


@pytest.fixture
def tracker(recorder):
    from account_service.features.activity_logs import ActivityLogTracker

    return ActivityLogTracker(recorder)


@pytest.fixture
def tracked_users(db: FakeDatabase, tracker):
    return tracker.track(db["users"])


# ============================================================================
# Services and Application Fixtures
# ============================================================================


@pytest.fixture
def graphql_settings() -> GraphQLSettings:
    return GraphQLSettings(throttle_limit=10, throttle_window_seconds=60)


@pytest.fixture
def services(db: FakeDatabase, activity_log_settings, graphql_settings):
    from account_service.app.container import build_services

    return build_services(
        db,
        activity_log_settings=activity_log_settings,
        auth_settings=AuthSettings(),
        graphql_settings=graphql_settings,
    )


@pytest.fixture
async def app(services):
    """FastAPI app with in-memory services; lifespan is not run by ASGITransport."""
    from account_service.app.main import create_app

    application = create_app()
    application.state.services = services
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Authentication Fixtures
# ============================================================================


@pytest.fixture
async def user(services):
    """A persisted ACTIVE user; its CREATE record is already stored."""
    from account_service.features.users import UserCreate

    created = await services.users.create_user(
        UserCreate(
            first_name="Alice",
            last_name="Smith",
            email="alice@example.com",
            password=STRONG_PASSWORD,
            status="ACTIVE",
        )
    )
    await services.recorder.drain()
    return created


@pytest.fixture
def access_token(services, user) -> str:
    return services.auth.tokens.issue_pair(user.id, user.email).access_token


@pytest.fixture
def auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
