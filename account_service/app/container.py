"""Application service wiring.

``build_services`` assembles the activity-log capture, the tracked user
collection and the services on top of it from one database handle. The
app stores the result on ``app.state.services``; tests build their own
against an in-memory database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from account_service.core.settings import (
    get_activity_log_settings,
    get_auth_settings,
    get_graphql_settings,
)
from account_service.features.activity_logs import (
    ActivityLogRecorder,
    ActivityLogRepository,
    ActivityLogTracker,
)
from account_service.features.auth import AuthService
from account_service.features.graphql.extensions.throttle import OperationThrottle
from account_service.features.users import UserRepository, UserService
from account_service.infra.auth import TokenService
from account_service.infra.database import USERS

if TYPE_CHECKING:
    from account_service.core.settings import (
        ActivityLogSettings,
        AuthSettings,
        GraphQLSettings,
    )

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived collaborators shared by every request."""

    recorder: ActivityLogRecorder
    tracker: ActivityLogTracker
    users: UserService
    auth: AuthService
    throttle: OperationThrottle | None = None

    async def shutdown(self) -> None:
        """Wait for in-flight activity log writes."""
        await self.recorder.drain()


def build_services(
    db: Any,
    *,
    activity_log_settings: ActivityLogSettings | None = None,
    auth_settings: AuthSettings | None = None,
    graphql_settings: GraphQLSettings | None = None,
) -> Services:
    """Wire services against ``db`` (anything indexable by collection name)."""
    activity_log_settings = activity_log_settings or get_activity_log_settings()
    auth_settings = auth_settings or get_auth_settings()
    graphql_settings = graphql_settings or get_graphql_settings()

    # The audit sink writes through the raw collection
    recorder = ActivityLogRecorder(
        ActivityLogRepository(db[activity_log_settings.collection_name]),
        activity_log_settings,
    )
    tracker = ActivityLogTracker(recorder)
    user_repository = UserRepository(tracker.track(db[USERS]))
    user_service = UserService(user_repository)
    auth_service = AuthService(user_service, user_repository, TokenService(auth_settings))

    throttle = None
    if graphql_settings.throttle_enabled:
        throttle = OperationThrottle(
            limit=graphql_settings.throttle_limit,
            window_seconds=graphql_settings.throttle_window_seconds,
        )

    logger.debug(
        "Services wired",
        extra={
            "activity_log_enabled": activity_log_settings.enabled,
            "throttle_enabled": throttle is not None,
        },
    )
    return Services(
        recorder=recorder,
        tracker=tracker,
        users=user_service,
        auth=auth_service,
        throttle=throttle,
    )
