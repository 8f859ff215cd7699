"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- the shared application services
- the authenticated user (optional)
- the authentication failure, when a token was sent but rejected

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from account_service.app.container import Services
    from account_service.core.exceptions import UnauthorizedException
    from account_service.features.users import User


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Example usage in resolver:
        @strawberry.field
        async def me(self, info: Info[GraphQLContext, None]) -> UserType:
            return UserType.from_model(info.context.user)
    """

    # Standard Strawberry/FastAPI context fields
    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    # Custom application fields
    services: Services = field(default=None)  # type: ignore[assignment]
    user: User | None = None
    auth_error: UnauthorizedException | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


__all__ = ["GraphQLContext"]
