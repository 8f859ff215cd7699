"""Base service class for business logic."""

from __future__ import annotations

import logging

from account_service.infra.logging import get_lazy_logger


class BaseService:
    """Base class for service classes.

    Loggers:
        - self.logger: standard logger for INFO/WARNING/ERROR
        - self._lazy: lazy logger for DEBUG (callables only run when DEBUG is on)

    Example:
        class UserService(BaseService):
            def __init__(self, repository: UserRepository) -> None:
                super().__init__()
                self.repository = repository

            async def get_user(self, user_id: str) -> User:
                self.logger.info("Fetching user", extra={"user_id": user_id})
                return await self.repository.get_by_id(user_id)
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)
