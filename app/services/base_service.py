"""
Base service class.

Provides common functionality for all service classes including session
management, logging and translation of database failures.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import (
    AppError,
    PersistenceUnavailableError,
    is_persistence_failure,
)


# Type variable for generic decorator return types
T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Provides common functionality for all service classes:
    - Session management
    - Logging with bound service context
    - Transaction helpers
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decorator to wrap method in transaction with automatic commit/rollback.

    Commits on success, rolls back on exception. Driver-level connection
    failures and timeouts are re-raised as PersistenceUnavailableError so
    callers only ever see the application error taxonomy.

    Usage:
        @transaction
        async def my_service_method(self, ...):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> T:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except AppError:
            await _safe_rollback(self)
            raise
        except Exception as e:
            await _safe_rollback(self)
            if is_persistence_failure(e):
                self.logger.error(f"Database unavailable in {func.__name__}: {e}")
                raise PersistenceUnavailableError(
                    "Database temporarily unavailable. Please try again later."
                ) from e
            self.logger.exception(f"Transaction failed in {func.__name__}: {e}")
            raise

    return wrapper


async def _safe_rollback(service: BaseService) -> None:
    """Rollback, tolerating a connection that is already gone."""
    try:
        await service.rollback()
    except Exception as e:
        service.logger.warning(f"Rollback failed: {e}")
