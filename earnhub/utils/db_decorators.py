"""
Database decorators for automatic commit and rollback.

Works on plain functions taking a session and on service methods
whose instance holds ``self.session``.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


def _find_session(args: tuple, kwargs: dict) -> AsyncSession | None:
    """Locate the session among call arguments."""
    session = kwargs.get("session")
    if session is not None:
        return session

    if args:
        first = args[0]
        if isinstance(first, AsyncSession):
            return first
        # Service method: session lives on the instance
        candidate = getattr(first, "session", None)
        if candidate is not None:
            return candidate

    return None


async def _safe_rollback(session: AsyncSession, func_name: str, error: Exception) -> None:
    try:
        await session.rollback()
        logger.info(
            f"Rollback performed in {func_name} due to error: {type(error).__name__}"
        )
    except Exception as rollback_error:
        logger.exception(f"Failed to rollback in {func_name}: {rollback_error}")


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that rolls back the session on any exception.

    The original exception is re-raised after the rollback.

    Example:
        @with_rollback_on_error
        async def create_offer(session: AsyncSession, title: str):
            session.add(Offer(title=title))
            await session.commit()
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)
        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_rollback_on_error "
                f"but no session argument found. Rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            await _safe_rollback(session, func.__name__, e)
            raise

    return wrapper


def with_auto_commit(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that commits the session on success and rolls back on error.

    Example:
        @with_auto_commit
        async def save_limits(self, limits):
            await self.settings_repo.set_value(KEY, limits)
            # Commit happens automatically
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)
        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_auto_commit "
                f"but no session argument found. Commit/rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            result = await func(*args, **kwargs)
            await session.commit()
            logger.debug(f"Auto-commit performed in {func.__name__}")
            return result
        except Exception as e:
            await _safe_rollback(session, func.__name__, e)
            raise

    return wrapper
