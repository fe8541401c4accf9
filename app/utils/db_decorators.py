"""
Database decorators for automatic error handling and rollback.

Provides decorators that turn connectivity errors into TransientIOError
so callers can retry them. ``translate_db_errors`` and ``with_auto_commit``
also roll the session back on failure; use them only where the decorated
method owns the transaction.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import TRANSIENT_DB_ERRORS, TransientIOError


T = TypeVar("T")


def _find_session(args: tuple[Any, ...], kwargs: dict[str, Any]) -> AsyncSession | None:
    """Locate the session in kwargs, the first argument, or ``self.session``."""
    session = kwargs.get('session')
    if session is not None:
        return session

    if args:
        if isinstance(args[0], AsyncSession):
            return args[0]
        candidate = getattr(args[0], 'session', None)
        if isinstance(candidate, AsyncSession):
            return candidate

    return None


async def _rollback(session: AsyncSession, func_name: str, error: Exception) -> None:
    try:
        await session.rollback()
        logger.info(
            f"Rollback performed in {func_name} due to error: {type(error).__name__}"
        )
    except Exception as rollback_error:
        logger.error(
            f"Failed to rollback in {func_name}: {rollback_error}",
            exc_info=True
        )


def translate_db_errors(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that rolls back on error and marks connectivity errors transient.

    Usage:
        class DashboardDataSource:
            @translate_db_errors
            async def fetch_wallet(self, member_id):
                ...

    The decorator will:
    1. Execute the wrapped function
    2. On any exception, roll the session back
    3. Re-raise driver connectivity errors as TransientIOError,
       everything else unchanged
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        try:
            return await func(*args, **kwargs)
        except TRANSIENT_DB_ERRORS as e:
            if session is not None:
                await _rollback(session, func.__name__, e)
            logger.warning(f"Transient database error in {func.__name__}: {e}")
            raise TransientIOError(str(e)) from e
        except Exception as e:
            if session is not None:
                await _rollback(session, func.__name__, e)
            raise

    return wrapper


def translate_transient_errors(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that marks connectivity errors transient and leaves the session alone.

    For components that only flush. The caller owns the transaction and
    decides whether to roll it back.

    Usage:
        class NetworkStore(BaseService):
            @translate_transient_errors
            async def place_member(self, ...):
                ...
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except TRANSIENT_DB_ERRORS as e:
            logger.warning(f"Transient database error in {func.__name__}: {e}")
            raise TransientIOError(str(e)) from e

    return wrapper


def with_auto_commit(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that commits the session on success.

    Errors are handled as in :func:`translate_db_errors`.

    Example:
        @with_auto_commit
        async def purchase(self, member_id: int, product_id: int, quantity: int):
            ...
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

        result = await translate_db_errors(func)(*args, **kwargs)
        try:
            await session.commit()
        except TRANSIENT_DB_ERRORS as e:
            await _rollback(session, func.__name__, e)
            raise TransientIOError(str(e)) from e
        logger.debug(f"Auto-commit performed in {func.__name__}")
        return result

    return wrapper
