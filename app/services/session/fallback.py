"""
Cache fallback.

Composes a fetch with the last-known-good value in a ReadThroughCache.
Retrying is the caller's concern; wrap ``fetch`` in a RetryPolicy first.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from loguru import logger
from pydantic import BaseModel

from app.services.session.cache import ReadThroughCache
from app.utils.exceptions import StaleDataError, is_retryable


M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FetchResult(Generic[M]):
    """A fetched value and whether it came from the cache."""

    value: M
    from_cache: bool = False
    fetched_at: datetime | None = None


async def with_cache_fallback(
    fetch: Callable[[], Awaitable[M]],
    cache: ReadThroughCache,
    key: str,
    model: type[M],
    is_current: Callable[[], bool] | None = None,
) -> FetchResult[M]:
    """
    Fetch a record, falling back to the cache on a retryable failure.

    A successful fetch refreshes the cache. On a retryable failure the
    cached record is returned if it is within the cache TTL.

    Args:
        fetch: Coroutine factory (usually ``lambda: policy.run(...)``)
        cache: Cache holding last-known-good records
        key: Cache key
        model: DTO class of the record
        is_current: Returns False once the result is no longer wanted; a
            fetch that completes after that does not touch the cache

    Returns:
        FetchResult

    Raises:
        StaleDataError: If the only cached record is older than the TTL
        The original error: If nothing is cached, or it is not retryable
    """
    try:
        value = await fetch()
    except Exception as e:
        if not is_retryable(e):
            raise
        try:
            hit = await cache.get(key, model, max_age=cache.ttl_seconds)
        except StaleDataError as stale:
            raise stale from e

        if hit is None:
            raise

        logger.warning(
            f"Serving cached {key} ({hit.age_seconds:.0f}s old) after fetch failure: {e}"
        )
        return FetchResult(value=hit.value, from_cache=True, fetched_at=hit.fetched_at)

    if is_current is None or is_current():
        await cache.set(key, value)
    return FetchResult(value=value, from_cache=False)
