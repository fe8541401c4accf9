"""
Read-through cache.

Last-known-good records in Redis, stored as JSON with the time they
were fetched. Redis failures are logged and never fail the caller.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from app.config.settings import settings
from app.utils.datetime_utils import ensure_utc, utc_now
from app.utils.exceptions import StaleDataError


M = TypeVar("M", bound=BaseModel)

# Stale entries are kept this long so they can still be reported as stale
DEFAULT_RETENTION_SECONDS = 7 * 24 * 3600


@dataclass(frozen=True)
class CacheHit(Generic[M]):
    """A cached value and when it was fetched."""

    value: M
    fetched_at: datetime
    age_seconds: float


class ReadThroughCache:
    """
    Namespaced JSON cache over ``redis.asyncio``.

    ``ttl_seconds`` is the freshness window: ``get_or_load`` reloads
    entries older than it, and ``get(..., max_age=...)`` raises
    StaleDataError for them. Keys themselves live for
    ``retention_seconds``.

    Example:
        cache = ReadThroughCache(redis_client, namespace="dashboard", ttl_seconds=300)
        wallet = await cache.get_or_load("wallet:7", WalletSnapshot, load_wallet)
    """

    def __init__(
        self,
        redis: AsyncRedis,
        namespace: str = "dashboard",
        ttl_seconds: int | None = None,
        retention_seconds: int = DEFAULT_RETENTION_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.redis = redis
        self.namespace = namespace
        self.ttl_seconds = (
            settings.dashboard_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self.retention_seconds = max(retention_seconds, self.ttl_seconds)
        self._clock = clock

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(
        self, key: str, model: type[M], max_age: float | None = None
    ) -> CacheHit[M] | None:
        """
        Read a cached record.

        Args:
            key: Key inside the namespace
            model: DTO class to validate into
            max_age: Raise StaleDataError if the entry is older (seconds)

        Returns:
            CacheHit, or None when missing, unreadable or Redis is down

        Raises:
            StaleDataError: If the entry is older than ``max_age``
        """
        try:
            raw = await self.redis.get(self._key(key))
        except (RedisError, OSError) as e:
            logger.warning(f"Cache read failed for {self._key(key)}: {e}")
            return None

        if raw is None:
            return None

        try:
            payload = json.loads(raw)
            fetched_at = ensure_utc(datetime.fromisoformat(payload["fetched_at"]))
            value = model.model_validate(payload["value"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cache entry {self._key(key)}: {e}")
            return None

        age = (self._clock() - fetched_at).total_seconds()
        if max_age is not None and age > max_age:
            raise StaleDataError(self._key(key), age)

        return CacheHit(value=value, fetched_at=fetched_at, age_seconds=age)

    async def set(self, key: str, value: BaseModel) -> None:
        """Store a record stamped with the current time."""
        payload = json.dumps(
            {
                "fetched_at": self._clock().isoformat(),
                "value": value.model_dump(mode="json"),
            }
        )
        try:
            await self.redis.set(self._key(key), payload, ex=self.retention_seconds)
        except (RedisError, OSError) as e:
            logger.warning(f"Cache write failed for {self._key(key)}: {e}")

    async def invalidate(self, *keys: str) -> int:
        """
        Delete records.

        Returns:
            Number of keys removed (0 if Redis is unreachable)
        """
        if not keys:
            return 0
        try:
            deleted = await self.redis.delete(*(self._key(key) for key in keys))
        except (RedisError, OSError) as e:
            logger.warning(f"Failed to invalidate cache keys {keys}: {e}")
            return 0

        if deleted:
            logger.debug(f"Cache invalidated: {deleted} key(s) in {self.namespace}")
        return deleted

    async def get_or_load(
        self,
        key: str,
        model: type[M],
        loader: Callable[[], Awaitable[M]],
    ) -> M:
        """
        Return a fresh cached record, or load and cache it.

        Args:
            key: Key inside the namespace
            model: DTO class
            loader: Coroutine factory producing the record

        Returns:
            The record
        """
        try:
            hit = await self.get(key, model, max_age=self.ttl_seconds)
        except StaleDataError:
            hit = None

        if hit is not None:
            return hit.value

        value = await loader()
        await self.set(key, value)
        return value
