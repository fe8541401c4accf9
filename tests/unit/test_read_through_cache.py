"""Tests for ReadThroughCache and with_cache_fallback."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from app.schemas import WalletSnapshot
from app.services.session import ReadThroughCache, with_cache_fallback
from app.utils.exceptions import MemberNotFoundError, StaleDataError, TransientIOError


class Clock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


def _wallet(main: str = "100") -> WalletSnapshot:
    return WalletSnapshot(
        member_id=7,
        main_balance=Decimal(main),
        topup_balance=Decimal("0"),
        purchased_amount=Decimal("0"),
        referral_bonus=Decimal("0"),
        stk_balance=Decimal("0"),
        business_volume=1500,
    )


@pytest.fixture
def clock() -> Clock:
    """Test clock."""
    return Clock()


@pytest.fixture
def cache(fake_redis, clock) -> ReadThroughCache:
    """Cache with a 300s freshness window."""
    return ReadThroughCache(fake_redis, namespace="test", ttl_seconds=300, clock=clock)


class TestReadThroughCache:
    """Tests for cache reads and writes."""

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache: ReadThroughCache, fake_redis) -> None:
        """Stored records validate back into their DTO."""
        await cache.set("wallet:7", _wallet())

        hit = await cache.get("wallet:7", WalletSnapshot)

        assert hit.value == _wallet()
        assert hit.age_seconds == 0
        assert "test:wallet:7" in fake_redis.store
        assert fake_redis.expiry["test:wallet:7"] >= 300

    @pytest.mark.asyncio
    async def test_missing_key(self, cache: ReadThroughCache) -> None:
        """Missing keys return None."""
        assert await cache.get("wallet:8", WalletSnapshot) is None

    @pytest.mark.asyncio
    async def test_stale_entry_raises(self, cache: ReadThroughCache, clock: Clock) -> None:
        """Entries older than max_age raise StaleDataError."""
        await cache.set("wallet:7", _wallet())
        clock.advance(301)

        with pytest.raises(StaleDataError) as exc_info:
            await cache.get("wallet:7", WalletSnapshot, max_age=300)

        assert exc_info.value.age_seconds == 301

    @pytest.mark.asyncio
    async def test_unreadable_entry_ignored(self, cache: ReadThroughCache, fake_redis) -> None:
        """Corrupt JSON is treated as a miss."""
        fake_redis.store["test:wallet:7"] = "{not json"

        assert await cache.get("wallet:7", WalletSnapshot) is None

    @pytest.mark.asyncio
    async def test_redis_down_is_a_miss(self, cache: ReadThroughCache, fake_redis) -> None:
        """Redis errors never reach the caller."""
        fake_redis.available = False

        await cache.set("wallet:7", _wallet())
        assert await cache.get("wallet:7", WalletSnapshot) is None
        assert await cache.invalidate("wallet:7") == 0

    @pytest.mark.asyncio
    async def test_invalidate(self, cache: ReadThroughCache) -> None:
        """Invalidated keys are gone."""
        await cache.set("wallet:7", _wallet())

        assert await cache.invalidate("wallet:7", "profile:7") == 1
        assert await cache.get("wallet:7", WalletSnapshot) is None

    @pytest.mark.asyncio
    async def test_get_or_load(self, cache: ReadThroughCache, clock: Clock) -> None:
        """Fresh entries are served; stale ones reloaded."""
        loads = []

        async def loader() -> WalletSnapshot:
            loads.append(1)
            return _wallet(str(100 + len(loads)))

        first = await cache.get_or_load("wallet:7", WalletSnapshot, loader)
        second = await cache.get_or_load("wallet:7", WalletSnapshot, loader)
        clock.advance(400)
        third = await cache.get_or_load("wallet:7", WalletSnapshot, loader)

        assert first == second
        assert first.main_balance == Decimal("101")
        assert third.main_balance == Decimal("102")
        assert len(loads) == 2

    @pytest.mark.asyncio
    async def test_zero_ttl_is_kept(self, fake_redis, clock: Clock) -> None:
        """A zero freshness window is not replaced by the configured default."""
        cache = ReadThroughCache(fake_redis, namespace="test", ttl_seconds=0, clock=clock)
        await cache.set("wallet:7", _wallet())
        clock.advance(1)

        assert cache.ttl_seconds == 0
        with pytest.raises(StaleDataError):
            await cache.get("wallet:7", WalletSnapshot, max_age=cache.ttl_seconds)


class TestCacheFallback:
    """Tests for with_cache_fallback."""

    @pytest.mark.asyncio
    async def test_success_refreshes_cache(self, cache: ReadThroughCache) -> None:
        """A successful fetch is returned and cached."""
        async def fetch() -> WalletSnapshot:
            return _wallet("250")

        result = await with_cache_fallback(fetch, cache, "wallet:7", WalletSnapshot)

        assert result.from_cache is False
        assert result.value.main_balance == Decimal("250")
        assert (await cache.get("wallet:7", WalletSnapshot)).value == result.value

    @pytest.mark.asyncio
    async def test_transient_failure_served_from_cache(
        self, cache: ReadThroughCache, clock: Clock
    ) -> None:
        """Last-known-good value is used when the fetch fails transiently."""
        await cache.set("wallet:7", _wallet("90"))
        clock.advance(60)

        async def fetch() -> WalletSnapshot:
            raise TransientIOError("database unreachable")

        result = await with_cache_fallback(fetch, cache, "wallet:7", WalletSnapshot)

        assert result.from_cache is True
        assert result.value.main_balance == Decimal("90")
        assert result.fetched_at == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_transient_failure_without_cache(self, cache: ReadThroughCache) -> None:
        """With nothing cached the original error propagates."""
        async def fetch() -> WalletSnapshot:
            raise TransientIOError("database unreachable")

        with pytest.raises(TransientIOError):
            await with_cache_fallback(fetch, cache, "wallet:7", WalletSnapshot)

    @pytest.mark.asyncio
    async def test_transient_failure_with_stale_cache(
        self, cache: ReadThroughCache, clock: Clock
    ) -> None:
        """A cached value older than the TTL is refused."""
        await cache.set("wallet:7", _wallet())
        clock.advance(3600)

        async def fetch() -> WalletSnapshot:
            raise TransientIOError("database unreachable")

        with pytest.raises(StaleDataError) as exc_info:
            await with_cache_fallback(fetch, cache, "wallet:7", WalletSnapshot)

        assert isinstance(exc_info.value.__cause__, TransientIOError)

    @pytest.mark.asyncio
    async def test_hard_failure_ignores_cache(self, cache: ReadThroughCache) -> None:
        """NotFound is never papered over with cached data."""
        await cache.set("wallet:7", _wallet())

        async def fetch() -> WalletSnapshot:
            raise MemberNotFoundError(7)

        with pytest.raises(MemberNotFoundError):
            await with_cache_fallback(fetch, cache, "wallet:7", WalletSnapshot)

    @pytest.mark.asyncio
    async def test_unwanted_result_not_cached(self, cache: ReadThroughCache) -> None:
        """A fetch that finishes after its caller moved on leaves the cache alone."""
        async def fetch() -> WalletSnapshot:
            return _wallet("250")

        result = await with_cache_fallback(
            fetch, cache, "wallet:7", WalletSnapshot, is_current=lambda: False
        )

        assert result.value.main_balance == Decimal("250")
        assert await cache.get("wallet:7", WalletSnapshot) is None
