"""
Dashboard session.

Explicit per-member session object replacing ambient auth state: it
loads profile, wallet and network standing together, retries transient
failures, falls back to the last-known-good cache, and never exposes a
partially loaded dashboard.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel

from app.config.database import async_session_maker
from app.schemas.dashboard import DashboardSnapshot, UnlockedLevels
from app.schemas.member import MemberProfile, WalletSnapshot
from app.schemas.network import SubtreeAggregate
from app.services.session.cache import ReadThroughCache
from app.services.session.data_source import DashboardDataSource
from app.services.session.fallback import FetchResult, with_cache_fallback
from app.services.session.retry import RetryPolicy
from app.utils.exceptions import is_hard_failure
from app.utils.redis_utils import get_redis_client
from compensation import EligibilityEvaluator


M = TypeVar("M", bound=BaseModel)


class SessionState(StrEnum):
    """Lifecycle of a DashboardSession."""

    INIT = "init"
    LOADING = "loading"
    POPULATED = "populated"
    FAILED = "failed"
    TORN_DOWN = "torn_down"


class DashboardSession:
    """
    Dashboard data of one signed-in member.

    States: init -> loading -> populated | failed -> torn_down. ``load``
    may be called again from populated or failed (e.g. after
    re-authentication); a load started earlier whose result arrives after
    a newer load or a teardown is discarded.

    Example:
        session = DashboardSession(member_id, DashboardDataSource(async_session_maker), cache)
        snapshot = await session.load()
        ...
        await session.teardown()
    """

    def __init__(
        self,
        member_id: int,
        source: DashboardDataSource,
        cache: ReadThroughCache | None = None,
        retry_policy: RetryPolicy | None = None,
        evaluator: EligibilityEvaluator | None = None,
    ) -> None:
        self.member_id = member_id
        self.source = source
        self.cache = cache
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.evaluator = evaluator or EligibilityEvaluator()

        self._state = SessionState.INIT
        self._snapshot: DashboardSnapshot | None = None
        self._error: BaseException | None = None
        self._generation = 0
        self._pending: list[asyncio.Future] = []
        self.logger = logger.bind(service="DashboardSession", member_id=member_id)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def snapshot(self) -> DashboardSnapshot | None:
        """The loaded dashboard, only while populated."""
        if self._state is SessionState.POPULATED:
            return self._snapshot
        return None

    @property
    def error(self) -> BaseException | None:
        """Why the last load failed, only while failed."""
        if self._state is SessionState.FAILED:
            return self._error
        return None

    @property
    def cache_keys(self) -> tuple[str, ...]:
        return tuple(
            f"{name}:{self.member_id}"
            for name in ("profile", "wallet", "aggregate", "levels")
        )

    async def load(self) -> DashboardSnapshot | None:
        """
        Fetch everything the dashboard shows.

        Starting a load cancels the fetches of any load still in flight.

        Returns:
            The snapshot, or None if this load was superseded while in flight

        Raises:
            RuntimeError: If the session was torn down
            TransientIOError: If a record could not be fetched or served from cache
            StaleDataError: If the only cached record is too old
            NotFoundError: If the member, wallet or placement is missing
        """
        if self._state is SessionState.TORN_DOWN:
            raise RuntimeError("Dashboard session has been torn down")

        self._cancel_pending()
        self._generation += 1
        generation = self._generation
        self._state = SessionState.LOADING
        self._snapshot = None
        self._error = None

        fetches = [
            asyncio.ensure_future(self._fetch(name, fetch, model, generation))
            for name, fetch, model in (
                ("profile", self.source.fetch_profile, MemberProfile),
                ("wallet", self.source.fetch_wallet, WalletSnapshot),
                ("aggregate", self.source.fetch_aggregate, SubtreeAggregate),
                ("levels", self.source.fetch_unlocked_levels, UnlockedLevels),
            )
        ]
        self._pending = fetches

        try:
            profile, wallet, aggregate, levels = await asyncio.gather(*fetches)
        except asyncio.CancelledError:
            _cancel(fetches)
            if generation != self._generation:
                self.logger.debug("Superseded load cancelled")
                return None
            raise
        except Exception as e:
            _cancel(fetches)
            if generation != self._generation:
                self.logger.debug(f"Discarding failure of superseded load: {e}")
                return None
            self._state = SessionState.FAILED
            self._error = e
            log = self.logger.error if is_hard_failure(e) else self.logger.warning
            log(f"Dashboard load failed: {type(e).__name__}: {e}")
            raise
        finally:
            if self._pending is fetches:
                self._pending = []

        if generation != self._generation:
            self.logger.debug("Discarding result of superseded load")
            return None

        snapshot = DashboardSnapshot(
            profile=profile.value,
            wallet=wallet.value,
            aggregate=aggregate.value,
            salary=self.evaluator.evaluate_salary(
                aggregate.value.balanced_bv, aggregate.value.direct_count
            ),
            unlocked_levels=self.evaluator.evaluate_referral_levels(
                aggregate.value.direct_count,
                previously_unlocked=levels.value.levels,
            ),
            from_cache=any(
                result.from_cache for result in (profile, wallet, aggregate, levels)
            ),
        )
        self._snapshot = snapshot
        self._state = SessionState.POPULATED
        self.logger.info(
            "Dashboard loaded", extra={"from_cache": snapshot.from_cache}
        )
        return snapshot

    async def teardown(self) -> None:
        """Drop loaded state and cached records; later loads are refused."""
        pending = self._pending
        self._cancel_pending()
        self._generation += 1
        self._state = SessionState.TORN_DOWN
        self._snapshot = None
        self._error = None
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if self.cache is not None:
            await self.cache.invalidate(*self.cache_keys)
        self.logger.info("Dashboard session torn down")

    def _cancel_pending(self) -> None:
        _cancel(self._pending)
        self._pending = []

    async def _fetch(
        self,
        name: str,
        fetch: Callable[[int], Awaitable[M]],
        model: type[M],
        generation: int,
    ) -> FetchResult[M]:
        def attempt() -> Awaitable[M]:
            return self.retry_policy.run(lambda: fetch(self.member_id))

        if self.cache is None:
            return FetchResult(value=await attempt())
        return await with_cache_fallback(
            attempt,
            self.cache,
            f"{name}:{self.member_id}",
            model,
            is_current=lambda: generation == self._generation,
        )


def _cancel(fetches: list[asyncio.Future]) -> None:
    for fetch in fetches:
        if not fetch.done():
            fetch.cancel()


async def open_dashboard_session(member_id: int) -> DashboardSession:
    """
    Build a DashboardSession over the application database and Redis.

    Args:
        member_id: Signed-in member

    Returns:
        Session in the ``init`` state; call ``load()`` to populate it
    """
    redis_client = await get_redis_client()
    return DashboardSession(
        member_id,
        DashboardDataSource(async_session_maker),
        cache=ReadThroughCache(redis_client),
    )
