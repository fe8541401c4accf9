"""Integration tests for DashboardDataSource and a full dashboard load."""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.models.enums import PlacementSide
from app.services.network import NetworkStore
from app.services.session import (
    DashboardDataSource,
    DashboardSession,
    ReadThroughCache,
    RetryPolicy,
    SessionState,
)
from app.services.volume import VolumeAggregator
from app.utils.exceptions import (
    MemberNotFoundError,
    NotFoundError,
    PlacementNotFoundError,
    TransientIOError,
)


pytestmark = pytest.mark.integration


async def _no_sleep(delay: float) -> None:
    return None


@pytest_asyncio.fixture
async def member_tree(db_session, make_member) -> dict[str, int]:
    """root with left and right children carrying BV."""
    store = NetworkStore(db_session)
    root = await make_member(name="Asha", topup_balance=Decimal("250"))
    left = await make_member(referrer_id=root)
    right = await make_member(referrer_id=root)
    await store.place_root(root)
    await store.place_member(left, root, PlacementSide.LEFT)
    await store.place_member(right, root, PlacementSide.RIGHT)
    volume = VolumeAggregator(db_session, network_store=store)
    await volume.credit_bv(left, 30000, left)
    await volume.credit_bv(right, 28000, right)
    await db_session.commit()
    return {"root": root, "left": left, "right": right}


@pytest.fixture
def source(session_maker) -> DashboardDataSource:
    return DashboardDataSource(session_maker)


class TestDashboardDataSource:
    """Tests for the individual fetches."""

    @pytest.mark.asyncio
    async def test_fetch_profile(self, source, member_tree) -> None:
        profile = await source.fetch_profile(member_tree["root"])
        assert profile.name == "Asha"
        assert profile.referrer_id is None

    @pytest.mark.asyncio
    async def test_fetch_wallet(self, source, member_tree) -> None:
        wallet = await source.fetch_wallet(member_tree["root"])
        assert wallet.topup_balance == Decimal("250")

    @pytest.mark.asyncio
    async def test_fetch_aggregate(self, source, member_tree) -> None:
        aggregate = await source.fetch_aggregate(member_tree["root"])
        assert (aggregate.left_bv, aggregate.right_bv) == (30000, 28000)
        assert aggregate.direct_count == 2

    @pytest.mark.asyncio
    async def test_fetch_unlocked_levels_empty(self, source, member_tree) -> None:
        """Nothing is unlocked until eligibility has been refreshed."""
        levels = await source.fetch_unlocked_levels(member_tree["root"])
        assert levels.member_id == member_tree["root"]
        assert levels.levels == frozenset()

    @pytest.mark.asyncio
    async def test_missing_records(self, source, make_member) -> None:
        unplaced = await make_member()
        with pytest.raises(MemberNotFoundError):
            await source.fetch_profile(9999)
        with pytest.raises(MemberNotFoundError):
            await source.fetch_wallet(9999)
        with pytest.raises(PlacementNotFoundError):
            await source.fetch_aggregate(unplaced)

    @pytest.mark.asyncio
    async def test_connectivity_errors_become_transient(self) -> None:
        """Driver connection failures are reported as retryable."""

        class BrokenSession:
            async def __aenter__(self):
                raise OperationalError("SELECT 1", None, ConnectionRefusedError())

            async def __aexit__(self, *exc_info):
                return False

        source = DashboardDataSource(lambda: BrokenSession())

        with pytest.raises(TransientIOError):
            await source.fetch_wallet(1)


class TestDashboardLoad:
    """End-to-end dashboard loads over the database."""

    @pytest.mark.asyncio
    async def test_load_populates_snapshot(self, source, fake_redis, member_tree) -> None:
        session = DashboardSession(
            member_tree["root"],
            source,
            cache=ReadThroughCache(fake_redis),
            retry_policy=RetryPolicy(sleep=_no_sleep),
        )

        snapshot = await session.load()

        assert session.state is SessionState.POPULATED
        assert snapshot.aggregate.balanced_bv == 28000
        assert snapshot.salary.current_slab.threshold == 25000
        assert snapshot.from_cache is False
        assert len(fake_redis.store) == 4

    @pytest.mark.asyncio
    async def test_load_unknown_member_fails(self, source, fake_redis) -> None:
        session = DashboardSession(
            9999, source,
            cache=ReadThroughCache(fake_redis),
            retry_policy=RetryPolicy(sleep=_no_sleep),
        )

        with pytest.raises(NotFoundError):
            await session.load()

        assert session.state is SessionState.FAILED
