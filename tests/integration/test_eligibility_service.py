"""Integration tests for EligibilityService over SQLite."""

import pytest
import pytest_asyncio
from sqlalchemy import update

from app.models.enums import PlacementSide
from app.models.team_structure import TeamStructure
from app.repositories.referral_level_unlock_repository import (
    ReferralLevelUnlockRepository,
)
from app.services.eligibility_service import EligibilityService
from app.services.network import NetworkStore
from app.services.volume import VolumeAggregator
from app.utils.exceptions import PlacementNotFoundError


pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def root_id(db_session, make_member) -> int:
    """Root with two direct referrals holding 60K and 58K BV."""
    store = NetworkStore(db_session)
    root = await make_member()
    left = await make_member(referrer_id=root)
    right = await make_member(referrer_id=root)
    await store.place_root(root)
    await store.place_member(left, root, PlacementSide.LEFT)
    await store.place_member(right, root, PlacementSide.RIGHT)
    volume = VolumeAggregator(db_session, network_store=store)
    await volume.credit_bv(left, 60000, left)
    await volume.credit_bv(right, 58000, right)
    await db_session.commit()
    return root


class TestEligibilityService:
    """Tests for EligibilityService."""

    @pytest.mark.asyncio
    async def test_standing(self, db_session, root_id) -> None:
        """Salary follows the weaker leg; level 1 needs no referrals."""
        standing = await EligibilityService(db_session).get_standing(root_id)

        assert standing.aggregate.balanced_bv == 58000
        assert standing.salary.current_slab.threshold == 50000
        assert standing.salary.next_slab.threshold == 100000
        assert standing.unlocked_levels == frozenset({1, 2})

    @pytest.mark.asyncio
    async def test_refresh_persists_unlocks(self, db_session, root_id) -> None:
        unlocked = await EligibilityService(db_session).refresh_referral_levels(root_id)

        assert unlocked == frozenset({1, 2})
        stored = await ReferralLevelUnlockRepository(db_session).get_unlocked_levels(
            root_id
        )
        assert stored == {1, 2}

    @pytest.mark.asyncio
    async def test_unlocks_are_never_relocked(self, db_session, root_id) -> None:
        """Losing directs later does not take unlocked levels away."""
        service = EligibilityService(db_session)
        await service.refresh_referral_levels(root_id)
        await db_session.commit()

        await db_session.execute(
            update(TeamStructure)
            .where(TeamStructure.member_id == root_id)
            .values(direct_team=0)
        )
        await db_session.commit()
        db_session.expire_all()

        assert await service.refresh_referral_levels(root_id) == frozenset({1, 2})
        standing = await service.get_standing(root_id)
        assert standing.aggregate.direct_count == 0
        assert standing.unlocked_levels == frozenset({1, 2})

    @pytest.mark.asyncio
    async def test_unplaced_member(self, db_session, make_member) -> None:
        member = await make_member()
        with pytest.raises(PlacementNotFoundError):
            await EligibilityService(db_session).get_standing(member)
