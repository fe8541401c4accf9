"""
Eligibility service.

Applies the pure compensation rules to a member's stored standing and
persists referral level unlocks.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.referral_level_unlock_repository import (
    ReferralLevelUnlockRepository,
)
from app.schemas.network import SubtreeAggregate
from app.services.base_service import BaseService
from app.services.network import NetworkStore
from compensation import EligibilityEvaluator, SalaryEvaluation


@dataclass(frozen=True)
class MemberStanding:
    """Aggregate plus everything it unlocks."""

    aggregate: SubtreeAggregate
    salary: SalaryEvaluation
    unlocked_levels: frozenset[int]


class EligibilityService(BaseService):
    """
    Salary slab and referral level standing of members.

    Example:
        service = EligibilityService(session)
        standing = await service.get_standing(member_id)
        standing.salary.current_slab
    """

    def __init__(
        self,
        session: AsyncSession,
        evaluator: EligibilityEvaluator | None = None,
        network_store: NetworkStore | None = None,
    ) -> None:
        """
        Initialize eligibility service.

        Args:
            session: Database session
            evaluator: Rule tables (defaults to the canonical ones)
            network_store: Store used to read aggregates
        """
        super().__init__(session)
        self.evaluator = evaluator or EligibilityEvaluator()
        self.store = network_store or NetworkStore(session)
        self.unlock_repo = ReferralLevelUnlockRepository(session)

    async def refresh_referral_levels(self, member_id: int) -> frozenset[int]:
        """
        Persist any referral levels the stored direct count now unlocks.

        Levels are never re-locked.

        Args:
            member_id: Member ID

        Returns:
            All unlocked level numbers

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        aggregate = await self.store.get_aggregate(member_id)
        previous = await self.unlock_repo.get_unlocked_levels(member_id)
        unlocked = self.evaluator.evaluate_referral_levels(
            aggregate.direct_count, previously_unlocked=previous
        )

        new_levels = sorted(unlocked - previous)
        for level in new_levels:
            await self.unlock_repo.unlock(member_id, level)

        if new_levels:
            self.logger.info(
                f"Member {member_id} unlocked referral levels {new_levels}",
                extra={"member_id": member_id, "levels": new_levels},
            )
        return unlocked

    async def get_standing(self, member_id: int) -> MemberStanding:
        """
        Evaluate salary and referral levels of a member.

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        aggregate = await self.store.get_aggregate(member_id)
        previous = await self.unlock_repo.get_unlocked_levels(member_id)

        return MemberStanding(
            aggregate=aggregate,
            salary=self.evaluator.evaluate_salary(
                aggregate.balanced_bv, aggregate.direct_count
            ),
            unlocked_levels=self.evaluator.evaluate_referral_levels(
                aggregate.direct_count, previously_unlocked=previous
            ),
        )
