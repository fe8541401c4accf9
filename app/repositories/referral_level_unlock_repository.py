"""
Referral level unlock repository.

Data access layer for ReferralLevelUnlock model.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.referral_level_unlock import ReferralLevelUnlock
from app.repositories.base import BaseRepository


class ReferralLevelUnlockRepository(BaseRepository[ReferralLevelUnlock]):
    """Referral level unlock repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral level unlock repository."""
        super().__init__(ReferralLevelUnlock, session)

    async def get_unlocked_levels(self, member_id: int) -> set[int]:
        """
        Get level numbers a member has unlocked.

        Args:
            member_id: Member ID

        Returns:
            Set of level numbers
        """
        stmt = select(ReferralLevelUnlock.level).where(
            ReferralLevelUnlock.member_id == member_id,
            ReferralLevelUnlock.is_unlocked.is_(True),
        )
        result = await self.session.execute(stmt)
        return {row[0] for row in result.all()}

    async def unlock(self, member_id: int, level: int) -> ReferralLevelUnlock:
        """
        Record a level as unlocked (idempotent).

        Args:
            member_id: Member ID
            level: Level number

        Returns:
            Unlock record
        """
        existing = await self.get_by(member_id=member_id, level=level)
        if existing:
            if not existing.is_unlocked:
                existing.is_unlocked = True
                await self.session.flush()
            return existing
        return await self.create(member_id=member_id, level=level, is_unlocked=True)

    async def add_earning(
        self, member_id: int, level: int, amount: Decimal
    ) -> ReferralLevelUnlock:
        """
        Add commission earned at a level.

        Args:
            member_id: Member ID
            level: Level number
            amount: Commission paid

        Returns:
            Updated unlock record
        """
        record = await self.get_by(for_update=True, member_id=member_id, level=level)
        if record is None:
            record = await self.unlock(member_id, level)
        record.total_earned = record.total_earned + amount
        await self.session.flush()
        return record
