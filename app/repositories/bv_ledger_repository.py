"""
BV ledger repository.

Data access layer for BVLedgerEntry model.
"""

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bv_ledger import BVLedgerEntry
from app.repositories.base import BaseRepository


class BVLedgerRepository(BaseRepository[BVLedgerEntry]):
    """BV ledger repository with expiry queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize BV ledger repository."""
        super().__init__(BVLedgerEntry, session)

    async def get_history(
        self, member_id: int, limit: int = 100
    ) -> list[BVLedgerEntry]:
        """
        Get credits received by a member, newest first.

        Args:
            member_id: Member ID
            limit: Max entries

        Returns:
            List of ledger entries
        """
        stmt = (
            select(BVLedgerEntry)
            .where(BVLedgerEntry.member_id == member_id)
            .order_by(BVLedgerEntry.created_at.desc(), BVLedgerEntry.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_active(self, member_id: int, now: datetime) -> int:
        """
        Sum a member's credits that have not expired at ``now``.

        Args:
            member_id: Member ID
            now: Reference time

        Returns:
            Active BV total
        """
        stmt = select(func.coalesce(func.sum(BVLedgerEntry.amount), 0)).where(
            BVLedgerEntry.member_id == member_id,
            BVLedgerEntry.expired_at.is_(None),
            or_(
                BVLedgerEntry.expires_at.is_(None),
                BVLedgerEntry.expires_at > now,
            ),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def get_due_for_expiry(
        self, now: datetime, limit: int = 500
    ) -> list[BVLedgerEntry]:
        """
        Get expired credits not yet withdrawn from the aggregates.

        Entries a previous sweep failed to withdraw are left out until an
        operator clears ``expiry_failed_at``.

        Rows are locked so two sweeps never withdraw the same credit.

        Args:
            now: Reference time
            limit: Batch size

        Returns:
            List of ledger entries, oldest expiry first
        """
        stmt = (
            select(BVLedgerEntry)
            .where(
                BVLedgerEntry.expired_at.is_(None),
                BVLedgerEntry.expiry_failed_at.is_(None),
                BVLedgerEntry.expires_at.is_not(None),
                BVLedgerEntry.expires_at <= now,
            )
            .order_by(BVLedgerEntry.expires_at, BVLedgerEntry.id)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
