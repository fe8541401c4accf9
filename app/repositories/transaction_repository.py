"""
Transaction repository.

Data access layer for Transaction model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction
from app.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def get_for_member(
        self,
        member_id: int,
        tx_type: str | None = None,
        limit: int = 50,
    ) -> list[Transaction]:
        """
        Get member transactions, newest first.

        Args:
            member_id: Member ID
            tx_type: Optional type filter
            limit: Max results

        Returns:
            List of transactions
        """
        stmt = select(Transaction).where(Transaction.member_id == member_id)
        if tx_type:
            stmt = stmt.where(Transaction.type == tx_type)
        stmt = stmt.order_by(
            Transaction.created_at.desc(), Transaction.id.desc()
        ).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
