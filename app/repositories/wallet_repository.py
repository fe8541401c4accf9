"""
Wallet repository.

Data access layer for Wallet model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.wallet import Wallet
from app.repositories.base import BaseRepository


class WalletRepository(BaseRepository[Wallet]):
    """Wallet repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet repository."""
        super().__init__(Wallet, session)

    async def get_by_member(
        self, member_id: int, for_update: bool = False
    ) -> Wallet | None:
        """
        Get wallet of a member.

        Args:
            member_id: Member ID
            for_update: Lock the row for balance changes

        Returns:
            Wallet or None
        """
        return await self.get_by(for_update=for_update, member_id=member_id)
