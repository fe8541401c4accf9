"""
Wallet service.

Read access to balances and transaction history.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TransactionType
from app.repositories.transaction_repository import TransactionRepository
from app.repositories.wallet_repository import WalletRepository
from app.schemas.member import TransactionRecord, WalletSnapshot
from app.services.base_service import BaseService
from app.utils.exceptions import MemberNotFoundError, ValidationFailedError


class WalletService(BaseService):
    """Wallet balances and history of a member."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet service."""
        super().__init__(session)
        self.wallet_repo = WalletRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def get_wallet(self, member_id: int) -> WalletSnapshot:
        """
        Get wallet balances.

        Raises:
            MemberNotFoundError: If the member has no wallet
        """
        wallet = await self.wallet_repo.get_by_member(member_id)
        if wallet is None:
            raise MemberNotFoundError(member_id, what="Wallet of member")
        return WalletSnapshot.model_validate(wallet)

    async def list_transactions(
        self,
        member_id: int,
        type: TransactionType | str | None = None,
        limit: int = 50,
    ) -> list[TransactionRecord]:
        """
        Get transactions, newest first.

        Args:
            member_id: Member ID
            type: Optional transaction type filter
            limit: Max results

        Returns:
            List of TransactionRecord
        """
        tx_type = None
        if type is not None:
            try:
                tx_type = TransactionType(type).value
            except ValueError as e:
                raise ValidationFailedError(f"Unknown transaction type: {type!r}") from e

        transactions = await self.transaction_repo.get_for_member(
            member_id, tx_type=tx_type, limit=limit
        )
        return [TransactionRecord.model_validate(tx) for tx in transactions]
