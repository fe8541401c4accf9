"""
Volume aggregator.

Credits business volume to a member and adds it to the left or right
subtree BV of every ancestor, depending on which leg the member sits in.
Credits expire after ``bv_expiry_months``; the expiry sweep withdraws
them from the same totals.
"""

from datetime import datetime
from typing import NamedTuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.bv_ledger import BVLedgerEntry
from app.models.enums import PlacementSide
from app.repositories.bv_ledger_repository import BVLedgerRepository
from app.repositories.team_structure_repository import TeamStructureRepository
from app.repositories.wallet_repository import WalletRepository
from app.schemas.volume import BVLedgerRecord
from app.services.base_service import BaseService, log_operation
from app.services.network import AncestorLink, NetworkStore
from app.utils.datetime_utils import add_months, utc_now
from app.utils.db_decorators import translate_transient_errors
from app.utils.exceptions import CorruptTreeError, ValidationFailedError


class ExpirySweepResult(NamedTuple):
    """Outcome of one expiry batch."""

    swept: int
    failed: int

    @property
    def processed(self) -> int:
        return self.swept + self.failed


class VolumeAggregator(BaseService):
    """
    Business volume ledger and subtree BV maintenance.

    Ancestor rows are locked (SELECT ... FOR UPDATE) before they are
    changed so concurrent credits on a shared ancestor do not lose updates.
    """

    def __init__(
        self,
        session: AsyncSession,
        network_store: NetworkStore | None = None,
        expiry_months: int | None = None,
    ) -> None:
        """
        Initialize volume aggregator.

        Args:
            session: Database session
            network_store: Store used for ancestor walks
            expiry_months: Credit lifetime (defaults to BV_EXPIRY_MONTHS, 0 = never)
        """
        super().__init__(session)
        self.store = network_store or NetworkStore(session)
        self.ledger_repo = BVLedgerRepository(session)
        self.team_repo = TeamStructureRepository(session)
        self.wallet_repo = WalletRepository(session)
        self.expiry_months = (
            settings.bv_expiry_months if expiry_months is None else expiry_months
        )

    @translate_transient_errors
    @log_operation
    async def credit_bv(
        self,
        member_id: int,
        amount: int,
        source_id: int | None,
        source: str = "purchase",
        reference_id: str | None = None,
        now: datetime | None = None,
    ) -> BVLedgerRecord:
        """
        Credit BV to a member and propagate it to every ancestor.

        The member's own subtree totals are untouched; its wallet
        ``business_volume`` grows by ``amount``.

        Args:
            member_id: Member receiving the credit
            amount: Positive BV amount
            source_id: Member whose activity produced the credit
            source: Credit origin label
            reference_id: Order or event identifier
            now: Credit time (defaults to now)

        Returns:
            The ledger entry written

        Raises:
            ValidationFailedError: If amount is not a positive integer
            PlacementNotFoundError: If the member is not placed
            CorruptTreeError: If the ancestor chain loops or is too deep
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationFailedError(f"BV amount must be a positive integer, got {amount!r}")

        now = now or utc_now()
        row = await self.store.get_placement_row(member_id)
        # Walk (and lock) the whole chain before the first write
        links = await self.store.walk_ancestors(row, for_update=True)

        _apply_to_ancestors(links, amount)

        wallet = await self.wallet_repo.get_by_member(member_id, for_update=True)
        if wallet is not None:
            wallet.business_volume += amount

        entry = await self.ledger_repo.create(
            member_id=member_id,
            source_member_id=source_id,
            amount=amount,
            source=source,
            reference_id=reference_id,
            created_at=now,
            expires_at=(
                add_months(now, self.expiry_months) if self.expiry_months > 0 else None
            ),
        )

        self.logger.info(
            "BV credited",
            extra={
                "member_id": member_id,
                "amount": amount,
                "source_id": source_id,
                "ancestors": len(links),
            },
        )
        return BVLedgerRecord.model_validate(entry)

    async def get_active_bv(self, member_id: int, now: datetime | None = None) -> int:
        """
        Sum of the member's own credits still counting at ``now``.

        Args:
            member_id: Member ID
            now: Reference time (defaults to now)

        Returns:
            Active BV
        """
        return await self.ledger_repo.sum_active(member_id, now or utc_now())

    async def list_entries(self, member_id: int, limit: int = 100) -> list[BVLedgerRecord]:
        """Ledger history of a member, newest first."""
        entries = await self.ledger_repo.get_history(member_id, limit=limit)
        return [BVLedgerRecord.model_validate(entry) for entry in entries]

    @translate_transient_errors
    async def expire_due_entries(
        self, now: datetime | None = None, limit: int = 500
    ) -> ExpirySweepResult:
        """
        Withdraw expired credits from the subtree and wallet totals.

        Each due entry is subtracted from its ancestors' leg BV and from
        the receiving wallet's ``business_volume`` (both floored at zero),
        then stamped ``expired_at`` so it is never withdrawn twice.
        Entries whose chain is corrupt are stamped ``expiry_failed_at``
        and left for an operator; later sweeps skip them.

        Args:
            now: Reference time (defaults to now)
            limit: Batch size

        Returns:
            ExpirySweepResult; ``processed < limit`` means nothing was left
        """
        now = now or utc_now()
        entries = await self.ledger_repo.get_due_for_expiry(now, limit=limit)
        swept = failed = 0

        for entry in entries:
            try:
                await self._withdraw(entry)
            except CorruptTreeError as e:
                self.logger.error(
                    f"Skipping BV expiry for ledger entry {entry.id}: {e}",
                    extra={"entry_id": entry.id, "member_id": entry.member_id},
                )
                entry.expiry_failed_at = now
                failed += 1
                continue
            entry.expired_at = now
            swept += 1

        await self.session.flush()

        if entries:
            self.logger.info(
                f"Expired {swept} BV ledger entries",
                extra={"swept": swept, "failed": failed, "due": len(entries)},
            )
        return ExpirySweepResult(swept=swept, failed=failed)

    async def _withdraw(self, entry: BVLedgerEntry) -> None:
        row = await self.team_repo.get_by_member(entry.member_id)
        if row is not None:
            links = await self.store.walk_ancestors(row, for_update=True)
            _apply_to_ancestors(links, -entry.amount)

        wallet = await self.wallet_repo.get_by_member(entry.member_id, for_update=True)
        if wallet is not None:
            wallet.business_volume = max(wallet.business_volume - entry.amount, 0)


def _apply_to_ancestors(links: list[AncestorLink], delta: int) -> None:
    """Add ``delta`` to the leg BV each ancestor sees the node in, floored at 0."""
    for link in links:
        if link.side is PlacementSide.LEFT:
            link.row.left_bv = max(link.row.left_bv + delta, 0)
        else:
            link.row.right_bv = max(link.row.right_bv + delta, 0)
