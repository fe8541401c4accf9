"""
BVLedgerEntry model.

Append-only record of business volume credited to a member.
"""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import VolumeType


class BVLedgerEntry(Base):
    """
    BVLedgerEntry entity.

    Attributes:
        member_id: Member receiving the credit
        source_member_id: Member whose purchase or referral produced it
        amount: Credited BV
        source: What produced the credit ("purchase", "referral", "manual")
        reference_id: Order or event identifier
        expires_at: When the credit stops counting (None = never)
        expired_at: Set once the expiry sweep has withdrawn the credit
        expiry_failed_at: Set when the sweep could not withdraw the credit
            (corrupt placement chain); cleared by an operator after repair
    """

    __tablename__ = "bv_ledger"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_bv_ledger_amount_positive"),
        Index("idx_bv_ledger_member_created", "member_id", "created_at"),
        Index("idx_bv_ledger_due", "expires_at", "expired_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    source_member_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[int] = mapped_column(VolumeType, nullable=False)
    source: Mapped[str] = mapped_column(
        String(20), default="purchase", nullable=False
    )
    reference_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expired_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expiry_failed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_swept(self) -> bool:
        """Whether the credit has already been withdrawn from the aggregates."""
        return self.expired_at is not None

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<BVLedgerEntry(id={self.id}, member_id={self.member_id}, "
            f"amount={self.amount}, expires_at={self.expires_at})>"
        )
