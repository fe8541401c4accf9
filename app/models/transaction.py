"""
Transaction model.

Wallet movements shown in the member's history.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import TransactionStatus
from app.models.types import MoneyType


class Transaction(Base):
    """Transaction entity."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_member_type", "member_id", "type"),
        Index("idx_transactions_member_created", "member_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.COMPLETED.value, nullable=False
    )
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    reference_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id}, member_id={self.member_id}, "
            f"type={self.type}, amount={self.amount})>"
        )
