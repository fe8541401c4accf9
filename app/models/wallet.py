"""
Wallet model.

Balances of a member plus its own cached business volume.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType, VolumeType


class Wallet(Base):
    """Wallet model - one per member."""

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint(
            'main_balance >= 0', name='check_wallet_main_balance_non_negative'
        ),
        CheckConstraint(
            'topup_balance >= 0', name='check_wallet_topup_balance_non_negative'
        ),
        CheckConstraint(
            'business_volume >= 0', name='check_wallet_business_volume_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Balances
    main_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    topup_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    purchased_amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    referral_bonus: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    stk_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Own active business volume
    business_volume: Mapped[int] = mapped_column(
        VolumeType, default=0, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Wallet(member_id={self.member_id}, main={self.main_balance}, "
            f"topup={self.topup_balance}, bv={self.business_volume})>"
        )
