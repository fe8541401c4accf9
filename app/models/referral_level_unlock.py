"""
ReferralLevelUnlock model.

Tracks which commission levels a member has unlocked and what each earned.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType


class ReferralLevelUnlock(Base):
    """Unlocked referral level per member (never re-locked)."""

    __tablename__ = "referral_level_unlocks"
    __table_args__ = (
        UniqueConstraint("member_id", "level", name="uq_referral_level_unlock"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    is_unlocked: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    total_earned: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralLevelUnlock(member_id={self.member_id}, level={self.level}, "
            f"earned={self.total_earned})>"
        )
