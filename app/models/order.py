"""
Order model.

A completed shop purchase.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import OrderStatus
from app.models.types import MoneyType, VolumeType


class Order(Base):
    """Order entity."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    bv_earned: Mapped[int] = mapped_column(VolumeType, default=0, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.COMPLETED.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Order(id={self.id}, member_id={self.member_id}, "
            f"product_id={self.product_id}, total={self.total_price})>"
        )
