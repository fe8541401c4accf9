"""
Product model.

Shop catalogue item; each unit sold credits ``bv_credit`` business volume.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType, VolumeType


class Product(Base):
    """Product entity."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="check_product_stock_non_negative"),
        CheckConstraint("bv_credit >= 0", name="check_product_bv_non_negative"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    base_price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    gst: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    bv_credit: Mapped[int] = mapped_column(VolumeType, default=0, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
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

    @property
    def unit_price(self) -> Decimal:
        """Price per unit including GST."""
        return self.base_price + self.gst

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name}, stock={self.stock})>"
