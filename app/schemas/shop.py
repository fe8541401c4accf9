"""Shop DTOs."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductRecord(BaseModel):
    """Validated view of a ``products`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    description: str | None = None
    image: str | None = None
    base_price: Decimal = Field(..., ge=0)
    gst: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0, description="base_price + gst")
    bv_credit: int = Field(..., ge=0)
    stock: int = Field(..., ge=0)


class OrderRecord(BaseModel):
    """Validated view of an ``orders`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    member_id: int
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    total_price: Decimal
    bv_earned: int = Field(..., ge=0)
    status: str
    created_at: datetime


class PurchaseResult(BaseModel):
    """Outcome of a purchase: the order and the commissions it paid."""

    model_config = ConfigDict(frozen=True)

    order: OrderRecord
    commissions: dict[int, Decimal] = Field(
        default_factory=dict, description="Referral level -> amount paid"
    )
