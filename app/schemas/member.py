"""Member profile and wallet DTOs."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import KycStatus, PlacementSide


class MemberProfile(BaseModel):
    """Validated view of a ``members`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., gt=0)
    member_code: str
    name: str
    email: str
    mobile: str
    referral_code: str
    referrer_id: int | None = None
    preferred_side: PlacementSide | None = None
    kyc_status: KycStatus
    rank: str
    profile_image: str | None = None
    join_date: datetime

    @field_validator("preferred_side", mode="before")
    @classmethod
    def empty_side_is_none(cls, value: object) -> object:
        """Treat blank sides stored by older clients as unset."""
        if value == "":
            return None
        return value


class WalletSnapshot(BaseModel):
    """Validated view of a ``wallets`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    member_id: int = Field(..., gt=0)
    main_balance: Decimal = Field(..., ge=0)
    topup_balance: Decimal = Field(..., ge=0)
    purchased_amount: Decimal = Field(..., ge=0)
    referral_bonus: Decimal = Field(..., ge=0)
    stk_balance: Decimal = Field(..., ge=0)
    business_volume: int = Field(..., ge=0)


class TransactionRecord(BaseModel):
    """Validated view of a ``transactions`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    member_id: int
    type: str
    amount: Decimal
    status: str
    description: str
    reference_id: str | None = None
    created_at: datetime
