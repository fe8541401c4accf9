"""Business volume DTOs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BVLedgerRecord(BaseModel):
    """Validated view of a ``bv_ledger`` row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    member_id: int
    source_member_id: int | None = None
    amount: int = Field(..., gt=0)
    source: str
    reference_id: str | None = None
    created_at: datetime
    expires_at: datetime | None = None
    expired_at: datetime | None = None
    expiry_failed_at: datetime | None = None
