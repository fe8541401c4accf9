"""Pydantic models for compensation rules."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class SalarySlab(BaseModel):
    """One tier of the monthly salary table.

    A slab is unlocked when the member's balanced BV reaches ``threshold``
    on both legs and the member has at least ``min_direct_count`` direct
    referrals.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, description="Slab number shown to members (1-based)")
    threshold: int = Field(..., ge=0, description="Required balanced BV on each leg")
    monthly_pay: Decimal = Field(..., ge=0, description="Monthly salary payout")
    min_direct_count: int = Field(default=0, ge=0, description="Direct referrals required")


class ReferralLevel(BaseModel):
    """Commission level unlocked by direct referral count."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, description="Level number (1 = direct referrals)")
    direct_required: int = Field(..., ge=0, description="Direct referrals needed to unlock")
    reward_percent: Decimal = Field(
        ..., ge=0, le=100, description="Commission percentage on downline purchases"
    )


class SalaryEvaluation(BaseModel):
    """Result of salary eligibility evaluation."""

    model_config = ConfigDict(frozen=True)

    balanced_bv: int = Field(..., ge=0)
    direct_count: int = Field(..., ge=0)
    current_slab_index: int | None = Field(
        default=None, description="0-based index of the highest unlocked slab"
    )
    current_slab: SalarySlab | None = None
    next_slab: SalarySlab | None = None
    progress_percent: Decimal = Field(
        ..., ge=0, le=100, description="Progress towards the next slab"
    )

    @property
    def is_eligible(self) -> bool:
        """Whether any slab is unlocked."""
        return self.current_slab is not None

    @property
    def bv_to_next_slab(self) -> int:
        """Balanced BV still missing for the next slab (0 at the top)."""
        if self.next_slab is None:
            return 0
        return max(self.next_slab.threshold - self.balanced_bv, 0)
