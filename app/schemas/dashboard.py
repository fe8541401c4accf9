"""Dashboard snapshot DTOs."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.member import MemberProfile, WalletSnapshot
from app.schemas.network import SubtreeAggregate
from compensation import SalaryEvaluation


class UnlockedLevels(BaseModel):
    """Referral levels recorded as unlocked for a member."""

    model_config = ConfigDict(frozen=True)

    member_id: int = Field(..., gt=0)
    levels: frozenset[int] = frozenset()


class DashboardSnapshot(BaseModel):
    """Everything the dashboard renders, loaded together or not at all."""

    model_config = ConfigDict(frozen=True)

    profile: MemberProfile
    wallet: WalletSnapshot
    aggregate: SubtreeAggregate
    salary: SalaryEvaluation
    unlocked_levels: frozenset[int]
    from_cache: bool = False
