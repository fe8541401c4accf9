"""Default salary slab and referral level tables, with their validation."""

from decimal import Decimal

from compensation.constants import REFERRAL_LEVEL_TABLE, SALARY_SLAB_TABLE
from compensation.core.models import ReferralLevel, SalarySlab


DEFAULT_SALARY_SLABS: tuple[SalarySlab, ...] = tuple(
    SalarySlab(level=index + 1, threshold=threshold, monthly_pay=Decimal(pay))
    for index, (threshold, pay) in enumerate(SALARY_SLAB_TABLE)
)

DEFAULT_REFERRAL_LEVELS: tuple[ReferralLevel, ...] = tuple(
    ReferralLevel(
        level=level,
        direct_required=direct_required,
        reward_percent=Decimal(percent),
    )
    for level, (direct_required, percent) in sorted(REFERRAL_LEVEL_TABLE.items())
)


def validate_slab_table(slabs: tuple[SalarySlab, ...] | list[SalarySlab]) -> None:
    """
    Check that slab thresholds strictly increase with the slab index.

    Raises:
        ValueError: If the table is empty or not strictly increasing
    """
    if not slabs:
        raise ValueError("Salary slab table is empty")

    for previous, current in zip(slabs, slabs[1:]):
        if current.threshold <= previous.threshold:
            raise ValueError(
                f"Slab {current.level} threshold {current.threshold} "
                f"must exceed slab {previous.level} threshold {previous.threshold}"
            )


def validate_level_table(levels: tuple[ReferralLevel, ...] | list[ReferralLevel]) -> None:
    """
    Check that referral level numbers are unique and requirements never drop.

    Raises:
        ValueError: If the table is empty or inconsistent
    """
    if not levels:
        raise ValueError("Referral level table is empty")

    numbers = [level.level for level in levels]
    if len(set(numbers)) != len(numbers):
        raise ValueError("Referral level numbers must be unique")

    ordered = sorted(levels, key=lambda lvl: lvl.level)
    for previous, current in zip(ordered, ordered[1:]):
        if current.direct_required < previous.direct_required:
            raise ValueError(
                f"Level {current.level} requires fewer direct referrals "
                f"than level {previous.level}"
            )


def get_slab_by_level(level: int) -> SalarySlab | None:
    """
    Get default slab by its 1-based level number.

    Example:
        >>> get_slab_by_level(3).threshold
        50000
    """
    for slab in DEFAULT_SALARY_SLABS:
        if slab.level == level:
            return slab
    return None


def get_referral_level(level: int) -> ReferralLevel | None:
    """Get default referral level by number."""
    for referral_level in DEFAULT_REFERRAL_LEVELS:
        if referral_level.level == level:
            return referral_level
    return None
