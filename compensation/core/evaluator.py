"""
Pure eligibility evaluation for salary slabs and referral levels.

This module contains standalone calculation logic without any
dependencies on database, ORM, or app-specific code.
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from compensation.core.models import ReferralLevel, SalaryEvaluation, SalarySlab
from compensation.core.tables import (
    DEFAULT_REFERRAL_LEVELS,
    DEFAULT_SALARY_SLABS,
    validate_level_table,
    validate_slab_table,
)


PERCENT_QUANT = Decimal("0.01")


class EligibilityEvaluator:
    """
    Maps a member's standing to the salary slab and referral levels unlocked.

    Tables are validated once on construction; every evaluation is a pure
    function of its arguments.
    """

    def __init__(
        self,
        slabs: Sequence[SalarySlab] | None = None,
        levels: Sequence[ReferralLevel] | None = None,
    ) -> None:
        self.slabs: tuple[SalarySlab, ...] = tuple(
            slabs if slabs is not None else DEFAULT_SALARY_SLABS
        )
        self.levels: tuple[ReferralLevel, ...] = tuple(
            sorted(
                levels if levels is not None else DEFAULT_REFERRAL_LEVELS,
                key=lambda lvl: lvl.level,
            )
        )
        validate_slab_table(self.slabs)
        validate_level_table(self.levels)

    @staticmethod
    def balanced_bv(left_bv: int, right_bv: int) -> int:
        """
        Balanced BV is the weaker leg.

        Example:
            >>> EligibilityEvaluator.balanced_bv(62000, 58000)
            58000
        """
        return max(min(left_bv, right_bv), 0)

    def evaluate_salary(
        self,
        balanced_bv: int,
        direct_count: int = 0,
    ) -> SalaryEvaluation:
        """
        Find the highest salary slab unlocked by the balanced BV.

        A slab is unlocked when ``balanced_bv >= threshold`` and
        ``direct_count >= min_direct_count``. The slab after the current one
        is reported as next; progress towards it is
        ``min(100, balanced_bv / next.threshold * 100)``.

        Args:
            balanced_bv: min(left subtree BV, right subtree BV)
            direct_count: Number of direct referrals

        Returns:
            SalaryEvaluation

        Example:
            >>> evaluator = EligibilityEvaluator()
            >>> evaluator.evaluate_salary(58000).current_slab.monthly_pay
            Decimal('1000')
        """
        balanced_bv = max(int(balanced_bv), 0)
        direct_count = max(int(direct_count), 0)

        current_index: int | None = None
        for index, slab in enumerate(self.slabs):
            if balanced_bv < slab.threshold:
                break
            if direct_count >= slab.min_direct_count:
                current_index = index

        next_index = 0 if current_index is None else current_index + 1
        next_slab = self.slabs[next_index] if next_index < len(self.slabs) else None

        return SalaryEvaluation(
            balanced_bv=balanced_bv,
            direct_count=direct_count,
            current_slab_index=current_index,
            current_slab=self.slabs[current_index] if current_index is not None else None,
            next_slab=next_slab,
            progress_percent=self.progress_percent(balanced_bv, next_slab),
        )

    @staticmethod
    def progress_percent(balanced_bv: int, next_slab: SalarySlab | None) -> Decimal:
        """Progress towards ``next_slab`` in percent, capped at 100."""
        if next_slab is None or next_slab.threshold <= 0:
            return Decimal("100.00")

        progress = Decimal(balanced_bv) / Decimal(next_slab.threshold) * 100
        progress = min(progress, Decimal("100"))
        return progress.quantize(PERCENT_QUANT, rounding=ROUND_HALF_UP)

    def evaluate_referral_levels(
        self,
        direct_count: int,
        previously_unlocked: Iterable[int] = (),
    ) -> frozenset[int]:
        """
        Get referral levels unlocked by the direct referral count.

        Level L is unlocked iff ``direct_count >= L.direct_required``.
        Levels unlocked earlier stay unlocked even if the count drops.

        Example:
            >>> sorted(EligibilityEvaluator().evaluate_referral_levels(3))
            [1, 2, 3]
        """
        direct_count = max(int(direct_count), 0)
        known = {level.level for level in self.levels}
        unlocked = {
            level.level
            for level in self.levels
            if direct_count >= level.direct_required
        }
        unlocked.update(level for level in previously_unlocked if level in known)
        return frozenset(unlocked)

    def commission_percent(self, level: int) -> Decimal:
        """Commission percentage for a level (0 if the level does not exist)."""
        for referral_level in self.levels:
            if referral_level.level == level:
                return referral_level.reward_percent
        return Decimal("0")

    @property
    def max_level(self) -> int:
        """Deepest referral level in the table."""
        return self.levels[-1].level
