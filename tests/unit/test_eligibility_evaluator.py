"""
Tests for the standalone eligibility evaluator.

Tests the compensation package without database dependencies.
"""

import subprocess
import sys
from decimal import Decimal
from pathlib import Path

import pytest

from compensation import (
    DEFAULT_REFERRAL_LEVELS,
    DEFAULT_SALARY_SLABS,
    EligibilityEvaluator,
    ReferralLevel,
    SalarySlab,
    get_referral_level,
    get_slab_by_level,
)
from compensation.constants import MAX_REFERRAL_DEPTH


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _slab(level: int, threshold: int, pay: int, min_direct: int = 0) -> SalarySlab:
    return SalarySlab(
        level=level,
        threshold=threshold,
        monthly_pay=Decimal(pay),
        min_direct_count=min_direct,
    )


class TestSalaryEvaluation:
    """Tests for EligibilityEvaluator.evaluate_salary."""

    @pytest.fixture
    def evaluator(self) -> EligibilityEvaluator:
        """Evaluator over a three-row table with a zero bottom slab."""
        return EligibilityEvaluator(
            slabs=[_slab(1, 0, 250), _slab(2, 25000, 500), _slab(3, 60000, 1000)]
        )

    def test_between_slabs(self, evaluator: EligibilityEvaluator) -> None:
        """58000 BV sits in the 25K slab, 96.67% of the way to 60K."""
        result = evaluator.evaluate_salary(58000, direct_count=0)

        assert result.current_slab_index == 1
        assert result.current_slab.monthly_pay == Decimal("500")
        assert result.next_slab.threshold == 60000
        assert result.progress_percent == Decimal("96.67")
        assert result.bv_to_next_slab == 2000

    def test_zero_bv_with_zero_threshold_slab(self, evaluator: EligibilityEvaluator) -> None:
        """A member with no volume still qualifies for a zero-threshold slab."""
        result = evaluator.evaluate_salary(0)

        assert result.current_slab_index == 0
        assert result.is_eligible is True
        assert result.next_slab.threshold == 25000
        assert result.progress_percent == Decimal("0.00")

    def test_exact_threshold_unlocks_slab(self, evaluator: EligibilityEvaluator) -> None:
        """Reaching a threshold exactly unlocks it."""
        result = evaluator.evaluate_salary(25000)

        assert result.current_slab_index == 1

    def test_top_slab_has_no_next(self, evaluator: EligibilityEvaluator) -> None:
        """Above the last threshold there is no next slab and progress is 100."""
        result = evaluator.evaluate_salary(1_000_000)

        assert result.current_slab_index == 2
        assert result.next_slab is None
        assert result.progress_percent == Decimal("100.00")
        assert result.bv_to_next_slab == 0

    def test_negative_bv_treated_as_zero(self, evaluator: EligibilityEvaluator) -> None:
        """Negative input is clamped."""
        assert evaluator.evaluate_salary(-500).balanced_bv == 0

    def test_monotonic_in_balanced_bv(self, evaluator: EligibilityEvaluator) -> None:
        """More balanced BV never lowers the slab for a fixed direct count."""
        previous = -1
        for bv in range(0, 120_001, 2_500):
            index = evaluator.evaluate_salary(bv, direct_count=3).current_slab_index
            index = -1 if index is None else index
            assert index >= previous
            previous = index

    def test_idempotent(self, evaluator: EligibilityEvaluator) -> None:
        """Same inputs, same output."""
        first = evaluator.evaluate_salary(42000, direct_count=5)
        second = evaluator.evaluate_salary(42000, direct_count=5)

        assert first == second

    def test_direct_count_gate(self) -> None:
        """A slab with a direct referral minimum is skipped until it is met."""
        evaluator = EligibilityEvaluator(
            slabs=[_slab(1, 0, 100), _slab(2, 10000, 200, min_direct=2)]
        )

        assert evaluator.evaluate_salary(15000, direct_count=1).current_slab_index == 0
        assert evaluator.evaluate_salary(15000, direct_count=2).current_slab_index == 1


class TestCanonicalTables:
    """Tests for the default slab and level tables."""

    @pytest.fixture
    def evaluator(self) -> EligibilityEvaluator:
        """Evaluator over the default tables."""
        return EligibilityEvaluator()

    def test_zero_bv_means_no_slab(self, evaluator: EligibilityEvaluator) -> None:
        """The bottom slab needs 10K, so an empty network has no slab."""
        result = evaluator.evaluate_salary(0)

        assert result.current_slab_index is None
        assert result.current_slab is None
        assert result.is_eligible is False
        assert result.next_slab.threshold == 10000

    def test_first_slab(self, evaluator: EligibilityEvaluator) -> None:
        """10K balanced BV pays 250."""
        result = evaluator.evaluate_salary(10000)

        assert result.current_slab.level == 1
        assert result.current_slab.monthly_pay == Decimal("250")

    def test_table_shape(self) -> None:
        """Ten slabs and ten referral levels."""
        assert len(DEFAULT_SALARY_SLABS) == 10
        assert DEFAULT_SALARY_SLABS[-1].threshold == 10_000_000
        assert len(DEFAULT_REFERRAL_LEVELS) == 10

    def test_lookup_helpers(self) -> None:
        """Slabs and levels can be fetched by number."""
        assert get_slab_by_level(3).threshold == 50000
        assert get_referral_level(1).reward_percent == Decimal("15")

    def test_package_imports_without_app(self) -> None:
        """The rules package loads on its own, without the application."""
        code = (
            "import sys, compensation; "
            "sys.exit(any(name == 'app' or name.startswith('app.') "
            "for name in sys.modules))"
        )
        result = subprocess.run(
            [sys.executable, "-c", code], cwd=PROJECT_ROOT, capture_output=True
        )

        assert result.returncode == 0, result.stderr.decode()
        assert MAX_REFERRAL_DEPTH == len(DEFAULT_REFERRAL_LEVELS)


class TestReferralLevels:
    """Tests for EligibilityEvaluator.evaluate_referral_levels."""

    @pytest.fixture
    def evaluator(self) -> EligibilityEvaluator:
        """Evaluator over the default tables."""
        return EligibilityEvaluator()

    def test_no_directs_unlocks_first_level(self, evaluator: EligibilityEvaluator) -> None:
        """Level 1 requires no direct referrals."""
        assert evaluator.evaluate_referral_levels(0) == frozenset({1})

    def test_staircase(self, evaluator: EligibilityEvaluator) -> None:
        """Each additional direct unlocks the next level."""
        assert evaluator.evaluate_referral_levels(3) == frozenset({1, 2, 3})
        assert evaluator.evaluate_referral_levels(10) == frozenset(range(1, 11))

    def test_previously_unlocked_levels_stay(self, evaluator: EligibilityEvaluator) -> None:
        """Levels never re-lock when the count drops."""
        unlocked = evaluator.evaluate_referral_levels(2, previously_unlocked={1, 2, 3, 4})

        assert unlocked == frozenset({1, 2, 3, 4})

    def test_unknown_previous_levels_ignored(self, evaluator: EligibilityEvaluator) -> None:
        """Stored levels that no longer exist in the table are dropped."""
        assert 42 not in evaluator.evaluate_referral_levels(0, previously_unlocked={42})

    def test_commission_percent(self, evaluator: EligibilityEvaluator) -> None:
        """Commission rates come from the level table."""
        assert evaluator.commission_percent(1) == Decimal("15")
        assert evaluator.commission_percent(10) == Decimal("2")
        assert evaluator.commission_percent(11) == Decimal("0")
        assert evaluator.max_level == 10


class TestTableValidation:
    """Tests for table validation on construction."""

    def test_non_increasing_thresholds_rejected(self) -> None:
        """Thresholds must strictly increase."""
        with pytest.raises(ValueError):
            EligibilityEvaluator(slabs=[_slab(1, 10000, 100), _slab(2, 10000, 200)])

    def test_empty_slab_table_rejected(self) -> None:
        """An empty table cannot be evaluated."""
        with pytest.raises(ValueError):
            EligibilityEvaluator(slabs=[])

    def test_duplicate_levels_rejected(self) -> None:
        """Level numbers must be unique."""
        levels = [
            ReferralLevel(level=1, direct_required=0, reward_percent=Decimal("10")),
            ReferralLevel(level=1, direct_required=1, reward_percent=Decimal("5")),
        ]
        with pytest.raises(ValueError):
            EligibilityEvaluator(levels=levels)


class TestBalancedBV:
    """Tests for the weaker-leg rule."""

    @pytest.mark.parametrize(
        "left, right, expected",
        [
            (62000, 58000, 58000),
            (0, 90000, 0),
            (0, 0, 0),
            (1500, 1500, 1500),
        ],
    )
    def test_balanced_bv(self, left: int, right: int, expected: int) -> None:
        """Balanced BV is the smaller leg."""
        assert EligibilityEvaluator.balanced_bv(left, right) == expected
