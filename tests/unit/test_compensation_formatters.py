"""Tests for BV label and currency formatters."""

from decimal import Decimal

import pytest

from compensation import (
    DEFAULT_SALARY_SLABS,
    format_bv_amount,
    format_bv_requirement,
    format_currency,
    format_percentage,
    parse_bv_amount,
    parse_bv_requirement,
)


class TestFormatBV:
    """Tests for BV label formatting."""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (750, "750"),
            (10000, "10K"),
            (60000, "60K"),
            (1_000_000, "1M"),
            (2_500_000, "2.5M"),
        ],
    )
    def test_format_bv_amount(self, amount: int, expected: str) -> None:
        """Amounts are shortened with K/M suffixes."""
        assert format_bv_amount(amount) == expected

    def test_format_bv_requirement(self) -> None:
        """Requirements show both legs."""
        assert format_bv_requirement(60000) == "60K-60K"

    def test_every_default_slab_label_parses_back(self) -> None:
        """Salary table labels map back to their thresholds."""
        for slab in DEFAULT_SALARY_SLABS:
            assert parse_bv_requirement(format_bv_requirement(slab.threshold)) == slab.threshold


class TestParseBV:
    """Tests for BV label parsing."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("60K", 60000),
            ("1.5M", 1_500_000),
            ("10M+", 10_000_000),
            (" 25k ", 25000),
            ("900", 900),
        ],
    )
    def test_parse_bv_amount(self, label: str, expected: int) -> None:
        """Short labels expand to whole BV."""
        assert parse_bv_amount(label) == expected

    def test_parse_single_leg_requirement(self) -> None:
        """A single amount is accepted as a requirement."""
        assert parse_bv_requirement("10M+") == 10_000_000

    def test_unbalanced_requirement_rejected(self) -> None:
        """Both legs must match."""
        with pytest.raises(ValueError, match="Unbalanced"):
            parse_bv_requirement("60K-50K")

    @pytest.mark.parametrize("label", ["", "abc", "10X", "1-2-3"])
    def test_invalid_labels_rejected(self, label: str) -> None:
        """Garbage raises ValueError."""
        with pytest.raises(ValueError):
            parse_bv_requirement(label)


class TestCurrencyFormatting:
    """Tests for currency and percentage output."""

    def test_format_currency(self) -> None:
        """Rupees with thousands separators."""
        assert format_currency(Decimal("48750")) == "₹48,750"
        assert format_currency(Decimal("1234.5"), decimals=2) == "₹1,234.50"

    def test_format_percentage(self) -> None:
        """One decimal by default."""
        assert format_percentage(Decimal("96.67")) == "96.7%"
        assert format_percentage(100) == "100.0%"
