"""
Formatting utilities for BV requirements and currency.

Converts between raw volume numbers and the short labels shown on the
salary table ("60K-60K", "1M-1M").
"""

import re
from decimal import Decimal


_SUFFIXES = (
    (1_000_000, "M"),
    (1_000, "K"),
)

_LABEL_PART = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KkMm]?)\s*\+?\s*$")


def format_bv_amount(amount: int) -> str:
    """
    Shorten a BV amount with K/M suffixes.

    Example:
        >>> format_bv_amount(60000)
        '60K'
        >>> format_bv_amount(2500000)
        '2.5M'
        >>> format_bv_amount(750)
        '750'
    """
    for factor, suffix in _SUFFIXES:
        if amount >= factor:
            value = (Decimal(amount) / factor).normalize()
            return f"{value:f}{suffix}"
    return str(amount)


def format_bv_requirement(threshold: int) -> str:
    """
    Format a slab threshold as an equal left/right requirement.

    Example:
        >>> format_bv_requirement(60000)
        '60K-60K'
    """
    label = format_bv_amount(threshold)
    return f"{label}-{label}"


def parse_bv_amount(label: str) -> int:
    """
    Parse a shortened BV label ("60K", "1.5M", "10M+").

    Raises:
        ValueError: If the label is not a BV amount
    """
    match = _LABEL_PART.match(label)
    if not match:
        raise ValueError(f"Invalid BV label: {label!r}")

    number, suffix = match.groups()
    multiplier = {"": 1, "K": 1_000, "M": 1_000_000}[suffix.upper()]
    return int(Decimal(number) * multiplier)


def parse_bv_requirement(label: str) -> int:
    """
    Parse a slab requirement label into its balanced BV threshold.

    Both legs must carry the same amount; a single amount ("10M+") is
    accepted as well.

    Example:
        >>> parse_bv_requirement("60K-60K")
        60000

    Raises:
        ValueError: If the legs differ or a part cannot be parsed
    """
    parts = label.split("-")
    if len(parts) > 2:
        raise ValueError(f"Invalid BV requirement: {label!r}")

    amounts = {parse_bv_amount(part) for part in parts}
    if len(amounts) != 1:
        raise ValueError(f"Unbalanced BV requirement: {label!r}")
    return amounts.pop()


def format_currency(amount: Decimal | int | float, symbol: str = "₹", decimals: int = 0) -> str:
    """
    Format a rupee amount with thousands separators.

    Example:
        >>> format_currency(Decimal("48750"))
        '₹48,750'
    """
    return f"{symbol}{float(amount):,.{decimals}f}"


def format_percentage(value: Decimal | float, decimals: int = 1) -> str:
    """
    Format a percentage value.

    Example:
        >>> format_percentage(Decimal("96.67"))
        '96.7%'
    """
    return f"{float(value):.{decimals}f}%"
