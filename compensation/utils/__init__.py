"""Utility functions for compensation labels."""

from compensation.utils.formatters import (
    format_bv_amount,
    format_bv_requirement,
    format_currency,
    format_percentage,
    parse_bv_amount,
    parse_bv_requirement,
)

__all__ = [
    "format_bv_amount",
    "format_bv_requirement",
    "format_currency",
    "format_percentage",
    "parse_bv_amount",
    "parse_bv_requirement",
]
