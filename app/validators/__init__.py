"""
Validators package.

Provides common validation functions for user input.
"""

from app.validators.unified import (
    normalize_email,
    normalize_phone,
    normalize_referral_code,
    validate_email,
    validate_name,
    validate_password,
    validate_phone,
    validate_quantity,
    validate_referral_code,
    validate_side,
)


__all__ = [
    "validate_email",
    "validate_phone",
    "validate_password",
    "validate_name",
    "validate_referral_code",
    "validate_side",
    "validate_quantity",
    "normalize_email",
    "normalize_phone",
    "normalize_referral_code",
]
