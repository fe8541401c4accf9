"""
Referral network compensation rules.

Standalone package for salary slab and referral level eligibility.

Example:
    >>> from compensation import EligibilityEvaluator
    >>>
    >>> evaluator = EligibilityEvaluator()
    >>> result = evaluator.evaluate_salary(balanced_bv=58000, direct_count=4)
    >>> result.current_slab.level, result.next_slab.threshold
    (3, 100000)
"""

from compensation.core.evaluator import EligibilityEvaluator
from compensation.core.models import ReferralLevel, SalaryEvaluation, SalarySlab
from compensation.core.tables import (
    DEFAULT_REFERRAL_LEVELS,
    DEFAULT_SALARY_SLABS,
    get_referral_level,
    get_slab_by_level,
    validate_level_table,
    validate_slab_table,
)
from compensation.utils import (
    format_bv_amount,
    format_bv_requirement,
    format_currency,
    format_percentage,
    parse_bv_amount,
    parse_bv_requirement,
)


__version__ = "1.0.0"
__all__ = [
    # Core
    "EligibilityEvaluator",
    # Models
    "SalarySlab",
    "ReferralLevel",
    "SalaryEvaluation",
    # Constants
    "DEFAULT_SALARY_SLABS",
    "DEFAULT_REFERRAL_LEVELS",
    "get_slab_by_level",
    "get_referral_level",
    "validate_slab_table",
    "validate_level_table",
    # Formatters
    "format_bv_amount",
    "format_bv_requirement",
    "format_currency",
    "format_percentage",
    "parse_bv_amount",
    "parse_bv_requirement",
]
