"""Core compensation logic and models."""

from compensation.core.evaluator import EligibilityEvaluator
from compensation.core.models import ReferralLevel, SalaryEvaluation, SalarySlab


__all__ = [
    "EligibilityEvaluator",
    "ReferralLevel",
    "SalaryEvaluation",
    "SalarySlab",
]
