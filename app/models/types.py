"""
Standard type definitions for database models.

Provides consistent types for monetary and volume fields across all models.
"""

from sqlalchemy import DECIMAL, BigInteger

# Standard money type for balances, prices and commissions
# Precision: 18 digits total, 2 after decimal point (INR paise)
# Range: up to 9,999,999,999,999,999.99
MoneyType = DECIMAL(18, 2)

# Business volume is a whole-number point value
# 64-bit so ancestor totals of large networks cannot overflow
VolumeType = BigInteger