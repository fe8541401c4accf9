"""
Canonical compensation tables.

Plain data only; ``compensation.core.tables`` builds the typed defaults
from it and the application reads it from here.
"""

# Salary slabs: (required balanced BV per leg, monthly payout in INR)
SALARY_SLAB_TABLE = [
    (10_000, 250),
    (25_000, 500),
    (50_000, 1_000),
    (100_000, 2_000),
    (250_000, 4_000),
    (500_000, 8_000),
    (1_000_000, 20_000),
    (2_000_000, 40_000),
    (5_000_000, 100_000),
    (10_000_000, 200_000),
]

# Referral levels: level -> (direct referrals required, commission %)
REFERRAL_LEVEL_TABLE = {
    1: (0, "15"),
    2: (2, "5"),
    3: (3, "4"),
    4: (4, "3"),
    5: (5, "2"),
    6: (6, "1"),
    7: (7, "1"),
    8: (8, "1"),
    9: (9, "1"),
    10: (10, "2"),
}

# Referral commission is paid up to this many referrer levels
MAX_REFERRAL_DEPTH = max(REFERRAL_LEVEL_TABLE)
