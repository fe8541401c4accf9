"""
Business logic constants for the referral network.

Central location for business rules and constants used across the application.
This module must not import settings so that settings can read defaults from it.
"""

# Member identifiers shown on the dashboard ("AU00001")
MEMBER_CODE_PREFIX = "AU"
MEMBER_CODE_DIGITS = 5

# Referral codes handed out at signup
REFERRAL_CODE_LENGTH = 8

# Rank label for freshly registered members
DEFAULT_RANK = "Associate"

# Credited BV stops counting towards eligibility after this many months
BV_EXPIRY_MONTHS = 12

# Levels rendered by the genealogy tree view
TREE_VIEW_DEPTH = 10

# Placement sides
SIDE_LEFT = "left"
SIDE_RIGHT = "right"
PLACEMENT_SIDES = (SIDE_LEFT, SIDE_RIGHT)
