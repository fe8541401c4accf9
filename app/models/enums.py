"""
Enumerations shared by models, schemas and services.
"""

from enum import StrEnum


class KycStatus(StrEnum):
    """Verification status of a member."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PlacementSide(StrEnum):
    """Side of a member relative to its placement parent."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "PlacementSide":
        """The other leg."""
        return PlacementSide.RIGHT if self is PlacementSide.LEFT else PlacementSide.LEFT


class SpilloverPolicy(StrEnum):
    """Rule applied when the requested direct slot is already filled."""

    NONE = "none"
    BFS = "bfs"


class TransactionType(StrEnum):
    """Wallet transaction types."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"
    TOPUP = "topup"
    PURCHASE = "purchase"
    REFERRAL_BONUS = "referral_bonus"
    SALARY = "salary"


class TransactionStatus(StrEnum):
    """Wallet transaction statuses."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class OrderStatus(StrEnum):
    """Shop order statuses."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
