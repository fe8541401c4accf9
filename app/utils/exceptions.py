"""
Exception handling utilities.

Defines categorized exception types for proper error handling.
"""

from sqlalchemy.exc import InterfaceError, OperationalError


class NetworkError(Exception):
    """Base class for referral network errors."""

    pass


class NotFoundError(NetworkError):
    """Raised when a requested record does not exist."""

    pass


class MemberNotFoundError(NotFoundError):
    """Raised when a member (or its wallet) cannot be resolved."""

    def __init__(self, member_id: int | str, what: str = "Member") -> None:
        self.member_id = member_id
        super().__init__(f"{what} {member_id} not found")


class PlacementNotFoundError(NotFoundError):
    """Raised when a member has no placement in the tree."""

    def __init__(self, member_id: int) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} is not placed in the network")


class SponsorNotFoundError(NotFoundError):
    """Raised when a sponsor id or referral code does not resolve."""

    def __init__(self, sponsor: int | str) -> None:
        self.sponsor = sponsor
        super().__init__(f"Sponsor {sponsor} not found")


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist or is inactive."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class SlotOccupiedError(NetworkError):
    """Raised when a direct slot is filled and no spillover policy applies."""

    def __init__(self, sponsor_id: int, side: str) -> None:
        self.sponsor_id = sponsor_id
        self.side = side
        super().__init__(f"The {side} slot under member {sponsor_id} is already occupied")


class AlreadyPlacedError(NetworkError):
    """Raised when placing a member that already has a placement."""

    def __init__(self, member_id: int) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} is already placed")


class CorruptTreeError(NetworkError):
    """Raised when an ancestor walk loops or exceeds the depth bound."""

    def __init__(self, member_id: int, reason: str) -> None:
        self.member_id = member_id
        super().__init__(f"Corrupt tree above member {member_id}: {reason}")


class StaleDataError(NetworkError):
    """Raised when a cached record is older than the acceptable window."""

    def __init__(self, key: str, age_seconds: float) -> None:
        self.key = key
        self.age_seconds = age_seconds
        super().__init__(f"Cached {key} is stale ({age_seconds:.0f}s old)")


class TransientIOError(NetworkError):
    """Raised when the database or cache is temporarily unreachable."""

    pass


class InsufficientBalanceError(NetworkError):
    """Raised when a wallet balance cannot cover a payment."""

    pass


class OutOfStockError(NetworkError):
    """Raised when a product has fewer units than requested."""

    pass


class AuthenticationFailedError(NetworkError):
    """Raised when credentials do not match."""

    pass


class ValidationFailedError(NetworkError, ValueError):
    """Raised when user input fails validation."""

    pass


# Exception categories based on handling strategy

# Retried locally with backoff, then served from cache if possible
RETRYABLE = (
    TransientIOError,
)

# Driver-level errors that indicate a transient connectivity problem
TRANSIENT_DB_ERRORS = (
    OperationalError,
    InterfaceError,
    ConnectionError,
    TimeoutError,
)

# Never retried - needs operator/admin intervention
HARD_FAILURE = (
    NotFoundError,
    CorruptTreeError,
)


def is_retryable(exc: BaseException) -> bool:
    """
    Check if exception may succeed on retry.

    Args:
        exc: Exception to check

    Returns:
        True if exception is transient
    """
    return isinstance(exc, RETRYABLE)


def is_hard_failure(exc: BaseException) -> bool:
    """
    Check if exception requires operator intervention.

    Args:
        exc: Exception to check

    Returns:
        True if exception must surface as a hard failure
    """
    return isinstance(exc, HARD_FAILURE)
