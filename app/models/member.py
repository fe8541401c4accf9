"""
Member model.

Represents a registered participant together with its login identity.
"""

from datetime import UTC, datetime

import bcrypt
from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.config.business_constants import (
    DEFAULT_RANK,
    MEMBER_CODE_DIGITS,
    MEMBER_CODE_PREFIX,
)
from app.models.base import Base
from app.models.enums import KycStatus


class Member(Base):
    """Member model - registered network participants."""

    __tablename__ = "members"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    mobile: Mapped[str] = mapped_column(String(20), nullable=False)
    profile_image: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )

    # Login identity
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Referral
    referral_code: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    referrer_id: Mapped[int | None] = mapped_column(
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    preferred_side: Mapped[str | None] = mapped_column(
        String(5), nullable=True
    )

    # Status
    kyc_status: Mapped[str] = mapped_column(
        String(20), default=KycStatus.PENDING.value, nullable=False, index=True
    )
    rank: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_RANK, nullable=False
    )

    # Timestamps
    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    @property
    def member_code(self) -> str:
        """Display identifier, e.g. AU00042."""
        return f"{MEMBER_CODE_PREFIX}{self.id:0{MEMBER_CODE_DIGITS}d}"

    def set_password(self, password: str, rounds: int = 12) -> None:
        """
        Set login password with bcrypt hashing.

        Args:
            password: Plain text password to hash and store
            rounds: bcrypt cost factor
        """
        self.password_hash = bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=rounds)
        ).decode()

    def verify_password(self, password: str) -> bool:
        """
        Verify login password against stored hash.

        Args:
            password: Plain text password to verify

        Returns:
            True if password matches, False otherwise
        """
        if not self.password_hash or len(password.encode()) > 72:
            return False
        return bcrypt.checkpw(
            password.encode(), self.password_hash.encode()
        )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Member(id={self.id}, email={self.email}, "
            f"referral_code={self.referral_code})>"
        )
