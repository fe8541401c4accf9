"""
TeamStructure model.

One row per placed member: its position in the binary placement tree
plus the cached counters of the subtree below it.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import VolumeType


class TeamStructure(Base):
    """
    TeamStructure entity.

    Placement:
    - sponsor_id is the placement parent (None for a root)
    - referrer_id is the member whose referral code was used; differs from
      sponsor_id when the member spilled over deeper into a leg
    - side is relative to the placement parent
    - level is the depth from the root (root = 0)
    - path lists ancestor member ids from the root, "1/4/9"

    Aggregates:
    - direct_team: members referred by this member
    - left_team / right_team: members placed in each leg
    - total_team: left_team + right_team
    - left_bv / right_bv: active business volume credited in each leg
    """

    __tablename__ = "team_structure"
    __table_args__ = (
        UniqueConstraint("sponsor_id", "side", name="uq_team_structure_slot"),
        Index("idx_team_structure_sponsor", "sponsor_id"),
        CheckConstraint(
            "side IN ('left', 'right') OR side IS NULL",
            name="check_team_structure_side",
        ),
        CheckConstraint("left_bv >= 0", name="check_team_structure_left_bv"),
        CheckConstraint("right_bv >= 0", name="check_team_structure_right_bv"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Placement edge
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    sponsor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=True,
    )
    referrer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    side: Mapped[str | None] = mapped_column(String(5), nullable=True)
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    path: Mapped[str] = mapped_column(String(4000), default="", nullable=False)

    # Subtree aggregate
    direct_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    left_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    right_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    left_bv: Mapped[int] = mapped_column(VolumeType, default=0, nullable=False)
    right_bv: Mapped[int] = mapped_column(VolumeType, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    @property
    def balanced_bv(self) -> int:
        """Weaker leg volume."""
        return max(min(self.left_bv, self.right_bv), 0)

    @property
    def ancestor_ids(self) -> list[int]:
        """Ancestor member ids from the root down to the placement parent."""
        if not self.path:
            return []
        return [int(part) for part in self.path.split("/")]

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TeamStructure(member_id={self.member_id}, sponsor_id={self.sponsor_id}, "
            f"side={self.side}, level={self.level})>"
        )
