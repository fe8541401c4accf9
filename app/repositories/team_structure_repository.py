"""
TeamStructure repository.

Data access layer for placements and subtree aggregates.
"""

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team_structure import TeamStructure
from app.repositories.base import BaseRepository


class TeamStructureRepository(BaseRepository[TeamStructure]):
    """TeamStructure repository with tree queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize team structure repository."""
        super().__init__(TeamStructure, session)

    async def get_by_member(
        self, member_id: int, for_update: bool = False
    ) -> TeamStructure | None:
        """
        Get placement row of a member.

        Args:
            member_id: Member ID
            for_update: Lock the row (ancestor aggregate updates)

        Returns:
            TeamStructure or None if the member is not placed
        """
        return await self.get_by(for_update=for_update, member_id=member_id)

    async def get_children(self, sponsor_id: int) -> list[TeamStructure]:
        """
        Get direct placement children, left before right.

        Args:
            sponsor_id: Placement parent member ID

        Returns:
            Up to two TeamStructure rows
        """
        side_order = case((TeamStructure.side == "left", 0), else_=1)
        stmt = (
            select(TeamStructure)
            .where(TeamStructure.sponsor_id == sponsor_id)
            .order_by(side_order)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_children_of_many(
        self, sponsor_ids: list[int]
    ) -> dict[int, list[TeamStructure]]:
        """
        Get direct children of several nodes in one query.

        Args:
            sponsor_ids: Placement parent member IDs

        Returns:
            Dict mapping sponsor id to its children (left before right)
        """
        children: dict[int, list[TeamStructure]] = {sid: [] for sid in sponsor_ids}
        if not sponsor_ids:
            return children

        side_order = case((TeamStructure.side == "left", 0), else_=1)
        stmt = (
            select(TeamStructure)
            .where(TeamStructure.sponsor_id.in_(sponsor_ids))
            .order_by(TeamStructure.sponsor_id, side_order)
        )
        result = await self.session.execute(stmt)
        for row in result.scalars().all():
            children[row.sponsor_id].append(row)
        return children

    async def get_child_on_side(
        self, sponsor_id: int, side: str
    ) -> TeamStructure | None:
        """
        Get the direct child occupying one slot.

        Args:
            sponsor_id: Placement parent member ID
            side: "left" or "right"

        Returns:
            TeamStructure or None if the slot is open
        """
        return await self.get_by(sponsor_id=sponsor_id, side=side)
