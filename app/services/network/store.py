"""
Network store.

Reads and writes placement edges of the binary tree and keeps the
cached subtree counters on ``team_structure`` current.
"""

from collections import deque
from typing import NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.enums import PlacementSide, SpilloverPolicy
from app.models.team_structure import TeamStructure
from app.repositories.member_repository import MemberRepository
from app.repositories.team_structure_repository import TeamStructureRepository
from app.schemas.network import PlacementEdge, SubtreeAggregate
from app.services.base_service import BaseService, log_operation
from app.utils.db_decorators import translate_transient_errors
from app.utils.exceptions import (
    AlreadyPlacedError,
    CorruptTreeError,
    MemberNotFoundError,
    PlacementNotFoundError,
    SlotOccupiedError,
    SponsorNotFoundError,
    ValidationFailedError,
)


class AncestorLink(NamedTuple):
    """An ancestor row and the side of it the walked node descends from."""

    row: TeamStructure
    side: PlacementSide


class NetworkStore(BaseService):
    """
    Placement tree access.

    Writes are flushed, never committed: the caller owns the transaction
    and decides whether to roll it back when a write fails.
    Every upward walk follows ``sponsor_id`` and stops with
    CorruptTreeError on a cycle or after ``max_depth`` steps.
    """

    def __init__(
        self,
        session: AsyncSession,
        max_depth: int | None = None,
        spillover_policy: SpilloverPolicy | str | None = None,
    ) -> None:
        """
        Initialize network store.

        Args:
            session: Database session
            max_depth: Longest ancestor walk allowed (defaults to MAX_TREE_DEPTH)
            spillover_policy: Default rule for filled slots (defaults to SPILLOVER_POLICY)
        """
        super().__init__(session)
        self.team_repo = TeamStructureRepository(session)
        self.member_repo = MemberRepository(session)
        self.max_depth = max_depth or settings.max_tree_depth
        self.spillover_policy = SpilloverPolicy(
            spillover_policy or settings.spillover_policy
        )

    # ------------------------------------------------------------------ reads

    async def get_placement_row(
        self, member_id: int, for_update: bool = False
    ) -> TeamStructure:
        """
        Get the raw placement row of a member.

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        row = await self.team_repo.get_by_member(member_id, for_update=for_update)
        if row is None:
            raise PlacementNotFoundError(member_id)
        return row

    async def get_placement(self, member_id: int) -> PlacementEdge:
        """
        Get the placement edge of a member.

        Args:
            member_id: Member ID

        Returns:
            PlacementEdge

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        row = await self.get_placement_row(member_id)
        return PlacementEdge.model_validate(row)

    async def get_aggregate(self, member_id: int) -> SubtreeAggregate:
        """
        Get the cached subtree counters of a member.

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        row = await self.get_placement_row(member_id)
        return SubtreeAggregate.model_validate(row)

    async def get_children(self, member_id: int) -> list[PlacementEdge]:
        """
        Get direct placement children, left before right.

        Raises:
            PlacementNotFoundError: If the member is not placed
        """
        await self.get_placement_row(member_id)
        rows = await self.team_repo.get_children(member_id)
        return [PlacementEdge.model_validate(row) for row in rows]

    async def get_ancestors(self, member_id: int) -> list[tuple[PlacementEdge, PlacementSide]]:
        """
        Get the ancestor chain bottom-up.

        Args:
            member_id: Member ID

        Returns:
            List of (ancestor edge, side the member descends from) pairs,
            placement parent first, root last

        Raises:
            PlacementNotFoundError: If the member is not placed
            CorruptTreeError: If the chain loops or is too deep
        """
        row = await self.get_placement_row(member_id)
        links = await self.walk_ancestors(row)
        return [(PlacementEdge.model_validate(link.row), link.side) for link in links]

    async def walk_ancestors(
        self, row: TeamStructure, for_update: bool = False
    ) -> list[AncestorLink]:
        """
        Walk from a placement row to the root via ``sponsor_id``.

        Args:
            row: Placement row to start from (not included in the result)
            for_update: Lock every ancestor row

        Returns:
            List of AncestorLink, placement parent first

        Raises:
            CorruptTreeError: On a cycle, a dangling sponsor or a chain
                longer than ``max_depth``
        """
        links: list[AncestorLink] = []
        visited = {row.member_id}
        current = row

        while current.sponsor_id is not None:
            if len(links) >= self.max_depth:
                raise CorruptTreeError(
                    row.member_id, f"ancestor chain exceeds {self.max_depth} levels"
                )
            if current.sponsor_id in visited:
                raise CorruptTreeError(
                    row.member_id, f"cycle through member {current.sponsor_id}"
                )
            if current.side is None:
                raise CorruptTreeError(
                    row.member_id, f"member {current.member_id} has a sponsor but no side"
                )

            parent = await self.team_repo.get_by_member(
                current.sponsor_id, for_update=for_update
            )
            if parent is None:
                raise CorruptTreeError(
                    row.member_id, f"sponsor {current.sponsor_id} has no placement"
                )

            links.append(AncestorLink(parent, PlacementSide(current.side)))
            visited.add(parent.member_id)
            current = parent

        return links

    # ----------------------------------------------------------------- writes

    @translate_transient_errors
    @log_operation
    async def place_root(self, member_id: int) -> PlacementEdge:
        """
        Create a root placement (level 0, no sponsor).

        Raises:
            MemberNotFoundError: If the member does not exist
            AlreadyPlacedError: If the member is already placed
        """
        await self._ensure_placeable(member_id)

        row = await self.team_repo.create(member_id=member_id, level=0, path="")
        self.logger.info("Root placed", extra={"member_id": member_id})
        return PlacementEdge.model_validate(row)

    @translate_transient_errors
    @log_operation
    async def place_member(
        self,
        new_member_id: int,
        sponsor_id: int,
        side: PlacementSide | str,
        policy: SpilloverPolicy | str | None = None,
    ) -> PlacementEdge:
        """
        Place a new member under a sponsor.

        The new member takes the sponsor's slot on ``side``. When that slot
        is filled, the BFS policy places it at the shallowest open slot in
        the subtree of the slot's occupant; the ``none`` policy refuses.
        The sponsor's direct count and the leg counts of every ancestor of
        the new node are incremented.

        Args:
            new_member_id: Member to place
            sponsor_id: Member whose referral brought the new member in
            side: Requested leg under the sponsor
            policy: Spillover rule (defaults to the store's policy)

        Returns:
            PlacementEdge of the new member

        Raises:
            MemberNotFoundError: If the new member does not exist
            AlreadyPlacedError: If the new member is already placed
            SponsorNotFoundError: If the sponsor is unknown or not placed
            SlotOccupiedError: If the slot is filled and policy is ``none``,
                or a concurrent placement took it (the failed flush leaves
                the session needing a rollback)
            CorruptTreeError: If the sponsor's chain is corrupt
        """
        try:
            side = PlacementSide(side)
        except ValueError as e:
            raise ValidationFailedError(f"Invalid side: {side!r}") from e
        policy = SpilloverPolicy(policy or self.spillover_policy)

        if new_member_id == sponsor_id:
            raise ValidationFailedError("A member cannot sponsor itself")

        await self._ensure_placeable(new_member_id)

        sponsor = await self.team_repo.get_by_member(sponsor_id, for_update=True)
        if sponsor is None:
            raise SponsorNotFoundError(sponsor_id)

        parent, slot_side = await self._find_slot(sponsor, side, policy)

        try:
            row = await self.team_repo.create(
                member_id=new_member_id,
                sponsor_id=parent.member_id,
                referrer_id=sponsor_id,
                side=slot_side.value,
                level=parent.level + 1,
                path=_child_path(parent),
            )
        except IntegrityError as e:
            # Lost a race for the same slot
            raise SlotOccupiedError(parent.member_id, slot_side.value) from e

        sponsor.direct_team += 1
        for link in await self.walk_ancestors(row, for_update=True):
            if link.side is PlacementSide.LEFT:
                link.row.left_team += 1
            else:
                link.row.right_team += 1
            link.row.total_team = link.row.left_team + link.row.right_team

        await self.session.flush()

        self.logger.info(
            "Member placed",
            extra={
                "member_id": new_member_id,
                "sponsor_id": sponsor_id,
                "parent_id": parent.member_id,
                "side": slot_side.value,
                "level": row.level,
                "spillover": parent.member_id != sponsor_id,
            },
        )
        return PlacementEdge.model_validate(row)

    async def _ensure_placeable(self, member_id: int) -> None:
        if await self.member_repo.get_by_id(member_id) is None:
            raise MemberNotFoundError(member_id)
        if await self.team_repo.get_by_member(member_id) is not None:
            raise AlreadyPlacedError(member_id)

    async def _find_slot(
        self,
        sponsor: TeamStructure,
        side: PlacementSide,
        policy: SpilloverPolicy,
    ) -> tuple[TeamStructure, PlacementSide]:
        """
        Pick the (parent, side) slot a new member goes into.

        Breadth-first from the occupant of the requested slot; at each node
        the requested side is tried before the opposite one.
        """
        occupant = await self.team_repo.get_child_on_side(sponsor.member_id, side.value)
        if occupant is None:
            return sponsor, side

        if policy is SpilloverPolicy.NONE:
            raise SlotOccupiedError(sponsor.member_id, side.value)

        queue = deque([occupant])
        visited = {sponsor.member_id}

        while queue:
            node = queue.popleft()
            if node.member_id in visited:
                raise CorruptTreeError(node.member_id, "cycle below sponsor")
            visited.add(node.member_id)
            if sponsor.member_id not in node.ancestor_ids:
                raise CorruptTreeError(
                    node.member_id, f"path does not pass through sponsor {sponsor.member_id}"
                )
            if node.level - sponsor.level > self.max_depth:
                raise CorruptTreeError(
                    node.member_id, f"subtree exceeds {self.max_depth} levels"
                )

            children = {
                PlacementSide(child.side): child
                for child in await self.team_repo.get_children(node.member_id)
            }
            for candidate in (side, side.opposite):
                if candidate not in children:
                    return node, candidate
            queue.extend(children[candidate] for candidate in (side, side.opposite))

        # Every leaf has two open slots
        raise CorruptTreeError(sponsor.member_id, "no open slot found")


def _child_path(parent: TeamStructure) -> str:
    """Materialised path of a child of ``parent``."""
    if parent.path:
        return f"{parent.path}/{parent.member_id}"
    return str(parent.member_id)
