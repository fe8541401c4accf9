"""
Tree presenter.

Read-only genealogy view of the placement tree rooted at one member,
with per-node expand/collapse state.
"""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.team_structure import TeamStructure
from app.repositories.member_repository import MemberRepository
from app.repositories.team_structure_repository import TeamStructureRepository
from app.schemas.network import TreeViewNode
from app.services.base_service import BaseService
from app.services.network import NetworkStore


class TreeExpansionState:
    """
    Expanded node ids of one rendered tree.

    The root starts expanded, every other node collapsed; ``toggle``
    flips a node between the two.
    """

    def __init__(self, root_member_id: int) -> None:
        self.root_member_id = root_member_id
        self._expanded: set[int] = {root_member_id}

    def is_expanded(self, member_id: int) -> bool:
        return member_id in self._expanded

    def toggle(self, member_id: int) -> bool:
        """
        Flip a node.

        Returns:
            True if the node is now expanded
        """
        if member_id in self._expanded:
            self._expanded.discard(member_id)
            return False
        self._expanded.add(member_id)
        return True

    def expand(self, member_ids: Iterable[int]) -> None:
        self._expanded.update(member_ids)

    def collapse_all(self) -> None:
        """Back to the initial state."""
        self._expanded = {self.root_member_id}

    @property
    def expanded(self) -> frozenset[int]:
        """Snapshot of expanded ids."""
        return frozenset(self._expanded)


class TreePresenter(BaseService):
    """
    Renders TreeViewNode trees.

    Children of collapsed nodes are never queried. Rendering stops at
    ``max_depth`` levels below the root; expanded nodes on that level are
    marked ``depth_capped``. Nothing is written.
    """

    def __init__(self, session: AsyncSession, max_depth: int | None = None) -> None:
        """
        Initialize tree presenter.

        Args:
            session: Database session
            max_depth: Levels rendered below the root (defaults to TREE_VIEW_MAX_DEPTH)
        """
        super().__init__(session)
        self.store = NetworkStore(session)
        self.team_repo = TeamStructureRepository(session)
        self.member_repo = MemberRepository(session)
        self.max_depth = (
            settings.tree_view_max_depth if max_depth is None else max_depth
        )

    async def render(
        self,
        root_member_id: int,
        expanded: Iterable[int] | TreeExpansionState,
        max_depth: int | None = None,
    ) -> TreeViewNode:
        """
        Render the tree below ``root_member_id``.

        The tree is loaded level by level: one query for the children of
        every expanded node on the current level, one for their names.

        Args:
            root_member_id: Member the view is rooted at
            expanded: Expanded member ids (or a TreeExpansionState)
            max_depth: Override of the depth limit

        Returns:
            Root TreeViewNode

        Raises:
            PlacementNotFoundError: If the root member is not placed
        """
        if isinstance(expanded, TreeExpansionState):
            expanded = expanded.expanded
        expanded = frozenset(expanded)
        if max_depth is None:
            max_depth = self.max_depth

        root = await self.store.get_placement_row(root_member_id)

        rows: dict[int, TeamStructure] = {root.member_id: root}
        depth_of: dict[int, int] = {root.member_id: 0}
        children_of: dict[int, list[int]] = {}
        frontier = [root.member_id]

        while frontier:
            to_open = [
                member_id
                for member_id in frontier
                if member_id in expanded and depth_of[member_id] < max_depth
            ]
            if not to_open:
                break

            loaded = await self.team_repo.get_children_of_many(to_open)
            frontier = []
            for parent_id, children in loaded.items():
                children_of[parent_id] = []
                for child in children:
                    if child.member_id in rows:
                        # Already rendered (corrupt edge)
                        continue
                    rows[child.member_id] = child
                    depth_of[child.member_id] = depth_of[parent_id] + 1
                    children_of[parent_id].append(child.member_id)
                    frontier.append(child.member_id)

        members = await self.member_repo.get_names(list(rows))

        def build(member_id: int) -> TreeViewNode:
            row = rows[member_id]
            member = members.get(member_id)
            return TreeViewNode(
                member_id=member_id,
                member_code=member.member_code if member else "",
                name=member.name if member else "",
                depth=depth_of[member_id],
                side=row.side if member_id != root.member_id else None,
                left_count=row.left_team,
                right_count=row.right_team,
                left_bv=row.left_bv,
                right_bv=row.right_bv,
                has_children=row.total_team > 0,
                expanded=member_id in expanded,
                depth_capped=(
                    member_id in expanded
                    and row.total_team > 0
                    and depth_of[member_id] >= max_depth
                ),
                children=tuple(build(child) for child in children_of.get(member_id, ())),
            )

        return build(root.member_id)
