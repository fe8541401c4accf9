"""Tests for boundary DTOs and tree expansion state."""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.models.enums import PlacementSide
from app.schemas.network import PlacementEdge, SubtreeAggregate, TreeViewNode
from app.services.tree_presenter import TreeExpansionState


class TestPlacementEdge:
    """Tests for PlacementEdge shape checks."""

    def test_root_edge(self) -> None:
        """A root has no sponsor, no side and level 0."""
        edge = PlacementEdge(member_id=1, level=0)
        assert edge.is_root

    def test_child_edge(self) -> None:
        """A child carries both sponsor and side."""
        edge = PlacementEdge(
            member_id=2, sponsor_id=1, referrer_id=1, side=PlacementSide.LEFT, level=1
        )
        assert not edge.is_root
        assert edge.side is PlacementSide.LEFT

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"member_id": 2, "sponsor_id": 1, "level": 1},
            {"member_id": 2, "side": PlacementSide.RIGHT, "level": 1},
            {"member_id": 2, "level": 3},
        ],
    )
    def test_inconsistent_edges_rejected(self, kwargs: dict) -> None:
        """Half-placed or floating roots fail validation."""
        with pytest.raises(ValidationError):
            PlacementEdge(**kwargs)


class TestSubtreeAggregate:
    """Tests for SubtreeAggregate."""

    def test_reads_orm_column_names(self) -> None:
        """Team counters map from the team_structure column names."""
        row = SimpleNamespace(
            member_id=7,
            direct_team=2,
            left_team=5,
            right_team=3,
            total_team=8,
            left_bv=60000,
            right_bv=58000,
        )
        aggregate = SubtreeAggregate.model_validate(row)

        assert aggregate.direct_count == 2
        assert aggregate.left_count == 5
        assert aggregate.right_count == 3
        assert aggregate.total_count == 8
        assert aggregate.balanced_bv == 58000

    def test_negative_bv_rejected(self) -> None:
        """Leg BV can never be negative."""
        with pytest.raises(ValidationError):
            SubtreeAggregate(
                member_id=1,
                direct_count=0,
                left_count=0,
                right_count=0,
                total_count=0,
                left_bv=-1,
                right_bv=0,
            )

    def test_balanced_bv_in_dump(self) -> None:
        """The computed minimum is serialized with the record."""
        aggregate = SubtreeAggregate(
            member_id=1,
            direct_count=0,
            left_count=1,
            right_count=1,
            total_count=2,
            left_bv=100,
            right_bv=400,
        )
        assert aggregate.model_dump()["balanced_bv"] == 100


class TestTreeViewNode:
    """Tests for TreeViewNode.walk."""

    def test_walk_is_depth_first(self) -> None:
        """walk yields the node, then each child subtree in order."""
        grandchild = TreeViewNode(member_id=4, member_code="D", name="d", depth=2)
        left = TreeViewNode(
            member_id=2, member_code="B", name="b", depth=1,
            side=PlacementSide.LEFT, children=(grandchild,),
        )
        right = TreeViewNode(
            member_id=3, member_code="C", name="c", depth=1, side=PlacementSide.RIGHT
        )
        root = TreeViewNode(
            member_id=1, member_code="A", name="a", depth=0, children=(left, right)
        )

        assert [node.member_id for node in root.walk()] == [1, 2, 4, 3]


class TestTreeExpansionState:
    """Tests for TreeExpansionState."""

    def test_root_starts_expanded(self) -> None:
        """Only the root is expanded initially."""
        state = TreeExpansionState(10)
        assert state.is_expanded(10)
        assert not state.is_expanded(11)
        assert state.expanded == frozenset({10})

    def test_toggle_flips(self) -> None:
        """toggle reports the new state and flips back on the second call."""
        state = TreeExpansionState(10)

        assert state.toggle(11) is True
        assert state.is_expanded(11)
        assert state.toggle(11) is False
        assert not state.is_expanded(11)

    def test_toggle_root_collapses_it(self) -> None:
        """The root is an ordinary node once rendered."""
        state = TreeExpansionState(10)
        assert state.toggle(10) is False
        assert state.expanded == frozenset()

    def test_collapse_all_restores_initial_state(self) -> None:
        """collapse_all keeps only the root."""
        state = TreeExpansionState(10)
        state.expand([11, 12, 13])
        state.collapse_all()
        assert state.expanded == frozenset({10})

    def test_expanded_is_a_snapshot(self) -> None:
        """Later toggles do not mutate a previously returned set."""
        state = TreeExpansionState(10)
        before = state.expanded
        state.toggle(11)
        assert 11 not in before
