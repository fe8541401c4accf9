"""Placement tree DTOs."""

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from app.models.enums import PlacementSide


class PlacementEdge(BaseModel):
    """Position of one member within the binary tree."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    member_id: int = Field(..., gt=0)
    sponsor_id: int | None = Field(default=None, description="Placement parent")
    referrer_id: int | None = Field(default=None, description="Member whose code was used")
    side: PlacementSide | None = None
    level: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_root_shape(self) -> "PlacementEdge":
        """A root has neither sponsor nor side; every other node has both."""
        if (self.sponsor_id is None) != (self.side is None):
            raise ValueError("sponsor_id and side must be set together")
        if self.sponsor_id is None and self.level != 0:
            raise ValueError("root placement must have level 0")
        return self

    @property
    def is_root(self) -> bool:
        return self.sponsor_id is None


class SubtreeAggregate(BaseModel):
    """Cached counters of the subtree below a member."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    member_id: int = Field(..., gt=0)
    direct_count: int = Field(
        ..., ge=0, validation_alias=AliasChoices("direct_team", "direct_count")
    )
    left_count: int = Field(
        ..., ge=0, validation_alias=AliasChoices("left_team", "left_count")
    )
    right_count: int = Field(
        ..., ge=0, validation_alias=AliasChoices("right_team", "right_count")
    )
    total_count: int = Field(
        ..., ge=0, validation_alias=AliasChoices("total_team", "total_count")
    )
    left_bv: int = Field(..., ge=0)
    right_bv: int = Field(..., ge=0)

    @computed_field
    @property
    def balanced_bv(self) -> int:
        """min(left_bv, right_bv)."""
        return min(self.left_bv, self.right_bv)


class TreeViewNode(BaseModel):
    """One node of the rendered genealogy tree."""

    model_config = ConfigDict(frozen=True)

    member_id: int
    member_code: str
    name: str
    depth: int = Field(..., ge=0, description="Levels below the rendered root")
    side: PlacementSide | None = None
    left_count: int = 0
    right_count: int = 0
    left_bv: int = 0
    right_bv: int = 0
    has_children: bool = False
    expanded: bool = False
    depth_capped: bool = Field(
        default=False,
        description="Expanded, but its children lie beyond the depth limit",
    )
    children: tuple["TreeViewNode", ...] = ()

    def walk(self):
        """Yield this node and every rendered descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()
