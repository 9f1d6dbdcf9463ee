"""Domain models for hop classification and resolved styles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from graph_styler.entities.rules import NodeShape  # noqa: TC001


class EdgeColorMode(StrEnum):
    """How an edge's color is derived."""

    INHERIT = "inherit"  # from the source node's resolved color
    BY_HOP = "by-hop"  # from the closer endpoint's hop distance
    SINGLE = "single"  # one fixed color


class HopClass(StrEnum):
    """Where a node sits relative to the active node."""

    ACTIVE = "active"
    HOP = "hop"
    CONNECTED_BEYOND_LIMIT = "connected_beyond_limit"
    DISCONNECTED = "disconnected"
    UNKNOWN = "unknown"  # no active node known


class HopLevel(BaseModel):
    """Tagged hop classification for one node.

    ``hop`` is only set for ``HopClass.HOP`` and is the BFS shortest-path
    distance from the active node.
    """

    model_config = ConfigDict(frozen=True)

    kind: HopClass
    hop: int | None = None

    @property
    def in_range(self) -> bool:
        """True for nodes 1..max_hops away (the active node itself is not)."""
        return self.kind == HopClass.HOP

    @classmethod
    def active(cls) -> HopLevel:
        return cls(kind=HopClass.ACTIVE)

    @classmethod
    def at_hop(cls, hop: int) -> HopLevel:
        return cls(kind=HopClass.HOP, hop=hop)

    @classmethod
    def beyond_limit(cls) -> HopLevel:
        return cls(kind=HopClass.CONNECTED_BEYOND_LIMIT)

    @classmethod
    def disconnected(cls) -> HopLevel:
        return cls(kind=HopClass.DISCONNECTED)

    @classmethod
    def unknown(cls) -> HopLevel:
        return cls(kind=HopClass.UNKNOWN)


class ResolvedNodeStyle(BaseModel):
    """Concrete style for one node in one recomputation pass."""

    model_config = ConfigDict(frozen=True)

    color: int = Field(description="Packed 0xRRGGBB")
    opacity: float = Field(ge=0.0, le=1.0)
    shape: NodeShape
    size: float


class ResolvedEdgeStyle(BaseModel):
    """Concrete style for one edge in one recomputation pass."""

    model_config = ConfigDict(frozen=True)

    color: int = Field(description="Packed 0xRRGGBB")
    opacity: float = Field(ge=0.0, le=1.0)
    width: float


@dataclass(frozen=True)
class EdgeRef:
    """Normalized endpoints of a host edge."""

    source_id: str
    target_id: str


@dataclass
class StyleTable:
    """Everything one recomputation pass produced for a surface."""

    active_node_id: str | None = None
    levels: dict[str, HopLevel] = field(default_factory=dict)
    node_styles: dict[str, ResolvedNodeStyle] = field(default_factory=dict)
    edge_styles: list[tuple[EdgeRef, ResolvedEdgeStyle]] = field(default_factory=list)

    def edge_style(self, source_id: str, target_id: str) -> ResolvedEdgeStyle | None:
        """Return the style of the first edge with these endpoints, in either order."""
        for ref, style in self.edge_styles:
            if (ref.source_id, ref.target_id) in (
                (source_id, target_id),
                (target_id, source_id),
            ):
                return style
        return None
