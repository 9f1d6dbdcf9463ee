"""Domain models for pattern-based node style rules."""

from __future__ import annotations

import uuid
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class NodeShape(StrEnum):
    """Shapes a renderer binding can draw for a node."""

    CIRCLE = "circle"
    SQUARE = "square"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    HEXAGON = "hexagon"


# Polygon vertices (x0, y0, x1, y1, ...) at radius 1 centered on the origin.
# Circles are drawn natively and carry no vertices.
SHAPE_VERTICES: dict[NodeShape, tuple[float, ...]] = {
    NodeShape.CIRCLE: (),
    NodeShape.SQUARE: (-1, -1, 1, -1, 1, 1, -1, 1),
    NodeShape.DIAMOND: (0, -1, 1, 0, 0, 1, -1, 0),
    NodeShape.TRIANGLE: (0, -1, 0.866, 0.5, -0.866, 0.5),
    NodeShape.HEXAGON: (0.866, -0.5, 0.866, 0.5, 0, 1, -0.866, 0.5, -0.866, -0.5, 0, -1),
}


class RuleKind(StrEnum):
    """What a style rule's pattern is matched against."""

    FOLDER = "folder"
    TAG = "tag"
    FILE = "file"


def generate_rule_id() -> str:
    """Return a random identifier for a new rule."""
    return uuid.uuid4().hex


class RuleOverride(BaseModel):
    """Style fields contributed by the first matching rule."""

    model_config = ConfigDict(frozen=True)

    color: str | None = None
    shape: NodeShape | None = None
    size: float | None = None


class StyleRule(BaseModel):
    """A pattern-based override evaluated in list order (index 0 wins).

    ``kind`` is kept as a plain string so that rules written by a newer
    client with an unrecognised kind still load; such rules never match.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_rule_id)
    kind: str = Field(description="One of folder, tag or file")
    pattern: str = Field(description="Folder prefix, #tag or file name")
    color: str | None = None
    shape: NodeShape | None = None
    size: float | None = Field(default=None, ge=0.5, le=2.0)
    enabled: bool = True

    def to_override(self) -> RuleOverride:
        """Return the style fields this rule contributes."""
        return RuleOverride(color=self.color, shape=self.shape, size=self.size)
