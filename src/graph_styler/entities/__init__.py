"""Entity models for the graph-styler domain layer."""

from graph_styler.entities.rules import (
    SHAPE_VERTICES,
    NodeShape,
    RuleKind,
    RuleOverride,
    StyleRule,
    generate_rule_id,
)
from graph_styler.entities.styles import (
    EdgeColorMode,
    EdgeRef,
    HopClass,
    HopLevel,
    ResolvedEdgeStyle,
    ResolvedNodeStyle,
    StyleTable,
)

__all__ = [
    "SHAPE_VERTICES",
    "EdgeColorMode",
    "EdgeRef",
    "HopClass",
    "HopLevel",
    "NodeShape",
    "ResolvedEdgeStyle",
    "ResolvedNodeStyle",
    "RuleKind",
    "RuleOverride",
    "StyleRule",
    "StyleTable",
    "generate_rule_id",
]
