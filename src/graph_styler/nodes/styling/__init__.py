"""Style computation nodes: hop distances, rule matching, style resolution."""

from __future__ import annotations

from graph_styler.nodes.styling.colors import format_color, parse_color
from graph_styler.nodes.styling.hop_finder import (
    classify_nodes,
    direct_neighbors,
    find_connected,
    find_neighbors_by_hop,
)
from graph_styler.nodes.styling.rule_matcher import (
    DEFAULT_EXTENSION,
    TagLookup,
    normalize_tag,
    resolve_rule_override,
)
from graph_styler.nodes.styling.style_resolver import (
    resolve_edge_style,
    resolve_node_style,
    resolve_styles,
    style_summary,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "TagLookup",
    "classify_nodes",
    "direct_neighbors",
    "find_connected",
    "find_neighbors_by_hop",
    "format_color",
    "normalize_tag",
    "parse_color",
    "resolve_edge_style",
    "resolve_node_style",
    "resolve_rule_override",
    "resolve_styles",
    "style_summary",
]
