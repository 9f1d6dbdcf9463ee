"""Resolve concrete node and edge styles from hop classification and rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graph_styler.config import (
    BEYOND_LIMIT_OPACITY,
    BY_HOP_BEYOND_OPACITY,
    BY_HOP_EDGE_OPACITY,
    IN_RANGE_EDGE_OPACITY,
    NEUTRAL_GRAY,
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
from graph_styler.nodes.styling.colors import parse_color
from graph_styler.nodes.styling.hop_finder import (
    classify_nodes,
    find_connected,
    find_neighbors_by_hop,
)
from graph_styler.nodes.styling.rule_matcher import TagLookup, resolve_rule_override

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    import networkx as nx

    from graph_styler.config import StyleSettings
    from graph_styler.entities.rules import RuleOverride, StyleRule

logger = logging.getLogger(__name__)


def resolve_node_style(
    level: HopLevel,
    override: RuleOverride | None,
    settings: StyleSettings,
) -> ResolvedNodeStyle:
    """Compute one node's style.

    Precedence: no active node, the active node, in-range hop, connected
    beyond the horizon, disconnected. A rule color never replaces the
    active color and a rule size never replaces the active size.
    """
    rule_color = override.color if override else None

    if level.kind == HopClass.UNKNOWN:
        color = rule_color or settings.hop_color(1)
        opacity = 1.0
    elif level.kind == HopClass.ACTIVE:
        color = settings.selected_node_color
        opacity = 1.0
    elif level.kind == HopClass.HOP and level.hop is not None and level.hop <= settings.max_hops:
        color = rule_color or settings.hop_color(level.hop)
        opacity = 1.0
    elif level.kind in (HopClass.HOP, HopClass.CONNECTED_BEYOND_LIMIT):
        color = rule_color or NEUTRAL_GRAY
        opacity = BEYOND_LIMIT_OPACITY
    else:
        color = rule_color or NEUTRAL_GRAY
        opacity = settings.disconnected_opacity

    shape = (override.shape if override else None) or settings.default_node_shape
    if level.kind == HopClass.ACTIVE:
        size = settings.active_node_size
    else:
        size = (override.size if override else None) or settings.default_node_size

    return ResolvedNodeStyle(color=parse_color(color), opacity=opacity, shape=shape, size=size)


def _resolve_single(
    touches_active: bool, both_in_range: bool, settings: StyleSettings
) -> ResolvedEdgeStyle:
    base = parse_color(settings.edge_color)
    if touches_active:
        return ResolvedEdgeStyle(
            color=parse_color(settings.highlighted_edge_color),
            opacity=1.0,
            width=settings.active_edge_width,
        )
    if both_in_range:
        return ResolvedEdgeStyle(color=base, opacity=IN_RANGE_EDGE_OPACITY, width=settings.default_edge_width)
    return ResolvedEdgeStyle(
        color=base, opacity=settings.disconnected_opacity, width=settings.disconnected_edge_width
    )


def _resolve_inherit(
    touches_active: bool,
    both_in_range: bool,
    source_style: ResolvedNodeStyle | None,
    settings: StyleSettings,
) -> ResolvedEdgeStyle:
    color = source_style.color if source_style else parse_color(NEUTRAL_GRAY)
    if touches_active:
        return ResolvedEdgeStyle(color=color, opacity=1.0, width=settings.active_edge_width)
    if both_in_range:
        source_opacity = source_style.opacity if source_style else IN_RANGE_EDGE_OPACITY
        return ResolvedEdgeStyle(
            color=color,
            opacity=min(source_opacity, IN_RANGE_EDGE_OPACITY),
            width=settings.default_edge_width,
        )
    return ResolvedEdgeStyle(
        color=color, opacity=settings.disconnected_opacity, width=settings.disconnected_edge_width
    )


def _edge_hop(level: HopLevel, max_hops: int) -> float:
    """Hop number of an endpoint for by-hop coloring; unreachable or unknown is inf."""
    if level.kind == HopClass.HOP and level.hop is not None and level.hop > 0:
        return float(level.hop)
    if level.kind == HopClass.CONNECTED_BEYOND_LIMIT:
        return float(max_hops + 1)
    return float("inf")


def _resolve_by_hop(
    touches_active: bool,
    source_level: HopLevel,
    target_level: HopLevel,
    settings: StyleSettings,
) -> ResolvedEdgeStyle:
    if touches_active:
        return ResolvedEdgeStyle(
            color=parse_color(settings.hop_edge_color(1)),
            opacity=1.0,
            width=settings.active_edge_width,
        )

    min_hop = min(_edge_hop(source_level, settings.max_hops), _edge_hop(target_level, settings.max_hops))
    base = parse_color(settings.edge_color)
    if min_hop <= settings.max_hops:
        return ResolvedEdgeStyle(
            color=parse_color(settings.hop_edge_color(int(min_hop))),
            opacity=BY_HOP_EDGE_OPACITY,
            width=settings.default_edge_width,
        )
    if min_hop != float("inf"):
        return ResolvedEdgeStyle(color=base, opacity=BY_HOP_BEYOND_OPACITY, width=settings.disconnected_edge_width)
    return ResolvedEdgeStyle(
        color=base, opacity=settings.disconnected_opacity, width=settings.disconnected_edge_width
    )


def resolve_edge_style(
    source_level: HopLevel,
    target_level: HopLevel,
    source_style: ResolvedNodeStyle | None,
    settings: StyleSettings,
) -> ResolvedEdgeStyle:
    """Compute one edge's style from its endpoints and the edge color mode.

    ``source_style`` is only consulted in inherit mode.
    """
    touches_active = HopClass.ACTIVE in (source_level.kind, target_level.kind)
    both_in_range = source_level.in_range and target_level.in_range

    if settings.edge_color_mode == EdgeColorMode.INHERIT:
        return _resolve_inherit(touches_active, both_in_range, source_style, settings)
    if settings.edge_color_mode == EdgeColorMode.BY_HOP:
        return _resolve_by_hop(touches_active, source_level, target_level, settings)
    return _resolve_single(touches_active, both_in_range, settings)


def resolve_styles(
    node_ids: Iterable[str],
    edges: Iterable[EdgeRef],
    active_id: str | None,
    graph: nx.Graph,
    rules: Sequence[StyleRule],
    tag_lookup: TagLookup | None,
    settings: StyleSettings,
) -> StyleTable:
    """Run one full pass: BFS, classification, rules, node and edge styles.

    An active id that is not in the graph is treated as no active node.
    """
    node_ids = list(node_ids)
    if active_id is not None and active_id not in graph:
        logger.debug("Active node %s not in graph, styling without focus", active_id)
        active_id = None

    layers: dict[int, set[str]] = {}
    connected: set[str] = set()
    if active_id is not None:
        layers = find_neighbors_by_hop(graph, active_id, settings.max_hops)
        connected = find_connected(graph, active_id)

    levels = classify_nodes(node_ids, active_id, layers, connected)

    table = StyleTable(active_node_id=active_id, levels=levels)
    for node_id in node_ids:
        override = resolve_rule_override(rules, node_id, tag_lookup)
        table.node_styles[node_id] = resolve_node_style(levels[node_id], override, settings)

    edges = list(edges)
    endpoints = {ref.source_id for ref in edges} | {ref.target_id for ref in edges}
    missing = sorted(endpoints - levels.keys())
    if missing:
        levels.update(classify_nodes(missing, active_id, layers, connected))

    for ref in edges:
        source_level = levels[ref.source_id]
        target_level = levels[ref.target_id]
        source_style = table.node_styles.get(ref.source_id)
        table.edge_styles.append((ref, resolve_edge_style(source_level, target_level, source_style, settings)))

    logger.debug(
        "Resolved %d node styles and %d edge styles (active=%s)",
        len(table.node_styles),
        len(table.edge_styles),
        active_id,
    )
    return table


def style_summary(table: StyleTable) -> dict[str, Any]:
    """Count nodes per hop class, for logging and diagnostics."""
    counts: dict[str, Any] = {kind.value: 0 for kind in HopClass}
    for level in table.levels.values():
        counts[level.kind.value] += 1
    counts["edges"] = len(table.edge_styles)
    return counts
