"""Breadth-first hop distances from the active node."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

from graph_styler.entities.styles import HopLevel

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def find_neighbors_by_hop(graph: nx.Graph, source: str, max_hops: int) -> dict[int, set[str]]:
    """Group nodes by their shortest-path distance from ``source``.

    Returns a mapping with a (possibly empty) set for every hop in
    1..max_hops. Expansion stops at ``max_hops`` so nothing beyond the
    horizon is discovered. An unknown source yields empty layers.
    """
    if max_hops < 1:
        return {}

    layers: dict[int, set[str]] = {hop: set() for hop in range(1, max_hops + 1)}
    if source not in graph:
        logger.debug("Hop source %s is not in the graph", source)
        return layers

    # cutoff bounds the BFS so it never walks past the horizon
    distances: dict[str, int] = nx.single_source_shortest_path_length(graph, source, cutoff=max_hops)
    for node_id, distance in distances.items():
        if 1 <= distance <= max_hops:
            layers[distance].add(node_id)
    return layers


def find_connected(graph: nx.Graph, source: str) -> set[str]:
    """Return every node reachable from ``source``, excluding ``source`` itself."""
    if source not in graph:
        return set()
    component: set[str] = set(nx.node_connected_component(graph, source))
    component.discard(source)
    return component


def direct_neighbors(graph: nx.Graph, source: str) -> set[str]:
    """Return the 1-hop neighbors of ``source``."""
    if source not in graph:
        return set()
    return set(graph.neighbors(source))


def classify_nodes(
    node_ids: Iterable[str],
    active_id: str | None,
    layers: dict[int, set[str]],
    connected: set[str],
) -> dict[str, HopLevel]:
    """Turn BFS output into an explicit per-node hop classification.

    With no active node every node is ``unknown``.
    """
    hop_of: dict[str, int] = {}
    for hop in sorted(layers):
        for node_id in layers[hop]:
            hop_of.setdefault(node_id, hop)

    levels: dict[str, HopLevel] = {}
    for node_id in node_ids:
        if active_id is None:
            levels[node_id] = HopLevel.unknown()
        elif node_id == active_id:
            levels[node_id] = HopLevel.active()
        elif node_id in hop_of:
            levels[node_id] = HopLevel.at_hop(hop_of[node_id])
        elif node_id in connected:
            levels[node_id] = HopLevel.beyond_limit()
        else:
            levels[node_id] = HopLevel.disconnected()
    return levels
