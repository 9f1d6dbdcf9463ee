"""Memory package."""

from graph_styler.memory.adjacency import (
    AdjacencyStore,
    build_adjacency,
    count_entries,
    extract_links,
    iter_edge_refs,
    iter_node_entries,
)

__all__ = [
    "AdjacencyStore",
    "build_adjacency",
    "count_entries",
    "extract_links",
    "iter_edge_refs",
    "iter_node_entries",
]
