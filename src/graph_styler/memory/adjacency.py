"""Undirected adjacency graph built from host node collections.

Host visualizations hand us nodes as a mapping (id -> node), a sequence of
nodes carrying an ``id``, or a bare record whose attributes are nodes.
Each node exposes ``forward`` and ``reverse`` link collections whose
elements are raw ids or objects with an ``id``. Everything is folded into
one ``networkx.Graph`` so that link direction never matters for distance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import networkx as nx
from pydantic import BaseModel

from graph_styler.entities.styles import EdgeRef

logger = logging.getLogger(__name__)

LINK_DIRECTIONS = ("forward", "reverse")


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _ref_id(ref: Any) -> str | None:
    """Resolve a link endpoint that is either a raw id or an object with one."""
    if isinstance(ref, str):
        return ref or None
    if ref is None:
        return None
    ref_id = _field(ref, "id")
    return ref_id if isinstance(ref_id, str) and ref_id else None


def _slot_names(cls: type) -> list[str]:
    """Collect ``__slots__`` declared anywhere in the class hierarchy."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        names.extend([slots] if isinstance(slots, str) else slots)
    return names


def iter_node_entries(nodes: Any) -> list[tuple[str, Any]]:
    """Normalize any supported node collection into ``(id, descriptor)`` pairs.

    Dispatches on capability: key-value pairs, pydantic models, iterable
    sequences, then plain or slotted records. Unsupported shapes yield an
    empty list.
    """
    if nodes is None:
        return []

    entries: list[tuple[str, Any]] = []
    if isinstance(nodes, Mapping) or callable(getattr(nodes, "items", None)):
        for key, node in nodes.items():
            if isinstance(key, str) and key:
                entries.append((key, node))
            else:
                logger.warning("Skipping node with non-string key %r", key)
        return entries

    # Models iterate as (field, value) pairs, so they are records, not sequences
    if isinstance(nodes, BaseModel):
        return [(key, node) for key, node in nodes if not key.startswith("_")]

    if isinstance(nodes, Iterable) and not isinstance(nodes, (str, bytes)):
        for node in nodes:
            node_id = _ref_id(node) if not isinstance(node, str) else None
            if node_id is None:
                logger.warning("Skipping node without an id: %r", node)
                continue
            entries.append((node_id, node))
        return entries

    if hasattr(nodes, "__dict__"):
        for key, node in vars(nodes).items():
            if not key.startswith("_"):
                entries.append((key, node))
        return entries

    slots = _slot_names(type(nodes))
    if slots:
        for key in slots:
            if not key.startswith("_") and hasattr(nodes, key):
                entries.append((key, getattr(nodes, key)))
        return entries

    logger.warning("Unsupported node collection type %s", type(nodes).__name__)
    return entries


def extract_links(node: Any, direction: str) -> list[str]:
    """Return the ids referenced by a node's ``forward`` or ``reverse`` links."""
    link_data = _field(node, direction)
    if not link_data:
        return []

    links: list[str] = []
    try:
        if isinstance(link_data, Mapping):
            for key, target in link_data.items():
                ref_id = _ref_id(key) or _ref_id(target)
                if ref_id is not None:
                    links.append(ref_id)
        elif isinstance(link_data, Iterable) and not isinstance(link_data, (str, bytes)):
            for target in link_data:
                ref_id = _ref_id(target)
                if ref_id is not None:
                    links.append(ref_id)
        else:
            logger.warning("Ignoring %s links of unsupported type %s", direction, type(link_data).__name__)
    except (TypeError, AttributeError) as e:
        logger.warning("Error parsing %s links: %s", direction, e)
    return links


def build_adjacency(nodes: Any) -> nx.Graph:
    """Build an undirected adjacency graph from a host node collection.

    Forward link A->B and reverse link B->A (read from A) both become the
    undirected edge {A, B}. Endpoints that are not in the collection are
    still added as nodes. Malformed descriptors are skipped.
    """
    graph: nx.Graph = nx.Graph()
    entries = iter_node_entries(nodes)

    for node_id, _ in entries:
        graph.add_node(node_id)

    for node_id, node in entries:
        if node is None:
            logger.warning("Skipping empty descriptor for node %s", node_id)
            continue
        for direction in LINK_DIRECTIONS:
            for other_id in extract_links(node, direction):
                graph.add_node(other_id)
                if other_id != node_id:
                    graph.add_edge(node_id, other_id)

    return graph


def iter_edge_refs(links: Any) -> list[EdgeRef]:
    """Normalize host edges (objects with ``source``/``target``) into EdgeRefs."""
    if not links:
        return []
    if isinstance(links, Mapping):
        links = list(links.values())

    refs: list[EdgeRef] = []
    for link in links:
        if link is None:
            continue
        source_id = _ref_id(_field(link, "source"))
        target_id = _ref_id(_field(link, "target"))
        if source_id is None or target_id is None:
            logger.warning("Skipping edge with unresolved endpoints: %r", link)
            continue
        refs.append(EdgeRef(source_id=source_id, target_id=target_id))
    return refs


def count_entries(collection: Any) -> int:
    """Cheap size of a host collection for change polling."""
    if collection is None:
        return 0
    try:
        return len(collection)
    except TypeError:
        return len(iter_node_entries(collection))


class AdjacencyStore:
    """Owns the adjacency graph for one visualization surface.

    Rebuilt from scratch on every topology change; there is no
    incremental update path.
    """

    def __init__(self) -> None:
        self._graph: nx.Graph = nx.Graph()

    @property
    def nx_graph(self) -> nx.Graph:
        return self._graph

    def rebuild(self, nodes: Any) -> nx.Graph:
        """Replace the graph with one built from ``nodes``."""
        self._graph = build_adjacency(nodes)
        logger.debug(
            "Rebuilt adjacency: %d nodes, %d edges",
            self._graph.number_of_nodes(),
            self._graph.number_of_edges(),
        )
        return self._graph

    def direct_neighbors(self, node_id: str) -> set[str]:
        """Return the 1-hop neighbors of ``node_id`` (empty if unknown)."""
        if node_id not in self._graph:
            return set()
        return set(self._graph.neighbors(node_id))

    def neighbors_map(self) -> dict[str, set[str]]:
        """Plain ``id -> neighbor ids`` view of the graph."""
        return {node_id: set(adj) for node_id, adj in self._graph.adjacency()}

    def has_nodes(self) -> bool:
        return self._graph.number_of_nodes() > 0

    def node_count(self) -> int:
        """Return the number of nodes in the graph."""
        return int(self._graph.number_of_nodes())

    def edge_count(self) -> int:
        """Return the number of undirected edges in the graph."""
        return int(self._graph.number_of_edges())

    def clear(self) -> None:
        self._graph = nx.Graph()
