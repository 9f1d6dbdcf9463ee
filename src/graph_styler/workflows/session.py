"""Per-surface styling session: recompute, poll, coalesce, and publish styles."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from graph_styler.entities.styles import EdgeRef, HopLevel, ResolvedEdgeStyle, ResolvedNodeStyle, StyleTable
from graph_styler.memory.adjacency import AdjacencyStore, count_entries, iter_edge_refs, iter_node_entries
from graph_styler.nodes.styling.style_resolver import resolve_styles, style_summary

if TYPE_CHECKING:
    from collections.abc import Callable

    from graph_styler.config import StyleSettings
    from graph_styler.nodes.styling.rule_matcher import TagLookup

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_DELAY = 0.1


@runtime_checkable
class GraphSource(Protocol):
    """Read-only view of a visualization's current nodes and links."""

    @property
    def nodes(self) -> Any: ...

    @property
    def links(self) -> Any: ...


@runtime_checkable
class StyleSink(Protocol):
    """Renderer binding that applies resolved styles to presentation objects."""

    def apply_node_style(self, node_id: str, style: ResolvedNodeStyle) -> None: ...

    def apply_edge_style(self, edge: EdgeRef, style: ResolvedEdgeStyle) -> None: ...

    def changed(self) -> None: ...

    def clear(self) -> None: ...


class RecordingSink:
    """In-memory sink keeping the latest style per node and edge."""

    def __init__(self) -> None:
        self.node_styles: dict[str, ResolvedNodeStyle] = {}
        self.edge_styles: dict[EdgeRef, ResolvedEdgeStyle] = {}
        self.change_count = 0

    def apply_node_style(self, node_id: str, style: ResolvedNodeStyle) -> None:
        self.node_styles[node_id] = style

    def apply_edge_style(self, edge: EdgeRef, style: ResolvedEdgeStyle) -> None:
        self.edge_styles[edge] = style

    def changed(self) -> None:
        self.change_count += 1

    def clear(self) -> None:
        self.node_styles.clear()
        self.edge_styles.clear()


class StyleSession:
    """Owns the adjacency graph and style table for one visualization surface.

    Every pass is a full rebuild: adjacency, BFS, rules, then node and edge
    styles. Passes are synchronous; a later pass simply replaces the table
    of an earlier one.
    """

    def __init__(
        self,
        source: GraphSource,
        sink: StyleSink,
        settings: StyleSettings,
        active_node_resolver: Callable[[], str | None] | None = None,
        tag_lookup: TagLookup | None = None,
        refresh_delay_seconds: float = DEFAULT_REFRESH_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize a session.

        Args:
            source: Host view of nodes and links.
            sink: Renderer binding receiving resolved styles.
            settings: Configuration snapshot, rules included.
            active_node_resolver: Returns the focused node id, or None.
            tag_lookup: Maps a node id to its tags, for tag rules.
            refresh_delay_seconds: Window in which refresh requests coalesce.
            clock: Monotonic time source.
        """
        self._source = source
        self._sink = sink
        self._settings = settings
        self._active_node_resolver = active_node_resolver
        self._tag_lookup = tag_lookup
        self._refresh_delay = refresh_delay_seconds
        self._clock = clock

        self._adjacency = AdjacencyStore()
        self._table = StyleTable()
        self._last_active_id: str | None = None
        self._last_node_count = 0
        self._last_link_count = 0
        self._last_pass_at: float | None = None
        self._pending_since: float | None = None

    @property
    def settings(self) -> StyleSettings:
        return self._settings

    @property
    def table(self) -> StyleTable:
        """Style table of the most recent pass."""
        return self._table

    @property
    def adjacency(self) -> AdjacencyStore:
        return self._adjacency

    @property
    def has_pending_refresh(self) -> bool:
        return self._pending_since is not None

    def _resolve_active_id(self) -> str | None:
        """Current focus, or the last known one when the host reports none."""
        active_id = self._active_node_resolver() if self._active_node_resolver else None
        if active_id:
            self._last_active_id = active_id
            return active_id
        return self._last_active_id

    def recompute(self) -> StyleTable:
        """Run a full pass and publish every style to the sink."""
        self._last_pass_at = self._clock()
        self._pending_since = None

        if not self._settings.enabled:
            self.clear_styles()
            return self._table

        nodes = self._source.nodes
        links = self._source.links
        if nodes is None:
            logger.debug("Surface has no nodes, clearing styles")
            self._last_node_count = 0
            self._last_link_count = count_entries(links)
            if self._table.node_styles or self._table.edge_styles:
                self.clear_styles()
            return self._table

        active_id = self._resolve_active_id()
        graph = self._adjacency.rebuild(nodes)
        node_ids = [node_id for node_id, _ in iter_node_entries(nodes)]
        edges = iter_edge_refs(links)

        self._table = resolve_styles(
            node_ids,
            edges,
            active_id,
            graph,
            self._settings.rules,
            self._tag_lookup,
            self._settings,
        )
        self._last_node_count = count_entries(nodes)
        self._last_link_count = count_entries(links)

        for node_id, style in self._table.node_styles.items():
            self._sink.apply_node_style(node_id, style)
        for edge, edge_style in self._table.edge_styles:
            self._sink.apply_edge_style(edge, edge_style)
        self._sink.changed()

        logger.debug("Style pass complete: %s", style_summary(self._table))
        return self._table

    def check_for_changes(self) -> bool:
        """Recompute only if the node or link count moved since the last pass.

        Cheap enough to call every animation frame.
        """
        if not self._settings.enabled:
            return False
        node_count = count_entries(self._source.nodes)
        link_count = count_entries(self._source.links)
        if node_count == self._last_node_count and link_count == self._last_link_count:
            return False
        logger.debug(
            "Topology changed (nodes %d -> %d, links %d -> %d)",
            self._last_node_count,
            node_count,
            self._last_link_count,
            link_count,
        )
        self.recompute()
        return True

    def request_refresh(self) -> bool:
        """Ask for a pass; bursts of requests collapse into one trailing pass.

        Runs immediately when no pass happened within the refresh window,
        otherwise defers to :meth:`flush`. Returns True if a pass ran.
        """
        now = self._clock()
        idle = self._last_pass_at is None or now - self._last_pass_at >= self._refresh_delay
        if idle and self._pending_since is None:
            self.recompute()
            return True
        self._pending_since = now
        return False

    def flush(self, now: float | None = None) -> bool:
        """Run a deferred pass once the window has elapsed since the last request."""
        if self._pending_since is None:
            return False
        now = self._clock() if now is None else now
        if now - self._pending_since < self._refresh_delay:
            return False
        self.recompute()
        return True

    def update_settings(self, settings: StyleSettings) -> StyleTable:
        """Swap the configuration snapshot and recompute."""
        self._settings = settings
        return self.recompute()

    def set_tag_lookup(self, tag_lookup: TagLookup | None) -> None:
        self._tag_lookup = tag_lookup

    def node_style(self, node_id: str) -> ResolvedNodeStyle | None:
        return self._table.node_styles.get(node_id)

    def edge_style(self, source_id: str, target_id: str) -> ResolvedEdgeStyle | None:
        return self._table.edge_style(source_id, target_id)

    def hop_level(self, node_id: str) -> HopLevel | None:
        return self._table.levels.get(node_id)

    def clear_styles(self) -> None:
        """Drop cached styles and tell the sink to restore host defaults."""
        self._table = StyleTable()
        self._sink.clear()
        self._sink.changed()

    def close(self) -> None:
        """Release every cache owned by this session."""
        self._table = StyleTable()
        self._adjacency.clear()
        self._sink.clear()
        self._last_active_id = None
        self._last_node_count = 0
        self._last_link_count = 0
        self._last_pass_at = None
        self._pending_since = None
        logger.info("Style session closed")
