"""Workflow layer: per-surface sessions and the host-level manager."""

from graph_styler.workflows.manager import GraphSurface, StyleManager, SurfaceKind
from graph_styler.workflows.session import GraphSource, RecordingSink, StyleSession, StyleSink

__all__ = [
    "GraphSource",
    "GraphSurface",
    "RecordingSink",
    "StyleManager",
    "StyleSession",
    "StyleSink",
    "SurfaceKind",
]
