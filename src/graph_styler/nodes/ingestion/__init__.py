"""Ingestion nodes: reading tags from vault notes."""

from graph_styler.nodes.ingestion.tags import VaultTagResolver, collect_tags

__all__ = ["VaultTagResolver", "collect_tags"]
