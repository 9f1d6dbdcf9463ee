"""Shared test fixtures for graph-styler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest


def chain_nodes(*ids: str) -> dict[str, dict[str, list[str]]]:
    """Mapping-shaped nodes linked forward in a chain: ids[0] -> ids[1] -> ..."""
    nodes: dict[str, dict[str, list[str]]] = {}
    for i, node_id in enumerate(ids):
        forward = [ids[i + 1]] if i + 1 < len(ids) else []
        nodes[node_id] = {"forward": forward, "reverse": []}
    return nodes


def links_for(nodes: dict[str, dict[str, list[str]]]) -> list[dict[str, str]]:
    """Host-style link records for every forward link."""
    return [
        {"source": node_id, "target": target}
        for node_id, node in nodes.items()
        for target in node.get("forward", [])
    ]


@dataclass
class FakeSource:
    """Mutable stand-in for a host graph renderer."""

    nodes: Any = field(default_factory=dict)
    links: Any = field(default_factory=list)


@pytest.fixture
def linear_nodes() -> dict[str, dict[str, list[str]]]:
    """A - B - C - D."""
    return chain_nodes("A", "B", "C", "D")


@pytest.fixture
def split_nodes() -> dict[str, dict[str, list[str]]]:
    """Two components: {A, B} and {C, D}."""
    return {**chain_nodes("A", "B"), **chain_nodes("C", "D")}


@pytest.fixture
def vault_nodes() -> dict[str, dict[str, list[str]]]:
    """Path-keyed nodes the way a notes app exposes them.

    Index.md links to Projects/X.md and Areas/Y.md; Projects/X.md links to
    Archive/Z.md; Loose.md is unlinked.
    """
    return {
        "Index.md": {"forward": ["Projects/X.md", "Areas/Y.md"], "reverse": []},
        "Projects/X.md": {"forward": ["Archive/Z.md"], "reverse": ["Index.md"]},
        "Areas/Y.md": {"forward": [], "reverse": ["Index.md"]},
        "Archive/Z.md": {"forward": [], "reverse": ["Projects/X.md"]},
        "Loose.md": {"forward": [], "reverse": []},
    }


@pytest.fixture
def source(linear_nodes: dict[str, dict[str, list[str]]]) -> FakeSource:
    return FakeSource(nodes=linear_nodes, links=links_for(linear_nodes))
