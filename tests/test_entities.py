"""Tests for entity models: rules, shapes, hop levels, style records."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from graph_styler.entities import (
    SHAPE_VERTICES,
    EdgeColorMode,
    EdgeRef,
    HopClass,
    HopLevel,
    NodeShape,
    ResolvedEdgeStyle,
    ResolvedNodeStyle,
    RuleKind,
    RuleOverride,
    StyleRule,
    StyleTable,
)


class TestEnums:
    def test_values(self) -> None:
        assert {k.value for k in RuleKind} == {"folder", "tag", "file"}
        assert {m.value for m in EdgeColorMode} == {"inherit", "by-hop", "single"}
        assert {s.value for s in NodeShape} == {"circle", "square", "diamond", "triangle", "hexagon"}

    def test_shape_vertices(self) -> None:
        assert SHAPE_VERTICES[NodeShape.CIRCLE] == ()
        for shape in NodeShape:
            assert len(SHAPE_VERTICES[shape]) % 2 == 0
        assert len(SHAPE_VERTICES[NodeShape.HEXAGON]) == 12


class TestStyleRule:
    def test_generated_ids_are_unique(self) -> None:
        a = StyleRule(kind=RuleKind.TAG, pattern="#a")
        b = StyleRule(kind=RuleKind.TAG, pattern="#a")
        assert a.id != b.id
        assert a.enabled

    def test_round_trip(self) -> None:
        rule = StyleRule(kind=RuleKind.FOLDER, pattern="Projects/", color="#112233", shape=NodeShape.SQUARE, size=1.2)
        restored = StyleRule.model_validate(rule.model_dump(mode="json"))
        assert restored == rule

    def test_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            StyleRule(kind=RuleKind.FILE, pattern="x", size=3.0)

    def test_unknown_kind_loads(self) -> None:
        rule = StyleRule.model_validate({"kind": "regex", "pattern": ".*"})
        assert rule.kind == "regex"

    def test_frozen(self) -> None:
        rule = StyleRule(kind=RuleKind.FILE, pattern="x")
        with pytest.raises(ValidationError):
            rule.pattern = "y"  # type: ignore[misc]

    def test_to_override(self) -> None:
        rule = StyleRule(kind=RuleKind.FILE, pattern="x", color="#010203", size=0.5)
        assert rule.to_override() == RuleOverride(color="#010203", size=0.5)


class TestHopLevel:
    def test_constructors(self) -> None:
        assert HopLevel.active().kind == HopClass.ACTIVE
        assert HopLevel.at_hop(2) == HopLevel(kind=HopClass.HOP, hop=2)
        assert HopLevel.beyond_limit().hop is None
        assert HopLevel.unknown().kind == HopClass.UNKNOWN


class TestStyleRecords:
    def test_opacity_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedNodeStyle(color=0, opacity=1.5, shape=NodeShape.CIRCLE, size=1.0)
        with pytest.raises(ValidationError):
            ResolvedEdgeStyle(color=0, opacity=-0.1, width=1.0)

    def test_table_edge_lookup_is_unordered(self) -> None:
        style = ResolvedEdgeStyle(color=1, opacity=1.0, width=1.0)
        table = StyleTable(edge_styles=[(EdgeRef("A", "B"), style)])
        assert table.edge_style("B", "A") == style
        assert table.edge_style("A", "C") is None
