"""Tests for first-match-wins style rule evaluation."""

from __future__ import annotations

import pytest

from graph_styler.entities.rules import NodeShape, RuleKind, RuleOverride, StyleRule
from graph_styler.nodes.styling.rule_matcher import (
    matches_file,
    matches_folder,
    matches_tag,
    normalize_tag,
    resolve_rule_override,
)


def _rule(kind: str, pattern: str, color: str | None = "#112233", **kwargs) -> StyleRule:
    return StyleRule(kind=kind, pattern=pattern, color=color, **kwargs)


class TestNormalizeTag:
    def test_adds_hash(self) -> None:
        assert normalize_tag("project") == "#project"
        assert normalize_tag("#project") == "#project"
        assert normalize_tag("  area/home ") == "#area/home"


class TestFolderMatch:
    def test_prefix(self) -> None:
        assert matches_folder("Projects/X.md", "Projects/")
        assert matches_folder("Projects/Sub/Y.md", "Projects/")

    def test_case_sensitive(self) -> None:
        assert not matches_folder("projects/X.md", "Projects/")


class TestFileMatch:
    @pytest.mark.parametrize(
        ("node_id", "pattern"),
        [
            ("Notes/Daily.md", "Notes/Daily.md"),
            ("Notes/Daily.md", "Notes/Daily"),
            ("Notes/Daily.md", "Daily.md"),
            ("Notes/Daily.md", "Daily"),
        ],
    )
    def test_four_equivalent_forms(self, node_id: str, pattern: str) -> None:
        assert matches_file(node_id, pattern)

    def test_partial_basename_does_not_match(self) -> None:
        assert not matches_file("Notes/MyDaily.md", "Daily")
        assert not matches_file("Notes/Daily.md", "Notes")


class TestTagMatch:
    def test_exact_and_nested(self) -> None:
        assert matches_tag({"#project"}, "project")
        assert matches_tag({"#project/alpha"}, "#project")
        assert matches_tag(["project/alpha"], "project")

    def test_prefix_without_separator_does_not_match(self) -> None:
        assert not matches_tag({"#projects"}, "#project")

    def test_parent_of_pattern_does_not_match(self) -> None:
        assert not matches_tag({"#project"}, "#project/alpha")


class TestResolveRuleOverride:
    def test_no_rules(self) -> None:
        assert resolve_rule_override([], "A.md") is None

    def test_first_match_wins(self) -> None:
        rules = [
            _rule(RuleKind.FOLDER, "Projects/", color="#000001"),
            _rule(RuleKind.FILE, "X", color="#000002"),
        ]
        override = resolve_rule_override(rules, "Projects/X.md")
        assert override == RuleOverride(color="#000001")

    def test_disabled_rule_is_skipped(self) -> None:
        rules = [
            _rule(RuleKind.FOLDER, "Projects/", color="#000001", enabled=False),
            _rule(RuleKind.FILE, "X", color="#000002"),
        ]
        assert resolve_rule_override(rules, "Projects/X.md") == RuleOverride(color="#000002")

    def test_only_disabled_matches(self) -> None:
        rules = [_rule(RuleKind.FOLDER, "Projects/", enabled=False)]
        assert resolve_rule_override(rules, "Projects/X.md") is None

    def test_override_carries_shape_and_size(self) -> None:
        rules = [_rule(RuleKind.FILE, "X", color=None, shape=NodeShape.DIAMOND, size=1.5)]
        override = resolve_rule_override(rules, "Projects/X.md")
        assert override == RuleOverride(color=None, shape=NodeShape.DIAMOND, size=1.5)

    def test_tag_rule_uses_lookup(self) -> None:
        tags = {"A.md": {"#area/home"}, "B.md": {"work"}}
        rules = [_rule(RuleKind.TAG, "area"), _rule(RuleKind.TAG, "#work", color="#445566")]
        assert resolve_rule_override(rules, "A.md", tags.get) == RuleOverride(color="#112233")
        assert resolve_rule_override(rules, "B.md", tags.get) == RuleOverride(color="#445566")
        assert resolve_rule_override(rules, "C.md", tags.get) is None

    def test_tag_lookup_called_once_and_lazily(self) -> None:
        calls: list[str] = []

        def lookup(node_id: str) -> set[str]:
            calls.append(node_id)
            return {"#x"}

        rules = [_rule(RuleKind.TAG, "a"), _rule(RuleKind.TAG, "b"), _rule(RuleKind.TAG, "x")]
        resolve_rule_override(rules, "N.md", lookup)
        assert calls == ["N.md"]

        calls.clear()
        resolve_rule_override([_rule(RuleKind.FOLDER, "")], "N.md", lookup)
        assert calls == []

    def test_failing_or_empty_lookup_means_no_tags(self) -> None:
        def broken(node_id: str) -> set[str]:
            raise RuntimeError("metadata cache not ready")

        rules = [_rule(RuleKind.TAG, "x")]
        assert resolve_rule_override(rules, "N.md", broken) is None
        assert resolve_rule_override(rules, "N.md", lambda _: None) is None
        assert resolve_rule_override(rules, "N.md", None) is None

    def test_single_string_tag_is_one_tag(self) -> None:
        override = RuleOverride(color="#123456")
        assert resolve_rule_override([_rule(RuleKind.TAG, "#o")], "n.md", lambda _: "#foo") is None
        assert resolve_rule_override([_rule(RuleKind.TAG, "foo", color="#123456")], "n.md", lambda _: "#foo") == override

    def test_non_iterable_lookup_result_means_no_tags(self) -> None:
        assert resolve_rule_override([_rule(RuleKind.TAG, "x")], "n.md", lambda _: 5) is None

    def test_unknown_kind_never_matches(self) -> None:
        rules = [_rule("regex", ".*"), _rule(RuleKind.FOLDER, "", color="#ABCDEF")]
        assert resolve_rule_override(rules, "A.md") == RuleOverride(color="#ABCDEF")
