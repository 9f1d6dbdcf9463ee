"""Tests for frontmatter and inline tag collection."""

from __future__ import annotations

from pathlib import Path

import pytest

from graph_styler.nodes.ingestion.tags import VaultTagResolver, collect_tags


class TestCollectTags:
    def test_frontmatter_list_and_string(self) -> None:
        assert collect_tags(["project", "#area/home"], "") == {"#project", "#area/home"}
        assert collect_tags("a, b", "") == {"#a", "#b"}
        assert collect_tags(None, "") == set()

    def test_inline_tags(self) -> None:
        body = "Notes for #project/alpha and #todo.\nSee issue #123 and email a#b."
        assert collect_tags(None, body) == {"#project/alpha", "#todo"}

    def test_headings_and_code_are_ignored(self) -> None:
        body = "# Heading\n## Sub\n```\n#not-a-tag\n```\ntext #real"
        assert collect_tags(None, body) == {"#real"}


class TestVaultTagResolver:
    @pytest.fixture
    def vault(self, tmp_path: Path) -> Path:
        (tmp_path / "Projects").mkdir()
        (tmp_path / "Projects" / "X.md").write_text(
            "---\ntags: [project, status/active]\n---\nBody with #inline\n", encoding="utf-8"
        )
        (tmp_path / "Broken.md").write_text("---\ntags: [unclosed\n---\nStill #here\n", encoding="utf-8")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")
        return tmp_path

    def test_merges_frontmatter_and_inline(self, vault: Path) -> None:
        resolver = VaultTagResolver(vault)
        assert resolver("Projects/X.md") == {"#project", "#status/active", "#inline"}

    def test_missing_and_non_markdown(self, vault: Path) -> None:
        resolver = VaultTagResolver(vault)
        assert resolver("Nope.md") == set()
        assert resolver("image.png") == set()

    def test_malformed_frontmatter_keeps_inline_tags(self, vault: Path) -> None:
        assert "#here" in VaultTagResolver(vault)("Broken.md")

    def test_cache_and_invalidate(self, vault: Path) -> None:
        resolver = VaultTagResolver(vault)
        assert "#inline" in resolver("Projects/X.md")

        (vault / "Projects" / "X.md").write_text("no tags\n", encoding="utf-8")
        assert "#inline" in resolver("Projects/X.md")

        resolver.invalidate("Projects/X.md")
        assert resolver("Projects/X.md") == set()
