"""Tag lookup for markdown notes: frontmatter tags merged with inline tags."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import frontmatter

from graph_styler.nodes.styling.rule_matcher import normalize_tag

logger = logging.getLogger(__name__)

# "#tag" or "#nested/tag" preceded by start-of-line or whitespace; pure numbers are not tags.
INLINE_TAG_RE = re.compile(r"(?:^|(?<=\s))#([\w\-/]*[^\W\d][\w\-/]*)", re.UNICODE)
FENCE_RE = re.compile(r"```.*?```", re.DOTALL)


def _frontmatter_tags(value: Any) -> list[str]:
    """Flatten the frontmatter ``tags`` value (list, comma string, or scalar)."""
    if value is None:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [str(value)]


def collect_tags(frontmatter_tags: Any, body: str) -> set[str]:
    """Merge frontmatter and inline tags, each normalized to a leading ``#``."""
    tags = {normalize_tag(t) for t in _frontmatter_tags(frontmatter_tags)}
    text = FENCE_RE.sub("", body)
    for match in INLINE_TAG_RE.finditer(text):
        tags.add(normalize_tag(match.group(1).rstrip("/")))
    return tags


class VaultTagResolver:
    """Resolve a node id (a vault-relative path) to the tags of that note.

    Results are cached per id until :meth:`invalidate` is called.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._cache: dict[str, set[str]] = {}

    def __call__(self, node_id: str) -> set[str]:
        cached = self._cache.get(node_id)
        if cached is not None:
            return cached
        tags = self._read_tags(node_id)
        self._cache[node_id] = tags
        return tags

    def _read_tags(self, node_id: str) -> set[str]:
        path = self._root / node_id
        if path.suffix.lower() != ".md" or not path.is_file():
            return set()
        try:
            post = frontmatter.load(str(path))
        except Exception as e:
            # Malformed YAML still leaves inline tags readable
            logger.warning("Failed to parse frontmatter in %s: %s", path, e)
            try:
                return collect_tags(None, path.read_text(encoding="utf-8"))
            except OSError:
                return set()
        return collect_tags(post.metadata.get("tags"), post.content)

    def invalidate(self, node_id: str | None = None) -> None:
        """Forget cached tags for one note, or for all notes."""
        if node_id is None:
            self._cache.clear()
        else:
            self._cache.pop(node_id, None)
