"""First-match-wins evaluation of style rules against a node id."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from graph_styler.entities.rules import RuleKind, RuleOverride, StyleRule

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".md"

TagLookup = Callable[[str], Iterable[str] | None]


def normalize_tag(tag: str) -> str:
    """Ensure a tag carries its leading ``#``."""
    tag = tag.strip()
    return tag if tag.startswith("#") else f"#{tag}"


def matches_folder(node_id: str, pattern: str) -> bool:
    return node_id.startswith(pattern)


def matches_file(node_id: str, pattern: str) -> bool:
    """Match the full id or its basename, with or without the default extension."""
    with_ext = pattern + DEFAULT_EXTENSION
    return (
        node_id == pattern
        or node_id == with_ext
        or node_id.endswith("/" + pattern)
        or node_id.endswith("/" + with_ext)
    )


def matches_tag(tags: Iterable[str], pattern: str) -> bool:
    """Match an exact tag or any nested tag below it (``#a`` matches ``#a/b``)."""
    wanted = normalize_tag(pattern)
    for tag in tags:
        tag = normalize_tag(tag)
        if tag == wanted or tag.startswith(wanted + "/"):
            return True
    return False


def _lookup_tags(tag_lookup: TagLookup | None, node_id: str) -> set[str]:
    if tag_lookup is None:
        return set()
    try:
        tags = tag_lookup(node_id)
    except Exception as e:  # resolver is host code; a failure means "no tags"
        logger.warning("Tag lookup failed for %s: %s", node_id, e)
        return set()
    if not tags:
        return set()
    if isinstance(tags, str):
        tags = [tags]
    elif not isinstance(tags, Iterable):
        logger.warning("Tag lookup for %s returned %s, ignoring", node_id, type(tags).__name__)
        return set()
    return {normalize_tag(t) for t in tags if isinstance(t, str) and t.strip()}


def rule_matches(rule: StyleRule, node_id: str, tags: Callable[[], set[str]]) -> bool:
    """Evaluate one rule's kind-specific predicate. Unknown kinds never match."""
    if rule.kind == RuleKind.FOLDER:
        return matches_folder(node_id, rule.pattern)
    if rule.kind == RuleKind.TAG:
        return matches_tag(tags(), rule.pattern)
    if rule.kind == RuleKind.FILE:
        return matches_file(node_id, rule.pattern)
    return False


def resolve_rule_override(
    rules: Sequence[StyleRule],
    node_id: str,
    tag_lookup: TagLookup | None = None,
) -> RuleOverride | None:
    """Return the override of the first enabled rule matching ``node_id``.

    Rules are checked in list order, so index 0 has the highest priority.
    Tags are looked up at most once, and only if a tag rule is reached.
    """
    if not rules:
        return None

    cached: list[set[str]] = []

    def tags() -> set[str]:
        if not cached:
            cached.append(_lookup_tags(tag_lookup, node_id))
        return cached[0]

    for rule in rules:
        if not rule.enabled:
            continue
        if rule_matches(rule, node_id, tags):
            return rule.to_override()
    return None
