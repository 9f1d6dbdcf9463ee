"""Hex color parsing for renderer tints."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

FALLBACK_TINT = 0xFFFFFF


def parse_color(color: str | None) -> int:
    """Convert ``#RRGGBB`` into a packed RGB integer.

    Anything that is not a ``#``-prefixed hex string becomes white.
    """
    if not color or not color.startswith("#"):
        return FALLBACK_TINT
    try:
        return int(color[1:], 16) & 0xFFFFFF
    except ValueError:
        logger.warning("Invalid color %r, using white", color)
        return FALLBACK_TINT


def format_color(tint: int) -> str:
    """Inverse of :func:`parse_color`."""
    return f"#{tint & 0xFFFFFF:06X}"
