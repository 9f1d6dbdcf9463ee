"""Style configuration snapshot, presets, and JSON persistence."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from graph_styler.entities.rules import NodeShape, StyleRule
from graph_styler.entities.styles import EdgeColorMode

logger = logging.getLogger(__name__)

MAX_HOP_LIMIT = 5
DEFAULT_HOP_COLORS = ["#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD"]

NEUTRAL_GRAY = "#888888"
BEYOND_LIMIT_OPACITY = 0.5
IN_RANGE_EDGE_OPACITY = 0.8
BY_HOP_EDGE_OPACITY = 0.7
BY_HOP_BEYOND_OPACITY = 0.4

# Fields a preset never captures or overwrites.
PRESET_EXCLUDED_FIELDS = frozenset({"presets", "active_preset", "rules"})


class SettingsError(Exception):
    """Raised when a settings file cannot be read or validated."""


class StylePreset(BaseModel):
    """A named partial settings snapshot."""

    name: str
    settings: dict[str, Any] = Field(default_factory=dict)


def _pad_colors(colors: list[str]) -> list[str]:
    padded = list(colors)
    while len(padded) < MAX_HOP_LIMIT:
        padded.append(DEFAULT_HOP_COLORS[len(padded)])
    return padded


class StyleSettings(BaseModel):
    """Every tunable parameter of the styler.

    A session receives one snapshot per recomputation and never mutates it.
    """

    enabled: bool = Field(default=True, description="Master switch for styling")
    max_hops: int = Field(default=3, ge=1, le=MAX_HOP_LIMIT, description="Hop horizon for neighbor coloring")

    # Node colors
    selected_node_color: str = Field(default="#FF6B6B", description="Color of the active node")
    hop_colors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HOP_COLORS),
        description="Node color per hop distance, hop 1 first",
    )
    disconnected_opacity: float = Field(
        default=0.15, ge=0.0, le=1.0, description="Opacity of nodes unreachable from the active node"
    )

    # Node shape and size
    default_node_shape: NodeShape = Field(default=NodeShape.CIRCLE)
    default_node_size: float = Field(default=1.0, gt=0.0, description="Default size multiplier")
    active_node_size: float = Field(default=1.1, gt=0.0, description="Size multiplier of the active node")

    # Edges
    edge_color_mode: EdgeColorMode = Field(default=EdgeColorMode.SINGLE)
    edge_color: str = Field(default=NEUTRAL_GRAY, description="Base edge color")
    highlighted_edge_color: str = Field(default="#4ECDC4", description="Edge color next to the active node")
    hop_edge_colors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HOP_COLORS),
        description="Edge color per hop distance in by-hop mode",
    )
    active_edge_width: float = Field(default=2.0, gt=0.0)
    default_edge_width: float = Field(default=1.0, gt=0.0)
    disconnected_edge_width: float = Field(default=0.5, gt=0.0)

    # Scope
    apply_to_global_graph: bool = True
    apply_to_local_graph: bool = True

    presets: list[StylePreset] = Field(default_factory=list)
    active_preset: str | None = None
    rules: list[StyleRule] = Field(default_factory=list)

    @field_validator("hop_colors", "hop_edge_colors", mode="before")
    @classmethod
    def pad_hop_colors(cls, v: Any) -> Any:
        """Fill short color lists up to the hop limit from the defaults."""
        if v is None:
            return list(DEFAULT_HOP_COLORS)
        if isinstance(v, list):
            return _pad_colors(v)
        return v

    def hop_color(self, hop: int) -> str:
        """Node color for a 1-indexed hop, falling back to hop 1."""
        return _color_at(self.hop_colors, hop) or _color_at(self.hop_colors, 1) or DEFAULT_HOP_COLORS[0]

    def hop_edge_color(self, hop: int) -> str:
        """Edge color for a 1-indexed hop, falling back to the base edge color."""
        return _color_at(self.hop_edge_colors, hop) or self.edge_color

    def preset_values(self) -> dict[str, Any]:
        """Dump the fields a preset captures."""
        return self.model_dump(mode="json", exclude=set(PRESET_EXCLUDED_FIELDS))

    def with_preset(self, preset: StylePreset) -> StyleSettings:
        """Return a copy with the preset merged in and marked active."""
        data = self.model_dump(mode="json")
        for key, value in preset.settings.items():
            if key in PRESET_EXCLUDED_FIELDS or key not in StyleSettings.model_fields:
                continue
            data[key] = value
        data["active_preset"] = preset.name
        return StyleSettings.model_validate(data)


def _color_at(colors: list[str], hop: int) -> str | None:
    if 1 <= hop <= len(colors) and colors[hop - 1]:
        return colors[hop - 1]
    return None


DEFAULT_SETTINGS = StyleSettings()


def load_settings(path: Path) -> StyleSettings:
    """Load settings from a JSON file, or return defaults if the file is missing."""
    if not path.exists():
        logger.info("No settings at %s, using defaults", path)
        return StyleSettings()
    try:
        settings = StyleSettings.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Cannot read settings from {path}: {e}") from e
    logger.info("Loaded settings from %s (%d rules, %d presets)", path, len(settings.rules), len(settings.presets))
    return settings


def save_settings(settings: StyleSettings, path: Path) -> None:
    """Persist settings to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    logger.debug("Saved settings to %s", path)
