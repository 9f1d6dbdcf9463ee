"""Host-level coordinator: one session per graph surface, shared settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING, Any

from graph_styler.config import StylePreset, StyleSettings, load_settings, save_settings
from graph_styler.workflows.session import DEFAULT_REFRESH_DELAY, StyleSession

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable
    from pathlib import Path

    from graph_styler.entities.rules import StyleRule
    from graph_styler.nodes.styling.rule_matcher import TagLookup
    from graph_styler.workflows.session import GraphSource, StyleSink

logger = logging.getLogger(__name__)


class SurfaceKind(StrEnum):
    """Kinds of graph views a host can open."""

    GLOBAL = "graph"
    LOCAL = "localgraph"


@dataclass
class GraphSurface:
    """A visualization surface the host currently shows."""

    key: Hashable
    kind: SurfaceKind
    source: GraphSource
    sink: StyleSink
    active_node_resolver: Callable[[], str | None] | None = None


class StyleManager:
    """Keeps sessions in step with the host's open surfaces and the settings.

    Settings snapshots are immutable; every change builds a new snapshot,
    persists it through ``on_save`` and pushes it to all sessions.
    """

    def __init__(
        self,
        settings: StyleSettings | None = None,
        tag_lookup: TagLookup | None = None,
        on_save: Callable[[StyleSettings], None] | None = None,
        refresh_delay_seconds: float = DEFAULT_REFRESH_DELAY,
    ) -> None:
        self._settings = settings or StyleSettings()
        self._tag_lookup = tag_lookup
        self._on_save = on_save
        self._refresh_delay = refresh_delay_seconds
        self._sessions: dict[Hashable, StyleSession] = {}

    @classmethod
    def from_file(cls, path: Path, tag_lookup: TagLookup | None = None) -> StyleManager:
        """Build a manager whose settings live in a JSON file."""
        return cls(
            settings=load_settings(path),
            tag_lookup=tag_lookup,
            on_save=partial(_save_to, path),
        )

    @property
    def settings(self) -> StyleSettings:
        return self._settings

    @property
    def sessions(self) -> dict[Hashable, StyleSession]:
        return dict(self._sessions)

    def _surface_enabled(self, surface: GraphSurface) -> bool:
        if surface.kind == SurfaceKind.GLOBAL:
            return self._settings.apply_to_global_graph
        if surface.kind == SurfaceKind.LOCAL:
            return self._settings.apply_to_local_graph
        return False

    def sync_surfaces(self, surfaces: Iterable[GraphSurface]) -> None:
        """Open sessions for new surfaces and close those that went away."""
        wanted = {s.key: s for s in surfaces if self._surface_enabled(s)}

        for key in list(self._sessions):
            if key not in wanted:
                self._sessions.pop(key).close()
                logger.info("Closed style session for surface %s", key)

        for key, surface in wanted.items():
            if key in self._sessions:
                continue
            self._sessions[key] = StyleSession(
                source=surface.source,
                sink=surface.sink,
                settings=self._settings,
                active_node_resolver=surface.active_node_resolver,
                tag_lookup=self._tag_lookup,
                refresh_delay_seconds=self._refresh_delay,
            )
            logger.info("Opened style session for %s surface %s", surface.kind, key)

    def update_all(self) -> None:
        """Push the current settings to every session and recompute."""
        for session in self._sessions.values():
            session.update_settings(self._settings)

    def request_refresh_all(self) -> None:
        """Coalesced refresh, e.g. on active-file or layout events."""
        for session in self._sessions.values():
            session.request_refresh()

    def poll(self) -> None:
        """Frame tick: run deferred refreshes and cheap topology checks."""
        for session in self._sessions.values():
            session.flush()
            session.check_for_changes()

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()

    def _commit(self, settings: StyleSettings) -> None:
        self._settings = settings
        if self._on_save is not None:
            self._on_save(settings)
        self.update_all()

    def update_settings(self, **changes: Any) -> StyleSettings:
        """Validate ``changes`` against the current settings and apply them."""
        data = self._settings.model_dump(mode="json")
        data.update(changes)
        self._commit(StyleSettings.model_validate(data))
        return self._settings

    def toggle_enabled(self) -> bool:
        """Flip the master switch; returns the new state."""
        self._commit(self._settings.model_copy(update={"enabled": not self._settings.enabled}))
        logger.info("Graph styling %s", "enabled" if self._settings.enabled else "disabled")
        return self._settings.enabled

    # Presets

    def save_preset(self, name: str) -> StylePreset:
        """Capture current settings (rules and presets excluded) under ``name``."""
        name = name.strip()
        if not name:
            raise ValueError("Preset name must not be empty")
        preset = StylePreset(name=name, settings=self._settings.preset_values())
        presets = list(self._settings.presets)
        index = next((i for i, p in enumerate(presets) if p.name == name), None)
        if index is None:
            presets.append(preset)
        else:
            presets[index] = preset
        self._commit(self._settings.model_copy(update={"presets": presets, "active_preset": name}))
        return preset

    def apply_preset(self, name: str) -> bool:
        """Merge a saved preset into the settings. Returns False if unknown."""
        preset = next((p for p in self._settings.presets if p.name == name), None)
        if preset is None:
            logger.warning("Unknown preset %r", name)
            return False
        self._commit(self._settings.with_preset(preset))
        logger.info("Applied preset %r", name)
        return True

    def cycle_preset(self) -> str | None:
        """Apply the preset after the active one (wrapping); None if there are none."""
        presets = self._settings.presets
        if not presets:
            return None
        names = [p.name for p in presets]
        current = names.index(self._settings.active_preset) if self._settings.active_preset in names else -1
        next_name = names[(current + 1) % len(names)]
        self.apply_preset(next_name)
        return next_name

    def delete_preset(self, name: str) -> bool:
        presets = [p for p in self._settings.presets if p.name != name]
        if len(presets) == len(self._settings.presets):
            return False
        active = None if self._settings.active_preset == name else self._settings.active_preset
        self._commit(self._settings.model_copy(update={"presets": presets, "active_preset": active}))
        return True

    def reset_to_defaults(self) -> None:
        """Restore default settings, keeping saved presets."""
        self._commit(
            StyleSettings(presets=self._settings.presets, active_preset=self._settings.active_preset)
        )

    # Rules

    def add_rule(self, rule: StyleRule) -> None:
        """Append a rule at the lowest priority."""
        self._commit(self._settings.model_copy(update={"rules": [*self._settings.rules, rule]}))

    def remove_rule(self, rule_id: str) -> bool:
        rules = [r for r in self._settings.rules if r.id != rule_id]
        if len(rules) == len(self._settings.rules):
            return False
        self._commit(self._settings.model_copy(update={"rules": rules}))
        return True

    def move_rule(self, from_index: int, to_index: int) -> None:
        """Reorder rules; index 0 has the highest priority."""
        rules = list(self._settings.rules)
        if not (0 <= from_index < len(rules)) or not (0 <= to_index < len(rules)):
            raise IndexError(f"Rule index out of range: {from_index} -> {to_index}")
        rules.insert(to_index, rules.pop(from_index))
        self._commit(self._settings.model_copy(update={"rules": rules}))

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> bool:
        rules = [r.model_copy(update={"enabled": enabled}) if r.id == rule_id else r for r in self._settings.rules]
        if rules == self._settings.rules:
            return any(r.id == rule_id for r in rules)
        self._commit(self._settings.model_copy(update={"rules": rules}))
        return True


def _save_to(path: Path, settings: StyleSettings) -> None:
    save_settings(settings, path)
