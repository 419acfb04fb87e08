"""Tunable constants for the editing engine.

Defaults match the behaviour of the seat-map editor canvas. A host can
override any of them from a mapping (or an optional JSON file); values that
fail to parse are ignored so a half-broken config never blocks editing.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

log = logging.getLogger("seatmap_editor.config")


@dataclass(frozen=True)
class EditorConfig:
    snap_threshold: float = 5.0       # smart-guide / vertex snap distance
    grid_size: float = 10.0           # Shift-drag grid
    min_size: float = 20.0            # resize clamp for width and height
    click_threshold: float = 3.0      # drag distance below which a drag is a click
    angle_step: float = 15.0          # Shift-rotate increment (degrees)
    paste_offset: float = 20.0
    segment_tolerance: float = 6.0    # thickened hit-test for polygon outlines
    canvas_width: float = 1000.0
    canvas_height: float = 700.0
    zoom_step: float = 0.1
    min_zoom: float = 0.1
    default_rect_x: float = 100.0
    default_rect_y: float = 100.0
    default_rect_width: float = 150.0
    default_rect_height: float = 100.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "EditorConfig":
        """Build a config from ``data``, keeping defaults for unknown or bad entries."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values: Dict[str, float] = {}
        for key, raw in data.items():
            if key not in known:
                log.debug("ignoring unknown config key %r", key)
                continue
            try:
                value = float(raw)
            except (TypeError, ValueError):
                log.warning("ignoring non-numeric config value %s=%r", key, raw)
                continue
            if value < 0.0:
                log.warning("ignoring negative config value %s=%r", key, raw)
                continue
            values[key] = value
        return cls(**values)


def load_config(path: Path) -> EditorConfig:
    """Read an :class:`EditorConfig` from a JSON file, falling back to defaults."""
    if not path.exists():
        return EditorConfig()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("could not read editor config %s: %s", path, exc)
        return EditorConfig()
    if not isinstance(data, dict):
        log.warning("editor config %s is not a JSON object", path)
        return EditorConfig()
    return EditorConfig.from_mapping(data)


DEFAULT_CONFIG = EditorConfig()
