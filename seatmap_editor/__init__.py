"""Editing engine for a 2D seat-map canvas."""

from .config import DEFAULT_CONFIG, EditorConfig, load_config
from .editor import Editor
from .errors import NoFloorError, UnknownShapeError
from .events import EventSource, KeyEvent, Modifiers, PointerEvent
from .history import EditorState, EditorStore, initial_state, reduce
from .model import (
    CanvasSettings,
    Floor,
    PolygonShape,
    RectShape,
    Seat,
    TextShape,
    TextStyle,
    shapes_from_json,
    shapes_to_json,
    to_polygon,
)
from .snapping import Guide, SmartGuides, VertexSnapper

__all__ = [
    "CanvasSettings",
    "DEFAULT_CONFIG",
    "Editor",
    "EditorConfig",
    "EditorState",
    "EditorStore",
    "EventSource",
    "Floor",
    "Guide",
    "KeyEvent",
    "Modifiers",
    "NoFloorError",
    "PointerEvent",
    "PolygonShape",
    "RectShape",
    "Seat",
    "SmartGuides",
    "TextShape",
    "TextStyle",
    "UnknownShapeError",
    "VertexSnapper",
    "initial_state",
    "load_config",
    "reduce",
    "shapes_from_json",
    "shapes_to_json",
    "to_polygon",
]
