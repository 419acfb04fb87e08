"""The :class:`Editor` facade a canvas host talks to.

The host renders ``editor.shapes`` (and ``editor.guides`` while a drag is
running), forwards pointer and key events, and calls the ``begin_*``
methods when the user presses on a shape body, a resize handle, the rotate
handle or a polygon vertex.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, EditorConfig
from .events import POINTER_MOVE, POINTER_UP, EventSource, KeyEvent, PointerEvent
from .history import (
    AddFloor,
    AddRect,
    Align,
    Alignment,
    Copy,
    DeleteShapes,
    DeleteVertex,
    EditorStore,
    EnterVertexEdit,
    ExitVertexEdit,
    InsertVertex,
    NewMap,
    Paste,
    Redo,
    RemoveFloor,
    Select,
    SetCanvasSettings,
    SetFloors,
    SetZoom,
    Undo,
    UpdateShape,
)
from .model import CanvasSettings, Floor, Point, ShapeList, find_shape
from .snapping import Guide, SmartGuides, VertexSnapper
from .tools import DragGesture, Gesture, ResizeGesture, RotateGesture, VertexDragGesture
from .vertex_edit import segment_at

log = logging.getLogger("seatmap_editor.editor")


class Editor:
    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        store: Optional[EditorStore] = None,
        events: Optional[EventSource] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.store = store or EditorStore()
        self.events = events or EventSource()
        self.smart_guides = SmartGuides(self.config.snap_threshold)
        self.vertex_snapper = VertexSnapper(self.config.snap_threshold)
        self._gestures: Dict[str, Gesture] = {}
        self.active_vertex: Optional[Tuple[str, int]] = None

    # ------------------------------------------------------------------
    # State access

    @property
    def shapes(self) -> ShapeList:
        return self.store.shapes

    @property
    def floors(self) -> Tuple[Floor, ...]:
        return self.store.floors

    @property
    def zoom(self) -> float:
        return self.store.state.canvas.zoom

    @property
    def guides(self) -> Tuple[Guide, ...]:
        return self.smart_guides.guides + self.vertex_snapper.guides

    @property
    def can_undo(self) -> bool:
        return self.store.can_undo

    @property
    def can_redo(self) -> bool:
        return self.store.can_redo

    def subscribe(self, callback: Callable[[ShapeList], None]) -> Callable[[], None]:
        return self.store.subscribe(callback)

    on_shape_list_changed = subscribe

    # ------------------------------------------------------------------
    # Gestures

    def _start(self, gesture: Gesture) -> Gesture:
        previous = self._gestures.pop(gesture.purpose, None)
        if previous is not None:
            previous.dispose()
        self._gestures[gesture.purpose] = gesture.attach()
        return gesture

    def begin_drag(self, event: PointerEvent, shape, all_shapes: Optional[Sequence[object]] = None) -> DragGesture:
        gesture = DragGesture(
            self.store, self.events, event, shape, all_shapes, self.config, guides=self.smart_guides
        )
        return self._start(gesture)

    def begin_resize(self, event: PointerEvent, shape, handle: str) -> ResizeGesture:
        return self._start(ResizeGesture(self.store, self.events, event, shape, handle, config=self.config))

    def begin_rotate(self, event: PointerEvent, shape) -> RotateGesture:
        return self._start(RotateGesture(self.store, self.events, event, shape, config=self.config))

    def begin_vertex_drag(self, event: PointerEvent, shape, vertex_index: int) -> VertexDragGesture:
        gesture = VertexDragGesture(
            self.store, self.events, event, shape, vertex_index, config=self.config, snapper=self.vertex_snapper
        )
        self.active_vertex = (gesture.shape.id, vertex_index)
        return self._start(gesture)

    def pointer_move(self, event: PointerEvent) -> None:
        self.events.dispatch(POINTER_MOVE, event)

    def pointer_up(self, event: PointerEvent) -> None:
        self.events.dispatch(POINTER_UP, event)
        self._gestures = {p: g for p, g in self._gestures.items() if g.active}

    def _cancel_vertex_gesture(self, shape_id: str) -> None:
        purpose = f"vertex:{shape_id}"
        gesture = self._gestures.pop(purpose, None)
        if gesture is not None:
            gesture.cancel()
        self.events.remove_purpose(purpose)

    # ------------------------------------------------------------------
    # Keyboard

    def key_down(self, event: KeyEvent) -> bool:
        """Handle an editor shortcut; return ``True`` when the key was consumed."""
        key = event.key.lower() if len(event.key) == 1 else event.key
        mods = event.modifiers
        if key == "Escape":
            editing = [s for s in self.shapes if s.editing_vertices]
            if not editing:
                return False
            for shape in editing:
                self._cancel_vertex_gesture(shape.id)
            log.debug("escape: leaving vertex edit on %d shape(s)", len(editing))
            self.active_vertex = None
            self.store.dispatch(ExitVertexEdit())
            return True
        if event.text_field_focused:
            return False
        if mods.command and key == "z":
            self.undo()
            return True
        if mods.command and key == "y":
            self.redo()
            return True
        if mods.command and key == "c":
            self.copy()
            return True
        if mods.command and key == "v":
            self.paste()
            return True
        if key in ("Delete", "Backspace"):
            editing = [s for s in self.shapes if s.editing_vertices]
            if editing:
                if self.active_vertex is None or self.active_vertex[0] != editing[0].id:
                    return False
                self.delete_vertex(*self.active_vertex)
                return True
            self.delete_shape()
            return True
        return False

    # ------------------------------------------------------------------
    # Commands

    def select_shape(self, shape_id: Optional[str], additive: bool = False) -> None:
        self.store.dispatch(Select(shape_id, additive))

    def delete_shape(self, shape_id: Optional[str] = None) -> None:
        self.store.dispatch(DeleteShapes(shape_id))

    def delete_vertex(self, shape_id: str, index: int) -> None:
        self.store.dispatch(DeleteVertex(shape_id, index))
        if self.active_vertex == (shape_id, index):
            self.active_vertex = None

    def undo(self) -> None:
        self.store.dispatch(Undo())

    def redo(self) -> None:
        self.store.dispatch(Redo())

    def copy(self) -> None:
        self.store.dispatch(Copy())

    def paste(self) -> None:
        self.store.dispatch(Paste(offset=self.config.paste_offset))

    def double_click(self, shape_id: str) -> None:
        """Toggle vertex-edit mode on a shape body."""
        target = find_shape(self.shapes, shape_id)
        if target is None:
            return
        if target.editing_vertices:
            self._cancel_vertex_gesture(shape_id)
            self.active_vertex = None
            self.store.dispatch(ExitVertexEdit(shape_id))
        else:
            self.store.dispatch(EnterVertexEdit(shape_id))

    def click_segment(self, shape_id: str, point: Point) -> bool:
        """Insert a vertex where an edited polygon's outline was clicked."""
        target = find_shape(self.shapes, shape_id)
        if target is None or not target.editing_vertices:
            return False
        index = segment_at(target, point, self.config.segment_tolerance)
        if index is None:
            return False
        log.debug("inserting vertex after %d on %s", index, shape_id)
        self.store.dispatch(InsertVertex(shape_id, index, point))
        return True

    def update_shape(self, shape) -> None:
        self.store.dispatch(UpdateShape(shape))

    def add_rect(self):
        cfg = self.config
        action = AddRect(cfg.default_rect_x, cfg.default_rect_y, cfg.default_rect_width, cfg.default_rect_height)
        self.store.dispatch(action)
        return find_shape(self.shapes, action.new_id)

    def new_map(self) -> None:
        self.store.dispatch(NewMap())

    def align(self, alignment: Alignment) -> None:
        self.store.dispatch(Align(alignment, self.config.canvas_width, self.config.canvas_height))

    def set_floors(self, floors: Sequence[Floor]) -> None:
        self.store.dispatch(SetFloors(tuple(floors)))

    def add_floor(self, name: str, color: str = "#87CEEB") -> Floor:
        floor = Floor(name=name, color=color)
        self.store.dispatch(AddFloor(floor))
        return floor

    def remove_floor(self, floor_id: str) -> None:
        self.store.dispatch(RemoveFloor(floor_id))

    def set_canvas_settings(self, settings: CanvasSettings) -> None:
        self.store.dispatch(SetCanvasSettings(settings))

    def zoom_in(self) -> float:
        self.store.dispatch(SetZoom(round(self.zoom + self.config.zoom_step, 6), self.config.min_zoom))
        return self.zoom

    def zoom_out(self) -> float:
        self.store.dispatch(SetZoom(round(self.zoom - self.config.zoom_step, 6), self.config.min_zoom))
        return self.zoom

    def zoom_reset(self) -> float:
        self.store.dispatch(SetZoom(1.0, self.config.min_zoom))
        return self.zoom
