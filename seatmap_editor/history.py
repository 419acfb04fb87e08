"""Editor state, actions and the reducer that applies them.

The state is a frozen value holding the live shape list, the full-snapshot
history and a cursor into it, the floors, canvas settings and clipboard.
:func:`reduce` is pure: it takes a state and an action and returns the next
state (or the same object when the action changes nothing).
:class:`EditorStore` keeps the current state and tells subscribers whenever
the live shape list changes, for drag previews and commits alike.

Only committed changes touch the history. ``Preview`` replaces the live
list without recording anything, so a drag can stream frames and then
commit exactly once on pointer-up.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Literal, Optional, Sequence, Tuple

from .errors import NoFloorError
from .model import (
    CanvasSettings,
    Floor,
    Point,
    RectShape,
    ShapeList,
    find_shape,
    new_shape_id,
    same_shapes,
)
from .vertex_edit import delete_vertex, enter_vertex_edit, exit_vertex_edit, insert_vertex

log = logging.getLogger("seatmap_editor.history")

Alignment = Literal["left", "center-h", "right", "top", "center-v", "bottom"]

DEFAULT_FLOOR = Floor(id="default", name="Default floor", color="#87CEEB")


@dataclass(frozen=True)
class EditorState:
    shapes: ShapeList = ()
    history: Tuple[ShapeList, ...] = ((),)
    cursor: int = 0
    floors: Tuple[Floor, ...] = (DEFAULT_FLOOR,)
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    clipboard: Optional[object] = None

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.history) - 1

    @property
    def selected(self) -> ShapeList:
        return tuple(s for s in self.shapes if s.selected)


def initial_state() -> EditorState:
    return EditorState()


# ---------------------------------------------------------------------------
# Actions


@dataclass(frozen=True)
class Commit:
    shapes: Tuple[object, ...]


@dataclass(frozen=True)
class Preview:
    shapes: Tuple[object, ...]


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class Copy:
    pass


@dataclass(frozen=True)
class Paste:
    new_id: str = field(default_factory=new_shape_id)
    offset: float = 20.0


@dataclass(frozen=True)
class Select:
    shape_id: Optional[str]
    additive: bool = False


@dataclass(frozen=True)
class DeleteShapes:
    shape_id: Optional[str] = None


@dataclass(frozen=True)
class DeleteVertex:
    shape_id: str
    index: int


@dataclass(frozen=True)
class InsertVertex:
    shape_id: str
    index: int
    point: Point


@dataclass(frozen=True)
class EnterVertexEdit:
    shape_id: str


@dataclass(frozen=True)
class ExitVertexEdit:
    shape_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateShape:
    shape: object


@dataclass(frozen=True)
class AddRect:
    x: float = 100.0
    y: float = 100.0
    width: float = 150.0
    height: float = 100.0
    new_id: str = field(default_factory=new_shape_id)


@dataclass(frozen=True)
class NewMap:
    pass


@dataclass(frozen=True)
class Align:
    alignment: Alignment
    canvas_width: float = 1000.0
    canvas_height: float = 700.0


@dataclass(frozen=True)
class SetFloors:
    floors: Tuple[Floor, ...]


@dataclass(frozen=True)
class AddFloor:
    floor: Floor


@dataclass(frozen=True)
class RemoveFloor:
    floor_id: str


@dataclass(frozen=True)
class SetCanvasSettings:
    settings: CanvasSettings


@dataclass(frozen=True)
class SetZoom:
    zoom: float
    min_zoom: float = 0.1


Action = object


# ---------------------------------------------------------------------------
# Reducer


def _repoint_floors(shapes: Sequence[object], floors: Sequence[Floor]) -> Tuple[tuple, int]:
    """Move shapes whose floor no longer exists onto the first floor.

    Shapes without a floor are left alone. Returns the shapes and how many moved.
    """
    shapes = tuple(shapes)
    if not floors:
        return shapes, 0
    known = {f.id for f in floors}
    fallback = floors[0].id
    moved = 0
    out = []
    for s in shapes:
        if s.floor_id is None or s.floor_id in known:
            out.append(s)
            continue
        moved += 1
        out.append(s.model_copy(update={"floor_id": fallback}))
    if not moved:
        return shapes, 0
    log.info("reassigned %d shape(s) to floor %r", moved, fallback)
    return tuple(out), moved


def _commit(state: EditorState, shapes: Sequence[object]) -> EditorState:
    shapes, _ = _repoint_floors(shapes, state.floors)
    if same_shapes(shapes, state.history[state.cursor]):
        return replace(state, shapes=shapes)
    history = state.history[: state.cursor + 1] + (shapes,)
    log.debug("commit: %d shapes, history entry %d", len(shapes), len(history) - 1)
    return replace(state, shapes=shapes, history=history, cursor=len(history) - 1)


def _restore(state: EditorState, cursor: int) -> EditorState:
    shapes, _ = _repoint_floors(state.history[cursor], state.floors)
    return replace(state, cursor=cursor, shapes=shapes)


def _select(state: EditorState, shape_id: Optional[str], additive: bool) -> EditorState:
    target = find_shape(state.shapes, shape_id)
    if additive:
        if target is None:
            return state
        shapes = []
        for s in state.shapes:
            if s.id != shape_id:
                shapes.append(s)
                continue
            # Toggling a shape on also takes it out of vertex-edit mode.
            shapes.append(s.model_copy(update={"selected": not s.selected, "editing_vertices": False}))
        return _commit(state, shapes)
    if target is not None and [s.id for s in state.selected] == [shape_id]:
        return state
    shapes = [
        s.model_copy(update={"selected": s.id == shape_id, "editing_vertices": False, "editing_text": False})
        for s in state.shapes
    ]
    return _commit(state, shapes)


def _align(state: EditorState, action: Align) -> EditorState:
    if action.alignment not in ("left", "center-h", "right", "top", "center-v", "bottom"):
        raise ValueError(f"Unknown alignment '{action.alignment}'")
    if not state.selected:
        return state
    cw, ch = float(action.canvas_width), float(action.canvas_height)
    shapes = []
    for s in state.shapes:
        if not s.selected:
            shapes.append(s)
            continue
        w, h = float(s.width or 0.0), float(s.height or 0.0)
        update = {
            "left": {"x": 0.0},
            "center-h": {"x": cw / 2.0 - w / 2.0},
            "right": {"x": cw - w},
            "top": {"y": 0.0},
            "center-v": {"y": ch / 2.0 - h / 2.0},
            "bottom": {"y": ch - h},
        }[action.alignment]
        shapes.append(s.model_copy(update=update))
    return _commit(state, shapes)


def _set_floors(state: EditorState, floors: Sequence[Floor]) -> EditorState:
    floors = tuple(floors)
    if not floors:
        raise NoFloorError("At least one floor is required")
    state = replace(state, floors=floors)
    shapes, moved = _repoint_floors(state.shapes, floors)
    if moved:
        return _commit(state, shapes)
    return state


def reduce(state: EditorState, action: Action) -> EditorState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, Commit):
        return _commit(state, action.shapes)
    if isinstance(action, Preview):
        return replace(state, shapes=tuple(action.shapes))
    if isinstance(action, Undo):
        if state.cursor == 0:
            return state
        cursor = state.cursor - 1
        log.debug("undo to history entry %d", cursor)
        return _restore(state, cursor)
    if isinstance(action, Redo):
        if state.cursor >= len(state.history) - 1:
            return state
        cursor = state.cursor + 1
        log.debug("redo to history entry %d", cursor)
        return _restore(state, cursor)
    if isinstance(action, Copy):
        selected = state.selected
        if len(selected) != 1:
            return state
        return replace(state, clipboard=selected[0].model_copy(update={"selected": False}, deep=True))
    if isinstance(action, Paste):
        if state.clipboard is None:
            return state
        clip = state.clipboard
        pasted = clip.model_copy(
            update={
                "id": action.new_id,
                "x": float(clip.x) + action.offset,
                "y": float(clip.y) + action.offset,
                "selected": True,
                "editing_vertices": False,
                "editing_text": False,
            },
            deep=True,
        )
        shapes = [s.model_copy(update={"selected": False}) if s.selected else s for s in state.shapes]
        return _commit(state, shapes + [pasted])
    if isinstance(action, Select):
        return _select(state, action.shape_id, action.additive)
    if isinstance(action, DeleteShapes):
        if action.shape_id:
            shapes = [s for s in state.shapes if s.id != action.shape_id]
        else:
            shapes = [s for s in state.shapes if not s.selected]
        return _commit(state, shapes)
    if isinstance(action, DeleteVertex):
        shapes = [delete_vertex(s, action.index) if s.id == action.shape_id else s for s in state.shapes]
        return _commit(state, shapes)
    if isinstance(action, InsertVertex):
        target = find_shape(state.shapes, action.shape_id)
        if target is None or not getattr(target, "vertices", None):
            return state
        shapes = [insert_vertex(s, action.index, action.point) if s.id == action.shape_id else s for s in state.shapes]
        return _commit(state, shapes)
    if isinstance(action, EnterVertexEdit):
        target = find_shape(state.shapes, action.shape_id)
        if target is None:
            return state
        edited = enter_vertex_edit(target)
        if edited is target:
            return state
        shapes = []
        for s in state.shapes:
            if s.id == action.shape_id:
                shapes.append(edited)
            elif s.editing_vertices:
                shapes.append(s.model_copy(update={"editing_vertices": False}))
            else:
                shapes.append(s)
        return _commit(state, shapes)
    if isinstance(action, ExitVertexEdit):
        shapes = [
            exit_vertex_edit(s) if action.shape_id is None or s.id == action.shape_id else s
            for s in state.shapes
        ]
        return _commit(state, shapes)
    if isinstance(action, UpdateShape):
        updated = action.shape
        if find_shape(state.shapes, updated.id) is None:
            return state
        shapes = []
        for s in state.shapes:
            if s.id == updated.id:
                shapes.append(updated)
            elif updated.selected and s.selected:
                shapes.append(s.model_copy(update={"selected": False}))
            else:
                shapes.append(s)
        return _commit(state, shapes)
    if isinstance(action, AddRect):
        rect = RectShape(
            id=action.new_id,
            floor_id=state.floors[0].id if state.floors else None,
            x=action.x,
            y=action.y,
            width=action.width,
            height=action.height,
        )
        return _commit(state, state.shapes + (rect,))
    if isinstance(action, NewMap):
        return _commit(state, ())
    if isinstance(action, Align):
        return _align(state, action)
    if isinstance(action, SetFloors):
        return _set_floors(state, action.floors)
    if isinstance(action, AddFloor):
        return _set_floors(state, state.floors + (action.floor,))
    if isinstance(action, RemoveFloor):
        remaining = tuple(f for f in state.floors if f.id != action.floor_id)
        if len(remaining) == len(state.floors):
            return state
        if not remaining:
            raise NoFloorError("Cannot remove the last floor")
        return _set_floors(state, remaining)
    if isinstance(action, SetCanvasSettings):
        return replace(state, canvas=action.settings)
    if isinstance(action, SetZoom):
        zoom = max(float(action.min_zoom), float(action.zoom))
        return replace(state, canvas=state.canvas.model_copy(update={"zoom": zoom}))
    raise ValueError(f"Unsupported action {type(action).__name__}")


# ---------------------------------------------------------------------------
# Store

ShapeListener = Callable[[ShapeList], None]


class EditorStore:
    """Holds the current :class:`EditorState` and notifies shape-list subscribers."""

    def __init__(self, state: Optional[EditorState] = None) -> None:
        self._state = state if state is not None else initial_state()
        self._listeners: List[ShapeListener] = []

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def shapes(self) -> ShapeList:
        return self._state.shapes

    @property
    def floors(self) -> Tuple[Floor, ...]:
        return self._state.floors

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    def subscribe(self, listener: ShapeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> EditorState:
        previous = self._state
        state = reduce(previous, action)
        if state is previous:
            return state
        self._state = state
        if state.shapes is not previous.shapes:
            for listener in list(self._listeners):
                listener(state.shapes)
        return state

    def commit(self, shapes: Sequence[object]) -> EditorState:
        return self.dispatch(Commit(tuple(shapes)))

    def preview(self, shapes: Sequence[object]) -> EditorState:
        return self.dispatch(Preview(tuple(shapes)))
