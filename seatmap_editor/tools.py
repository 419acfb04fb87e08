"""Pointer gestures for the seat-map canvas.

Each gesture captures what it needs at pointer-down, attaches
``pointermove``/``pointerup`` listeners on the root :class:`EventSource`
and then streams previews into the store until pointer-up, where it
commits once and detaches.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, EditorConfig
from .errors import UnknownShapeError
from .events import POINTER_MOVE, POINTER_UP, EventSource, PointerEvent
from .history import EditorStore, Select
from .model import Point, find_shape
from .snapping import SmartGuides, VertexSnapper
from .transform import drag_shapes, local_handle, resize_shape, rotate_shape
from .vertex_edit import move_vertex

log = logging.getLogger("seatmap_editor.tools")


def _replace_shape(shapes: Sequence[object], updated) -> tuple:
    return tuple(updated if s.id == updated.id else s for s in shapes)


class Gesture:
    """Common plumbing every gesture shares."""

    purpose = "gesture"

    def __init__(
        self,
        store: EditorStore,
        source: EventSource,
        event: PointerEvent,
        shapes: Optional[Sequence[object]] = None,
        config: EditorConfig = DEFAULT_CONFIG,
    ) -> None:
        self.store = store
        self.source = source
        self.config = config
        self.origin: Point = event.point
        self._shapes: tuple = tuple(shapes) if shapes is not None else tuple(store.shapes)
        self._attached = False
        self._previewed = False

    @property
    def active(self) -> bool:
        return self._attached

    def _lookup(self, shape):
        shape_id = shape if isinstance(shape, str) else shape.id
        found = find_shape(self._shapes, shape_id)
        if found is None:
            raise UnknownShapeError(shape_id)
        return found

    def attach(self) -> "Gesture":
        dropped = self.source.remove_purpose(self.purpose)
        if dropped:
            log.debug("%s: dropped %d stale listener(s)", self.purpose, dropped)
        self.source.subscribe(POINTER_MOVE, self.purpose, self.mouse_move)
        self.source.subscribe(POINTER_UP, self.purpose, self.mouse_release)
        self._attached = True
        log.debug("%s: started at %s", self.purpose, self.origin)
        return self

    def delta(self, event: PointerEvent) -> Tuple[float, float]:
        return (float(event.x) - self.origin[0], float(event.y) - self.origin[1])

    def frame(self, event: PointerEvent) -> Optional[tuple]:
        """Shape list for the pointer position in ``event``; ``None`` leaves the canvas as is."""
        raise NotImplementedError

    def mouse_move(self, event: PointerEvent) -> None:
        if not self._attached:
            return
        shapes = self.frame(event)
        if shapes is None:
            return
        self._previewed = True
        self.store.preview(shapes)

    def mouse_release(self, event: PointerEvent) -> None:
        if not self._attached:
            return
        try:
            self.finish(event)
        finally:
            self.dispose()

    def finish(self, event: PointerEvent) -> None:
        shapes = self.frame(event)
        if shapes is not None:
            self.store.commit(shapes)

    def cancel(self) -> None:
        """Detach without committing and put the captured shapes back on screen."""
        if not self._attached:
            return
        self.dispose()
        if self._previewed:
            self.store.preview(self._shapes)

    def dispose(self) -> None:
        if not self._attached:
            return
        self.source.unsubscribe(POINTER_MOVE, self.purpose, self.mouse_move)
        self.source.unsubscribe(POINTER_UP, self.purpose, self.mouse_release)
        self._attached = False
        self.on_dispose()
        log.debug("%s: detached", self.purpose)

    def on_dispose(self) -> None:
        pass

    def __enter__(self) -> "Gesture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class DragGesture(Gesture):
    """Move the grabbed shape (or the whole selection it belongs to)."""

    purpose = "drag"

    def __init__(self, store, source, event, shape, shapes=None, config=DEFAULT_CONFIG, guides=None):
        super().__init__(store, source, event, shapes, config)
        self.shape = self._lookup(shape)
        self.guides = guides if guides is not None else SmartGuides(config.snap_threshold)
        if self.shape.selected:
            moving = [s for s in self._shapes if s.selected]
        else:
            moving = [self.shape]
        self.start_positions: Dict[str, Point] = {s.id: (float(s.x), float(s.y)) for s in moving}
        self._dragging = False

    def frame(self, event):
        dx, dy = self.delta(event)
        if not self._dragging:
            if math.hypot(dx, dy) <= self.config.click_threshold:
                return None
            self._dragging = True
        grid = self.config.grid_size if event.modifiers.shift else None
        return drag_shapes(
            self._shapes,
            self.start_positions,
            self.shape,
            dx,
            dy,
            guides=self.guides,
            grid_size=grid,
        )

    def finish(self, event):
        shapes = self.frame(event)
        if shapes is None:
            self.store.dispatch(Select(self.shape.id, additive=event.modifiers.shift))
            return
        self.store.commit(shapes)

    def on_dispose(self):
        self.guides.clear()


class ResizeGesture(Gesture):
    purpose = "resize"

    def __init__(self, store, source, event, shape, handle: str, shapes=None, config=DEFAULT_CONFIG):
        super().__init__(store, source, event, shapes, config)
        self.shape = self._lookup(shape)
        local_handle(handle, self.shape.rotation)
        self.handle = handle

    def frame(self, event):
        dx, dy = self.delta(event)
        resized = resize_shape(
            self.shape,
            self.handle,
            dx,
            dy,
            keep_aspect=event.modifiers.shift,
            min_size=self.config.min_size,
        )
        return _replace_shape(self._shapes, resized)


class RotateGesture(Gesture):
    purpose = "rotate"

    def __init__(self, store, source, event, shape, shapes=None, config=DEFAULT_CONFIG):
        super().__init__(store, source, event, shapes, config)
        self.shape = self._lookup(shape)

    def frame(self, event):
        step = self.config.angle_step if event.modifiers.shift else None
        return _replace_shape(self._shapes, rotate_shape(self.shape, event.point, step=step))


class VertexDragGesture(Gesture):
    """Drag one polygon vertex, snapping it to the vertices of other polygons."""

    def __init__(self, store, source, event, shape, index: int, shapes=None, config=DEFAULT_CONFIG, snapper=None):
        super().__init__(store, source, event, shapes, config)
        self.shape = self._lookup(shape)
        vertices = getattr(self.shape, "vertices", None)
        if not vertices:
            raise ValueError(f"Shape '{self.shape.id}' has no vertices to drag")
        if not 0 <= index < len(vertices):
            raise ValueError(f"Vertex index {index} out of range for {len(vertices)} vertices")
        self.index = index
        self.snapper = snapper if snapper is not None else VertexSnapper(config.snap_threshold)
        self.purpose = f"vertex:{self.shape.id}"

    def frame(self, event):
        ox, oy = float(self.shape.x), float(self.shape.y)
        candidate = (float(event.x) - ox, float(event.y) - oy)
        statics = [s for s in self._shapes if s.id != self.shape.id]
        local = self.snapper.query(candidate, (ox, oy), statics)
        return _replace_shape(self._shapes, move_vertex(self.shape, self.index, local))

    def on_dispose(self):
        self.snapper.clear()
