"""Smart-guide snapping for shape drags and vertex drags.

Two flavours share the same nearest-wins policy:

* :func:`alignment_snap` compares the left/center/right and top/middle/bottom
  reference lines of a moving box against every static box. Each axis keeps
  the single closest candidate under the threshold, so a shape can snap on X
  to one neighbour and on Y to another.
* :func:`vertex_snap` compares one canvas-space point against the vertices of
  other polygons, matching equal X or equal Y only.

:class:`SmartGuides` and :class:`VertexSnapper` wrap the pure queries and keep
the guide lines of the latest query around for the renderer until
``clear()`` is called at the end of a gesture.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

from .geometry import Box, Point, shape_box

Orientation = Literal["vertical", "horizontal"]


@dataclass(frozen=True)
class Guide:
    """A transient alignment line: vertical at ``x=position`` or horizontal at ``y=position``."""

    orientation: Orientation
    position: float
    start: float
    end: float

    @classmethod
    def vertical(cls, x: float, y_start: float, y_end: float) -> "Guide":
        return cls("vertical", float(x), float(min(y_start, y_end)), float(max(y_start, y_end)))

    @classmethod
    def horizontal(cls, y: float, x_start: float, x_end: float) -> "Guide":
        return cls("horizontal", float(y), float(min(x_start, x_end)), float(max(x_start, x_end)))


@dataclass(frozen=True)
class SnapResult:
    """Snapped coordinates (``None`` where an axis found no candidate) plus guides."""

    x: Optional[float] = None
    y: Optional[float] = None
    guides: Tuple[Guide, ...] = ()


class _AxisPick:
    """Track the closest candidate on one axis and what it lines up with."""

    def __init__(self, threshold: float) -> None:
        self.threshold = float(threshold)
        self.value: Optional[float] = None
        self.target: Optional[float] = None
        self.anchor = None
        self._best = float("inf")

    def consider(self, moving: float, target: float, value: float, anchor) -> None:
        diff = abs(moving - target)
        if diff < self.threshold and diff < self._best:
            self._best = diff
            self.value = value
            self.target = target
            self.anchor = anchor


def alignment_snap(moving: Box, statics: Iterable[Box], threshold: float = 5.0) -> SnapResult:
    """Snap ``moving`` against ``statics`` and return the top-left it should take.

    Guides are measured on the snapped box, so a guide on one axis already
    accounts for a snap on the other.
    """
    pick_x = _AxisPick(threshold)
    pick_y = _AxisPick(threshold)
    x_refs = (
        (moving.left, 0.0),
        (moving.right, moving.width),
        (moving.h_center, moving.width / 2.0),
    )
    y_refs = (
        (moving.top, 0.0),
        (moving.bottom, moving.height),
        (moving.v_center, moving.height / 2.0),
    )
    for other in statics:
        for ref, offset in x_refs:
            for target in (other.left, other.right, other.h_center):
                pick_x.consider(ref, target, target - offset, other)
        for ref, offset in y_refs:
            for target in (other.top, other.bottom, other.v_center):
                pick_y.consider(ref, target, target - offset, other)

    snapped = Box(
        pick_x.value if pick_x.value is not None else moving.left,
        pick_y.value if pick_y.value is not None else moving.top,
        moving.width,
        moving.height,
    )
    guides: List[Guide] = []
    if pick_x.anchor is not None:
        other = pick_x.anchor
        guides.append(Guide.vertical(pick_x.target, min(snapped.top, other.top), max(snapped.bottom, other.bottom)))
    if pick_y.anchor is not None:
        other = pick_y.anchor
        guides.append(Guide.horizontal(pick_y.target, min(snapped.left, other.left), max(snapped.right, other.right)))
    return SnapResult(pick_x.value, pick_y.value, tuple(guides))


def vertex_snap(point: Point, candidates: Iterable[Point], threshold: float = 5.0) -> SnapResult:
    """Snap a canvas-space ``point`` to the X and/or Y of the nearest candidate vertex."""
    px, py = float(point[0]), float(point[1])
    pick_x = _AxisPick(threshold)
    pick_y = _AxisPick(threshold)
    for cx, cy in candidates:
        cx, cy = float(cx), float(cy)
        pick_x.consider(px, cx, cx, (cx, cy))
        pick_y.consider(py, cy, cy, (cx, cy))
    sx = pick_x.value if pick_x.value is not None else px
    sy = pick_y.value if pick_y.value is not None else py
    guides: List[Guide] = []
    if pick_x.anchor is not None:
        guides.append(Guide.vertical(sx, sy, pick_x.anchor[1]))
    if pick_y.anchor is not None:
        guides.append(Guide.horizontal(sy, sx, pick_y.anchor[0]))
    return SnapResult(pick_x.value, pick_y.value, tuple(guides))


def polygon_vertices_in_canvas(shapes: Iterable[object]) -> List[Point]:
    """Collect the vertices of every polygon in ``shapes``, translated to canvas space."""
    points: List[Point] = []
    for shape in shapes:
        vertices = getattr(shape, "vertices", None)
        if not vertices:
            continue
        ox, oy = float(shape.x), float(shape.y)
        points.extend((ox + float(vx), oy + float(vy)) for vx, vy in vertices)
    return points


class SmartGuides:
    """Edge/center snapping used while dragging whole shapes."""

    def __init__(self, threshold: float = 5.0) -> None:
        self.threshold = float(threshold)
        self._guides: Tuple[Guide, ...] = ()

    @property
    def guides(self) -> Tuple[Guide, ...]:
        return self._guides

    def query(self, moving_shape, static_shapes: Sequence[object]) -> SnapResult:
        statics = [shape_box(s) for s in static_shapes if s.id != moving_shape.id]
        result = alignment_snap(shape_box(moving_shape), statics, self.threshold)
        self._guides = result.guides
        return result

    def clear(self) -> None:
        self._guides = ()


class VertexSnapper:
    """Vertex-to-vertex snapping used while dragging a polygon vertex."""

    def __init__(self, threshold: float = 5.0) -> None:
        self.threshold = float(threshold)
        self._guides: Tuple[Guide, ...] = ()

    @property
    def guides(self) -> Tuple[Guide, ...]:
        return self._guides

    def query(self, vertex: Point, origin: Point, static_shapes: Sequence[object]) -> Point:
        """Return ``vertex`` (relative to ``origin``) with any snapped axis applied."""
        ox, oy = float(origin[0]), float(origin[1])
        canvas_pt = (ox + float(vertex[0]), oy + float(vertex[1]))
        result = vertex_snap(canvas_pt, polygon_vertices_in_canvas(static_shapes), self.threshold)
        self._guides = result.guides
        x = result.x - ox if result.x is not None else float(vertex[0])
        y = result.y - oy if result.y is not None else float(vertex[1])
        return (x, y)

    def clear(self) -> None:
        self._guides = ()
