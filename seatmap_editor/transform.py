"""Drag, resize and rotate math.

The functions here are the pure half of the transform engine: given the
shapes captured at pointer-down and the pointer offset of the current frame,
they return the shapes for that frame. The gesture objects in
:mod:`seatmap_editor.tools` call them on every pointer move and decide what
gets previewed and what gets committed.
"""
from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .geometry import (
    Point,
    pointer_angle,
    scale_vertices,
    shape_center,
    snap_angle,
    snap_to_grid,
    to_local_delta,
)
from .snapping import SmartGuides

HANDLES: Tuple[str, ...] = (
    "top",
    "right",
    "bottom",
    "left",
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
)

# Compass order by screen angle (y grows downwards, 0 degrees = +x).
_COMPASS: Tuple[str, ...] = (
    "right",
    "bottom-right",
    "bottom",
    "bottom-left",
    "left",
    "top-left",
    "top",
    "top-right",
)
_HANDLE_ANGLE: Dict[str, float] = {name: index * 45.0 for index, name in enumerate(_COMPASS)}
_EDGES = _COMPASS[0::2]
_CORNERS = _COMPASS[1::2]


def local_handle(handle: str, rotation: float) -> str:
    """Map an on-screen handle of a rotated shape to the handle of its unrotated box.

    Edge handles stay edges and corner handles stay corners: the de-rotated
    direction snaps to the nearest of the four of its own kind.
    """
    if handle not in _HANDLE_ANGLE:
        raise ValueError(f"Unknown resize handle '{handle}'")
    angle = _HANDLE_ANGLE[handle] - float(rotation)
    if handle in _EDGES:
        return _EDGES[int(math.floor(angle / 90.0 + 0.5)) % 4]
    return _CORNERS[int(math.floor((angle - 45.0) / 90.0 + 0.5)) % 4]


def resize_shape(
    start,
    handle: str,
    dx: float,
    dy: float,
    *,
    keep_aspect: bool = False,
    min_size: float = 20.0,
):
    """Resize ``start`` by a canvas-space pointer offset ``(dx, dy)`` dragged on ``handle``.

    The offset is de-rotated into the shape's own frame first, so the box
    always grows along its own axes. Left/top handles move the origin so the
    opposite edge stays put. With ``keep_aspect`` the ratio captured in
    ``start`` is preserved; horizontal handles drive the width, vertical
    handles drive the height. Polygons get their vertices rescaled to the
    new box.
    """
    rotation = float(start.rotation or 0.0)
    side = local_handle(handle, rotation)
    ldx, ldy = to_local_delta(dx, dy, rotation)
    start_w = float(start.width or 0.0)
    start_h = float(start.height or 0.0)

    width, height = start_w, start_h
    if "right" in side:
        width = start_w + ldx
    if "left" in side:
        width = start_w - ldx
    if "bottom" in side:
        height = start_h + ldy
    if "top" in side:
        height = start_h - ldy

    if keep_aspect and start_w > 0 and start_h > 0:
        ratio = start_w / start_h
        if "left" in side or "right" in side:
            height = width / ratio
        else:
            width = height * ratio

    width = max(float(min_size), width)
    height = max(float(min_size), height)

    update = {"width": width, "height": height}
    if "left" in side:
        update["x"] = float(start.x) + (start_w - width)
    if "top" in side:
        update["y"] = float(start.y) + (start_h - height)
    vertices = getattr(start, "vertices", None)
    if vertices and start_w > 0 and start_h > 0:
        update["vertices"] = scale_vertices(vertices, width / start_w, height / start_h)
    return start.model_copy(update=update)


def drag_shapes(
    shapes: Sequence[object],
    start_positions: Mapping[str, Point],
    primary,
    dx: float,
    dy: float,
    *,
    guides: Optional[SmartGuides] = None,
    grid_size: Optional[float] = None,
) -> tuple:
    """Move every shape listed in ``start_positions`` by the same offset.

    ``primary`` is the shape under the pointer; it alone is tested against
    the static shapes for alignment, and its snapped offset is applied to
    the whole moving set. Grid rounding happens last, per shape, and wins
    over alignment.
    """
    px, py = start_positions[primary.id]
    if guides is not None:
        candidate = primary.model_copy(update={"x": px + dx, "y": py + dy})
        statics = [s for s in shapes if s.id not in start_positions]
        snap = guides.query(candidate, statics)
        if snap.x is not None:
            dx = snap.x - px
        if snap.y is not None:
            dy = snap.y - py
        if grid_size:
            guides.clear()

    moved = []
    for shape in shapes:
        start = start_positions.get(shape.id)
        if start is None:
            moved.append(shape)
            continue
        nx, ny = start[0] + dx, start[1] + dy
        if grid_size:
            nx = snap_to_grid(nx, grid_size)
            ny = snap_to_grid(ny, grid_size)
        moved.append(shape.model_copy(update={"x": nx, "y": ny}))
    return tuple(moved)


def rotate_shape(shape, pointer: Point, *, center: Optional[Point] = None, step: Optional[float] = None):
    """Point the shape's top towards ``pointer``; ``step`` snaps the angle."""
    pivot = center if center is not None else shape_center(shape)
    angle = pointer_angle(pivot, pointer)
    if step:
        angle = snap_angle(angle, step)
    return shape.model_copy(update={"rotation": angle})
