"""Geometry helpers shared by the transform, snap and vertex engines.

Everything here is pure: functions take plain tuples or shape records and
return new values. numpy handles the small matrix work (de-rotating pointer
deltas, bounding boxes, vertex scaling, segment distances).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass(frozen=True)
class Box:
    """Axis-aligned box of a shape before rotation is applied."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def h_center(self) -> float:
        return self.left + self.width / 2.0

    @property
    def v_center(self) -> float:
        return self.top + self.height / 2.0


def shape_box(shape) -> Box:
    return Box(float(shape.x), float(shape.y), float(shape.width or 0.0), float(shape.height or 0.0))


def shape_center(shape) -> Point:
    """Rotation pivot: the center of the unrotated box (rotation keeps it fixed)."""
    box = shape_box(shape)
    return (box.h_center, box.v_center)


def rotation_matrix(degrees: float) -> np.ndarray:
    """Clockwise rotation on a y-down canvas (same sense as the shape rotation)."""
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([[c, -s], [s, c]], dtype=float)


def rotate_vector(vector: Sequence[float], degrees: float) -> Point:
    out = rotation_matrix(degrees) @ np.asarray(vector, dtype=float)
    return (float(out[0]), float(out[1]))


def to_local_delta(dx: float, dy: float, rotation: float) -> Point:
    """Express a canvas-space pointer delta in the shape's unrotated frame."""
    return rotate_vector((dx, dy), -rotation)


def vertices_bbox(vertices: Iterable[Sequence[float]]) -> Tuple[float, float, float, float]:
    """Return ``(min_x, min_y, max_x, max_y)`` of a vertex list."""
    pts = np.asarray(list(vertices), dtype=float)
    if pts.size == 0:
        return (0.0, 0.0, 0.0, 0.0)
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def scale_vertices(vertices: Iterable[Sequence[float]], sx: float, sy: float) -> list[Point]:
    pts = np.asarray(list(vertices), dtype=float)
    if pts.size == 0:
        return []
    scaled = pts * np.array([sx, sy], dtype=float)
    return [(float(x), float(y)) for x, y in scaled]


def translate_points(points: Iterable[Sequence[float]], dx: float, dy: float) -> list[Point]:
    pts = np.asarray(list(points), dtype=float)
    if pts.size == 0:
        return []
    moved = pts + np.array([dx, dy], dtype=float)
    return [(float(x), float(y)) for x, y in moved]


def point_to_segment_distance(point: Sequence[float], a: Sequence[float], b: Sequence[float]) -> float:
    p = np.asarray(point, dtype=float)
    pa = np.asarray(a, dtype=float)
    ab = np.asarray(b, dtype=float) - pa
    denom = float(np.dot(ab, ab))
    if denom <= 1e-12:
        return float(np.hypot(*(p - pa)))
    t = float(np.clip(np.dot(p - pa, ab) / denom, 0.0, 1.0))
    proj = pa + ab * t
    return float(np.hypot(*(p - proj)))


def pointer_angle(center: Sequence[float], pointer: Sequence[float]) -> float:
    """Angle of ``pointer`` around ``center`` with straight up as 0 degrees, in [0, 360)."""
    angle = math.degrees(math.atan2(float(pointer[1]) - float(center[1]), float(pointer[0]) - float(center[0])))
    return (angle + 90.0) % 360.0


def snap_to_grid(value: float, size: float) -> float:
    if size <= 0.0:
        return value
    return math.floor(value / size + 0.5) * size


def snap_angle(angle: float, step: float) -> float:
    if step <= 0.0:
        return angle
    return (math.floor(angle / step + 0.5) * step) % 360.0

