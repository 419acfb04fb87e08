"""Polygon vertex editing: mode switches, vertex moves, segment insertion, deletion.

Vertices are stored relative to the shape origin. After any change to the
outline the polygon is re-anchored: the origin moves to the top-left of the
vertices' bounding box and width/height follow the box, so ``(x, y)``,
``(width, height)`` and ``vertices`` always describe the same outline.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .geometry import Point, point_to_segment_distance, translate_points, vertices_bbox
from .model import PolygonShape, RectShape, to_polygon

MIN_VERTICES = 3


def enter_vertex_edit(shape):
    """Switch ``shape`` into vertex-edit mode, converting rectangles to polygons."""
    if isinstance(shape, RectShape):
        shape = to_polygon(shape)
    if not isinstance(shape, PolygonShape):
        return shape
    return shape.model_copy(update={"selected": False, "editing_vertices": True, "editing_text": False})


def exit_vertex_edit(shape):
    if not getattr(shape, "editing_vertices", False):
        return shape
    return shape.model_copy(update={"editing_vertices": False, "selected": True})


def reanchor(shape: PolygonShape, vertices: Sequence[Point]) -> PolygonShape:
    min_x, min_y, max_x, max_y = vertices_bbox(vertices)
    return shape.model_copy(
        update={
            "x": float(shape.x) + min_x,
            "y": float(shape.y) + min_y,
            "vertices": translate_points(vertices, -min_x, -min_y),
            "width": max_x - min_x,
            "height": max_y - min_y,
        }
    )


def move_vertex(shape: PolygonShape, index: int, point: Point) -> PolygonShape:
    """Place vertex ``index`` at ``point`` (relative to the current origin) and re-anchor."""
    vertices: List[Point] = list(shape.vertices)
    if not 0 <= index < len(vertices):
        raise ValueError(f"Vertex index {index} out of range for {len(vertices)} vertices")
    vertices[index] = (float(point[0]), float(point[1]))
    return reanchor(shape, vertices)


def segment_at(shape: PolygonShape, point: Point, tolerance: float = 6.0) -> Optional[int]:
    """Index ``i`` of the outline segment ``i -> i+1`` nearest to canvas ``point``, if within tolerance."""
    local = (float(point[0]) - float(shape.x), float(point[1]) - float(shape.y))
    vertices = list(shape.vertices)
    best_i: Optional[int] = None
    best_d = float("inf")
    for i, a in enumerate(vertices):
        b = vertices[(i + 1) % len(vertices)]
        d = point_to_segment_distance(local, a, b)
        if d < best_d:
            best_d = d
            best_i = i
    if best_i is None or best_d > tolerance:
        return None
    return best_i


def insert_vertex(shape: PolygonShape, index: int, point: Point) -> PolygonShape:
    """Insert canvas ``point`` as a new vertex right after vertex ``index``."""
    vertices: List[Point] = list(shape.vertices)
    local = (float(point[0]) - float(shape.x), float(point[1]) - float(shape.y))
    vertices.insert(index + 1, local)
    return reanchor(shape, vertices)


def delete_vertex(shape, index: int):
    """Remove vertex ``index``; polygons never drop below three vertices."""
    vertices = getattr(shape, "vertices", None)
    if not vertices or len(vertices) <= MIN_VERTICES:
        return shape
    if not 0 <= index < len(vertices):
        return shape
    remaining = [v for i, v in enumerate(vertices) if i != index]
    return reanchor(shape, remaining)
