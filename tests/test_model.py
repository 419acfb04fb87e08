"""Shape records and serialisation."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from seatmap_editor.model import (
    PolygonShape,
    RectShape,
    TextShape,
    find_shape,
    same_shapes,
    shapes_from_json,
    shapes_to_json,
    to_polygon,
)


def test_polygon_needs_three_vertices() -> None:
    with pytest.raises(ValidationError):
        PolygonShape(vertices=[(0, 0), (1, 1)])


def test_shape_cannot_be_selected_while_editing_vertices() -> None:
    with pytest.raises(ValidationError):
        PolygonShape(vertices=[(0, 0), (1, 0), (0, 1)], selected=True, editing_vertices=True)


def test_vertices_accept_point_dicts() -> None:
    poly = PolygonShape(vertices=[{"x": 0, "y": 0}, {"x": 5, "y": 0}, {"x": 0, "y": 5}])
    assert poly.vertices[1] == (5.0, 0.0)


def test_json_keeps_shape_kinds() -> None:
    shapes = (
        RectShape(id="r", width=10, height=10, label="Stage"),
        PolygonShape(id="p", vertices=[(0, 0), (4, 0), (0, 4)]),
        TextShape(id="t", width=30, height=12, label="Exit"),
    )
    data = shapes_to_json(shapes)
    assert [d["kind"] for d in data] == ["rect", "polygon", "text"]
    loaded = shapes_from_json(data)
    assert [type(s) for s in loaded] == [RectShape, PolygonShape, TextShape]
    assert same_shapes(loaded, shapes)


def test_to_polygon_keeps_identity() -> None:
    rect = RectShape(id="r", x=3, y=4, width=10, height=20, rotation=45, label="Bar")
    poly = to_polygon(rect)
    assert (poly.id, poly.x, poly.y, poly.rotation, poly.label) == ("r", 3.0, 4.0, 45.0, "Bar")
    assert poly.vertices[2] == (10.0, 20.0)


def test_find_shape() -> None:
    shapes = (RectShape(id="a", width=1, height=1),)
    assert find_shape(shapes, "a") is shapes[0]
    assert find_shape(shapes, "b") is None
    assert find_shape(shapes, "") is None


def test_polygon_size_comes_from_vertices() -> None:
    poly = PolygonShape(id="p", vertices=[(0, 0), (100, 0), (100, 50)])
    assert (poly.width, poly.height) == (100.0, 50.0)
    explicit = PolygonShape(id="q", vertices=[(0, 0), (100, 0), (100, 50)], width=40, height=20)
    assert (explicit.width, explicit.height) == (40.0, 20.0)
