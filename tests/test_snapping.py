"""Smart-guide and vertex snapping."""
from __future__ import annotations

import pytest

from seatmap_editor.geometry import Box
from seatmap_editor.model import PolygonShape, RectShape
from seatmap_editor.snapping import SmartGuides, VertexSnapper, alignment_snap, vertex_snap


def test_nearest_candidate_wins() -> None:
    moving = Box(100.0, 0.0, 50.0, 50.0)
    statics = [Box(104.0, 200.0, 200.0, 50.0), Box(98.0, 400.0, 300.0, 50.0)]
    result = alignment_snap(moving, statics, threshold=5.0)
    assert result.x == pytest.approx(98.0)
    assert result.y is None
    assert len(result.guides) == 1
    guide = result.guides[0]
    assert guide.orientation == "vertical"
    assert guide.position == pytest.approx(98.0)
    assert (guide.start, guide.end) == (0.0, 450.0)


def test_axes_snap_to_different_neighbours() -> None:
    moving = Box(100.0, 0.0, 50.0, 50.0)
    statics = [Box(300.0, 2.0, 50.0, 50.0), Box(153.0, 300.0, 10.0, 10.0)]
    result = alignment_snap(moving, statics)
    # right edge (150) meets the left edge at 153
    assert result.x == pytest.approx(103.0)
    assert result.y == pytest.approx(2.0)
    assert {g.orientation for g in result.guides} == {"vertical", "horizontal"}


def test_threshold_is_exclusive() -> None:
    result = alignment_snap(Box(100.0, 0.0, 50.0, 50.0), [Box(105.0, 300.0, 10.0, 10.0)])
    assert result.x is None
    assert result.guides == ()


def test_vertex_snap_matches_each_axis() -> None:
    result = vertex_snap((10.0, 10.0), [(12.0, 50.0), (100.0, 9.0)])
    assert result.x == pytest.approx(12.0)
    assert result.y == pytest.approx(9.0)
    assert len(result.guides) == 2


def test_vertex_snapper_returns_local_point() -> None:
    other = PolygonShape(id="other", vertices=[(112, 0), (200, 0), (200, 108)])
    snapper = VertexSnapper(5.0)
    local = snapper.query((10.0, 10.0), (100.0, 100.0), [other])
    assert local == pytest.approx((12.0, 8.0))
    assert len(snapper.guides) == 2
    snapper.clear()
    assert snapper.guides == ()


def test_smart_guides_ignore_the_moving_shape() -> None:
    shape = RectShape(id="a", x=100, y=0, width=50, height=50)
    guides = SmartGuides(5.0)
    result = guides.query(shape.model_copy(update={"x": 102.0}), [shape])
    assert result.x is None and result.y is None
    assert guides.guides == ()


def test_guides_span_the_snapped_box() -> None:
    moving = Box(100.0, 0.0, 50.0, 50.0)
    statics = [Box(98.0, 400.0, 300.0, 50.0), Box(300.0, 3.0, 10.0, 10.0)]
    result = alignment_snap(moving, statics)
    assert (result.x, result.y) == (98.0, 3.0)
    vertical, horizontal = result.guides
    assert (vertical.start, vertical.end) == (3.0, 450.0)
    assert (horizontal.start, horizontal.end) == (98.0, 310.0)
