"""Gestures and keyboard handling through the Editor facade."""
from __future__ import annotations

import pytest

from seatmap_editor.editor import Editor
from seatmap_editor.errors import UnknownShapeError
from seatmap_editor.events import KeyEvent, Modifiers, PointerEvent
from seatmap_editor.model import CanvasSettings, PolygonShape, RectShape

SHIFT = Modifiers(shift=True)
CTRL = Modifiers(ctrl=True)
META = Modifiers(meta=True)


def _rect(shape_id: str, x: float = 0.0, y: float = 0.0, w: float = 50.0, h: float = 50.0, **kw) -> RectShape:
    return RectShape(id=shape_id, x=x, y=y, width=w, height=h, **kw)


def _square(shape_id: str = "sq", **kw) -> PolygonShape:
    return PolygonShape(
        id=shape_id,
        x=10.0,
        y=10.0,
        vertices=[(0, 0), (100, 0), (100, 100), (0, 100)],
        width=100.0,
        height=100.0,
        **kw,
    )


def _editor(*shapes) -> Editor:
    editor = Editor()
    editor.store.commit(shapes)
    return editor


def _at(x: float, y: float, modifiers: Modifiers | None = None) -> PointerEvent:
    return PointerEvent(x, y, modifiers or Modifiers())


def test_short_drag_is_a_click() -> None:
    editor = _editor(_rect("a"), _rect("b", 300))
    editor.begin_drag(_at(5, 5), "a")
    editor.pointer_move(_at(6, 6))
    editor.pointer_up(_at(6, 6))
    assert [s.id for s in editor.shapes if s.selected] == ["a"]
    assert editor.shapes[0].x == 0.0
    assert editor.store.state.cursor == 2
    assert editor.events.listener_count() == 0


def test_drag_previews_then_commits_once() -> None:
    editor = _editor(_rect("a"), _rect("far", 500, 500, 10, 10))
    seen = []
    editor.subscribe(seen.append)
    cursor = editor.store.state.cursor
    editor.begin_drag(_at(10, 10), "a")
    editor.pointer_move(_at(30, 10))
    editor.pointer_move(_at(60, 10))
    assert editor.store.state.cursor == cursor
    editor.pointer_up(_at(60, 10))
    assert editor.shapes[0].x == 50.0
    assert editor.store.state.cursor == cursor + 1
    assert len(seen) == 3
    assert editor.events.listener_count() == 0


def test_drag_moves_whole_selection() -> None:
    editor = _editor(_rect("a", selected=True), _rect("b", 100, 100, selected=True), _rect("far", 700, 600))
    editor.begin_drag(_at(0, 0), "b")
    editor.pointer_up(_at(20, 30))
    a, b, far = editor.shapes
    assert (a.x, a.y) == (20.0, 30.0)
    assert (b.x, b.y) == (120.0, 130.0)
    assert (far.x, far.y) == (700.0, 600.0)


def test_shift_drag_rounds_to_grid() -> None:
    editor = _editor(_rect("a"), _rect("far", 500, 500, 10, 10))
    editor.begin_drag(_at(0, 0), "a")
    editor.pointer_up(_at(13, 27, SHIFT))
    assert (editor.shapes[0].x, editor.shapes[0].y) == (10.0, 30.0)


def test_guides_show_during_drag_only() -> None:
    editor = _editor(_rect("a"), _rect("b", 103, 200))
    editor.begin_drag(_at(0, 0), "a")
    editor.pointer_move(_at(52, 0))
    assert len(editor.guides) == 1
    assert editor.shapes[0].x == pytest.approx(53.0)
    editor.pointer_up(_at(52, 0))
    assert editor.guides == ()
    assert editor.shapes[0].x == pytest.approx(53.0)


def test_rotated_resize_through_editor() -> None:
    editor = _editor(_rect("r", w=100, h=50, rotation=90.0))
    editor.begin_resize(_at(0, 0), "r", "right")
    editor.pointer_up(_at(30, 0))
    shape = editor.shapes[0]
    assert shape.width == pytest.approx(100.0)
    assert shape.height == pytest.approx(80.0)


def test_shift_rotate_snaps_angle() -> None:
    editor = _editor(_rect("r", w=100, h=100))
    editor.begin_rotate(_at(50, -10), "r")
    editor.pointer_up(_at(150, 60, SHIFT))
    assert editor.shapes[0].rotation == pytest.approx(90.0)


def test_new_gesture_replaces_stale_listeners() -> None:
    editor = _editor(_rect("a"))
    editor.begin_drag(_at(0, 0), "a")
    editor.begin_drag(_at(0, 0), "a")
    assert editor.events.listener_count() == 2


def test_gesture_context_manager_detaches() -> None:
    editor = _editor(_rect("a"))
    with editor.begin_drag(_at(0, 0), "a") as gesture:
        assert gesture.active
    assert not gesture.active
    assert editor.events.listener_count() == 0
    gesture.dispose()


def test_unknown_shape_raises() -> None:
    editor = _editor(_rect("a"))
    with pytest.raises(UnknownShapeError):
        editor.begin_rotate(_at(0, 0), "ghost")


def test_vertex_drag_commits_reanchored_polygon() -> None:
    editor = _editor(_square(editing_vertices=True))
    editor.begin_vertex_drag(_at(10, 10), "sq", 0)
    editor.pointer_move(_at(5, 5))
    editor.pointer_up(_at(0, 0))
    shape = editor.shapes[0]
    assert (shape.x, shape.y) == (0.0, 0.0)
    assert shape.vertices[0] == (0.0, 0.0)
    assert (shape.width, shape.height) == (110.0, 110.0)
    assert editor.events.listener_count() == 0


def test_escape_drops_vertex_drag_and_exits() -> None:
    editor = _editor(_square(editing_vertices=True))
    original = editor.shapes[0].vertices
    editor.begin_vertex_drag(_at(10, 10), "sq", 0)
    editor.pointer_move(_at(0, 0))
    assert editor.key_down(KeyEvent("Escape"))
    shape = editor.shapes[0]
    assert shape.selected and not shape.editing_vertices
    assert shape.vertices == original
    assert editor.events.listener_count() == 0


def test_delete_key_removes_active_vertex() -> None:
    editor = _editor(_square(editing_vertices=True))
    editor.begin_vertex_drag(_at(110, 10), "sq", 1)
    editor.pointer_up(_at(110, 10))
    assert editor.key_down(KeyEvent("Delete"))
    assert len(editor.shapes[0].vertices) == 3


def test_delete_key_removes_selection() -> None:
    editor = _editor(_rect("a", selected=True), _rect("b", 300))
    assert editor.key_down(KeyEvent("Backspace"))
    assert [s.id for s in editor.shapes] == ["b"]


def test_delete_ignored_while_typing() -> None:
    editor = _editor(_rect("a", selected=True))
    assert not editor.key_down(KeyEvent("Delete", text_field_focused=True))
    assert len(editor.shapes) == 1


def test_undo_redo_shortcuts() -> None:
    editor = _editor(_rect("a"))
    editor.key_down(KeyEvent("z", CTRL))
    assert editor.shapes == ()
    editor.key_down(KeyEvent("Y", META))
    assert [s.id for s in editor.shapes] == ["a"]


def test_copy_paste_shortcuts() -> None:
    editor = _editor(_rect("a", 10, 10, selected=True))
    editor.key_down(KeyEvent("c", CTRL))
    editor.key_down(KeyEvent("v", CTRL))
    assert len(editor.shapes) == 2
    pasted = editor.shapes[1]
    assert pasted.id != "a"
    assert (pasted.x, pasted.y) == (30.0, 30.0)


def test_double_click_toggles_vertex_edit() -> None:
    editor = _editor(_rect("r", selected=True))
    editor.double_click("r")
    assert isinstance(editor.shapes[0], PolygonShape)
    assert editor.shapes[0].editing_vertices
    editor.double_click("r")
    assert editor.shapes[0].selected and not editor.shapes[0].editing_vertices


def test_click_segment_inserts_vertex() -> None:
    editor = _editor(_square(editing_vertices=True))
    assert editor.click_segment("sq", (60.0, 12.0))
    assert len(editor.shapes[0].vertices) == 5
    assert not editor.click_segment("sq", (60.0, 60.0))


def test_zoom_steps_and_floor() -> None:
    editor = Editor()
    assert editor.zoom_in() == pytest.approx(1.1)
    assert editor.zoom_reset() == 1.0
    for _ in range(20):
        editor.zoom_out()
    assert editor.zoom == pytest.approx(0.1)


def test_add_rect_and_floors() -> None:
    editor = Editor()
    floor = editor.add_floor("Balcony")
    rect = editor.add_rect()
    assert rect.floor_id == "default"
    assert [f.name for f in editor.floors][-1] == "Balcony"
    editor.remove_floor(floor.id)
    assert len(editor.floors) == 1


def test_canvas_settings_and_new_map() -> None:
    editor = _editor(_rect("a", selected=True))
    editor.align("right")
    assert editor.shapes[0].x == pytest.approx(950.0)
    editor.set_canvas_settings(CanvasSettings(background_color="#000000", zoom=2.0))
    assert editor.zoom == 2.0
    editor.new_map()
    assert editor.shapes == ()
    assert editor.can_undo


def test_resize_previews_then_commits_once() -> None:
    editor = _editor(_rect("r", w=100, h=50))
    cursor = editor.store.state.cursor
    editor.begin_resize(_at(100, 25), "r", "right")
    editor.pointer_move(_at(110, 25))
    editor.pointer_move(_at(120, 25))
    assert editor.store.state.cursor == cursor
    assert editor.shapes[0].width == pytest.approx(120.0)
    editor.pointer_up(_at(130, 25))
    assert editor.store.state.cursor == cursor + 1
    assert editor.shapes[0].width == pytest.approx(130.0)
    assert editor.events.listener_count() == 0


def test_rotate_previews_then_commits_once() -> None:
    editor = _editor(_rect("r", w=100, h=100))
    cursor = editor.store.state.cursor
    editor.begin_rotate(_at(50, -10), "r")
    editor.pointer_move(_at(100, 0))
    editor.pointer_move(_at(150, 50))
    assert editor.store.state.cursor == cursor
    editor.pointer_up(_at(50, 150))
    assert editor.store.state.cursor == cursor + 1
    assert editor.shapes[0].rotation == pytest.approx(180.0)


def test_vertex_drag_snaps_to_another_polygon() -> None:
    other = PolygonShape(id="o", x=200, y=0, vertices=[(0, 0), (50, 0), (0, 50)])
    editor = _editor(_square(editing_vertices=True), other)
    editor.begin_vertex_drag(_at(110, 10), "sq", 1)
    editor.pointer_move(_at(198, 48))
    assert len(editor.guides) == 2
    editor.pointer_up(_at(198, 48))
    square = editor.shapes[0]
    assert square.vertices[1] == pytest.approx((190.0, 40.0))
    assert (square.x + square.vertices[1][0], square.y + square.vertices[1][1]) == pytest.approx((200.0, 50.0))
    assert editor.shapes[1] == other
    assert editor.guides == ()
