"""Translate PySide6 input events into editor events.

A Qt canvas widget forwards its ``mousePressEvent``/``mouseMoveEvent``/
``mouseReleaseEvent``/``keyPressEvent`` through these helpers, so the
engine itself never imports Qt.
"""
from __future__ import annotations

from PySide6.QtCore import Qt

from .events import KeyEvent, Modifiers, PointerEvent

_NAMED_KEYS = {
    int(Qt.Key.Key_Delete): "Delete",
    int(Qt.Key.Key_Backspace): "Backspace",
    int(Qt.Key.Key_Escape): "Escape",
    int(Qt.Key.Key_Return): "Enter",
    int(Qt.Key.Key_Enter): "Enter",
    int(Qt.Key.Key_Shift): "Shift",
    int(Qt.Key.Key_Control): "Control",
    int(Qt.Key.Key_Meta): "Meta",
    int(Qt.Key.Key_Alt): "Alt",
}


def key_name(key) -> str:
    code = int(key)
    if code in _NAMED_KEYS:
        return _NAMED_KEYS[code]
    if int(Qt.Key.Key_A) <= code <= int(Qt.Key.Key_Z):
        return chr(code).lower()
    if int(Qt.Key.Key_0) <= code <= int(Qt.Key.Key_9):
        return chr(code)
    return f"Key_{code}"


def modifiers_from_qt(modifiers) -> Modifiers:
    return Modifiers(
        shift=bool(modifiers & Qt.ShiftModifier),
        ctrl=bool(modifiers & Qt.ControlModifier),
        meta=bool(modifiers & Qt.MetaModifier),
        alt=bool(modifiers & Qt.AltModifier),
    )


def key_event_from_qt(event, text_field_focused: bool = False) -> KeyEvent:
    return KeyEvent(key_name(event.key()), modifiers_from_qt(event.modifiers()), text_field_focused)


def pointer_event_from_qt(event, zoom: float = 1.0) -> PointerEvent:
    """Canvas-space pointer event for a Qt mouse event on a view scaled by ``zoom``."""
    pos = event.position()
    scale = float(zoom) if zoom else 1.0
    return PointerEvent(pos.x() / scale, pos.y() / scale, modifiers_from_qt(event.modifiers()))
