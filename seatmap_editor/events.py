"""Toolkit-neutral input events and the root event source gestures listen on."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"


@dataclass(frozen=True)
class Modifiers:
    shift: bool = False
    ctrl: bool = False
    meta: bool = False
    alt: bool = False

    @property
    def command(self) -> bool:
        """Ctrl on Windows/Linux, Cmd on macOS."""
        return self.ctrl or self.meta


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    modifiers: Modifiers = field(default_factory=Modifiers)

    @property
    def point(self) -> Tuple[float, float]:
        return (float(self.x), float(self.y))


@dataclass(frozen=True)
class KeyEvent:
    key: str
    modifiers: Modifiers = field(default_factory=Modifiers)
    text_field_focused: bool = False


Listener = Callable[[object], None]


class EventSource:
    """Root dispatcher for pointer and key events.

    Listeners are registered under a ``purpose`` (``"drag"``, ``"resize"``,
    ``"vertex:<shape id>"``...) so one gesture can find and drop whatever
    another gesture of the same purpose left attached.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Tuple[str, Listener]]] = {}

    def subscribe(self, event_type: str, purpose: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append((purpose, listener))

    def unsubscribe(self, event_type: str, purpose: str, listener: Listener) -> None:
        entries = self._listeners.get(event_type, [])
        self._listeners[event_type] = [
            (p, fn) for p, fn in entries if not (p == purpose and fn == listener)
        ]

    def remove_purpose(self, purpose: str) -> int:
        """Detach every listener registered under ``purpose``; return how many went."""
        removed = 0
        for event_type, entries in self._listeners.items():
            kept = [(p, fn) for p, fn in entries if p != purpose]
            removed += len(entries) - len(kept)
            self._listeners[event_type] = kept
        return removed

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(entries) for entries in self._listeners.values())

    def dispatch(self, event_type: str, event) -> None:
        # Listeners may detach themselves while running.
        for _purpose, listener in list(self._listeners.get(event_type, [])):
            listener(event)
