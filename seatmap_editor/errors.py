"""Exceptions raised by the editing engine."""
from __future__ import annotations


class NoFloorError(RuntimeError):
    """The floor list would become empty; the host must always keep one floor."""


class UnknownShapeError(KeyError):
    """A shape id did not resolve in the current shape list."""

    def __init__(self, shape_id: str) -> None:
        super().__init__(shape_id)
        self.shape_id = shape_id

    def __str__(self) -> str:
        return f"Unknown shape '{self.shape_id}'"
