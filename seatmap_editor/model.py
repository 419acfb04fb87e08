"""Pydantic records for shapes, floors and canvas settings.

These are the plain, serialisable values the editor passes around. All
models are frozen: engines never edit a shape in place, they build a new one
with ``model_copy(update=...)`` and hand the new list to the store.
"""
from __future__ import annotations

from typing import Annotated, Any, Iterable, List, Literal, Optional, Sequence, Tuple, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from .geometry import vertices_bbox

Point = Tuple[float, float]
AlignLiteral = Literal["left", "center", "right"]


def new_shape_id() -> str:
    return str(uuid4())


class Seat(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_shape_id, description="Stable seat identifier.")
    label: str = Field("", description="Seat label shown by the renderer.")
    position: Optional[Point] = Field(None, description="Optional position relative to the owning shape.")


class TextStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    align: AlignLiteral = Field("center", description="Horizontal alignment of the shape label.")
    bold: bool = Field(False, description="Render the label in bold.")
    color: str = Field("#333333", description="Label colour as a CSS hex string.")


class Floor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_shape_id, description="Floor identifier referenced by shapes.")
    name: str = Field(..., description="Human readable floor name.")
    color: str = Field("#87CEEB", description="Floor colour as a CSS hex string.")


class CanvasSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    background_color: str = Field("#ffffff", description="Canvas background colour.")
    zoom: float = Field(1.0, gt=0.0, description="View zoom factor, 1.0 = 100%.")


class _ShapeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_shape_id, description="Opaque id, stable for the shape's lifetime.")
    floor_id: Optional[str] = Field(None, description="Floor the shape belongs to.")
    x: float = Field(0.0, description="Left of the unrotated bounding box, canvas units.")
    y: float = Field(0.0, description="Top of the unrotated bounding box, canvas units.")
    rotation: float = Field(0.0, description="Clockwise rotation about the box center, degrees.")
    flip_x: bool = False
    flip_y: bool = False
    label: str = ""
    text_style: TextStyle = Field(default_factory=TextStyle)
    seats: List[Seat] = Field(default_factory=list)
    selected: bool = False
    editing_vertices: bool = False
    editing_text: bool = False

    @model_validator(mode="after")
    def _check_modes(self):
        if self.selected and self.editing_vertices:
            raise ValueError("A shape cannot be selected while its vertices are being edited")
        return self


class RectShape(_ShapeBase):
    kind: Literal["rect"] = "rect"
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)


class TextShape(_ShapeBase):
    kind: Literal["text"] = "text"
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)


def _coerce_points(value: Iterable[Sequence[float]] | None) -> List[Point]:
    pts: List[Point] = []
    if value is None:
        return pts
    for pair in value:
        if isinstance(pair, dict):
            pair = (pair.get("x", 0.0), pair.get("y", 0.0))
        if len(pair) != 2:
            raise ValueError("Polygon vertices must be 2D points")
        pts.append((float(pair[0]), float(pair[1])))
    return pts


class PolygonShape(_ShapeBase):
    kind: Literal["polygon"] = "polygon"
    vertices: List[Point] = Field(..., min_length=3, description="Outline points relative to (x, y).")
    width: float = Field(0.0, ge=0.0, description="Bounding-box width of the vertices; derived when omitted.")
    height: float = Field(0.0, ge=0.0, description="Bounding-box height of the vertices; derived when omitted.")

    @model_validator(mode="before")
    @classmethod
    def _derive_size(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("vertices") is None:
            return data
        if data.get("width") is not None and data.get("height") is not None:
            return data
        try:
            points = _coerce_points(data["vertices"])
        except (TypeError, ValueError):
            # Left for the field validator to report.
            return data
        min_x, min_y, max_x, max_y = vertices_bbox(points)
        data = dict(data)
        if data.get("width") is None:
            data["width"] = max_x - min_x
        if data.get("height") is None:
            data["height"] = max_y - min_y
        return data

    @field_validator("vertices", mode="before")
    @classmethod
    def _coerce_vertices(cls, value: Iterable[Sequence[float]] | None) -> List[Point]:
        return _coerce_points(value)


Shape = Annotated[Union[RectShape, PolygonShape, TextShape], Field(discriminator="kind")]
ShapeList = Tuple[Union[RectShape, PolygonShape, TextShape], ...]

_shape_list_adapter = TypeAdapter(List[Shape])


def to_polygon(rect: RectShape) -> PolygonShape:
    """Convert a rectangle into an equivalent four-vertex polygon."""
    w, h = float(rect.width), float(rect.height)
    data = rect.model_dump(exclude={"kind"})
    data["vertices"] = [(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)]
    return PolygonShape(**data)


def shapes_to_json(shapes: Iterable[_ShapeBase]) -> list:
    return [shape.model_dump(mode="json") for shape in shapes]


def shapes_from_json(data: Sequence[dict]) -> ShapeList:
    return tuple(_shape_list_adapter.validate_python(list(data)))


def find_shape(shapes: Iterable[_ShapeBase], shape_id: Optional[str]):
    if not shape_id:
        return None
    for shape in shapes:
        if shape.id == shape_id:
            return shape
    return None


def same_shapes(a: Sequence[_ShapeBase], b: Sequence[_ShapeBase]) -> bool:
    """Structural comparison of two snapshots."""
    if len(a) != len(b):
        return False
    return all(left.model_dump() == right.model_dump() for left, right in zip(a, b))


__all__ = [
    "CanvasSettings",
    "Floor",
    "Point",
    "PolygonShape",
    "RectShape",
    "Seat",
    "Shape",
    "ShapeList",
    "TextShape",
    "TextStyle",
    "find_shape",
    "new_shape_id",
    "same_shapes",
    "shapes_from_json",
    "shapes_to_json",
    "to_polygon",
]
