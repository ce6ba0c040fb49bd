"""
Pydantic data models for erd-hull.

Everything lives for a single invocation: parsed groups, hulls, splines
and render results are derived on demand and never persisted.
"""

from typing import Dict, List, Optional, Union

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Point(BaseModel):
    """An (x, y) coordinate in document space."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def as_tuple(self):
        return (self.x, self.y)


class BoundingBox(BaseModel):
    """Axis-aligned rectangle (x, y, width, height)."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    model_config = ConfigDict(frozen=True)

    @property
    def center(self):
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def max_x(self):
        return self.x + self.width

    @property
    def max_y(self):
        return self.y + self.height


class ElementRecord(BaseModel):
    """A single shape element inside an entity group."""
    tag: str
    attributes: Dict[str, str] = Field(default_factory=dict)
    bbox: BoundingBox

    model_config = ConfigDict(extra="forbid")


class EntityGroup(BaseModel):
    """A named cluster of diagram elements."""
    name: str
    elements: List[ElementRecord] = Field(default_factory=list)
    bbox: BoundingBox = Field(default_factory=BoundingBox)

    model_config = ConfigDict(extra="forbid")

    def representative_points(self):
        """Centre of every member element's bounding box."""
        return [element.bbox.center for element in self.elements]


class FocusArea(BaseModel):
    """A named, coloured aggregation of entity groups from configuration."""
    name: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    areas: List[str]
    url: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("color")
    @classmethod
    def _check_color(cls, value):
        # Named, hex and rgb(...) forms are all accepted downstream
        try:
            ImageColor.getrgb(value)
        except ValueError:
            raise ValueError(f"unrecognised colour {value!r}")
        return value


class HullResult(BaseModel):
    """Closed polygon (implicit closing edge) with its area and perimeter."""
    points: List[Point] = Field(default_factory=list)
    area: float = 0.0
    perimeter: float = 0.0

    @property
    def point_count(self):
        return len(self.points)


class LineSegment(BaseModel):
    """A straight path segment."""
    p0: List[float] = Field(..., min_length=2, max_length=2)
    p1: List[float] = Field(..., min_length=2, max_length=2)


class CubicBezier(BaseModel):
    """A single cubic Bezier curve segment."""
    p0: List[float] = Field(..., min_length=2, max_length=2)  # start point
    p1: List[float] = Field(..., min_length=2, max_length=2)  # control point 1
    p2: List[float] = Field(..., min_length=2, max_length=2)  # control point 2
    p3: List[float] = Field(..., min_length=2, max_length=2)  # end point


class SplineResult(BaseModel):
    """A smoothed curve through (or around) polygon vertices."""
    curve_type: str
    segments: List[Union[CubicBezier, LineSegment]] = Field(default_factory=list)
    closed: bool = True
    path_data: str = ""


class RenderLayer(BaseModel):
    """One translucent copy of a hull path."""
    path_data: str
    opacity: float
    color: str


class RenderResult(BaseModel):
    """Everything the output composer needs to draw one group."""
    name: str
    label: str
    points: List[Point]
    color: str
    url: Optional[str] = None
    centroid: Point
    hull: HullResult


def compute_centroid(points):
    """
    Arithmetic mean of a point sequence.

    Returns the origin for an empty sequence.
    """
    if not points:
        return Point(x=0.0, y=0.0)

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Point(x=sum(xs) / len(xs), y=sum(ys) / len(ys))


def union_bbox(boxes):
    """
    Combined bounding box of several boxes.

    Returns a zero box for empty input.
    """
    boxes = list(boxes)
    if not boxes:
        return BoundingBox()

    min_x = min(b.x for b in boxes)
    min_y = min(b.y for b in boxes)
    max_x = max(b.max_x for b in boxes)
    max_y = max(b.max_y for b in boxes)
    return BoundingBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def bbox_from_points(coords):
    """Bounding box of an iterable of (x, y) pairs."""
    coords = list(coords)
    if not coords:
        return BoundingBox()

    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    return BoundingBox(x=min(xs), y=min(ys), width=max(xs) - min(xs), height=max(ys) - min(ys))
