"""
Shape value types used by the prefix tree.

Coordinates follow the x/y convention of the spatial context:
x is longitude and y is latitude, both in degrees for a geo context.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SpatialRelation(Enum):
    """
    How one shape relates to another.

    The relation is always read from the point of view of the shape whose
    ``relate`` method was called: ``a.relate(b) is WITHIN`` means a lies
    inside b.
    """
    WITHIN = "within"
    CONTAINS = "contains"
    DISJOINT = "disjoint"
    INTERSECTS = "intersects"

    def intersects(self) -> bool:
        """True for every relation except DISJOINT."""
        return self is not SpatialRelation.DISJOINT

    def transpose(self) -> SpatialRelation:
        """The relation as seen from the other shape."""
        if self is SpatialRelation.WITHIN:
            return SpatialRelation.CONTAINS
        if self is SpatialRelation.CONTAINS:
            return SpatialRelation.WITHIN
        return self


@dataclass(frozen=True)
class Point:
    """A point; x is longitude and y is latitude."""
    x: float
    y: float

    @property
    def lon(self) -> float:
        return self.x

    @property
    def lat(self) -> float:
        return self.y

    def get_bounding_box(self) -> Rectangle:
        return Rectangle(self.x, self.x, self.y, self.y)

    def relate(self, other: "Point | Rectangle") -> SpatialRelation:
        if isinstance(other, Point):
            if self == other:
                return SpatialRelation.CONTAINS
            return SpatialRelation.DISJOINT
        return other.relate(self).transpose()


@dataclass(frozen=True)
class Rectangle:
    """
    An axis-aligned rectangle, edges included.

    Represents the closed ranges [min_x, max_x] and [min_y, max_y]. Rectangles
    crossing the dateline are not supported.
    """
    min_x: float  # west edge (longitude)
    max_x: float  # east edge (longitude)
    min_y: float  # south edge (latitude)
    max_y: float  # north edge (latitude)

    def __post_init__(self):
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(
                f"Invalid rectangle: min_x={self.min_x}, max_x={self.max_x}, "
                f"min_y={self.min_y}, max_y={self.max_y}"
            )

    @property
    def width(self) -> float:
        """Extent along the x-axis."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Extent along the y-axis."""
        return self.max_y - self.min_y

    def get_center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def get_bounding_box(self) -> Rectangle:
        return self

    def contains_point(self, x: float, y: float) -> bool:
        """Check if point (x, y) is within this rectangle."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in SW, SE, NW, NE order."""
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.min_x, self.max_y),
            Point(self.max_x, self.max_y),
        )

    def relate(self, other: "Point | Rectangle") -> SpatialRelation:
        """
        Relate this rectangle to a point or another rectangle.

        Args:
            other: Shape to compare against

        Returns:
            CONTAINS if other lies inside this rectangle (equal rectangles
            included), WITHIN if this rectangle lies inside other, DISJOINT
            if they share no point, INTERSECTS otherwise.
        """
        if isinstance(other, Point):
            if self.contains_point(other.x, other.y):
                return SpatialRelation.CONTAINS
            return SpatialRelation.DISJOINT

        x_rel = _relate_range(self.min_x, self.max_x, other.min_x, other.max_x)
        if x_rel is SpatialRelation.DISJOINT:
            return x_rel
        y_rel = _relate_range(self.min_y, self.max_y, other.min_y, other.max_y)
        if y_rel is SpatialRelation.DISJOINT:
            return y_rel

        if x_rel is y_rel:
            return x_rel
        # A degenerate axis on either side contains and is within at once.
        if x_rel is SpatialRelation.CONTAINS and self.width == other.width:
            return y_rel
        if y_rel is SpatialRelation.CONTAINS and self.height == other.height:
            return x_rel
        return SpatialRelation.INTERSECTS


def _relate_range(
    a_min: float, a_max: float, b_min: float, b_max: float
) -> SpatialRelation:
    """Relate the closed range [a_min, a_max] to [b_min, b_max]."""
    if b_max < a_min or b_min > a_max:
        return SpatialRelation.DISJOINT
    if b_min >= a_min and b_max <= a_max:
        return SpatialRelation.CONTAINS
    if b_min <= a_min and b_max >= a_max:
        return SpatialRelation.WITHIN
    return SpatialRelation.INTERSECTS
