"""
Spatial context: the coordinate system a prefix tree is built over.

The context owns the world bounds, whether coordinates are geodetic
(lat/lon degrees) and the distance units the tree interprets. Distances
handed to the tree are in degrees for a geo context.
"""

import math

from .shapes import Point, Rectangle, SpatialRelation


EARTH_MEAN_RADIUS_KM = 6371.0087714
"""Mean Earth radius in kilometers (WGS84 based)."""

WORLD_BOUNDS = Rectangle(-180.0, 180.0, -90.0, 90.0)


def dist_to_degrees(dist: float, radius: float = EARTH_MEAN_RADIUS_KM) -> float:
    """
    Convert a distance along the surface of a sphere to degrees of arc.

    Args:
        dist: Distance, same units as radius
        radius: Sphere radius

    Returns:
        Angle in degrees
    """
    return math.degrees(dist / radius)


def degrees_to_dist(degrees: float, radius: float = EARTH_MEAN_RADIUS_KM) -> float:
    """Inverse of dist_to_degrees."""
    return math.radians(degrees) * radius


class SpatialContext:
    """
    Coordinate system configuration shared by trees and cells.

    Instances are immutable and safe to share between threads.
    """

    def __init__(self, geo: bool = True, world_bounds: Rectangle = WORLD_BOUNDS):
        """
        Args:
            geo: True when coordinates are latitude/longitude degrees
            world_bounds: Rectangle spanning every valid coordinate
        """
        self._geo = geo
        self._world_bounds = world_bounds

    @property
    def geo(self) -> bool:
        return self._geo

    @property
    def world_bounds(self) -> Rectangle:
        return self._world_bounds

    def make_point(self, x: float, y: float) -> Point:
        """Create a point, checking it lies inside the world bounds."""
        if not self._world_bounds.contains_point(x, y):
            raise ValueError(f"Point ({x}, {y}) outside world bounds {self._world_bounds}")
        return Point(x, y)

    def make_rectangle(
        self, min_x: float, max_x: float, min_y: float, max_y: float
    ) -> Rectangle:
        rect = Rectangle(min_x, max_x, min_y, max_y)
        if self._world_bounds.relate(rect) is not SpatialRelation.CONTAINS:
            raise ValueError(f"Rectangle {rect} outside world bounds {self._world_bounds}")
        return rect

    def __repr__(self) -> str:
        return f"SpatialContext(geo={self._geo}, world_bounds={self._world_bounds})"


GEO = SpatialContext()
"""Default geodetic context spanning the whole globe."""
