"""Tests for shapes and spatial context."""

import math

import pytest
from geoprefix.shapes import Point, Rectangle, SpatialRelation
from geoprefix.context import (
    GEO,
    SpatialContext,
    dist_to_degrees,
    degrees_to_dist,
    EARTH_MEAN_RADIUS_KM,
)


class TestRectangle:
    """Tests for Rectangle class."""

    def test_basic_creation(self):
        """Test basic rectangle creation."""
        r = Rectangle(-10, 10, -5, 5)
        assert r.min_x == -10
        assert r.max_x == 10
        assert r.min_y == -5
        assert r.max_y == 5

    def test_invalid_rectangle(self):
        """Test that invalid rectangles raise errors."""
        with pytest.raises(ValueError):
            Rectangle(10, 0, 0, 10)  # min_x > max_x

        with pytest.raises(ValueError):
            Rectangle(0, 10, 10, 0)  # min_y > max_y

    def test_width_height(self):
        """Test width and height properties."""
        r = Rectangle(0, 45, 0, 22.5)
        assert r.width == 45
        assert r.height == 22.5

    def test_center(self):
        """Test center calculation."""
        assert Rectangle(0, 10, -20, 0).get_center() == Point(5, -10)

    def test_contains_point(self):
        """Test point containment, edges included."""
        r = Rectangle(0, 10, 0, 10)
        assert r.contains_point(5, 5)
        assert r.contains_point(0, 0)
        assert r.contains_point(10, 10)
        assert not r.contains_point(11, 5)
        assert not r.contains_point(5, -1)

    def test_corners(self):
        """Test corner order is SW, SE, NW, NE."""
        sw, se, nw, ne = Rectangle(0, 1, 2, 3).corners()
        assert sw == Point(0, 2)
        assert se == Point(1, 2)
        assert nw == Point(0, 3)
        assert ne == Point(1, 3)


class TestRelate:
    """Tests for shape relations."""

    def test_contains(self):
        """Test a rectangle containing a smaller one."""
        outer = Rectangle(0, 10, 0, 10)
        inner = Rectangle(2, 8, 2, 8)
        assert outer.relate(inner) is SpatialRelation.CONTAINS
        assert inner.relate(outer) is SpatialRelation.WITHIN

    def test_equal_is_contains(self):
        """Test equal rectangles contain each other."""
        r = Rectangle(0, 10, 0, 10)
        assert r.relate(Rectangle(0, 10, 0, 10)) is SpatialRelation.CONTAINS

    def test_disjoint(self):
        """Test separated rectangles."""
        a = Rectangle(0, 10, 0, 10)
        assert a.relate(Rectangle(11, 20, 0, 10)) is SpatialRelation.DISJOINT
        assert a.relate(Rectangle(0, 10, 11, 20)) is SpatialRelation.DISJOINT

    def test_shared_edge_intersects(self):
        """Test rectangles touching along an edge intersect."""
        a = Rectangle(0, 10, 0, 10)
        assert a.relate(Rectangle(10, 20, 0, 10)) is SpatialRelation.INTERSECTS

    def test_overlap(self):
        """Test partially overlapping rectangles."""
        a = Rectangle(0, 10, 0, 10)
        assert a.relate(Rectangle(5, 15, 5, 15)) is SpatialRelation.INTERSECTS

    def test_within_sharing_full_axis(self):
        """Test a rectangle spanning the same x range but fewer rows."""
        band = Rectangle(-180, 180, 45, 90)
        cell = Rectangle(-180, -135, 45, 90)
        assert cell.relate(band) is SpatialRelation.WITHIN
        assert band.relate(cell) is SpatialRelation.CONTAINS

    def test_cross_shape_intersects(self):
        """Test a wide and a tall rectangle crossing each other."""
        wide = Rectangle(0, 10, 4, 6)
        tall = Rectangle(4, 6, 0, 10)
        assert wide.relate(tall) is SpatialRelation.INTERSECTS

    def test_point_relations(self):
        """Test relations between rectangles and points."""
        r = Rectangle(0, 10, 0, 10)
        assert r.relate(Point(5, 5)) is SpatialRelation.CONTAINS
        assert Point(5, 5).relate(r) is SpatialRelation.WITHIN
        assert r.relate(Point(50, 5)) is SpatialRelation.DISJOINT
        assert Point(1, 1).relate(Point(1, 1)) is SpatialRelation.CONTAINS

    def test_intersects_flag(self):
        """Test only DISJOINT doesn't intersect."""
        assert not SpatialRelation.DISJOINT.intersects()
        assert SpatialRelation.WITHIN.intersects()
        assert SpatialRelation.CONTAINS.intersects()
        assert SpatialRelation.INTERSECTS.intersects()


class TestSpatialContext:
    """Tests for SpatialContext."""

    def test_geo_default(self):
        """Test the default context covers the globe."""
        assert GEO.geo
        assert GEO.world_bounds == Rectangle(-180, 180, -90, 90)

    def test_make_point(self):
        """Test points are x=lon, y=lat."""
        p = GEO.make_point(-4.329, 48.669)
        assert p.lon == -4.329
        assert p.lat == 48.669

    def test_make_point_outside_bounds(self):
        """Test points outside the world bounds are rejected."""
        with pytest.raises(ValueError):
            GEO.make_point(0, 91)

    def test_make_rectangle_outside_bounds(self):
        """Test rectangles outside the world bounds are rejected."""
        assert GEO.make_rectangle(-10, 10, -10, 10) == Rectangle(-10, 10, -10, 10)
        with pytest.raises(ValueError):
            GEO.make_rectangle(170, 190, 0, 10)

    def test_custom_bounds(self):
        """Test a non-geo context keeps its bounds."""
        ctx = SpatialContext(geo=False, world_bounds=Rectangle(0, 100, 0, 100))
        assert not ctx.geo
        assert ctx.world_bounds.max_x == 100


class TestDistanceConversion:
    """Tests for km/degree conversion."""

    def test_one_radian(self):
        """Test one earth radius is one radian of arc."""
        assert dist_to_degrees(EARTH_MEAN_RADIUS_KM) == pytest.approx(math.degrees(1))

    def test_one_degree(self):
        """Test one degree is about 111 km."""
        assert degrees_to_dist(1.0) == pytest.approx(111.195, abs=0.01)

    def test_inverse(self):
        """Test conversions are inverse of each other."""
        assert degrees_to_dist(dist_to_degrees(0.001)) == pytest.approx(0.001)
