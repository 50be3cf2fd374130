"""Tests for geometric primitives and shapes."""

import math

import pytest

from py_dungeon.core.geometry import (
    CubicBezierCurve, Path, Point, Rectangle, Triangle,
    circumcenter, circumradius, circumradius2, distance, distance2,
    in_circumcircle, orientation, segments_cross, signed_area
)


class TestPrimitives:
    """Test the scalar geometric predicates."""

    def test_distances(self):
        """Test squared and plain distance."""
        assert distance2(Point(0, 0), Point(3, 4)) == 25
        assert distance(Point(0, 0), Point(3, 4)) == 5
        assert Point(0, 0).distance(Point(0, 2)) == 2

    def test_point_equality(self):
        """Test that points compare by coordinates."""
        assert Point(1, 2) == Point(1.0, 2.0)
        assert Point(1, 2) != Point(2, 1)
        assert len({Point(0, 0), Point(0.0, 0.0)}) == 1

    def test_signed_area_orientation(self):
        """Test that swapping two vertices flips the sign."""
        a, b, c = Point(0, 0), Point(0, 1), Point(1, 0)
        assert signed_area(a, b, c) == 1
        assert signed_area(a, c, b) == -1
        assert signed_area(Point(0, 0), Point(1, 1), Point(2, 2)) == 0

    def test_orientation_matches_signed_area(self):
        """Test that the stable orientation agrees with signed_area away from degeneracy."""
        a, b, c = Point(0, 0), Point(0, 1), Point(1, 0)
        assert orientation(a, b, c) == signed_area(a, b, c)
        assert orientation(a, c, b) < 0
        assert orientation(b, c, a) > 0

    def test_orientation_is_rotation_stable(self):
        """Test that points collinear up to rounding give 0 in every rotation."""
        third = 1 / 3
        p0, p2, p3 = Point(0, third), Point(2 / 3, 1), Point(third, 2 / 3)

        assert orientation(p2, p0, p3) == 0
        assert orientation(p0, p3, p2) == 0
        assert orientation(p3, p2, p0) == 0

    def test_circumcircle_of_right_triangle(self):
        """Test circumcenter and radius of a right triangle."""
        a, b, c = Point(0, 0), Point(2, 0), Point(0, 2)
        assert circumcenter(a, b, c) == Point(1, 1)
        assert circumradius2(a, b, c) == pytest.approx(2.0)
        assert circumradius(a, b, c) == pytest.approx(math.sqrt(2))

    def test_collinear_has_no_circle(self):
        """Test that collinear points give an infinite radius instead of failing."""
        a, b, c = Point(0, 0), Point(1, 1), Point(2, 2)
        assert circumradius2(a, b, c) == math.inf
        assert circumcenter(a, b, c) is None

    def test_duplicate_vertex_has_no_circle(self):
        """Test that a repeated vertex is treated as degenerate."""
        assert circumradius2(Point(0, 0), Point(0, 0), Point(1, 1)) == math.inf

    def test_in_circumcircle(self):
        """Test the strict in-circle test."""
        a, b, c = Point(0, 0), Point(0, 2), Point(2, 0)
        assert signed_area(a, b, c) > 0

        assert in_circumcircle(a, b, c, Point(1, 1))
        assert in_circumcircle(a, b, c, Point(1.9, 1.9))
        assert not in_circumcircle(a, b, c, Point(3, 3))
        # on the circle is not inside
        assert not in_circumcircle(a, b, c, Point(2, 2))

    def test_in_circumcircle_uses_both_axes(self):
        """Test a point that only the y offset of the first vertex separates."""
        a, b, c = Point(0, 0), Point(0, 2), Point(2, 0)
        # outside the circle centred at (1, 1), close to the first vertex
        assert not in_circumcircle(a, b, c, Point(-0.1, 1.9))
        assert in_circumcircle(a, b, c, Point(0.1, 0.5))

    def test_segments_cross(self):
        """Test proper and improper crossings."""
        assert segments_cross(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        # parallel
        assert not segments_cross(Point(0, 0), Point(2, 0), Point(0, 1), Point(2, 1))
        # sharing an endpoint
        assert not segments_cross(Point(0, 0), Point(1, 1), Point(1, 1), Point(2, 0))
        # disjoint
        assert not segments_cross(Point(0, 0), Point(1, 1), Point(3, 0), Point(4, 5))


class TestShapes:
    """Test paths, triangles, curves and rectangles."""

    def test_path_length(self):
        """Test polyline length and endpoints."""
        path = Path(Point(0, 0), Point(3, 0), Point(3, 4))
        assert path.length == 7
        assert path.first == Point(0, 0)
        assert path.last == Point(3, 4)
        assert Path(Point(1, 1)).length == 0

    def test_triangle_view(self):
        """Test triangle sides and area."""
        tri = Triangle(Point(0, 0), Point(0, 2), Point(2, 0))
        assert tri.points == [Point(0, 0), Point(0, 2), Point(2, 0)]
        assert tri.area == 2
        assert [side.length for side in tri.sides] == pytest.approx([2, math.sqrt(8), 2])
        assert tri.sides[0] == Path(Point(0, 0), Point(0, 2))
        assert tri.circumcenter == Point(1, 1)
        assert tri.circumcircle_contains(Point(1, 0.5))

    def test_bezier_endpoints(self):
        """Test curve evaluation at the ends and its bounds check."""
        curve = CubicBezierCurve(Point(0, 0), Point(1, 2), Point(3, 2), Point(4, 0))
        assert curve.eval(0) == Point(0, 0)
        assert curve.eval(1) == Point(4, 0)
        assert curve.naive_length == 4

        with pytest.raises(ValueError):
            curve.eval(1.5)

    def test_bezier_subdivide(self):
        """Test that subdivision splits the curve at its midpoint."""
        curve = CubicBezierCurve(Point(0, 0), Point(1, 2), Point(3, 2), Point(4, 0))
        left, right = curve.subdivide()
        mid = curve.eval(0.5)

        assert left.p0 == curve.p0
        assert right.p3 == curve.p3
        assert left.p3 == right.p0
        assert left.p3.x == pytest.approx(mid.x)
        assert left.p3.y == pytest.approx(mid.y)

    def test_bezier_between(self):
        """Test that curves start from the upper-left endpoint."""
        curve = CubicBezierCurve.between(Point(10, 10), Point(0, 0))
        assert curve.first == Point(0, 0)
        assert curve.last == Point(10, 10)

        curve = CubicBezierCurve.between(Point(40, 5), Point(15, 20))
        assert curve.first == Point(40, 5)
        assert curve.last == Point(15, 20)

    def test_rectangle_geometry(self):
        """Test rectangle edges and corners."""
        rect = Rectangle(0, 0, 10, 5)
        assert rect.right == 10
        assert rect.bottom == 5
        assert rect.top_left == Point(0, 0)
        assert rect.bottom_right == Point(10, 5)
        assert len(rect.sides) == 4
        assert rect.perimeter == 30

    def test_rectangle_intersections(self):
        """Test rectangle, point and path intersection."""
        rect = Rectangle(0, 0, 10, 5)

        assert rect.intersects(Rectangle(9, 4, 5, 5))
        # touching edges don't overlap
        assert not rect.intersects(Rectangle(10, 0, 5, 5))

        assert rect.intersects(Point(10, 5))
        assert not rect.intersects(Point(11, 0))

        assert rect.intersects(Path(Point(-1, 2), Point(11, 2)))
        assert not rect.intersects(Path(Point(1, 1), Point(2, 2)))

    def test_rectangle_rejects_unknown_objects(self):
        """Test that unsupported objects raise TypeError."""
        with pytest.raises(TypeError):
            Rectangle(0, 0, 1, 1).intersects("room")
