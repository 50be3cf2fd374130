"""
Planar geometry used by the triangulation and the corridor generator.

Coordinates follow the raster convention of the dungeon grid: x grows to the
right and y grows downwards. ``signed_area`` is positive for triangles that
wind counter-clockwise on screen, and every triangle produced by the
triangulator has positive signed area.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple, Union


class Point(NamedTuple):
    """Immutable 2D point."""
    x: float
    y: float

    def distance(self, other: Point) -> float:
        return distance(self, other)


def distance2(p0: Point, p1: Point) -> float:
    """Squared euclidean distance."""
    dx = p0.x - p1.x
    dy = p0.y - p1.y
    return dx * dx + dy * dy


def distance(p0: Point, p1: Point) -> float:
    return math.sqrt(distance2(p0, p1))


def lerp(p0: Point, p1: Point, t: float = 0.5) -> Point:
    return Point(p0.x + (p1.x - p0.x) * t, p0.y + (p1.y - p0.y) * t)


def signed_area(p0: Point, p1: Point, p2: Point) -> float:
    """Twice the signed area of (p0, p1, p2); positive when counter-clockwise on screen."""
    return (p1.y - p0.y) * (p2.x - p1.x) - (p1.x - p0.x) * (p2.y - p1.y)


# relative error bound of the 2x2 orientation determinant (Shewchuk)
ORIENT_EPSILON = 3.3306690738754716e-16


def _orient_if_sure(p0: Point, p1: Point, p2: Point) -> float:
    left = (p1.y - p0.y) * (p2.x - p0.x)
    right = (p1.x - p0.x) * (p2.y - p0.y)
    if abs(left - right) >= ORIENT_EPSILON * abs(left + right):
        return left - right
    return 0.0


def orientation(p0: Point, p1: Point, p2: Point) -> float:
    """
    Sign-stable version of ``signed_area``.

    The determinant is evaluated from each vertex in turn and the first result
    outside the rounding error bound wins. Rotating the arguments therefore
    never flips the sign, and points that are collinear up to rounding give 0.
    """
    return (_orient_if_sure(p2, p0, p1) or
            _orient_if_sure(p0, p1, p2) or
            _orient_if_sure(p1, p2, p0))


def _circumcenter_offset(p0: Point, p1: Point, p2: Point) -> Optional[Tuple[float, float, float, float]]:
    dx = p1.x - p0.x
    dy = p1.y - p0.y
    ex = p2.x - p0.x
    ey = p2.y - p0.y

    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    d = dx * ey - dy * ex

    if d == 0:
        return None

    x = (ey * bl - dy * cl) * 0.5 / d
    y = (dx * cl - ex * bl) * 0.5 / d
    return x, y, bl, cl


def circumradius2(p0: Point, p1: Point, p2: Point) -> float:
    """Squared circumradius, or ``math.inf`` when the three points have no finite circle."""
    offset = _circumcenter_offset(p0, p1, p2)
    if offset is None:
        return math.inf

    x, y, bl, cl = offset
    r = x * x + y * y
    if not bl or not cl or not r or math.isnan(r):
        return math.inf
    return r


def circumradius(p0: Point, p1: Point, p2: Point) -> float:
    return math.sqrt(circumradius2(p0, p1, p2))


def circumcenter(p0: Point, p1: Point, p2: Point) -> Optional[Point]:
    """Center of the circle through the three points, ``None`` if they are collinear."""
    offset = _circumcenter_offset(p0, p1, p2)
    if offset is None:
        return None
    x, y, _, _ = offset
    return Point(p0.x + x, p0.y + y)


def in_circumcircle(p0: Point, p1: Point, p2: Point, p: Point) -> bool:
    """True when ``p`` lies strictly inside the circumcircle of a positive-area triangle."""
    dx = p0.x - p.x
    dy = p0.y - p.y
    ex = p1.x - p.x
    ey = p1.y - p.y
    fx = p2.x - p.x
    fy = p2.y - p.y

    ap = dx * dx + dy * dy
    bp = ex * ex + ey * ey
    cp = fx * fx + fy * fy

    return dx * (ey * cp - bp * fy) - dy * (ex * cp - bp * fx) + ap * (ex * fy - ey * fx) < 0


def segments_cross(a0: Point, a1: Point, b0: Point, b1: Point) -> bool:
    """Proper crossing test; segments that only touch or overlap collinearly don't cross."""
    a_side = (b1.x - b0.x) * (a0.y - b0.y) - (b1.y - b0.y) * (a0.x - b0.x) > 0
    b_side = (b1.x - b0.x) * (a1.y - b0.y) - (b1.y - b0.y) * (a1.x - b0.x) > 0
    c_side = (a1.x - a0.x) * (b0.y - a0.y) - (a1.y - a0.y) * (b0.x - a0.x) > 0
    d_side = (a1.x - a0.x) * (b1.y - a0.y) - (a1.y - a0.y) * (b1.x - a0.x) > 0
    return a_side != b_side and c_side != d_side


class Path:
    """Polyline through an ordered list of points."""

    def __init__(self, *points: Point):
        self.points: List[Point] = list(points)

    def __repr__(self) -> str:
        return f"Path({', '.join(map(repr, self.points))})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Path) and self.points == other.points

    @property
    def length(self) -> float:
        if len(self.points) < 2:
            return 0.0
        return sum(distance(a, b) for a, b in zip(self.points, self.points[1:]))

    @property
    def first(self) -> Point:
        return self.points[0]

    @property
    def last(self) -> Point:
        return self.points[-1]


@dataclass(frozen=True)
class Triangle:
    """Geometric view of one output triangle."""
    p0: Point
    p1: Point
    p2: Point

    @property
    def points(self) -> List[Point]:
        return [self.p0, self.p1, self.p2]

    @property
    def sides(self) -> List[Path]:
        return [
            Path(self.p0, self.p1),
            Path(self.p1, self.p2),
            Path(self.p2, self.p0),
        ]

    @property
    def area(self) -> float:
        """Signed area (half of ``signed_area``)."""
        return signed_area(self.p0, self.p1, self.p2) / 2

    @property
    def circumradius(self) -> float:
        return circumradius(self.p0, self.p1, self.p2)

    @property
    def circumcenter(self) -> Optional[Point]:
        return circumcenter(self.p0, self.p1, self.p2)

    def circumcircle_contains(self, point: Point) -> bool:
        return in_circumcircle(self.p0, self.p1, self.p2, point)


@dataclass(frozen=True)
class CubicBezierCurve:
    """Cubic Bezier curve used for long corridors."""
    p0: Point
    p1: Point
    p2: Point
    p3: Point

    @property
    def points(self) -> List[Point]:
        return [self.p0, self.p1, self.p2, self.p3]

    @property
    def first(self) -> Point:
        return self.p0

    @property
    def last(self) -> Point:
        return self.p3

    def eval(self, t: float) -> Point:
        if t < 0 or t > 1:
            raise ValueError("t must be in range [0, 1]")
        u = 1 - t
        x = u ** 3 * self.p0.x + 3 * u ** 2 * t * self.p1.x + 3 * u * t ** 2 * self.p2.x + t ** 3 * self.p3.x
        y = u ** 3 * self.p0.y + 3 * u ** 2 * t * self.p1.y + 3 * u * t ** 2 * self.p2.y + t ** 3 * self.p3.y
        return Point(x, y)

    @property
    def naive_length(self) -> float:
        return distance(self.p0, self.p3)

    def subdivide(self) -> Tuple[CubicBezierCurve, CubicBezierCurve]:
        """De Casteljau split at t = 0.5."""
        p4 = lerp(self.p0, self.p1)
        p5 = lerp(self.p1, self.p2)
        p6 = lerp(self.p2, self.p3)
        p7 = lerp(p4, p5)
        p8 = lerp(p5, p6)
        p9 = lerp(p7, p8)
        return (
            CubicBezierCurve(self.p0, p4, p7, p9),
            CubicBezierCurve(p9, p8, p6, self.p3),
        )

    @classmethod
    def between(cls, p0: Point, p1: Point) -> CubicBezierCurve:
        """Elbow-shaped curve from the upper-left endpoint to the other one."""
        swap = p1.x < p0.x and p1.y < p0.y
        a = p1 if swap else p0
        b = p0 if swap else p1
        dx = a.x - b.x
        dy = abs(a.y - b.y)
        return cls(a, Point(a.x + dx / 2, a.y), Point(b.x, a.y + dy / 2), b)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle anchored at its top-left corner."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)

    @property
    def top_right(self) -> Point:
        return Point(self.right, self.y)

    @property
    def bottom_right(self) -> Point:
        return Point(self.right, self.bottom)

    @property
    def bottom_left(self) -> Point:
        return Point(self.x, self.bottom)

    @property
    def outline(self) -> Path:
        return Path(self.top_right, self.bottom_right, self.bottom_left, self.top_left, self.top_right)

    @property
    def sides(self) -> List[Path]:
        return [
            Path(self.top_right, self.bottom_right),
            Path(self.bottom_right, self.bottom_left),
            Path(self.bottom_left, self.top_left),
            Path(self.top_left, self.top_right),
        ]

    @property
    def perimeter(self) -> float:
        return self.outline.length

    def intersects_rectangle(self, rect: Rectangle) -> bool:
        return (self.x < rect.right and self.right > rect.x and
                self.y < rect.bottom and self.bottom > rect.y)

    def intersects_point(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom

    def intersects_path(self, path: Path) -> bool:
        sides = self.sides
        for p0, p1 in zip(path.points, path.points[1:]):
            for side in sides:
                if segments_cross(side.first, side.last, p0, p1):
                    return True
        return False

    def intersects(self, obj: Union[Rectangle, Point, Path]) -> bool:
        if isinstance(obj, Rectangle):
            return self.intersects_rectangle(obj)
        if isinstance(obj, Point):
            return self.intersects_point(obj)
        if isinstance(obj, Path):
            return self.intersects_path(obj)
        raise TypeError(f"Can't intersect {obj!r} with {self!r}")
