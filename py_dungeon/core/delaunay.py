"""
Incremental Delaunay triangulation.

Points are inserted in order of distance from the seed triangle's
circumcenter, so every new point lies outside the current hull. Each point is
connected to the hull edges it can see, and every new triangle is legalized
by flipping edges whose opposite vertex falls inside its circumcircle.
"""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import structlog

from ..config import settings
from .geometry import Point, Triangle, in_circumcircle, orientation
from .halfedges import HalfEdgeMesh
from .hull import EMPTY, AdvancingHull
from .ordering import TriangulationError, insertion_order, seed_center, select_seed
from .validation import validate_triangulation

logger = structlog.get_logger()

PointsLike = Union[Sequence[Point], Sequence[Tuple[float, float]], np.ndarray]


def as_coords(points: PointsLike) -> np.ndarray:
    """Validate input points and return them as an ``(n, 2)`` float array."""
    coords = np.asarray(points, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        if coords.size == 0:
            raise TriangulationError("Need at least 3 points")
        raise ValueError(f"Expected a sequence of (x, y) pairs, got array of shape {coords.shape}")
    if not np.all(np.isfinite(coords)):
        raise ValueError("Point coordinates must be finite")
    if len(coords) < 3:
        raise TriangulationError("Need at least 3 points")
    return coords


class DelaunayTriangulator:
    """
    Delaunay triangulation of a 2D point set, built on construction.

    Attributes after construction:
        triangles: read-only flat array of point indices, three per triangle
        halfedges: read-only flat array of opposite half-edges (-1 on the hull)
        hull: point indices of the convex hull in boundary order
    """

    def __init__(self, points: PointsLike, insertion_threshold: Optional[int] = None):
        self.coords = as_coords(points)
        self.points: List[Point] = [Point(x, y) for x, y in self.coords.tolist()]
        n = len(self.points)

        if insertion_threshold is None:
            insertion_threshold = settings.insertion_sort_threshold

        self.seed = select_seed(self.coords)
        self.center = seed_center(self.coords, self.seed)
        self._ids = insertion_order(self.coords, self.center, insertion_threshold)

        max_triangles = max(2 * n - 5, 1)
        self._mesh = HalfEdgeMesh(max_triangles)
        self._hull = AdvancingHull(self.points, self.center)
        self._flip_limit = 3 * max_triangles + 16
        self.skipped = 0

        self._build()

        self._mesh.trim()
        self.triangles: np.ndarray = self._mesh.triangles
        self.halfedges: np.ndarray = self._mesh.halfedges
        self.hull: List[int] = list(self._hull.nodes())

        logger.info("Triangulation complete",
                    points=n,
                    triangles=len(self),
                    hull_size=len(self.hull),
                    skipped=self.skipped)

    def __len__(self) -> int:
        return len(self._mesh)

    # ---------------- Construction ----------------
    def _build(self) -> None:
        i0, i1, i2 = self.seed
        hull = self._hull

        e = hull.insert(i0)
        hull.hash_node(e)
        hull.tri[e] = 0
        e = hull.insert(i1, after=e)
        hull.hash_node(e)
        hull.tri[e] = 1
        e = hull.insert(i2, after=e)
        hull.hash_node(e)
        hull.tri[e] = 2

        self._mesh.add_triangle(i0, i1, i2, EMPTY, EMPTY, EMPTY)

        seed_points = (self.points[i0], self.points[i1], self.points[i2])
        previous = None

        for i in self._ids:
            p = self.points[i]

            # skip near-duplicate points
            if previous is not None and p == previous:
                self.skipped += 1
                continue
            previous = p

            if p in seed_points:
                if i not in self.seed:
                    self.skipped += 1
                continue

            self._insert(i, p)

        if self.skipped:
            logger.debug("Duplicate points skipped", count=self.skipped)

    def _insert(self, i: int, p: Point) -> None:
        hull = self._hull
        mesh = self._mesh
        pts = self.points

        # find a visible edge on the hull, starting from the hash guess
        start = hull.find_start(p)
        e = start
        while orientation(p, pts[e], pts[hull.next[e]]) >= 0:
            e = int(hull.next[e])
            if e == start:
                logger.error("No visible hull edge", point=i, x=p.x, y=p.y, hull_size=hull.size)
                raise TriangulationError(
                    f"Invalid input points: no visible hull edge for point {i} at ({p.x}, {p.y})"
                )

        walk_back = e == start

        # first triangle from the point
        t = mesh.add_triangle(e, i, int(hull.next[e]), EMPTY, EMPTY, int(hull.tri[e]))
        hull.insert(i, after=e)
        hull.tri[i] = self._legalize(t + 2)
        hull.tri[e] = t

        # walk forward through the hull, adding more triangles
        n = int(hull.next[i])
        while True:
            q = int(hull.next[n])
            if orientation(p, pts[n], pts[q]) >= 0:
                break
            t = mesh.add_triangle(n, i, q, int(hull.tri[i]), EMPTY, int(hull.tri[n]))
            hull.tri[i] = self._legalize(t + 2)
            hull.remove(n)
            n = q

        # walk backward from the other side
        if walk_back:
            while True:
                q = int(hull.prev[e])
                if orientation(p, pts[q], pts[e]) >= 0:
                    break
                t = mesh.add_triangle(q, i, e, EMPTY, int(hull.tri[e]), int(hull.tri[q]))
                self._legalize(t + 2)
                hull.tri[q] = t
                hull.remove(e)
                e = q

        hull.start = e
        hull.hash_node(i)
        hull.hash_node(e)

    def _legalize(self, a: int) -> int:
        """
        Flip edges around slot ``a`` until both sides satisfy the Delaunay condition.

        Uses an explicit stack of pending edges. Returns the slot of the edge
        that ended up facing the hull on the last examined triangle.
        """
        triangles = self._mesh.triangles
        halfedges = self._mesh.halfedges
        pts = self.points
        stack: List[int] = []
        flips = 0
        ar = 0

        while True:
            b = int(halfedges[a])
            a0 = a - a % 3
            ar = a0 + (a + 2) % 3

            if b == EMPTY:
                if not stack:
                    break
                a = stack.pop()
                continue

            b0 = b - b % 3
            al = a0 + (a + 1) % 3
            bl = b0 + (b + 2) % 3

            p0 = int(triangles[ar])
            pr = int(triangles[a])
            pl = int(triangles[al])
            p1 = int(triangles[bl])

            if in_circumcircle(pts[p0], pts[pr], pts[pl], pts[p1]):
                triangles[a] = p1
                triangles[b] = p0

                hbl = int(halfedges[bl])
                if hbl == EMPTY:
                    # the flipped edge now owns a hull edge
                    self._hull.retarget_edge(bl, a)

                self._mesh.link(a, hbl)
                self._mesh.link(b, int(halfedges[ar]))
                self._mesh.link(ar, bl)

                stack.append(b0 + (b + 1) % 3)

                flips += 1
                if flips > self._flip_limit:
                    logger.error("Edge flips do not terminate", edge=a, flips=flips)
                    raise TriangulationError("Edge legalization did not terminate")
            else:
                if not stack:
                    break
                a = stack.pop()

        return ar

    # ---------------- Output ----------------
    def triangle_indices(self) -> List[Tuple[int, int, int]]:
        """Triangles as point index triples, in buffer order."""
        return [tuple(int(i) for i in tri) for tri in self.triangles.reshape(-1, 3)]

    def triangle_views(self) -> List[Triangle]:
        """Triangles as geometric objects over the input points."""
        pts = self.points
        return [Triangle(pts[i0], pts[i1], pts[i2]) for i0, i1, i2 in self.triangle_indices()]

    def edges(self) -> List[Tuple[int, int]]:
        """Each undirected edge once, as point index pairs."""
        return list(self._mesh.edges())


def delaunay_triangulate(points: PointsLike, validate: Optional[bool] = None) -> List[Triangle]:
    """
    Triangulate a point set.

    Args:
        points: Input points as ``Point``s, (x, y) pairs or an (n, 2) array
        validate: Verify the result before returning it; defaults to
            ``settings.validate_output``

    Returns:
        List of triangles covering the convex hull of the points

    Raises:
        TriangulationError: if no triangulation exists or construction fails
    """
    triangulator = DelaunayTriangulator(points)

    if validate is None:
        validate = settings.validate_output

    if validate:
        report = validate_triangulation(triangulator.coords,
                                        triangulator.triangles,
                                        triangulator.halfedges,
                                        tolerance=settings.validation_tolerance)
        logger.info("Triangulation validated", **report.summary())
        if not report.is_valid:
            raise TriangulationError(f"Triangulation failed validation: {report.summary()}")

    return triangulator.triangle_views()
