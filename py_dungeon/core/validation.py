"""Property checks for a finished triangulation.

Used by the test suite and, when ``settings.validate_output`` is set, by
``delaunay_triangulate`` itself. All checks are vectorized with numpy; the
reference hull area comes from ``scipy.spatial.ConvexHull``.
"""

from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np
import structlog
from scipy.spatial import ConvexHull

logger = structlog.get_logger()


@dataclass
class TriangulationReport:
    """Outcome of ``validate_triangulation``."""
    triangle_count: int
    covered_area: float
    hull_area: float
    negative_triangles: int
    asymmetric_halfedges: int
    delaunay_violations: int
    tolerance: float

    @property
    def area_matches(self) -> bool:
        return abs(self.covered_area - self.hull_area) <= self.tolerance * max(1.0, self.hull_area)

    @property
    def is_valid(self) -> bool:
        return (self.area_matches and
                self.negative_triangles == 0 and
                self.asymmetric_halfedges == 0 and
                self.delaunay_violations == 0)

    def summary(self) -> Dict:
        data = asdict(self)
        data["is_valid"] = self.is_valid
        return data


def triangle_areas(coords: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Signed area of every triangle, positive for the triangulator's orientation."""
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    a = coords[tris[:, 0]]
    b = coords[tris[:, 1]]
    c = coords[tris[:, 2]]
    cross = (b[:, 1] - a[:, 1]) * (c[:, 0] - b[:, 0]) - (b[:, 0] - a[:, 0]) * (c[:, 1] - b[:, 1])
    return cross / 2


def hull_area(coords: np.ndarray) -> float:
    """Area of the convex hull of the distinct points."""
    unique = np.unique(coords, axis=0)
    # for 2D input ConvexHull.volume is the enclosed area
    return float(ConvexHull(unique).volume)


def count_asymmetric_halfedges(halfedges: np.ndarray) -> int:
    he = np.asarray(halfedges, dtype=np.int64)
    linked = np.nonzero(he >= 0)[0]
    return int(np.count_nonzero(he[he[linked]] != linked))


def count_delaunay_violations(coords: np.ndarray, triangles: np.ndarray,
                              tolerance: float = 1e-9, chunk_size: int = 256) -> int:
    """
    Count (triangle, point) pairs where the point lies strictly inside the circumcircle.

    A pair only counts when the in-circle determinant exceeds ``tolerance``
    relative to the magnitude of its terms, so cocircular points are accepted.
    """
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    px = coords[:, 0][np.newaxis, :]
    py = coords[:, 1][np.newaxis, :]
    violations = 0

    for start in range(0, len(tris), chunk_size):
        chunk = tris[start:start + chunk_size]
        a = coords[chunk[:, 0]]
        b = coords[chunk[:, 1]]
        c = coords[chunk[:, 2]]

        dx = a[:, 0:1] - px
        dy = a[:, 1:2] - py
        ex = b[:, 0:1] - px
        ey = b[:, 1:2] - py
        fx = c[:, 0:1] - px
        fy = c[:, 1:2] - py

        ap = dx * dx + dy * dy
        bp = ex * ex + ey * ey
        cp = fx * fx + fy * fy

        terms = (dx * ey * cp, dx * bp * fy, dy * ex * cp, dy * bp * fx, ap * ex * fy, ap * ey * fx)
        det = terms[0] - terms[1] - terms[2] + terms[3] + terms[4] - terms[5]
        magnitude = sum(np.abs(term) for term in terms)

        violations += int(np.count_nonzero(det < -tolerance * magnitude))

    return violations


def validate_triangulation(coords: np.ndarray, triangles: np.ndarray, halfedges: np.ndarray,
                           tolerance: float = 1e-9) -> TriangulationReport:
    """
    Check coverage, orientation, half-edge symmetry and the Delaunay property.

    Args:
        coords: (n, 2) input coordinates
        triangles: flat array of point indices, three per triangle
        halfedges: flat array of opposite half-edges
        tolerance: relative tolerance for the area and in-circle checks

    Returns:
        TriangulationReport
    """
    coords = np.asarray(coords, dtype=np.float64)
    areas = triangle_areas(coords, triangles)

    report = TriangulationReport(
        triangle_count=len(areas),
        covered_area=float(areas.sum()),
        hull_area=hull_area(coords),
        negative_triangles=int(np.count_nonzero(areas <= 0)),
        asymmetric_halfedges=count_asymmetric_halfedges(halfedges),
        delaunay_violations=count_delaunay_violations(coords, triangles, tolerance),
        tolerance=tolerance,
    )

    if not report.is_valid:
        logger.warning("Triangulation check failed", **report.summary())

    return report
