"""Tests for triangulation verification."""

import numpy as np
import pytest

from py_dungeon.core.validation import (
    TriangulationReport, count_asymmetric_halfedges, count_delaunay_violations,
    hull_area, triangle_areas, validate_triangulation
)

# A(-2, 0), B(0, -1), C(2, 0), D(0, 1)
RHOMBUS = np.array([[-2, 0], [0, -1], [2, 0], [0, 1]], dtype=float)

# split along the long diagonal A-C: each half holds the other's apex in its circumcircle
LONG_DIAGONAL = np.array([0, 2, 1, 0, 3, 2])
LONG_DIAGONAL_HALFEDGES = np.array([5, -1, -1, -1, -1, 0])

# split along the short diagonal B-D
SHORT_DIAGONAL = np.array([1, 0, 3, 1, 3, 2])
SHORT_DIAGONAL_HALFEDGES = np.array([-1, -1, 3, 2, -1, -1])


class TestChecks:
    """Test the individual checks."""

    def test_triangle_areas(self):
        """Test that both halves are positively oriented."""
        areas = triangle_areas(RHOMBUS, LONG_DIAGONAL)
        assert areas.tolist() == pytest.approx([2.0, 2.0])

    def test_hull_area_ignores_duplicates(self):
        """Test that repeated points don't affect the hull area."""
        coords = np.vstack([RHOMBUS, RHOMBUS[:2]])
        assert hull_area(coords) == pytest.approx(4.0)

    def test_asymmetric_halfedges(self):
        """Test that a one-sided link is reported on both slots."""
        assert count_asymmetric_halfedges(LONG_DIAGONAL_HALFEDGES) == 0
        assert count_asymmetric_halfedges(np.array([5, -1, -1, -1, -1, 1])) == 2

    def test_delaunay_violations(self):
        """Test the in-circle check on both diagonals."""
        assert count_delaunay_violations(RHOMBUS, LONG_DIAGONAL) == 2
        assert count_delaunay_violations(RHOMBUS, SHORT_DIAGONAL) == 0

    def test_cocircular_points_accepted(self):
        """Test that either diagonal of a square passes."""
        square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        assert count_delaunay_violations(square, np.array([0, 2, 1, 0, 3, 2])) == 0
        assert count_delaunay_violations(square, np.array([1, 3, 2, 1, 0, 3])) == 0

    def test_chunking(self):
        """Test that chunk size does not change the count."""
        coords = np.random.default_rng(1).random((30, 2))
        tris = np.array([0, 1, 2] * 20)
        assert (count_delaunay_violations(coords, tris, chunk_size=1) ==
                count_delaunay_violations(coords, tris, chunk_size=256))


class TestReport:
    """Test the combined report."""

    def test_valid_triangulation(self):
        """Test a correct triangulation of the rhombus."""
        report = validate_triangulation(RHOMBUS, SHORT_DIAGONAL, SHORT_DIAGONAL_HALFEDGES)

        assert report.is_valid
        assert report.triangle_count == 2
        assert report.covered_area == pytest.approx(4.0)
        assert report.hull_area == pytest.approx(4.0)

    def test_non_delaunay_triangulation(self):
        """Test that a covering but non-Delaunay split is rejected."""
        report = validate_triangulation(RHOMBUS, LONG_DIAGONAL, LONG_DIAGONAL_HALFEDGES)

        assert report.area_matches
        assert report.delaunay_violations == 2
        assert not report.is_valid

    def test_missing_triangle(self):
        """Test that an uncovered region is rejected."""
        report = validate_triangulation(RHOMBUS, SHORT_DIAGONAL[:3], np.array([-1, -1, -1]))

        assert report.covered_area == pytest.approx(2.0)
        assert not report.area_matches
        assert not report.is_valid

    def test_summary(self):
        """Test the report summary used for logging."""
        report = TriangulationReport(
            triangle_count=1, covered_area=1.0, hull_area=1.0, negative_triangles=1,
            asymmetric_halfedges=0, delaunay_violations=0, tolerance=1e-9,
        )
        summary = report.summary()

        assert summary["negative_triangles"] == 1
        assert summary["is_valid"] is False
