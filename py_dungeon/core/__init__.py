"""
Core triangulation and corridor generation functionality.
"""

from .geometry import Point, Triangle, Path, Rectangle, CubicBezierCurve
from .ordering import TriangulationError
from .delaunay import DelaunayTriangulator, delaunay_triangulate
from .validation import TriangulationReport, validate_triangulation
from .corridors import Direction, find_corridors, triangulate_doors

__all__ = ['Point', 'Triangle', 'Path', 'Rectangle', 'CubicBezierCurve',
           'TriangulationError', 'DelaunayTriangulator', 'delaunay_triangulate',
           'TriangulationReport', 'validate_triangulation',
           'Direction', 'find_corridors', 'triangulate_doors']
