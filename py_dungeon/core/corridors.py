"""
Corridor selection over a Delaunay triangulation of room doors.

Every room exposes one door per side. The doors of all rooms are triangulated
and each triangle touching exactly one door of a room proposes its longest
side that does not cut through any room as a corridor.
"""

from enum import IntEnum
from typing import List, Optional, Sequence, Set, Union

import structlog

from ..config import settings
from .delaunay import delaunay_triangulate
from .geometry import CubicBezierCurve, Path, Point, Rectangle, Triangle

logger = structlog.get_logger()

Corridor = Union[Path, CubicBezierCurve]


class Direction(IntEnum):
    """Room side a door sits on."""
    N = 0
    E = 1
    S = 2
    W = 3


def triangulate_doors(doors: Sequence[Sequence[Point]]) -> List[Triangle]:
    """Triangulate the doors of all rooms together."""
    points = [door for room_doors in doors for door in room_doors]
    return delaunay_triangulate(points)


def _is_axis_aligned(tri: Triangle, room_doors: Sequence[Point]) -> bool:
    """True when the triangle has a side too flat for one of the room's door directions."""
    for tri_pt in tri.points:
        for direction in range(len(room_doors)):
            if direction in (Direction.N, Direction.S):
                # too horizontal
                if any(other.x != tri_pt.x and other.y == tri_pt.y for other in tri.points):
                    return True
            elif any(other.y != tri_pt.y and other.x == tri_pt.x for other in tri.points):
                # too vertical
                return True
    return False


def _door_hits(tri: Triangle, room_doors: Sequence[Point]) -> int:
    return sum(1 for tri_pt in tri.points for door in room_doors if tri_pt == door)


def _longest_clear_side(tri: Triangle, rooms: Sequence[Rectangle]) -> Optional[Path]:
    clear = [side for side in tri.sides
             if not any(room.intersects_path(side) for room in rooms)]
    if not clear:
        return None
    return max(clear, key=lambda side: side.length)


def find_corridors(rooms: Sequence[Rectangle],
                   doors: Sequence[Sequence[Point]],
                   triangles: Sequence[Triangle],
                   curve_threshold: Optional[float] = None) -> List[Corridor]:
    """
    Pick corridors linking rooms from a triangulation of their doors.

    Args:
        rooms: Room rectangles
        doors: ``doors[k]`` holds the door points of ``rooms[k]`` indexed by ``Direction``
        triangles: Triangulation of all door points, in the triangulator's order
        curve_threshold: Corridors longer than this become Bezier curves;
            defaults to ``settings.corridor_curve_length``

    Returns:
        Corridors in selection order
    """
    if len(rooms) != len(doors):
        raise ValueError(f"Got {len(rooms)} rooms but {len(doors)} door lists")

    if curve_threshold is None:
        curve_threshold = settings.corridor_curve_length

    corridors: List[Corridor] = []
    used_points: Set[Point] = set()

    for room_doors in doors:
        if not room_doors:
            continue

        for tri in triangles:
            if _is_axis_aligned(tri, room_doors):
                continue
            if _door_hits(tri, room_doors) != 1:
                continue

            path = _longest_clear_side(tri, rooms)
            if path is None:
                continue
            if path.first == path.last or path.first in used_points:
                continue

            if path.length > curve_threshold:
                corridors.append(CubicBezierCurve.between(path.first, path.last))
            else:
                corridors.append(path)
            used_points.add(path.last)

    logger.info("Corridors selected", rooms=len(rooms), corridors=len(corridors))
    return corridors

