"""
Seed triangle selection and insertion ordering.

The seed is a small, well centred triangle: the point nearest to the bounding
box center, its nearest distinct neighbour, and the third point giving the
smallest circumcircle. Every other point is then inserted in order of
increasing distance from the seed's circumcenter, which keeps each new point
just outside the current hull.
"""

from typing import List, Sequence, Tuple

import numpy as np
import structlog

from .geometry import Point, circumcenter, signed_area

logger = structlog.get_logger()

NO_TRIANGULATION = "No Delaunay triangulation exists for this input."


class TriangulationError(ValueError):
    """Raised when a point set cannot be triangulated."""


def select_seed(coords: np.ndarray) -> Tuple[int, int, int]:
    """
    Pick the seed triangle for an ``(n, 2)`` coordinate array.

    Args:
        coords: Point coordinates

    Returns:
        Indices (i0, i1, i2) of a positively oriented seed triangle

    Raises:
        TriangulationError: if all points coincide or are collinear
    """
    xs = coords[:, 0]
    ys = coords[:, 1]

    cx = (xs.min() + xs.max()) / 2
    cy = (ys.min() + ys.max()) / 2

    # argmin keeps the first index on ties
    i0 = int(np.argmin((xs - cx) ** 2 + (ys - cy) ** 2))
    x0, y0 = xs[i0], ys[i0]

    d0 = (xs - x0) ** 2 + (ys - y0) ** 2
    d0[d0 == 0] = np.inf
    i1 = int(np.argmin(d0))
    if not np.isfinite(d0[i1]):
        logger.error("Seed search failed", reason="all points coincide", points=len(coords))
        raise TriangulationError(NO_TRIANGULATION)

    radii = circumradii2(coords, i0, i1)
    radii[[i0, i1]] = np.inf
    i2 = int(np.argmin(radii))
    if not np.isfinite(radii[i2]):
        logger.error("Seed search failed", reason="all points collinear", points=len(coords))
        raise TriangulationError(NO_TRIANGULATION)

    p0, p1, p2 = (Point(*coords[i]) for i in (i0, i1, i2))
    if signed_area(p0, p1, p2) < 0:
        i1, i2 = i2, i1

    logger.debug("Seed triangle selected", i0=i0, i1=i1, i2=i2, radius2=float(radii[i2]))
    return i0, i1, i2


def circumradii2(coords: np.ndarray, i0: int, i1: int) -> np.ndarray:
    """Squared circumradius of (i0, i1, k) for every k; ``inf`` where no finite circle exists."""
    dx = coords[i1, 0] - coords[i0, 0]
    dy = coords[i1, 1] - coords[i0, 1]
    ex = coords[:, 0] - coords[i0, 0]
    ey = coords[:, 1] - coords[i0, 1]

    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    d = dx * ey - dy * ex

    with np.errstate(divide="ignore", invalid="ignore"):
        x = (ey * bl - dy * cl) * 0.5 / d
        y = (dx * cl - ex * bl) * 0.5 / d
        r = x * x + y * y

    degenerate = (bl == 0) | (cl == 0) | (d == 0) | (r == 0) | ~np.isfinite(r)
    return np.where(degenerate, np.inf, r)


def seed_center(coords: np.ndarray, seed: Tuple[int, int, int]) -> Point:
    """Circumcenter of the seed triangle, the pivot for ordering and hashing."""
    p0, p1, p2 = (Point(float(coords[i, 0]), float(coords[i, 1])) for i in seed)
    center = circumcenter(p0, p1, p2)
    if center is None:
        raise TriangulationError(NO_TRIANGULATION)
    return center


def distance_keys(coords: np.ndarray, center: Point) -> List[Tuple[float, float, float]]:
    """Sort keys: squared distance to ``center``, then x, then y."""
    dists = (coords[:, 0] - center.x) ** 2 + (coords[:, 1] - center.y) ** 2
    return list(zip(dists.tolist(), coords[:, 0].tolist(), coords[:, 1].tolist()))


def _insertion_sort(ids: List[int], keys: Sequence, left: int, right: int) -> None:
    for i in range(left + 1, right + 1):
        temp = ids[i]
        j = i - 1
        while j >= left and keys[ids[j]] > keys[temp]:
            ids[j + 1] = ids[j]
            j -= 1
        ids[j + 1] = temp


def quicksort_ids(ids: List[int], keys: Sequence, insertion_threshold: int = 20) -> None:
    """
    Sort ``ids`` in place by ``keys[id]``.

    Quicksort with a median-of-three pivot that falls back to insertion sort
    for short partitions. Pending partitions live on an explicit stack with the
    larger one pushed first, so the stack stays logarithmic. Not stable.
    """
    stack = [(0, len(ids) - 1)]

    while stack:
        left, right = stack.pop()

        if right - left <= insertion_threshold:
            _insertion_sort(ids, keys, left, right)
            continue

        median = (left + right) >> 1
        i = left + 1
        j = right
        ids[median], ids[i] = ids[i], ids[median]
        if keys[ids[left]] > keys[ids[right]]:
            ids[left], ids[right] = ids[right], ids[left]
        if keys[ids[i]] > keys[ids[right]]:
            ids[i], ids[right] = ids[right], ids[i]
        if keys[ids[left]] > keys[ids[i]]:
            ids[left], ids[i] = ids[i], ids[left]

        temp = ids[i]
        pivot = keys[temp]
        while True:
            i += 1
            while keys[ids[i]] < pivot:
                i += 1
            j -= 1
            while keys[ids[j]] > pivot:
                j -= 1
            if j < i:
                break
            ids[i], ids[j] = ids[j], ids[i]
        ids[left + 1] = ids[j]
        ids[j] = temp

        if right - i + 1 >= j - left:
            stack.append((i, right))
            stack.append((left, j - 1))
        else:
            stack.append((left, j - 1))
            stack.append((i, right))


def insertion_order(coords: np.ndarray, center: Point, insertion_threshold: int = 20) -> List[int]:
    """Point indices sorted by distance from ``center`` with (x, y) tie-break."""
    keys = distance_keys(coords, center)
    ids = list(range(len(coords)))
    quicksort_ids(ids, keys, insertion_threshold)
    return ids
