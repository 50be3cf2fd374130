"""Flat triangle and half-edge buffers.

Triangle ``t`` occupies slots ``3t``, ``3t + 1`` and ``3t + 2`` of
``triangles``; slot ``e`` is the half-edge starting at ``triangles[e]``.
``halfedges[e]`` is the opposite slot in the neighbouring triangle, or
``EMPTY`` on the boundary.
"""

from typing import Iterator, Tuple

import numpy as np

from .hull import EMPTY


def next_halfedge(e: int) -> int:
    return e - 2 if e % 3 == 2 else e + 1


def prev_halfedge(e: int) -> int:
    return e + 2 if e % 3 == 0 else e - 1


def triangle_of_edge(e: int) -> int:
    return e // 3


def edges_of_triangle(t: int) -> Tuple[int, int, int]:
    return 3 * t, 3 * t + 1, 3 * t + 2


class HalfEdgeMesh:
    """Preallocated triangle / half-edge storage."""

    def __init__(self, max_triangles: int):
        self.triangles = np.zeros(max_triangles * 3, dtype=np.uint32)
        self.halfedges = np.full(max_triangles * 3, EMPTY, dtype=np.int32)
        self.length = 0

    def __len__(self) -> int:
        return self.length // 3

    def link(self, a: int, b: int) -> None:
        self.halfedges[a] = b
        if b != EMPTY:
            self.halfedges[b] = a

    def add_triangle(self, i0: int, i1: int, i2: int, a: int, b: int, c: int) -> int:
        """Store triangle (i0, i1, i2) and link its three edges to ``a``, ``b`` and ``c``.

        Returns the slot of its first edge.
        """
        t = self.length
        if t + 3 > len(self.triangles):
            raise IndexError("triangle buffer is full")
        self.triangles[t] = i0
        self.triangles[t + 1] = i1
        self.triangles[t + 2] = i2
        self.link(t, a)
        self.link(t + 1, b)
        self.link(t + 2, c)
        self.length += 3
        return t

    def trim(self) -> None:
        """Shrink both buffers to the triangles actually created and freeze them."""
        self.triangles = self.triangles[:self.length].copy()
        self.halfedges = self.halfedges[:self.length].copy()
        self.triangles.setflags(write=False)
        self.halfedges.setflags(write=False)

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Each undirected edge once, as a pair of point indices."""
        for e in range(self.length):
            opposite = int(self.halfedges[e])
            if e > opposite:
                yield int(self.triangles[e]), int(self.triangles[next_halfedge(e)])
