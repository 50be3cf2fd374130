"""
Advancing hull used during incremental triangulation.

The hull is a circular doubly linked list of point indices stored as an arena:
node ``i`` is point ``i`` and its links live in flat numpy arrays. Removed
nodes keep their slot and carry a tombstone flag. An angular hash around the
seed circumcenter gives a nearby live node to start boundary walks from; the
linked list stays authoritative for the hull's shape.
"""

import math
from typing import Iterator, List

import numpy as np

from .geometry import Point

EMPTY = -1


def pseudo_angle(dx: float, dy: float) -> float:
    """
    Monotonic substitute for ``atan2`` with values in [0, 4].

    Only the ordering matters, so the cheap ratio ``dx / (|dx| + |dy|)`` is
    used instead of a real arctangent. The origin itself maps to 0.
    """
    s = abs(dx) + abs(dy)
    if s == 0:
        return 0.0
    a = 1 - dx / s
    return 2 - a if dy < 0 else 2 + a


class AdvancingHull:
    """Boundary of the partial triangulation plus its spatial hash."""

    def __init__(self, points: List[Point], center: Point):
        n = len(points)
        self.points = points
        self.center = center

        self.prev = np.full(n, EMPTY, dtype=np.int32)
        self.next = np.full(n, EMPTY, dtype=np.int32)
        # half-edge running from node i to next[i]
        self.tri = np.full(n, EMPTY, dtype=np.int32)
        self.removed = np.zeros(n, dtype=bool)

        self.hash_size = max(1, math.ceil(math.sqrt(n)))
        self.hash = np.full(self.hash_size, EMPTY, dtype=np.int32)

        self.start = EMPTY
        self.size = 0

    # ---------------- Linked list ----------------
    def insert(self, i: int, after: int = EMPTY) -> int:
        """Add node ``i``; the first node forms a ring with itself."""
        if after == EMPTY:
            self.prev[i] = i
            self.next[i] = i
            self.start = i
        else:
            nxt = int(self.next[after])
            self.next[i] = nxt
            self.prev[i] = after
            self.prev[nxt] = i
            self.next[after] = i
        self.removed[i] = False
        self.size += 1
        return i

    def remove(self, i: int) -> int:
        """Unlink node ``i`` and tombstone it. Returns its former predecessor."""
        prv = int(self.prev[i])
        nxt = int(self.next[i])
        self.next[prv] = nxt
        self.prev[nxt] = prv
        self.removed[i] = True
        self.size -= 1
        if self.start == i:
            self.start = prv
        return prv

    def nodes(self, start: int = EMPTY) -> Iterator[int]:
        """Live nodes in boundary order."""
        if start == EMPTY:
            start = self.start
        if start == EMPTY:
            return
        e = start
        while True:
            yield e
            e = int(self.next[e])
            if e == start:
                break

    def retarget_edge(self, old: int, new: int) -> bool:
        """Point the node owning half-edge ``old`` at ``new``."""
        for e in self.nodes():
            if self.tri[e] == old:
                self.tri[e] = new
                return True
        return False

    # ---------------- Spatial hash ----------------
    def hash_key(self, p: Point) -> int:
        angle = pseudo_angle(p.x - self.center.x, p.y - self.center.y)
        return int(angle / 4 * self.hash_size) % self.hash_size

    def hash_node(self, i: int) -> None:
        self.hash[self.hash_key(self.points[i])] = i

    def find_start(self, p: Point) -> int:
        """A live hull node near ``p`` in angle, or the hull start if the hash has none."""
        start_key = self.hash_key(p)
        for offset in range(self.hash_size):
            node = int(self.hash[(start_key + offset) % self.hash_size])
            if node != EMPTY and not self.removed[node]:
                return node
        return self.start
