"""Working state of one triangulation run.

A TriangulationContext owns every arena used while triangulating: the node
arena of the circular doubly-linked loops, the loop table, the projected
point array, the emitted triangles and the stack of split-off chains. The
algorithm modules are plain functions that receive the context explicitly.

Nodes are addressed by integer handles into parallel lists. A deleted node
keeps its slot and links to itself; slots are never reclaimed during a run,
so handles stored in the ear queue stay unambiguous.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .constants import EPS_ZERO
from .diagnostics import Diagnostics
from .stats import TriangulationStats


class TriangulationContext:
    """Arenas and per-face state for a single triangulation call.

    Attributes
    ----------
    vertices : (N, 3) ndarray of float64
        Caller coordinates, addressed by the initial node indices.
    index, prev, next, angle, common : list of int
        Node arena. ``index`` holds a vertex index before projection and a
        point index afterwards; ``common`` is the position in the caller's
        index arrays; ``angle`` is the angle classification.
    loops : list of int
        One node handle per loop; faces are consecutive runs.
    points : list of (float, float)
        Projected, sorted and de-duplicated points of the current face.
    triangles : list of (int, int, int)
        Emitted triangles as node handles.
    """

    def __init__(self, vertices: np.ndarray, epsilon: float = EPS_ZERO,
                 diagnostics: Optional[Diagnostics] = None,
                 stats: Optional[TriangulationStats] = None):
        self.vertices = np.ascontiguousarray(vertices, dtype=np.float64)
        self.epsilon = float(epsilon)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.stats = stats if stats is not None else TriangulationStats()

        # node arena
        self.index: List[int] = []
        self.prev: List[int] = []
        self.next: List[int] = []
        self.angle: List[int] = []
        self.common: List[int] = []
        self.first_node = 0

        self.loops: List[int] = []
        self.points: List[Tuple[float, float]] = []
        self.triangles: List[Tuple[int, int, int]] = []
        self.chains: List[int] = []

        self.ccw_loop = True
        self.face = 0
        # bumped by seg_intersect when a tested segment shares the query vertex
        self.ident_cntr = 0

        # collaborators attached by the driver
        self.oracle = None
        self.queue = None
        self.ears_sorted = False

    # ------------------------------------------------------------------
    # node arena
    # ------------------------------------------------------------------
    @property
    def num_nodes(self) -> int:
        return len(self.index)

    @property
    def num_points(self) -> int:
        return len(self.points)

    def make_node(self, index: int) -> int:
        ind = len(self.index)
        self.index.append(index)
        self.prev.append(-1)
        self.next.append(-1)
        self.angle.append(0)
        self.common.append(-1)
        return ind

    def make_hook(self) -> int:
        """Return a self-linked placeholder node used while building a loop."""
        ind = self.make_node(-1)
        self.prev[ind] = ind
        self.next[ind] = ind
        return ind

    def make_loop_header(self) -> int:
        self.loops.append(self.make_hook())
        return len(self.loops) - 1

    def insert_after(self, ind1: int, ind2: int) -> None:
        nxt = self.next[ind1]
        self.next[ind2] = nxt
        self.prev[ind2] = ind1
        self.next[ind1] = ind2
        self.prev[nxt] = ind2

    def delete_links(self, ind: int) -> None:
        if self.first_node == ind:
            self.first_node = self.next[ind]
        nxt = self.next[ind]
        prv = self.prev[ind]
        self.prev[nxt] = prv
        self.next[prv] = nxt
        self.prev[ind] = ind
        self.next[ind] = ind

    def delete_hook(self, loop: int) -> None:
        """Unlink the placeholder of ``loop`` and point the loop at its first node."""
        ind1 = self.loops[loop]
        ind2 = self.next[ind1]
        self.delete_links(ind1)
        self.loops[loop] = ind2

    def rotate_links(self, ind1: int, ind2: int) -> None:
        """Exchange the successors of ind1 and ind2, merging or splitting cycles."""
        ind0 = self.next[ind1]
        ind3 = self.next[ind2]
        self.next[ind1] = ind3
        self.next[ind2] = ind0
        self.prev[ind0] = ind2
        self.prev[ind3] = ind1

    def split_splice(self, ind1: int, ind2: int, ind3: int, ind4: int) -> None:
        self.next[ind1] = ind4
        self.prev[ind4] = ind1
        self.prev[ind2] = ind3
        self.next[ind3] = ind2

    def swap_links(self, ind1: int) -> None:
        """Reverse the orientation of the loop containing ind1."""
        ind2 = self.next[ind1]
        self.next[ind1] = self.prev[ind1]
        self.prev[ind1] = ind2
        while ind2 != ind1:
            ind3 = self.next[ind2]
            self.next[ind2] = self.prev[ind2]
            self.prev[ind2] = ind3
            ind2 = ind3

    def duplicate_node(self, ind: int) -> int:
        """Insert a copy of ``ind`` right after it, sharing its common index."""
        dup = self.make_node(self.index[ind])
        self.insert_after(ind, dup)
        self.common[dup] = self.common[ind]
        return dup

    def loop_nodes(self, ind: int) -> Iterator[int]:
        """Yield the handles of the loop starting at ``ind``."""
        yield ind
        cur = self.next[ind]
        while cur != ind:
            yield cur
            cur = self.next[cur]

    def loop_length(self, ind: int) -> int:
        return sum(1 for _ in self.loop_nodes(ind))

    def reset_poly_list(self, ind: int) -> None:
        self.first_node = ind

    def get_node(self) -> int:
        return self.first_node

    # ------------------------------------------------------------------
    # chains of split-off loops
    # ------------------------------------------------------------------
    def store_chain(self, ind: int) -> None:
        self.chains.append(ind)

    def get_next_chain(self) -> Optional[int]:
        if self.chains:
            return self.chains.pop()
        return None

    # ------------------------------------------------------------------
    # triangles and points
    # ------------------------------------------------------------------
    def store_triangle(self, i: int, j: int, k: int) -> None:
        index = self.index
        if index[i] == index[j] or index[j] == index[k] or index[k] == index[i]:
            # corners collapsed onto one point by cleaning or bridging
            self.stats.degenerate_triangles += 1
            return
        if self.ccw_loop:
            self.triangles.append((i, j, k))
        else:
            self.triangles.append((j, i, k))

    def init_points(self, number: int = 0) -> None:
        self.points = [(0.0, 0.0)] * number

    def store_point(self, x: float, y: float) -> int:
        self.points.append((float(x), float(y)))
        return len(self.points) - 1


__all__ = ['TriangulationContext']
