"""Brute-force validity oracle for candidate diagonals.

ReflexOracle keeps the set of reflex nodes of the loop being clipped. A
triangle is free of obstructions if it contains none of those nodes, which
is enough to validate an ear of a simple polygon. For bridges and splits
every boundary edge of the face is scanned instead, pruned by bounding
boxes. No spatial hashing is used.
"""
from __future__ import annotations

from typing import Dict

from .bbox import BBox
from .numerics import (
    ge, le, pnt_in_triangle, seg_intersect, stable_det2d, vtx_in_triangle,
)

__all__ = ['ReflexOracle']


def _sorted_pair(i: int, j: int):
    return (i, j) if i <= j else (j, i)


class ReflexOracle:
    """Reflex-vertex set plus the edge range used by edge scans.

    Parameters
    ----------
    ctx : TriangulationContext
        Context whose node arena and points are queried.
    """

    def __init__(self, ctx):
        self.ctx = ctx
        self.loop_min = 0
        self.loop_max = 0
        # insertion ordered set of reflex node handles
        self.reflex: Dict[int, None] = {}

    def __len__(self) -> int:
        return len(self.reflex)

    def __contains__(self, ind: int) -> bool:
        return ind in self.reflex

    def prepare_edges(self, loop_min: int, loop_max: int) -> None:
        """Scan the edges of ``ctx.loops[loop_min:loop_max]`` from now on."""
        self.loop_min = loop_min
        self.loop_max = loop_max

    def prepare_points(self, loop: int) -> None:
        """Collect the reflex nodes of ``ctx.loops[loop]``."""
        ctx = self.ctx
        self.reflex = {}
        for ind in ctx.loop_nodes(ctx.loops[loop]):
            if ctx.angle[ind] < 0:
                self.reflex[ind] = None

    def delete_reflex_vertex(self, ind: int) -> None:
        self.reflex.pop(ind, None)

    def intersection_exists(self, i1: int, ind1: int, i2: int, i3: int, bb: BBox) -> bool:
        """Whether the CCW triangle i1, i2, i3 contains a reflex vertex.

        ``i2, i3`` is the candidate diagonal and ``bb`` its bounding box,
        which is grown to cover the whole triangle. ``ind1`` is the apex node.
        """
        if not self.reflex:
            return False
        ctx = self.ctx
        bb.extend(ctx, i1)
        index = ctx.index
        nxt = ctx.next
        for ind_vtx in self.reflex:
            i4 = index[ind_vtx]
            if not bb.pnt_in_bbox(ctx, i4):
                continue
            ind5 = nxt[ind_vtx]
            # skip the apex and nodes that no longer belong to the polygon
            if ind_vtx == ind1 or ind_vtx == ind5:
                continue
            if i4 == i1:
                if self.handle_degeneracies(i1, ind1, i2, i3, i4, ind_vtx):
                    return True
            elif i4 != i2 and i4 != i3:
                inside, _ = vtx_in_triangle(ctx, i1, i2, i3, i4)
                if inside:
                    return True
        return False

    def edge_intersection_exists(self, bb: BBox, i1: int, i2: int, ind5: int, i5: int) -> bool:
        """Whether the segment spanned by ``bb`` crosses a boundary edge."""
        ctx = self.ctx
        index = ctx.index
        nxt = ctx.next
        ctx.ident_cntr = 0
        for loop in range(self.loop_min, self.loop_max):
            ind = ctx.loops[loop]
            ind2 = ind
            i3 = index[ind2]
            while True:
                ind2 = nxt[ind2]
                i4 = index[ind2]
                bb1 = BBox(ctx, i3, i4)
                if bb.overlaps(bb1):
                    if seg_intersect(ctx, bb.imin, bb.imax, bb1.imin, bb1.imax, i5):
                        return True
                i3 = i4
                if ind2 == ind:
                    break

        # the segment shares an endpoint with at least four boundary edges
        if ctx.ident_cntr >= 4:
            return self.check_bottle_neck(i5, i1, i2, ind5)
        return False

    def _edge_hits(self, i2: int, i3: int, i4: int, i5: int) -> bool:
        a, b = _sorted_pair(i2, i3)
        c, d = _sorted_pair(i4, i5)
        return seg_intersect(self.ctx, a, b, c, d, -1)

    def handle_degeneracies(self, i1: int, ind1: int, i2: int, i3: int, i4: int, ind4: int) -> bool:
        """Decide whether node ``ind4``, coincident with the apex i1, obstructs
        the triangle i1, i2, i3.

        The neighbors of ``ind4`` and its incident edges are tested first;
        then the loop is split at the two coincident nodes and the ear is
        rejected unless both halves have the same orientation.
        """
        ctx = self.ctx
        index = ctx.index
        eps = ctx.epsilon

        for ind5 in (ctx.prev[ind4], ctx.next[ind4]):
            i5 = index[ind5]
            if i5 != i2 and i5 != i3:
                inside, kind = vtx_in_triangle(ctx, i1, i2, i3, i5)
                if inside and kind == 0:
                    return True
                if self._edge_hits(i2, i3, i4, i5):
                    return True

        i0 = i1
        ind0 = ind1
        area1 = 0.0
        ind = ctx.next[ind0]
        j1 = index[ind]
        while ind != ind4:
            ind2 = ctx.next[ind]
            j2 = index[ind2]
            area1 += stable_det2d(ctx, i0, j1, j2)
            ind = ind2
            j1 = j2

        area2 = 0.0
        ind = ctx.prev[ind0]
        j1 = index[ind]
        while ind != ind4:
            ind2 = ctx.prev[ind]
            j2 = index[ind2]
            area2 += stable_det2d(ctx, i0, j1, j2)
            ind = ind2
            j1 = j2

        if le(area1, eps) and le(area2, eps):
            return False
        if ge(area1, eps) and ge(area2, eps):
            return False
        return True

    def check_area(self, ind4: int, ind5: int) -> bool:
        """Whether both sub-loops cut off by the coincident nodes ind4, ind5
        have positive area."""
        ctx = self.ctx
        index = ctx.index
        eps = ctx.epsilon
        i0 = index[ind4]

        area1 = 0.0
        ind1 = ctx.next[ind4]
        i1 = index[ind1]
        while ind1 != ind5:
            ind2 = ctx.next[ind1]
            i2 = index[ind2]
            area1 += stable_det2d(ctx, i0, i1, i2)
            ind1 = ind2
            i1 = i2
        if le(area1, eps):
            return False

        area2 = 0.0
        ind1 = ctx.next[ind5]
        i1 = index[ind1]
        while ind1 != ind4:
            ind2 = ctx.next[ind1]
            i2 = index[ind2]
            area2 += stable_det2d(ctx, i0, i1, i2)
            ind1 = ind2
            i1 = i2
        return not le(area2, eps)

    def check_bottle_neck(self, i1: int, i2: int, i3: int, ind4: int) -> bool:
        """Whether the diagonal i2, i3 leaves the polygon through the
        bottleneck vertex i1 (node ``ind4``)."""
        ctx = self.ctx
        index = ctx.index
        i4 = i1

        for ind5 in (ctx.prev[ind4], ctx.next[ind4]):
            i5 = index[ind5]
            if i5 != i2 and i5 != i3:
                if pnt_in_triangle(ctx, i1, i2, i3, i5):
                    return True
            if self._edge_hits(i2, i3, i4, i5):
                return True

        ind5 = ctx.next[ind4]
        while ind5 != ind4:
            if index[ind5] == i4 and self.check_area(ind4, ind5):
                return True
            ind5 = ctx.next[ind5]
        return False
