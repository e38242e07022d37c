"""Robust geometric predicates over sorted point indices.

All predicates take the TriangulationContext first and address points by
their index into ``ctx.points``. Because the points are sorted
lexicographically, many collinear or coincident cases are decided by
comparing indices rather than coordinates, which keeps every answer
deterministic for a given triple of indices.
"""
from __future__ import annotations

import math
import sys

from .constants import RATIO_SKINNY, RATIO_LIMIT

__all__ = [
    'lt', 'le', 'ge', 'eq', 'gt', 'sign_eps',
    'det2d', 'base_length', 'side_length', 'in_between', 'strictly_in_between',
    'stable_det2d', 'orientation', 'is_in_cone', 'is_convex_angle', 'spike_angle',
    'pnt_in_triangle', 'vtx_in_triangle', 'seg_intersect', 'get_ratio', 'angle',
]


def lt(a: float, eps: float) -> bool:
    return a < -eps


def le(a: float, eps: float) -> bool:
    return a <= eps


def ge(a: float, eps: float) -> bool:
    return not (a <= -eps)


def eq(a: float, eps: float) -> bool:
    return a <= eps and not (a < -eps)


def gt(a: float, eps: float) -> bool:
    return not (a <= eps)


def sign_eps(x: float, eps: float) -> int:
    if x <= eps:
        return -1 if x < -eps else 0
    return 1


def det2d(u, v, w) -> float:
    """Twice the signed area of the triangle u, v, w (positive if CCW)."""
    return (u[0] - v[0]) * (v[1] - w[1]) + (v[1] - u[1]) * (v[0] - w[0])


def base_length(u, v) -> float:
    """L1 distance between u and v."""
    return abs(v[0] - u[0]) + abs(v[1] - u[1])


def side_length(u, v) -> float:
    """Squared L2 distance between u and v."""
    x = v[0] - u[0]
    y = v[1] - u[1]
    return x * x + y * y


def in_between(i1: int, i2: int, i3: int) -> bool:
    """Whether i3, known to be collinear with i1, i2, lies between them."""
    return i1 <= i3 <= i2


def strictly_in_between(i1: int, i2: int, i3: int) -> bool:
    return i1 < i3 < i2


def stable_det2d(ctx, i: int, j: int, k: int) -> float:
    """Determinant of points i, j, k evaluated in ascending index order.

    The subtraction sequence depends only on the sorted order of the three
    indices, so every call with the same triple returns the same value.
    """
    if i == j or i == k or j == k:
        return 0.0
    pts = ctx.points
    p = pts[i]
    q = pts[j]
    r = pts[k]
    if i < j:
        if j < k:
            return det2d(p, q, r)      # i < j < k
        elif i < k:
            return -det2d(p, r, q)     # i < k < j
        return det2d(r, p, q)          # k < i < j
    if i < k:
        return -det2d(q, p, r)         # j < i < k
    elif j < k:
        return det2d(q, r, p)          # j < k < i
    return -det2d(r, q, p)             # k < j < i


def orientation(ctx, i: int, j: int, k: int) -> int:
    """+1 if i, j, k are CCW, -1 if CW, 0 if collinear within ctx.epsilon."""
    det = stable_det2d(ctx, i, j, k)
    if det < -ctx.epsilon:
        return -1
    if det > ctx.epsilon:
        return 1
    return 0


def is_in_cone(ctx, i: int, j: int, k: int, l: int, convex: bool) -> bool:
    """Whether l lies in the cone at j spanned by the edges i, j and j, k."""
    if convex:
        if i != j:
            ori1 = orientation(ctx, i, j, l)
            if ori1 < 0:
                return False
            if ori1 == 0:
                if i < j:
                    if not in_between(i, j, l):
                        return False
                elif not in_between(j, i, l):
                    return False
        if j != k:
            ori2 = orientation(ctx, j, k, l)
            if ori2 < 0:
                return False
            if ori2 == 0:
                if j < k:
                    if not in_between(j, k, l):
                        return False
                elif not in_between(k, j, l):
                    return False
        return True
    if orientation(ctx, i, j, l) <= 0:
        if orientation(ctx, j, k, l) < 0:
            return False
    return True


def is_convex_angle(ctx, i: int, j: int, k: int, ind: int) -> int:
    """Classify the angle at node ``ind`` (point j) between i, j and j, k.

    Returns 1 (0..180 degrees), 0 (180), 2 (0), -1 (180..360) or -2 (360).
    """
    if i == j:
        # two or three identical vertices: report convex so that j gets clipped
        return 1
    if j == k:
        # duplicates are clipped first, after which the regular
        # classification applies; err on the reflex side meanwhile
        return -1
    ori = orientation(ctx, i, j, k)
    if ori > 0:
        return 1
    if ori < 0:
        return -1
    pts = ctx.points
    pj = pts[j]
    dot = (pts[i][0] - pj[0]) * (pts[k][0] - pj[0]) + (pts[i][1] - pj[1]) * (pts[k][1] - pj[1])
    if dot < 0.0:
        return 0
    # 0 or 360 degrees: cannot be judged locally
    return spike_angle(ctx, i, j, k, ind)


def spike_angle(ctx, i: int, j: int, k: int, ind: int) -> int:
    """Decide between a 0 and a 360 degree spike at node ``ind``.

    Walks outwards from the spike along the loop until the neighborhood is no
    longer collinear.
    """
    nxt = ctx.next
    prv = ctx.prev
    index = ctx.index
    ind1 = prv[ind]
    ind3 = nxt[ind]
    i1, i2, i3 = i, j, k
    while True:
        if ind1 == ind3:
            # all points collinear; a 360 degree answer treats the loop as a hole
            return -2
        if i1 != i3:
            if i1 < i2:
                ii1, ii2 = i1, i2
            else:
                ii1, ii2 = i2, i1
            if in_between(ii1, ii2, i3):
                i2 = i3
                ind3 = nxt[ind3]
                i3 = index[ind3]
            else:
                i2 = i1
                ind1 = prv[ind1]
                i1 = index[ind1]
            if ind1 == ind3:
                return 2
            ori = orientation(ctx, i1, i2, i3)
            if ori > 0:
                return 2
            if ori < 0:
                return -2
            continue

        i0 = i2
        i2 = i1
        ind1 = prv[ind1]
        i1 = index[ind1]
        if ind1 == ind3:
            return 2
        ind3 = nxt[ind3]
        i3 = index[ind3]
        if ind1 == ind3:
            return 2
        ori = orientation(ctx, i1, i2, i3)
        if ori > 0:
            if orientation(ctx, i1, i2, i0) > 0 and orientation(ctx, i2, i3, i0) > 0:
                return -2
            return 2
        if ori < 0:
            if orientation(ctx, i2, i1, i0) > 0 and orientation(ctx, i3, i2, i0) > 0:
                return 2
            return -2
        pts = ctx.points
        p2 = pts[i2]
        dot = (pts[i1][0] - p2[0]) * (pts[i3][0] - p2[0]) + (pts[i1][1] - p2[1]) * (pts[i3][1] - p2[1])
        if dot < 0.0:
            return 2 if orientation(ctx, i2, i1, i0) > 0 else -2


def pnt_in_triangle(ctx, i1: int, i2: int, i3: int, i4: int) -> bool:
    """Whether i4 lies inside or on the boundary of the CCW triangle i1, i2, i3."""
    if orientation(ctx, i2, i3, i4) >= 0:
        if orientation(ctx, i1, i2, i4) >= 0:
            if orientation(ctx, i3, i1, i4) >= 0:
                return True
    return False


def vtx_in_triangle(ctx, i1: int, i2: int, i3: int, i4: int):
    """Like pnt_in_triangle, but also classify where i4 was found.

    Returns ``(inside, type)`` with type 0 for the interior, 1 for the edge
    i3, i1, 2 for the edge i1, i2 and 3 for the vertex i1. The edge i2, i3
    is not distinguished from the interior.
    """
    if orientation(ctx, i2, i3, i4) >= 0:
        ori = orientation(ctx, i1, i2, i4)
        if ori > 0:
            ori = orientation(ctx, i3, i1, i4)
            if ori > 0:
                return True, 0
            if ori == 0:
                return True, 1
        elif ori == 0:
            ori = orientation(ctx, i3, i1, i4)
            if ori > 0:
                return True, 2
            if ori == 0:
                return True, 3
    return False, -1


def seg_intersect(ctx, i1: int, i2: int, i3: int, i4: int, i5: int) -> bool:
    """Whether the segments i1, i2 and i3, i4 intersect.

    Callers must pass ``i1 <= i2`` and ``i3 <= i4``. Touching at a common
    vertex is not an intersection. If i3 or i4 lies on i1, i2 an
    intersection is reported, but not if i1 or i2 lies on i3, i4: the test
    is not symmetric. Segments incident to ``i5`` are counted in
    ``ctx.ident_cntr``.
    """
    if i1 == i2 or i3 == i4:
        return False
    if i1 == i3 and i2 == i4:
        return True
    if i3 == i5 or i4 == i5:
        ctx.ident_cntr += 1

    ori3 = orientation(ctx, i1, i2, i3)
    ori4 = orientation(ctx, i1, i2, i4)
    if (ori3 == 1 and ori4 == 1) or (ori3 == -1 and ori4 == -1):
        return False

    if ori3 == 0:
        if strictly_in_between(i1, i2, i3):
            return True
        if ori4 == 0:
            if strictly_in_between(i1, i2, i4):
                return True
        else:
            return False
    elif ori4 == 0:
        return strictly_in_between(i1, i2, i4)

    ori1 = orientation(ctx, i3, i4, i1)
    ori2 = orientation(ctx, i3, i4, i2)
    if (ori1 <= 0 and ori2 <= 0) or (ori1 >= 0 and ori2 >= 0):
        return False
    return True


def get_ratio(ctx, i: int, j: int, k: int) -> float:
    """Quality measure of the triangle i, j, k (smaller is better).

    The ratio is ``base * base / area`` with the L1 length of the longest side
    as base. Skinny triangles whose short side is i, j get a small ratio so
    that they are clipped early.
    """
    pts = ctx.points
    p = pts[i]
    q = pts[j]
    r = pts[k]
    a = base_length(p, q)
    b = base_length(p, r)
    c = base_length(r, q)
    base = max(a, b, c)

    if 10.0 * a < min(b, c):
        return RATIO_SKINNY

    area = stable_det2d(ctx, i, j, k)
    if lt(area, ctx.epsilon):
        area = -area
    elif not gt(area, ctx.epsilon):
        if base > a:
            return RATIO_SKINNY
        return sys.float_info.max

    ratio = base * base / area
    if ratio < RATIO_LIMIT:
        return ratio
    if a < base:
        return RATIO_SKINNY
    return ratio


def angle(ctx, p, p1, p2) -> float:
    """Signed angle between p, p1 and p, p2.

    Not correct for an angle of exactly 180 degrees; callers only evaluate
    it at midpoints of valid diagonals.
    """
    sign = sign_eps(det2d(p2, p, p1), ctx.epsilon)
    if sign == 0:
        return 0.0
    angle1 = math.atan2(p1[1] - p[1], p1[0] - p[0])
    angle2 = math.atan2(p2[1] - p[1], p2[0] - p[0])
    if angle1 < 0.0:
        angle1 += 2.0 * math.pi
    if angle2 < 0.0:
        angle2 += 2.0 * math.pi
    ang = angle1 - angle2
    if ang > math.pi:
        ang = 2.0 * math.pi - ang
    elif ang < -math.pi:
        ang = 2.0 * math.pi + ang
    if sign == 1:
        return -ang if ang < 0.0 else ang
    return -ang if ang > 0.0 else ang
