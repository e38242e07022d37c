"""Fallback ladder for loops in which no ear can be found.

The steps get more aggressive each time the driver runs out of ears:

1. break a cross-over of two consecutive edges by clipping unchecked
   triangles;
2. split the loop along any valid diagonal whose midpoint has winding
   number one;
3. queue the first convex corner (or any corner) as an ear regardless of
   its validity.

Each step removes or separates at least one vertex, so the driver always
terminates. The price is that malformed input may produce overlapping
triangles.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from .bbox import BBox
from .errors import IrreducibleLastResort, SelfIntersectingLoop
from .logging_utils import get_logger
from .numerics import angle, base_length, get_ratio, is_convex_angle, is_in_cone, seg_intersect

logger = get_logger('fist.desperate')

__all__ = [
    'desperate', 'exists_cross_over', 'handle_cross_over', 'exists_split',
    'found_split', 'handle_split', 'winding_number', 'lets_hope',
]


def desperate(ctx, ind: int, loop: int) -> Tuple[bool, bool]:
    """Try the cross-over and split steps on the loop through ``ind``.

    Returns ``(hopeless, split)``. ``hopeless`` means neither step applied
    and the caller has to fall back to lets_hope(); ``split`` means the
    loop was split and both parts were pushed onto the chain stack.
    """
    found = exists_cross_over(ctx, ind)
    if found is not None:
        handle_cross_over(ctx, *found)
        return False, False

    ctx.oracle.prepare_edges(loop, loop + 1)
    found = exists_split(ctx, ind)
    if found is not None:
        handle_split(ctx, *found)
        return False, True
    return True, False


def exists_cross_over(ctx, ind: int) -> Optional[Tuple[int, int, int, int, int, int, int, int]]:
    """Find consecutive nodes whose edges i1, i2 and i3, i4 intersect."""
    index = ctx.index
    nxt = ctx.next
    ind1 = ind
    ind2 = nxt[ind1]
    ind3 = nxt[ind2]
    ind4 = nxt[ind3]
    i1, i2, i3, i4 = index[ind1], index[ind2], index[ind3], index[ind4]
    while True:
        bb1 = BBox(ctx, i1, i2)
        bb2 = BBox(ctx, i3, i4)
        if bb1.overlaps(bb2):
            if seg_intersect(ctx, bb1.imin, bb1.imax, bb2.imin, bb2.imax, -1):
                return ind1, i1, ind2, i2, ind3, i3, ind4, i4
        ind1, i1 = ind2, i2
        ind2, i2 = ind3, i3
        ind3, i3 = ind4, i4
        ind4 = nxt[ind3]
        i4 = index[ind4]
        if ind1 == ind:
            return None


def handle_cross_over(ctx, ind1: int, i1: int, ind2: int, i2: int,
                      ind3: int, i3: int, ind4: int, i4: int) -> None:
    """Clip one triangle next to the cross-over and queue the other."""
    angle1 = ctx.angle[ind1]
    angle4 = ctx.angle[ind4]
    if angle1 < angle4:
        first = True
    elif angle1 > angle4:
        first = False
    elif ctx.ears_sorted:
        ratio1 = get_ratio(ctx, i3, i4, i1)
        ratio4 = get_ratio(ctx, i1, i2, i4)
        first = not (ratio4 < ratio1)
    else:
        first = True

    if first:
        # clip i1, i2, i3, then i1, i3, i4
        ctx.delete_links(ind2)
        ctx.store_triangle(ind1, ind2, ind3)
        ctx.angle[ind3] = 1
        ctx.queue.insert(0.0, ind3, ind1, ind4)
    else:
        # clip i2, i3, i4, then i1, i2, i4
        ctx.delete_links(ind3)
        ctx.store_triangle(ind2, ind3, ind4)
        ctx.angle[ind2] = 1
        ctx.queue.insert(0.0, ind2, ind1, ind4)

    ctx.stats.crossovers += 1
    ctx.diagnostics.record(
        SelfIntersectingLoop, ctx.face,
        f"edges {i1}-{i2} and {i3}-{i4} cross; clipped without validation",
        edges=((i1, i2), (i3, i4)),
    )


def winding_number(ctx, ind: int, p) -> int:
    """Winding number of the loop through ``ind`` around point ``p``.

    Not meaningful for points on the boundary.
    """
    points = ctx.points
    index = ctx.index
    total = 0.0
    i1 = index[ind]
    ind2 = ctx.next[ind]
    i2 = index[ind2]
    total += angle(ctx, p, points[i1], points[i2])
    while ind2 != ind:
        i1 = i2
        ind2 = ctx.next[ind2]
        i2 = index[ind2]
        total += angle(ctx, p, points[i1], points[i2])
    total += math.pi
    return int(total / (2.0 * math.pi))


def found_split(ctx, ind5: int, ind: int, ind1: int, i1: int, i3: int, i4: int) -> Optional[Tuple[int, int]]:
    """Look for a partner of node ``ind1`` among the nodes ``ind5 .. ind``.

    ``i3`` and ``i4`` are the points of the neighbors of ``ind1``. Returns
    ``(node, point)`` of the partner or None.
    """
    index = ctx.index
    points = ctx.points
    p1 = points[i1]

    distances = []
    while True:
        distances.append((base_length(p1, points[index[ind5]]), ind5))
        ind5 = ctx.next[ind5]
        if ind5 == ind:
            break
    distances.sort(key=lambda item: item[0])

    oracle = ctx.oracle
    for _, ind2 in distances:
        i2 = index[ind2]
        if i1 == i2:
            continue
        i6 = index[ctx.prev[ind2]]
        i7 = index[ctx.next[ind2]]
        if not is_in_cone(ctx, i6, i2, i7, i1, ctx.angle[ind2] > 0):
            continue
        if not is_in_cone(ctx, i3, i1, i4, i2, ctx.angle[ind1] > 0):
            continue
        bb = BBox(ctx, i1, i2)
        if oracle.edge_intersection_exists(bb, -1, -1, ind1, -1):
            continue
        # reject diagonals that would create figure-eights
        p2 = points[i2]
        center = (0.5 * (p1[0] + p2[0]), 0.5 * (p1[1] + p2[1]))
        if winding_number(ctx, ind, center) == 1:
            return ind2, i2
    return None


def exists_split(ctx, ind: int) -> Optional[Tuple[int, int, int, int]]:
    """Find a valid diagonal ``(ind1, i1, ind2, i2)`` of the loop through ``ind``."""
    index = ctx.index
    nxt = ctx.next
    ind1 = ind
    i1 = index[ind1]
    ind4 = nxt[ind1]
    i4 = index[ind4]
    ind5 = nxt[ind4]
    ind3 = ctx.prev[ind1]
    i3 = index[ind3]
    if ind5 != ind3 and ind5 != ind1:
        found = found_split(ctx, ind5, ind3, ind1, i1, i3, i4)
        if found is not None:
            return (ind1, i1) + found

    i3 = i1
    ind1, i1 = ind4, i4
    ind4 = ind5
    i4 = index[ind4]
    ind5 = nxt[ind4]
    while ind5 != ind:
        found = found_split(ctx, ind5, ind, ind1, i1, i3, i4)
        if found is not None:
            return (ind1, i1) + found
        i3 = i1
        ind1, i1 = ind4, i4
        ind4 = ind5
        i4 = index[ind4]
        ind5 = nxt[ind4]
    return None


def handle_split(ctx, ind1: int, i1: int, ind3: int, i3: int) -> None:
    """Split the loop along the diagonal ind1, ind3 into two chains."""
    ind2 = ctx.duplicate_node(ind1)
    ind4 = ctx.duplicate_node(ind3)
    ctx.split_splice(ind1, ind2, ind3, ind4)
    ctx.store_chain(ind1)
    ctx.store_chain(ind3)

    index = ctx.index
    for ind in (ind1, ind2, ind3, ind4):
        ctx.angle[ind] = is_convex_angle(
            ctx, index[ctx.prev[ind]], index[ind], index[ctx.next[ind]], ind)
    ctx.stats.splits += 1
    logger.debug("face %d: loop split along %d-%d", ctx.face, i1, i3)


def lets_hope(ctx, ind: int) -> None:
    """Queue the first convex corner of the loop as an ear, unchecked.

    Without any convex corner the corner at ``ind`` is forced.
    """
    target = None
    for ind1 in ctx.loop_nodes(ind):
        if ctx.angle[ind1] > 0:
            target = ind1
            break
    if target is None:
        ctx.angle[ind] = 1
        target = ind
    ctx.queue.insert(0.0, target, ctx.prev[target], ctx.next[target])
    ctx.stats.last_resorts += 1
    ctx.diagnostics.record(
        IrreducibleLastResort, ctx.face,
        f"no ear and no split diagonal left; corner at point {ctx.index[target]} clipped unchecked",
        point=ctx.index[target],
    )
