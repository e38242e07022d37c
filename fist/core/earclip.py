"""Angle classification, ear detection and the clipping step."""
from __future__ import annotations

from typing import Tuple

from .bbox import BBox
from .numerics import get_ratio, is_convex_angle, is_in_cone

__all__ = ['classify_angles', 'classify_ears', 'is_ear', 'clip_ear']


def classify_angles(ctx, ind: int) -> None:
    """Classify every angle of the loop through ``ind``.

    Classes: 1 convex, 0 straight, 2 zero angle, -1 reflex, -2 full angle.
    """
    index = ctx.index
    ind1 = ind
    i1 = index[ind1]
    i0 = index[ctx.prev[ind1]]
    while True:
        ind2 = ctx.next[ind1]
        i2 = index[ind2]
        ctx.angle[ind1] = is_convex_angle(ctx, i0, i1, i2, ind1)
        i0 = i1
        i1 = i2
        ind1 = ind2
        if ind1 == ind:
            break


def classify_ears(ctx, ind: int) -> None:
    """Refill the ear queue with every ear of the loop through ``ind``."""
    queue = ctx.queue
    queue.clear()
    for ind1 in ctx.loop_nodes(ind):
        if ctx.angle[ind1] > 0:
            ok, prev, nxt, ratio = is_ear(ctx, ind1)
            if ok:
                queue.insert(ratio, ind1, prev, nxt)


def is_ear(ctx, ind2: int) -> Tuple[bool, int, int, float]:
    """Check whether node ``ind2`` is an ear.

    Returns ``(ok, prev, next, ratio)``. The diagonal prev, next must lie
    inside the cones at both of its endpoints and the triangle may contain
    no reflex vertex. Coincident neighbors short-circuit to a ratio-0 ear.
    """
    index = ctx.index
    angle = ctx.angle
    i2 = index[ind2]
    ind3 = ctx.next[ind2]
    i3 = index[ind3]
    ind4 = ctx.next[ind3]
    i4 = index[ind4]
    ind1 = ctx.prev[ind2]
    i1 = index[ind1]
    ind0 = ctx.prev[ind1]
    i0 = index[ind0]

    if i1 == i3 or i1 == i2 or i2 == i3 or angle[ind2] == 2:
        # not a simple polygon here
        return True, ind1, ind3, 0.0
    if i0 == i3:
        if angle[ind0] < 0 or angle[ind3] < 0:
            return True, ind1, ind3, 0.0
        return False, ind1, ind3, 0.0
    if i1 == i4:
        if angle[ind1] < 0 or angle[ind4] < 0:
            return True, ind1, ind3, 0.0
        return False, ind1, ind3, 0.0

    if not is_in_cone(ctx, i0, i1, i2, i3, angle[ind1] > 0):
        return False, ind1, ind3, 0.0
    if not is_in_cone(ctx, i2, i3, i4, i1, angle[ind3] > 0):
        return False, ind1, ind3, 0.0

    bb = BBox(ctx, i1, i3)
    if ctx.oracle.intersection_exists(i2, ind2, i3, i1, bb):
        return False, ind1, ind3, 0.0
    if ctx.ears_sorted:
        ratio = get_ratio(ctx, i1, i3, i2)
    else:
        ratio = 1.0
    return True, ind1, ind3, ratio


def clip_ear(ctx) -> Tuple[bool, bool]:
    """Clip the best queued ear.

    Returns ``(clipped, done)``; ``clipped`` is False if the queue ran dry,
    ``done`` is True once the current loop has been triangulated.
    """
    queue = ctx.queue
    index = ctx.index
    while True:
        entry = queue.pop()
        if entry is None:
            return False, False
        _, ind2, prev, nxt = entry
        ind1 = ctx.prev[ind2]
        ind3 = ctx.next[ind2]
        if prev == ind1 and nxt == ind3:
            break
        # the neighborhood changed since the ear was queued
        ctx.stats.stale_ears += 1

    i1 = index[ind1]
    i3 = index[ind3]
    ctx.delete_links(ind2)
    ctx.store_triangle(ind1, ind2, ind3)
    ctx.stats.ears_clipped += 1

    ind0 = ctx.prev[ind1]
    if ind0 == ind3:
        # nothing left
        return True, True
    i0 = index[ind0]
    angle1 = is_convex_angle(ctx, i0, i1, i3, ind1)
    ind4 = ctx.next[ind3]
    i4 = index[ind4]
    angle3 = is_convex_angle(ctx, i1, i3, i4, ind3)

    oracle = ctx.oracle
    angle = ctx.angle
    if i1 != i3:
        if angle1 >= 0 and angle[ind1] < 0:
            oracle.delete_reflex_vertex(ind1)
        if angle3 >= 0 and angle[ind3] < 0:
            oracle.delete_reflex_vertex(ind3)
    else:
        if angle1 >= 0 and angle[ind1] < 0:
            oracle.delete_reflex_vertex(ind1)
        elif angle3 >= 0 and angle[ind3] < 0:
            oracle.delete_reflex_vertex(ind3)
    angle[ind1] = angle1
    angle[ind3] = angle3

    if angle1 > 0:
        ok, prev, nxt, ratio = is_ear(ctx, ind1)
        if ok:
            queue.insert(ratio, ind1, prev, nxt)
    if angle3 > 0:
        ok, prev, nxt, ratio = is_ear(ctx, ind3)
        if ok:
            queue.insert(ratio, ind3, prev, nxt)

    ind0 = ctx.prev[ind1]
    ind4 = ctx.next[ind3]
    if ind0 == ind4:
        # one triangle left
        ctx.store_triangle(ind1, ind3, ind4)
        ctx.stats.ears_clipped += 1
        return True, True
    return True, False
