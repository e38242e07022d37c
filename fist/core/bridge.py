"""Bridges linking the holes of a face to its outer boundary.

Every hole is attached at its leftmost vertex. Holes are processed from
left to right, so each one is joined to the boundary merged so far: the
outer loop plus the holes already bridged. Because the points are sorted,
"leftmost" is simply "smallest point index".
"""
from __future__ import annotations

from typing import List, Tuple

from .bbox import BBox
from .errors import NoValidBridge
from .logging_utils import get_logger
from .numerics import base_length, is_convex_angle, is_in_cone

logger = get_logger('fist.bridge')

__all__ = [
    'construct_bridges', 'find_bridge', 'find_leftmost_vertex',
    'simple_bridge', 'insert_bridge',
]


def find_leftmost_vertex(ctx, ind: int) -> Tuple[int, int]:
    """Return ``(node, point)`` of the leftmost vertex of the loop through ``ind``.

    Among coincident leftmost nodes a reflex one is preferred.
    """
    index = ctx.index
    left_ind = ind
    left_i = index[ind]
    ind1 = ctx.next[ind]
    while ind1 != ind:
        i1 = index[ind1]
        if i1 < left_i:
            left_ind, left_i = ind1, i1
        elif i1 == left_i and ctx.angle[ind1] < 0:
            left_ind, left_i = ind1, i1
        ind1 = ctx.next[ind1]
    return left_ind, left_i


def construct_bridges(ctx, loop_min: int, loop_max: int) -> None:
    """Merge the holes ``ctx.loops[loop_min + 1:loop_max]`` into the outer loop."""
    ind0, i0 = find_leftmost_vertex(ctx, ctx.loops[loop_min])
    leftmost: List[Tuple[int, int]] = []
    for i in range(loop_min + 1, loop_max):
        ind, index = find_leftmost_vertex(ctx, ctx.loops[i])
        leftmost.append((index, ind))
    leftmost.sort(key=lambda item: item[0])

    for start, hole_ind in leftmost:
        found, ind1, i1 = find_bridge(ctx, ind0, i0, start)
        if not found:
            ctx.diagnostics.record(
                NoValidBridge, ctx.face,
                f"hole at point {start} cannot be linked to the boundary without crossing it",
                point=start,
            )
        if i1 == start:
            # the hole touches the boundary at its leftmost vertex
            simple_bridge(ctx, ind1, hole_ind)
            ctx.stats.bridges_simple += 1
        else:
            insert_bridge(ctx, ind1, i1, hole_ind, start)
            ctx.stats.bridges_inserted += 1


def find_bridge(ctx, ind: int, i: int, start: int) -> Tuple[bool, int, int]:
    """Find a node of the loop through ``ind`` that sees point ``start``.

    Returns ``(found, node, point)``. Candidates are tried by increasing L1
    distance; only points left of ``start`` can form a valid diagonal. If
    none does, any candidate with an uncrossed diagonal is accepted, and as
    a last resort ``ind`` itself is returned with ``found`` False.
    """
    index = ctx.index
    points = ctx.points
    p_start = points[start]

    distances = []
    for node in ctx.loop_nodes(ind):
        if index[node] == start:
            return True, node, start
        distances.append((base_length(p_start, points[index[node]]), node))
    distances.sort(key=lambda item: item[0])

    oracle = ctx.oracle
    for _, ind1 in distances:
        i1 = index[ind1]
        if i1 > start:
            continue
        i0 = index[ctx.prev[ind1]]
        i2 = index[ctx.next[ind1]]
        if is_in_cone(ctx, i0, i1, i2, start, ctx.angle[ind1] > 0):
            bb = BBox(ctx, i1, start)
            if not oracle.edge_intersection_exists(bb, -1, -1, ind1, -1):
                return True, ind1, i1

    # the hole does not lie inside the boundary; settle for any diagonal
    for _, ind1 in distances:
        i1 = index[ind1]
        bb = BBox(ctx, i1, start)
        if not oracle.edge_intersection_exists(bb, -1, -1, ind1, -1):
            return True, ind1, i1

    return False, ind, i


def _reset_angle(ctx, ind: int) -> None:
    index = ctx.index
    ctx.angle[ind] = is_convex_angle(
        ctx, index[ctx.prev[ind]], index[ind], index[ctx.next[ind]], ind)


def simple_bridge(ctx, ind1: int, ind2: int) -> None:
    """Join two loops that share a vertex by exchanging successors."""
    ctx.rotate_links(ind1, ind2)
    _reset_angle(ctx, ind1)
    _reset_angle(ctx, ind2)


def insert_bridge(ctx, ind1: int, i1: int, ind3: int, i3: int) -> None:
    """Join two loops by the double edge ind1, ind3.

    Both endpoints are duplicated; the copies keep the common index of
    their originals.
    """
    ind2 = ctx.duplicate_node(ind1)
    ind4 = ctx.duplicate_node(ind3)
    ctx.split_splice(ind1, ind2, ind3, ind4)
    for ind in (ind1, ind2, ind3, ind4):
        _reset_angle(ctx, ind)
    logger.debug("face %d: bridge %d-%d inserted", ctx.face, i1, i3)
