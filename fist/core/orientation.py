"""Orientation normalization of the loops of a face.

The outer loop is made CCW and every hole CW. A single loop that had to be
reversed clears ``ctx.ccw_loop`` so that emitted triangles keep the winding
of the input.
"""
from __future__ import annotations

from .errors import LoopOrderingError
from .logging_utils import get_logger
from .numerics import stable_det2d

logger = get_logger('fist.orientation')

__all__ = ['polygon_area', 'adjust_orientation', 'determine_orientation']


def polygon_area(ctx, ind: int) -> float:
    """Signed area of the loop through node ``ind`` (positive if CCW).

    Point 0 serves as the common apex of the summed triangles.
    """
    hook = 0
    area = 0.0
    index = ctx.index
    nxt = ctx.next
    ind1 = ind
    i1 = index[ind1]
    while True:
        ind2 = nxt[ind1]
        i2 = index[ind2]
        area += stable_det2d(ctx, hook, i1, i2)
        ind1 = ind2
        i1 = i2
        if ind1 == ind:
            break
    return 0.5 * area


def determine_orientation(ctx, ind: int) -> None:
    """Make the single loop through ``ind`` CCW."""
    if polygon_area(ctx, ind) < 0.0:
        ctx.swap_links(ind)
        ctx.ccw_loop = False


def adjust_orientation(ctx, loop_min: int, loop_max: int, strict: bool = True) -> None:
    """Orient the loops ``ctx.loops[loop_min:loop_max]`` of a face with holes.

    The loop enclosing the largest area is the outer boundary. If it is not
    the first loop of the face, LoopOrderingError is raised in strict mode;
    otherwise it is moved to the front.
    """
    areas = [polygon_area(ctx, ctx.loops[i]) for i in range(loop_min, loop_max)]
    outer = 0
    largest = abs(areas[0])
    for k in range(1, len(areas)):
        if largest < abs(areas[k]):
            largest = abs(areas[k])
            outer = k

    if outer != 0:
        if strict:
            raise LoopOrderingError(ctx.face, outer)
        logger.debug("face %d: loop %d moved to the front as outer boundary", ctx.face, outer)
        loops = ctx.loops
        loops[loop_min], loops[loop_min + outer] = loops[loop_min + outer], loops[loop_min]
        areas[0], areas[outer] = areas[outer], areas[0]

    if areas[0] < 0.0:
        ctx.swap_links(ctx.loops[loop_min])
        # emit triangles with the winding of the outer boundary
        ctx.ccw_loop = False
    for k in range(1, len(areas)):
        if areas[k] > 0.0:
            ctx.swap_links(ctx.loops[loop_min + k])
