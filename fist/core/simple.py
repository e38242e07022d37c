"""Fast path for faces that are a single triangle or quadrangle."""
from __future__ import annotations

import numpy as np

from .numerics import orientation

__all__ = ['simple_face']


def _distinct_corners(ctx, nodes) -> bool:
    """Whether the corners use distinct vertices at distinct coordinates."""
    idx = [ctx.index[ind] for ind in nodes]
    if len(set(idx)) < len(idx):
        return False
    return len(np.unique(ctx.vertices[idx], axis=0)) == len(idx)


def simple_face(ctx, ind1: int) -> bool:
    """Triangulate the loop through ``ind1`` directly if it has at most four nodes.

    Must run before projection and cleaning: node indices are still vertex
    indices. Returns False if the loop needs the full algorithm, which is
    also the case when two corners coincide.
    """
    ind0 = ctx.prev[ind1]
    ind2 = ctx.next[ind1]
    if ind0 == ind1 or ind0 == ind2:
        # fewer than three vertices: nothing to emit
        return True
    ind3 = ctx.next[ind2]
    if ind0 == ind3:
        if not _distinct_corners(ctx, (ind1, ind2, ind3)):
            return False
        ctx.store_triangle(ind1, ind2, ind3)
        return True
    ind4 = ctx.next[ind3]
    if ind0 != ind4:
        return False
    if not _distinct_corners(ctx, (ind1, ind2, ind3, ind4)):
        return False

    # quadrangle: project onto the coordinate plane most parallel to it
    index = ctx.index
    verts = ctx.vertices[[index[ind1], index[ind2], index[ind3], index[ind4]]]
    nr = np.abs(np.cross(verts[0] - verts[1], verts[2] - verts[1]))
    x, y, z = nr
    if z >= x and z >= y:
        axes = [0, 1]
    elif x >= y and x >= z:
        axes = [2, 1]
    else:
        axes = [0, 2]
    ctx.init_points(1)
    for p in verts[:, axes].tolist():
        ctx.store_point(*p)

    ori2 = orientation(ctx, 1, 2, 3)
    ori4 = orientation(ctx, 1, 3, 4)
    if (ori2 > 0 and ori4 > 0) or (ori2 < 0 and ori4 < 0):
        # diagonal i1, i3
        ctx.store_triangle(ind1, ind2, ind3)
        ctx.store_triangle(ind1, ind3, ind4)
    else:
        # diagonal i2, i4; for a figure-eight either choice is wrong
        ctx.store_triangle(ind2, ind3, ind4)
        ctx.store_triangle(ind2, ind4, ind1)
    return True
