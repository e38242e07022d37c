"""Sorting and de-duplication of the projected points of a face.

After cleaning, ``ctx.points`` is sorted lexicographically (x, then y) and
holds every distinct point exactly once; node indices are remapped into the
cleaned array. Points closer than a snap tolerance can optionally be merged
first, using a KD-tree to find the close pairs.
"""
from __future__ import annotations

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components
from scipy.spatial import cKDTree

from .logging_utils import get_logger

logger = get_logger('fist.clean')

__all__ = ['snap_points', 'clean_face']


def snap_points(pts: np.ndarray, tolerance: float) -> np.ndarray:
    """Replace every cluster of points within ``tolerance`` by its first member.

    Clusters are the connected components of the "closer than tolerance"
    relation, so chains of close points collapse onto a single point.
    """
    if tolerance <= 0.0 or len(pts) < 2:
        return pts
    tree = cKDTree(pts)
    pairs = tree.query_pairs(r=tolerance, output_type='ndarray')
    if len(pairs) == 0:
        return pts
    n = len(pts)
    graph = coo_matrix((np.ones(len(pairs)), (pairs[:, 0], pairs[:, 1])), shape=(n, n))
    _, labels = connected_components(graph, directed=False)
    _, first = np.unique(labels, return_index=True)
    return pts[first[labels]]


def clean_face(ctx, loop_min: int, loop_max: int, snap_tolerance: float = 0.0) -> int:
    """Sort the points of the face, drop duplicates and remap the nodes.

    Returns the number of points removed.
    """
    pts = np.asarray(ctx.points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return 0
    pts = snap_points(pts, snap_tolerance)
    unique, inverse = np.unique(pts, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)

    for i in range(loop_min, loop_max):
        for node in ctx.loop_nodes(ctx.loops[i]):
            ctx.index[node] = int(inverse[ctx.index[node]])
    ctx.points = [tuple(p) for p in unique.tolist()]

    removed = len(pts) - len(unique)
    if removed:
        ctx.stats.duplicates_removed += removed
        logger.debug("face %d: %d duplicate points removed", ctx.face, removed)
    return removed
