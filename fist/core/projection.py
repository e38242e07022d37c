"""Projection of (possibly nonplanar) 3D loops onto an approximating plane.

The plane normal is the average of the unit normals of the fan triangles of a
loop, flipped where necessary to agree with the running sum. For faces with
holes the per-loop normals are averaged as well. The vertices are then
expressed in an orthonormal frame whose third axis is the normal, and the
first two coordinates become the working 2D points.
"""
from __future__ import annotations

import numpy as np

from .constants import EPS_NORMAL, AXIS_PICK_THRESHOLD
from .logging_utils import get_logger

logger = get_logger('fist.projection')

_Z_AXIS = np.array([0.0, 0.0, 1.0])

__all__ = ['determine_normal', 'face_normal', 'projection_frame', 'project_face']


def _unit(v: np.ndarray):
    d = float(np.linalg.norm(v))
    if d > EPS_NORMAL:
        return v / d
    return None


def determine_normal(ctx, ind: int) -> np.ndarray:
    """Average normal of the loop starting at node ``ind``.

    The corner at ``ind`` seeds the sum; the normals of the fan triangles
    anchored at ``ind`` are added, each flipped to agree with the running
    sum. Degenerate triangles are skipped. Returns +z when nothing usable
    remains.
    """
    nodes = list(ctx.loop_nodes(ind))
    if len(nodes) < 3:
        return _Z_AXIS.copy()
    idx = np.fromiter((ctx.index[n] for n in nodes), dtype=np.int64, count=len(nodes))
    pts = ctx.vertices[idx]
    apex = pts[0]
    seed = np.cross(pts[-1] - apex, pts[1] - apex)
    fans = np.cross(pts[1:-1] - apex, pts[2:] - apex)

    unit = _unit(seed)
    normal = np.zeros(3) if unit is None else unit
    lengths = np.linalg.norm(fans, axis=1)
    for nr, d in zip(fans, lengths):
        if d <= EPS_NORMAL:
            continue
        nr = nr / d
        if float(np.dot(normal, nr)) < 0.0:
            nr = -nr
        normal = normal + nr
    unit = _unit(normal)
    return _Z_AXIS.copy() if unit is None else unit


def face_normal(ctx, loop_min: int, loop_max: int) -> np.ndarray:
    """Normal of the face made of ``ctx.loops[loop_min:loop_max]``."""
    normal = determine_normal(ctx, ctx.loops[loop_min])
    if loop_max - loop_min > 1:
        for i in range(loop_min + 1, loop_max):
            nr = determine_normal(ctx, ctx.loops[i])
            if float(np.dot(normal, nr)) < 0.0:
                nr = -nr
            normal = normal + nr
        unit = _unit(normal)
        normal = _Z_AXIS.copy() if unit is None else unit
    return normal


def projection_frame(n3: np.ndarray) -> np.ndarray:
    """Return the 3x3 matrix whose rows are the frame axes n1, n2, n3.

    ``n3`` must have unit length.
    """
    if abs(n3[0]) > AXIS_PICK_THRESHOLD or abs(n3[1]) > AXIS_PICK_THRESHOLD:
        n1 = np.array([-n3[1], n3[0], 0.0])
    else:
        n1 = np.array([n3[2], 0.0, -n3[0]])
    n1 = n1 / np.linalg.norm(n1)
    n2 = np.cross(n1, n3)
    n2 = n2 / np.linalg.norm(n2)
    return np.vstack([n1, n2, n3])


def project_face(ctx, loop_min: int, loop_max: int) -> np.ndarray:
    """Project the loops of one face into ``ctx.points``.

    Every node index is replaced by the index of its projected point; the
    points are stored in loop order, one per node. Returns the normal used.
    """
    normal = face_normal(ctx, loop_min, loop_max)
    frame = projection_frame(normal)

    nodes = []
    for i in range(loop_min, loop_max):
        nodes.extend(ctx.loop_nodes(ctx.loops[i]))
    idx = np.fromiter((ctx.index[n] for n in nodes), dtype=np.int64, count=len(nodes))
    projected = ctx.vertices[idx] @ frame[:2].T

    ctx.init_points()
    for node, (x, y) in zip(nodes, projected.tolist()):
        ctx.index[node] = ctx.store_point(x, y)
    logger.debug("face %d projected %d points onto normal %s", ctx.face, len(nodes), normal)
    return normal
