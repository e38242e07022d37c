"""Visualization helpers for triangulation results.

Separated from the triangulator so that matplotlib stays an optional
dependency.
"""
from __future__ import annotations

import os as _os
import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt

from .logging_utils import get_logger

logger = get_logger('fist.viz')

__all__ = ['plot_triangulation', 'flatten_points']


def flatten_points(points) -> np.ndarray:
    """Return 2D plotting coordinates.

    3D input is reduced by dropping the coordinate with the smallest extent.
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] not in (2, 3):
        raise ValueError(f"points must be (N, 2) or (N, 3), got shape {pts.shape}")
    if pts.shape[1] == 2 or len(pts) == 0:
        return pts[:, :2]
    extent = pts.max(axis=0) - pts.min(axis=0)
    keep = [k for k in range(3) if k != int(np.argmin(extent))]
    return pts[:, keep]


def plot_triangulation(points2d, triangles, outname="triangulation.png",
                       title=None, show_vertices: bool = True):
    """Plot triangles over their vertices and save the figure.

    Args:
        points2d: (N, 2) coordinates; (N, 3) input is flattened
        triangles: (M, 3) vertex indices
        outname: output image path
        title: optional figure title; defaults to the triangle count
        show_vertices: if True, mark the vertices used by any triangle
    """
    pts = flatten_points(points2d)
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    plt.figure(figsize=(6, 6))
    if len(tris):
        plt.triplot(pts[:, 0], pts[:, 1], tris, color='k', linewidth=0.8)
        if show_vertices:
            used = np.unique(tris)
            plt.plot(pts[used, 0], pts[used, 1], 'o', color=(0.2, 0.4, 0.8), markersize=3)
    else:
        logger.warning("no triangles to plot; drawing vertices only")
        plt.plot(pts[:, 0], pts[:, 1], 'o', color=(0.85, 0.2, 0.2), markersize=3)
    plt.gca().set_aspect('equal')
    plt.title(title if title is not None else f"{len(tris)} triangles")
    plt.savefig(outname, dpi=150)
    plt.close()
    logger.info("wrote %s", outname)
