"""Lightweight polygon/triangle file I/O for fist.

Provides readers/writers for common formats without heavy dependencies:
- read_obj_polygons: Import polygonal faces from Wavefront .obj
- write_obj: Export triangles as Wavefront .obj
- write_vtk: Export legacy VTK format for ParaView/VisIt visualization

Triangles are always (M, 3) integer arrays of 0-based vertex indices.
"""
from __future__ import annotations

import warnings
from typing import Dict, Optional

import numpy as np

from .logging_utils import get_logger
from .polygon_array import PolygonArray

logger = get_logger('fist.io')

__all__ = ['read_obj_polygons', 'write_obj', 'write_vtk']


def _resolve_index(token: str, count: int, lineno: int) -> int:
    n = int(token)
    if n > 0:
        idx = n - 1
    elif n < 0:
        idx = count + n
    else:
        raise ValueError(f"line {lineno}: OBJ indices are 1-based, got 0")
    if not 0 <= idx < count:
        raise ValueError(f"line {lineno}: index {n} out of range ({count} defined)")
    return idx


def read_obj_polygons(filepath: str) -> PolygonArray:
    """Read the polygonal faces of a Wavefront .obj file.

    Parameters
    ----------
    filepath : str
        Path to .obj file

    Returns
    -------
    PolygonArray
        One single-loop face per ``f`` record. Texture coordinate and normal
        references become the ``texcoord0`` and ``normal`` attribute index
        lists; the referenced arrays are in ``attribute_data``.

    Raises
    ------
    ValueError
        If the file contains no faces, a malformed record or an index out
        of range.

    Notes
    -----
    - Supports ``v``, ``vt``, ``vn`` and ``f`` records; other records are
      skipped
    - Face vertices may be given as ``v``, ``v/vt``, ``v//vn`` or
      ``v/vt/vn``, with 1-based or negative (relative) indices
    - Attribute indices are only kept if every face vertex carries them
    """
    vertices = []
    texcoords = []
    normals = []
    v_idx = []
    vt_idx = []
    vn_idx = []
    strips = []
    has_vt = True
    has_vn = True

    with open(filepath, 'r') as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.split('#', 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            tag = parts[0]
            try:
                if tag == 'v':
                    xyz = [float(t) for t in parts[1:4]]
                    if len(xyz) < 2:
                        raise ValueError("vertex needs at least two coordinates")
                    vertices.append(xyz + [0.0] * (3 - len(xyz)))
                elif tag == 'vt':
                    uv = [float(t) for t in parts[1:3]]
                    texcoords.append(uv + [0.0] * (2 - len(uv)))
                elif tag == 'vn':
                    normals.append([float(t) for t in parts[1:4]])
                elif tag == 'f':
                    refs = parts[1:]
                    for ref in refs:
                        fields = ref.split('/')
                        v_idx.append(_resolve_index(fields[0], len(vertices), lineno))
                        if len(fields) > 1 and fields[1]:
                            vt_idx.append(_resolve_index(fields[1], len(texcoords), lineno))
                        else:
                            has_vt = False
                        if len(fields) > 2 and fields[2]:
                            vn_idx.append(_resolve_index(fields[2], len(normals), lineno))
                        else:
                            has_vn = False
                    strips.append(len(refs))
            except ValueError as exc:
                raise ValueError(f"{filepath}:{lineno}: {exc}") from exc

    if not strips:
        raise ValueError(f"No faces found in {filepath}")

    attribute_indices: Dict[str, np.ndarray] = {}
    attribute_data: Dict[str, np.ndarray] = {}
    if has_vt and texcoords:
        attribute_indices['texcoord0'] = np.asarray(vt_idx, dtype=np.int64)
        attribute_data['texcoord0'] = np.asarray(texcoords, dtype=np.float64)
    if has_vn and normals:
        attribute_indices['normal'] = np.asarray(vn_idx, dtype=np.int64)
        attribute_data['normal'] = np.asarray(normals, dtype=np.float64)

    logger.debug("read %d vertices and %d faces from %s", len(vertices), len(strips), filepath)
    return PolygonArray(
        coordinates=np.asarray(vertices, dtype=np.float64),
        coordinate_indices=np.asarray(v_idx, dtype=np.int64),
        strip_counts=np.asarray(strips, dtype=np.int64),
        attribute_indices=attribute_indices,
        attribute_data=attribute_data,
    )


def _check_triangles(points: np.ndarray, triangles: np.ndarray):
    points = np.asarray(points, dtype=np.float64)
    triangles = np.asarray(triangles)
    if points.ndim != 2 or points.shape[1] not in (2, 3):
        raise ValueError(f"points must be (N, 2) or (N, 3), got shape {points.shape}")
    if triangles.size == 0:
        triangles = triangles.reshape(0, 3)
    if triangles.ndim != 2 or triangles.shape[1] != 3:
        raise ValueError(f"triangles must be (M, 3), got shape {triangles.shape}")
    if points.shape[1] == 2:
        points = np.column_stack([points, np.zeros(len(points))])
    return points, triangles


def write_obj(filepath: str, points: np.ndarray, triangles: np.ndarray,
              title: str = "fist triangulation") -> None:
    """Write a triangle mesh as Wavefront .obj (1-based indices).

    Parameters
    ----------
    filepath : str
        Output .obj file path
    points : (N, 2) or (N, 3) ndarray
        Vertex coordinates. If 2D, z=0 is added.
    triangles : (M, 3) ndarray
        Triangle connectivity (0-indexed)
    title : str
        Written as a leading comment
    """
    points, triangles = _check_triangles(points, triangles)
    with open(filepath, 'w') as f:
        f.write(f"# {title}\n")
        for pt in points:
            f.write(f"v {pt[0]:.16g} {pt[1]:.16g} {pt[2]:.16g}\n")
        for tri in triangles:
            f.write(f"f {tri[0] + 1} {tri[1] + 1} {tri[2] + 1}\n")


def write_vtk(filepath: str,
              points: np.ndarray,
              triangles: np.ndarray,
              cell_data: Optional[Dict[str, np.ndarray]] = None,
              title: str = "fist triangulation") -> None:
    """Write a triangle mesh to legacy VTK format (ASCII).

    Parameters
    ----------
    filepath : str
        Output .vtk file path
    points : (N, 2) or (N, 3) ndarray
        Vertex coordinates. If 2D, z=0 is added.
    triangles : (M, 3) ndarray
        Triangle connectivity (0-indexed)
    cell_data : dict, optional
        Scalar data per triangle, keyed by field name; (M,) arrays
    title : str, default="fist triangulation"
        Dataset title/description

    Examples
    --------
    >>> write_vtk('square.vtk', coords, result.coordinate_indices)
    """
    points, triangles = _check_triangles(points, triangles)
    num_points = len(points)
    num_triangles = len(triangles)

    with open(filepath, 'w') as f:
        f.write("# vtk DataFile Version 2.0\n")
        f.write(f"{title}\n")
        f.write("ASCII\n")
        f.write("DATASET UNSTRUCTURED_GRID\n")

        f.write(f"POINTS {num_points} double\n")
        for pt in points:
            f.write(f"{pt[0]:.16e} {pt[1]:.16e} {pt[2]:.16e}\n")

        # Format: numIndices v0 v1 v2
        f.write(f"\nCELLS {num_triangles} {num_triangles * 4}\n")
        for tri in triangles:
            f.write(f"3 {tri[0]} {tri[1]} {tri[2]}\n")

        # Cell types (5 = triangle in VTK)
        f.write(f"\nCELL_TYPES {num_triangles}\n")
        for _ in range(num_triangles):
            f.write("5\n")

        if cell_data:
            f.write(f"\nCELL_DATA {num_triangles}\n")
            for name, data in cell_data.items():
                data = np.asarray(data)
                if data.ndim != 1 or len(data) != num_triangles:
                    warnings.warn(f"Skipping cell_data['{name}'] with unsupported shape {data.shape}")
                    continue
                f.write(f"SCALARS {name} double 1\n")
                f.write("LOOKUP_TABLE default\n")
                for val in data:
                    f.write(f"{val:.16e}\n")
