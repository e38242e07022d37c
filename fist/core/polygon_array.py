"""Input and output containers of the triangulator.

A PolygonArray describes polygonal faces the way an indexed geometry
container does: a shared coordinate array, one index per loop vertex,
``strip_counts`` giving the number of vertices of every loop and
``contour_counts`` giving the number of loops of every face. The first loop
of a face is its outer boundary, the following loops are its holes.
Per-vertex attributes (normals, colors, texture coordinates) are carried as
index lists parallel to ``coordinate_indices``.

A TriangleArray holds the result, with every index mapped back into the
caller's index spaces.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

__all__ = ['PolygonArray', 'TriangleArray']


def _as_xyz(coordinates) -> np.ndarray:
    coords = np.asarray(coordinates, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] not in (2, 3):
        raise ValueError(f"coordinates must have shape (N, 2) or (N, 3), got {coords.shape}")
    if coords.shape[1] == 2:
        coords = np.hstack([coords, np.zeros((len(coords), 1))])
    return coords


@dataclass
class PolygonArray:
    """Polygonal faces over a shared coordinate array.

    Attributes
    ----------
    coordinates : (N, 3) ndarray of float64
        Vertex coordinates; (N, 2) input is padded with z = 0.
    coordinate_indices : (K,) ndarray of int64
        Vertex index of every loop vertex; defaults to ``range(N)``.
    strip_counts : (L,) ndarray of int64
        Number of vertices of every loop; defaults to a single loop.
    contour_counts : (F,) ndarray of int64
        Number of loops of every face; defaults to one loop per face.
    attribute_indices : dict of str -> (K,) ndarray of int64
        Attribute index lists parallel to ``coordinate_indices``.
    attribute_data : dict of str -> ndarray
        Optional attribute arrays the index lists refer to. Passed through
        untouched.
    """
    coordinates: np.ndarray
    coordinate_indices: Optional[np.ndarray] = None
    strip_counts: Optional[np.ndarray] = None
    contour_counts: Optional[np.ndarray] = None
    attribute_indices: Dict[str, np.ndarray] = field(default_factory=dict)
    attribute_data: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        self.coordinates = _as_xyz(self.coordinates)
        if self.coordinate_indices is None:
            self.coordinate_indices = np.arange(len(self.coordinates), dtype=np.int64)
        else:
            self.coordinate_indices = np.asarray(self.coordinate_indices, dtype=np.int64).reshape(-1)
        if self.strip_counts is None:
            self.strip_counts = np.array([len(self.coordinate_indices)], dtype=np.int64)
        else:
            self.strip_counts = np.asarray(self.strip_counts, dtype=np.int64).reshape(-1)
        if self.contour_counts is None:
            self.contour_counts = np.ones(len(self.strip_counts), dtype=np.int64)
        else:
            self.contour_counts = np.asarray(self.contour_counts, dtype=np.int64).reshape(-1)
        self.attribute_indices = {
            name: np.asarray(idx, dtype=np.int64).reshape(-1)
            for name, idx in self.attribute_indices.items()
        }

    @classmethod
    def from_loops(cls, coordinates, loops: Sequence[Sequence[int]], **attribute_indices) -> 'PolygonArray':
        """Build a single face from an outer loop followed by hole loops.

        ``loops`` holds vertex indices into ``coordinates``.
        """
        loops = [list(loop) for loop in loops]
        if not loops:
            raise ValueError("at least one loop is required")
        indices = np.array([i for loop in loops for i in loop], dtype=np.int64)
        return cls(
            coordinates=coordinates,
            coordinate_indices=indices,
            strip_counts=np.array([len(loop) for loop in loops], dtype=np.int64),
            contour_counts=np.array([len(loops)], dtype=np.int64),
            attribute_indices=dict(attribute_indices),
        )

    @classmethod
    def from_polygon(cls, outer, holes=()) -> 'PolygonArray':
        """Build a single face from explicit vertex lists.

        The vertices of ``outer`` and of every hole are concatenated in that
        order; the face indexes them consecutively.
        """
        rings = [_as_xyz(outer)] + [_as_xyz(h) for h in holes]
        coords = np.vstack(rings)
        loops = []
        start = 0
        for ring in rings:
            loops.append(range(start, start + len(ring)))
            start += len(ring)
        return cls.from_loops(coords, loops)

    @property
    def num_faces(self) -> int:
        return len(self.contour_counts)

    @property
    def num_loops(self) -> int:
        return len(self.strip_counts)

    def validate(self) -> None:
        """Check the index bookkeeping; raise ValueError on inconsistencies."""
        n_idx = len(self.coordinate_indices)
        if np.any(self.strip_counts < 0):
            raise ValueError("strip_counts must be non-negative")
        if int(self.strip_counts.sum()) != n_idx:
            raise ValueError(f"strip_counts sum to {int(self.strip_counts.sum())} "
                             f"but there are {n_idx} coordinate indices")
        if np.any(self.contour_counts < 1):
            raise ValueError("every face needs at least one loop")
        if int(self.contour_counts.sum()) != len(self.strip_counts):
            raise ValueError(f"contour_counts sum to {int(self.contour_counts.sum())} "
                             f"but there are {len(self.strip_counts)} strips")
        if n_idx and (self.coordinate_indices.min() < 0
                      or self.coordinate_indices.max() >= len(self.coordinates)):
            raise ValueError("coordinate index out of range")
        for name, idx in self.attribute_indices.items():
            if len(idx) != n_idx:
                raise ValueError(f"attribute {name!r} has {len(idx)} indices, expected {n_idx}")

    def loop_slices(self):
        """Yield one slice into ``coordinate_indices`` per loop."""
        start = 0
        for count in self.strip_counts.tolist():
            yield slice(start, start + count)
            start += count

    def reverse(self) -> None:
        """Reverse the winding of every loop, attributes included."""
        arrays = [self.coordinate_indices] + list(self.attribute_indices.values())
        for sl in self.loop_slices():
            for arr in arrays:
                arr[sl] = arr[sl][::-1].copy()


@dataclass
class TriangleArray:
    """Triangles in the caller's index spaces.

    Attributes
    ----------
    coordinate_indices : (M, 3) ndarray of int64
        Vertex indices into the input coordinates.
    attribute_indices : dict of str -> (M, 3) ndarray of int64
        Attribute indices remapped the same way.
    coordinates : (N, 3) ndarray of float64
        The input coordinates, for convenience.
    stats : TriangulationStats
    diagnostics : Diagnostics
    attribute_data : dict of str -> ndarray
        The input attribute arrays, for convenience.
    """
    coordinate_indices: np.ndarray
    attribute_indices: Dict[str, np.ndarray]
    coordinates: np.ndarray
    stats: object = None
    diagnostics: object = None
    attribute_data: Dict[str, np.ndarray] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.coordinate_indices)

    @property
    def triangles(self) -> np.ndarray:
        return self.coordinate_indices
