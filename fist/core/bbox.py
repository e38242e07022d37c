"""Axis-aligned boxes over sorted point indices.

Because the points are sorted lexicographically, the index range
``imin..imax`` doubles as the x-range of a box. Only the y-range needs
actual coordinates.
"""
from __future__ import annotations


class BBox:
    __slots__ = ('imin', 'imax', 'ymin', 'ymax')

    def __init__(self, ctx, i: int, j: int):
        if i <= j:
            self.imin, self.imax = i, j
        else:
            self.imin, self.imax = j, i
        y1 = ctx.points[i][1]
        y2 = ctx.points[j][1]
        if y1 <= y2:
            self.ymin, self.ymax = y1, y2
        else:
            self.ymin, self.ymax = y2, y1

    def pnt_in_bbox(self, ctx, i: int) -> bool:
        if self.imax < i or self.imin > i:
            return False
        y = ctx.points[i][1]
        return not (self.ymax < y or self.ymin > y)

    def overlaps(self, other: 'BBox') -> bool:
        return not (self.imax < other.imin or self.imin > other.imax
                    or self.ymax < other.ymin or self.ymin > other.ymax)

    def extend(self, ctx, i: int) -> None:
        """Grow the box so that it also covers point ``i``."""
        if i < self.imin:
            self.imin = i
        elif i > self.imax:
            self.imax = i
        y = ctx.points[i][1]
        if y < self.ymin:
            self.ymin = y
        elif y > self.ymax:
            self.ymax = y

    def __repr__(self) -> str:
        return f"BBox(imin={self.imin}, imax={self.imax}, ymin={self.ymin!r}, ymax={self.ymax!r})"


__all__ = ['BBox']
