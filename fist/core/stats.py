"""Triangulation counters and presentation utilities."""
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, Any


@dataclass
class TriangulationStats:
    faces: int = 0
    simple_faces: int = 0
    loops: int = 0
    triangles: int = 0
    duplicates_removed: int = 0
    degenerate_loops: int = 0
    degenerate_triangles: int = 0
    bridges_simple: int = 0
    bridges_inserted: int = 0
    ears_clipped: int = 0
    stale_ears: int = 0
    reclassifications: int = 0
    crossovers: int = 0
    splits: int = 0
    last_resorts: int = 0
    forced_fans: int = 0
    # Timing (seconds)
    time_total: float = 0.0

    def merge(self, other: 'TriangulationStats') -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d['fallback_rate'] = ((self.crossovers + self.splits + self.last_resorts) / self.faces) if self.faces else 0.0
        d['simple_rate'] = (self.simple_faces / self.faces) if self.faces else 0.0
        return d


def format_stats_table(stats_dict) -> str:
    """Return a human readable two-column table of triangulation counters."""
    if not stats_dict:
        return "<no stats>"
    rows = []
    for key, value in stats_dict.items():
        if isinstance(value, float):
            rows.append((key, f"{value:.6g}"))
        else:
            rows.append((key, str(value)))
    kw = max(len(k) for k, _ in rows)
    vw = max(len(v) for _, v in rows)
    lines = [f"{'counter'.ljust(kw)} {'value'.rjust(vw)}", "-" * (kw + vw + 1)]
    lines += [f"{k.ljust(kw)} {v.rjust(vw)}" for k, v in rows]
    return "\n".join(lines)


__all__ = ["TriangulationStats", "format_stats_table"]
