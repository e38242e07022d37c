"""Central numerical tolerances and small algorithm constants.

Every tolerance used by the predicates lives here so they can be tuned
consistently and referenced without scattering literals.
"""
from __future__ import annotations

# Geometry tolerances
EPS_ZERO: float = 1e-8            # default "near zero" threshold for stable determinants
EPS_NORMAL: float = 1e-8          # minimum length of a usable (unnormalized) normal
EPS_AREA: float = 1e-12           # triangles below this area count as degenerate in checks

# Projection frame selection: use (-n.y, n.x, 0) as first axis when the
# normal is not (almost) parallel to z
AXIS_PICK_THRESHOLD: float = 0.1

# Quality ratio shortcuts for skinny triangles
RATIO_SKINNY: float = 0.1
RATIO_LIMIT: float = 10.0

# Iteration cap: factor * arena size + slack
DEFAULT_ITERATION_FACTOR: int = 8
ITERATION_SLACK: int = 64

__all__ = [
    'EPS_ZERO',
    'EPS_NORMAL',
    'EPS_AREA',
    'AXIS_PICK_THRESHOLD',
    'RATIO_SKINNY',
    'RATIO_LIMIT',
    'DEFAULT_ITERATION_FACTOR',
    'ITERATION_SLACK',
]
