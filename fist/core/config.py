"""Configuration objects for the triangulator."""
from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .constants import EPS_ZERO, DEFAULT_ITERATION_FACTOR


class EarOrder(enum.IntEnum):
    """Order in which queued ears are clipped."""
    SEQUENCE = 0
    RANDOM = 1
    SORTED = 2

    @classmethod
    def parse(cls, value) -> 'EarOrder':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown ear order {value!r}; expected one of "
                                 f"{', '.join(m.name.lower() for m in cls)}") from None
        return cls(int(value))


@dataclass
class TriangulatorConfig:
    """Triangulator settings.

    Attributes
    ----------
    ear_order : EarOrder
        Ear selection policy (sequence, random, sorted by quality ratio).
    epsilon : float
        Threshold of the "near zero" predicate family.
    seed : int, optional
        Seed of the private RNG used by the RANDOM policy.
    rng : random.Random, optional
        Explicit RNG for the RANDOM policy; takes precedence over seed.
    strict_loop_order : bool
        Raise LoopOrderingError when a face's outer loop is not listed first.
        When False the loops are reordered.
    snap_tolerance : float
        Projected points closer than this are merged before cleaning.
        0 keeps exact duplicate removal only.
    max_iterations_factor : int
        Cap of the clipping loop per face, in multiples of the node arena size.
    emit_warnings : bool
        Re-issue diagnostics through ``warnings.warn``.
    diagnostics_sink : callable, optional
        Called with every DiagnosticEvent as it is recorded.
    """
    ear_order: EarOrder = EarOrder.SEQUENCE
    epsilon: float = EPS_ZERO
    seed: Optional[int] = None
    rng: Optional[random.Random] = None
    strict_loop_order: bool = True
    snap_tolerance: float = 0.0
    max_iterations_factor: int = DEFAULT_ITERATION_FACTOR
    emit_warnings: bool = False
    diagnostics_sink: Optional[Callable[[Any], None]] = None

    def __post_init__(self):
        self.ear_order = EarOrder.parse(self.ear_order)
        if self.epsilon < 0.0:
            raise ValueError("epsilon must be non-negative")
        if self.snap_tolerance < 0.0:
            raise ValueError("snap_tolerance must be non-negative")
        if self.max_iterations_factor < 1:
            raise ValueError("max_iterations_factor must be >= 1")

    def make_rng(self) -> random.Random:
        if self.rng is not None:
            return self.rng
        return random.Random(self.seed)


__all__ = ['EarOrder', 'TriangulatorConfig']
