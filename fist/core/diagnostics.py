"""Structured diagnostics for recoverable triangulation conditions.

Conditions the algorithm recovers from (self-intersections, missing
bridges, last-resort clipping, ...) are recorded as DiagnosticEvent records.
Each record is logged, handed to an optional sink and, on request,
re-issued as a Python warning.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from .errors import TriangulationWarning
from .logging_utils import get_logger

logger = get_logger('fist.diagnostics')


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: Type[TriangulationWarning]
    face: int
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.kind.__name__

    def __str__(self) -> str:
        return f"{self.name} (face {self.face}): {self.message}"


class Diagnostics:
    """Collector of DiagnosticEvents for one triangulation run."""

    def __init__(self, sink: Optional[Callable[[DiagnosticEvent], None]] = None,
                 emit_warnings: bool = False):
        self.sink = sink
        self.emit_warnings = emit_warnings
        self.events: List[DiagnosticEvent] = []

    def record(self, kind: Type[TriangulationWarning], face: int, message: str, **details) -> DiagnosticEvent:
        event = DiagnosticEvent(kind, face, message, dict(details))
        self.events.append(event)
        logger.warning("%s", event)
        if self.sink is not None:
            self.sink(event)
        if self.emit_warnings:
            warnings.warn(str(event), kind, stacklevel=3)
        return event

    def of_kind(self, kind: Type[TriangulationWarning]) -> List[DiagnosticEvent]:
        return [e for e in self.events if issubclass(e.kind, kind)]

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)


__all__ = ['DiagnosticEvent', 'Diagnostics']
