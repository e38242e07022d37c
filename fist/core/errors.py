"""Exception and warning taxonomy.

Fatal precondition violations derive from TriangulationError. Everything
that the algorithm recovers from is a TriangulationWarning subclass; those
are recorded through fist.core.diagnostics rather than raised.
"""
from __future__ import annotations


class TriangulationError(Exception):
    """Base class for errors that abort a triangulation."""


class LoopOrderingError(TriangulationError, ValueError):
    """The outer loop of a face is not its first loop."""

    def __init__(self, face: int, outer_loop: int, message: str = None):
        self.face = face
        self.outer_loop = outer_loop
        if message is None:
            message = (f"face {face}: loop {outer_loop} encloses the largest area "
                       f"but the outer boundary must be the first loop of the face")
        super().__init__(message)


class TriangulationWarning(UserWarning):
    """Base class for recoverable conditions met while triangulating."""


class SelfIntersectingLoop(TriangulationWarning):
    """A loop crosses itself; a cross-over was broken by forced triangles."""


class NoValidBridge(TriangulationWarning):
    """A hole could not be linked to the boundary by a valid diagonal."""


class IrreducibleLastResort(TriangulationWarning):
    """No ear and no split diagonal exist; a corner was clipped unchecked."""


class IterationCapExceeded(TriangulationWarning):
    """The clipping loop hit its iteration cap; remaining loops were fanned."""


class DegenerateFace(TriangulationWarning):
    """A face or loop has fewer than three distinct vertices."""


__all__ = [
    'TriangulationError', 'LoopOrderingError',
    'TriangulationWarning', 'SelfIntersectingLoop', 'NoValidBridge',
    'IrreducibleLastResort', 'IterationCapExceeded', 'DegenerateFace',
]
