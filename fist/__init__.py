"""Public package API for the fist polygon triangulator.

This facade provides a flat import surface on top of the implementation
package ``fist.core``. The matplotlib-backed visualization module is
loaded lazily so that ``import fist`` works without matplotlib.

Example
-------
    from fist import triangulate_polygon

    tris = triangulate_polygon([(0, 0), (4, 0), (4, 4), (0, 4)],
                               holes=[[(1, 1), (1, 3), (3, 3), (3, 1)]])

The deeper modules (``fist.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # Python 3.8+ runtime version export
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("fist-mesh")  # populated when installed
except _NotFound:  # pragma: no cover - source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('fist.core.constants')
_errors = _imp('fist.core.errors')
_config = _imp('fist.core.config')
_diag = _imp('fist.core.diagnostics')
_stats = _imp('fist.core.stats')
_arrays = _imp('fist.core.polygon_array')
_tri = _imp('fist.core.triangulator')
_io = _imp('fist.core.io')
_log = _imp('fist.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            if hasattr(self, '_m'):
                return self._m
            self._m = _imp(mod_name)
            return self._m

        def __getattr__(self, item):
            if item == '_m':
                # unset slot; avoid re-entering _load
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# Lazily loaded optional-dependency modules
visualization = _lazy_module('fist.core.visualization')

# Entry points
Triangulator = _tri.Triangulator
triangulate = _tri.triangulate
triangulate_polygon = _tri.triangulate_polygon
PolygonArray = _arrays.PolygonArray
TriangleArray = _arrays.TriangleArray
TriangulatorConfig = _config.TriangulatorConfig
EarOrder = _config.EarOrder
TriangulationStats = _stats.TriangulationStats
Diagnostics = _diag.Diagnostics
DiagnosticEvent = _diag.DiagnosticEvent

# Errors and warnings
TriangulationError = _errors.TriangulationError
LoopOrderingError = _errors.LoopOrderingError
TriangulationWarning = _errors.TriangulationWarning
SelfIntersectingLoop = _errors.SelfIntersectingLoop
NoValidBridge = _errors.NoValidBridge
IrreducibleLastResort = _errors.IrreducibleLastResort
IterationCapExceeded = _errors.IterationCapExceeded
DegenerateFace = _errors.DegenerateFace

# Tolerances
EPS_ZERO = _const.EPS_ZERO

# I/O and logging
read_obj_polygons = _io.read_obj_polygons
write_obj = _io.write_obj
write_vtk = _io.write_vtk
configure_logging = _log.configure_logging

# Namespace submodules for exploratory users
constants = _const
config = _config
io = _io

__all__ = [
    '__version__',
    # triangulation
    'Triangulator', 'triangulate', 'triangulate_polygon',
    'PolygonArray', 'TriangleArray', 'TriangulatorConfig', 'EarOrder',
    'TriangulationStats', 'Diagnostics', 'DiagnosticEvent',
    # errors / warnings
    'TriangulationError', 'LoopOrderingError', 'TriangulationWarning',
    'SelfIntersectingLoop', 'NoValidBridge', 'IrreducibleLastResort',
    'IterationCapExceeded', 'DegenerateFace',
    # tolerances
    'EPS_ZERO',
    # io / logging
    'read_obj_polygons', 'write_obj', 'write_vtk', 'configure_logging',
    # submodules
    'constants', 'config', 'io', 'visualization',
]
