"""Command line entry point: ``fist-triangulate IN.obj OUT.(obj|vtk)``."""
from __future__ import annotations

import argparse
import json
import os

from .config import EarOrder, TriangulatorConfig
from .errors import TriangulationError
from .io import read_obj_polygons, write_obj, write_vtk
from .logging_utils import configure_logging, get_logger
from .stats import format_stats_table
from .triangulator import Triangulator

logger = get_logger('fist.cli')

_WRITERS = {'.obj': write_obj, '.vtk': write_vtk}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fist-triangulate',
        description='Triangulate the polygonal faces of an OBJ file by ear clipping.')
    parser.add_argument('input', help='Input Wavefront .obj file')
    parser.add_argument('output', help='Output file; .obj or .vtk')
    parser.add_argument('--ear-order', type=str, choices=[m.name.lower() for m in EarOrder],
                        default=None, help='Ear selection policy (default: sequence)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the random ear order')
    parser.add_argument('--snap-tolerance', type=float, default=None,
                        help='Merge projected points closer than this distance')
    parser.add_argument('--lenient-loops', action='store_true',
                        help='Reorder loops instead of failing when the outer loop is not first')
    parser.add_argument('--config-json', type=str, default=None,
                        help='Path to JSON file with TriangulatorConfig fields; flags override it')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO', help='Logging verbosity (default: INFO)')
    parser.add_argument('--plot', type=str, default=None, metavar='PNG',
                        help='Also render the triangulation to this image (requires matplotlib)')
    parser.add_argument('--stats', action='store_true', help='Print triangulation counters')
    return parser


def _load_config(args) -> TriangulatorConfig:
    params = {}
    if args.config_json:
        with open(args.config_json, 'r') as f:
            params.update(json.load(f))
    if args.ear_order is not None:
        params['ear_order'] = args.ear_order
    if args.seed is not None:
        params['seed'] = args.seed
    if args.snap_tolerance is not None:
        params['snap_tolerance'] = args.snap_tolerance
    if args.lenient_loops:
        params['strict_loop_order'] = False
    return TriangulatorConfig(**params)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    ext = os.path.splitext(args.output)[1].lower()
    writer = _WRITERS.get(ext)
    if writer is None:
        parser.error(f"unsupported output format {ext!r}; use .obj or .vtk")

    try:
        config = _load_config(args)
        polygons = read_obj_polygons(args.input)
        result = Triangulator(config).triangulate(polygons)
    except (OSError, ValueError, TypeError, TriangulationError) as exc:
        logger.error("%s", exc)
        return 1

    writer(args.output, result.coordinates, result.coordinate_indices)
    logger.info("wrote %d triangles to %s", len(result), args.output)

    if args.plot:
        from .visualization import plot_triangulation
        plot_triangulation(result.coordinates, result.coordinate_indices, args.plot)
    if args.stats:
        print(format_stats_table(result.stats.to_dict()))
    return 0


if __name__ == '__main__':  # pragma: no cover
    raise SystemExit(main())
