"""Ear-clipping driver.

Triangulator.triangulate() takes a PolygonArray and returns a TriangleArray.
Every face goes through the same pipeline:

1. single triangles and quadrangles are handled by simple_face();
2. consecutive duplicate vertices are dropped from every loop;
3. the loops are projected onto their best-fit plane, sorted and cleaned;
4. the outer loop is made CCW and the holes CW;
5. the holes are bridged into the outer loop;
6. ears are clipped until the loop is exhausted, escalating to the
   fallback ladder in fist.core.desperate whenever no ear is left.

Sub-loops created by splits are kept on a chain stack and handled after the
current loop. The clipping loop is capped; if the cap is hit, the remaining
loops are closed by triangle fans.
"""
from __future__ import annotations

import time
from typing import List, Optional

import numpy as np

from .bridge import construct_bridges
from .clean import clean_face
from .config import EarOrder, TriangulatorConfig
from .constants import ITERATION_SLACK
from .context import TriangulationContext
from .desperate import desperate, lets_hope
from .diagnostics import Diagnostics
from .ear_queue import EarQueue
from .earclip import classify_angles, classify_ears, clip_ear
from .errors import DegenerateFace, IterationCapExceeded
from .logging_utils import get_logger
from .orientation import adjust_orientation, determine_orientation
from .polygon_array import PolygonArray, TriangleArray
from .projection import project_face
from .reflex import ReflexOracle
from .simple import simple_face
from .stats import TriangulationStats

logger = get_logger('fist.triangulator')

__all__ = ['Triangulator', 'triangulate', 'triangulate_polygon', 'preprocess_loop']


def preprocess_loop(ctx, loop: int) -> int:
    """Remove consecutive repetitions of a vertex from ``ctx.loops[loop]``.

    Returns the number of nodes left.
    """
    index = ctx.index
    head = ctx.loops[loop]
    ind1 = head
    ind2 = ctx.next[ind1]
    while ind2 != head:
        if index[ind1] == index[ind2]:
            ctx.delete_links(ind2)
        else:
            ind1 = ind2
        ind2 = ctx.next[ind1]
    # wrap-around
    while ctx.prev[head] != head and index[ctx.prev[head]] == index[head]:
        ctx.delete_links(ctx.prev[head])
    return ctx.loop_length(head)


def _emit_triangle_loop(ctx, ind: int) -> bool:
    """Store the loop through ``ind`` directly if it is a triangle."""
    ind2 = ctx.next[ind]
    ind3 = ctx.next[ind2]
    if ind2 == ind or ind3 == ind or ctx.next[ind3] != ind:
        return False
    ctx.store_triangle(ind, ind2, ind3)
    ctx.stats.ears_clipped += 1
    return True


class Triangulator:
    """Converts polygonal faces (with holes) into triangles.

    A Triangulator only holds its configuration and RNG; every call to
    triangulate() works on a fresh TriangulationContext.
    """

    def __init__(self, config: Optional[TriangulatorConfig] = None, **overrides):
        if config is None:
            config = TriangulatorConfig(**overrides)
        elif overrides:
            raise TypeError("pass either a TriangulatorConfig or keyword overrides, not both")
        self.config = config
        self.rng = config.make_rng()

    def triangulate(self, polygons: PolygonArray) -> TriangleArray:
        polygons.validate()
        cfg = self.config
        t0 = time.perf_counter()

        diagnostics = Diagnostics(sink=cfg.diagnostics_sink, emit_warnings=cfg.emit_warnings)
        stats = TriangulationStats()
        ctx = TriangulationContext(polygons.coordinates, cfg.epsilon, diagnostics, stats)
        ctx.queue = EarQueue(cfg.ear_order, self.rng)
        ctx.oracle = ReflexOracle(ctx)
        ctx.ears_sorted = cfg.ear_order is EarOrder.SORTED

        faces = self._build_loops(ctx, polygons)
        for face, loops in enumerate(faces):
            ctx.face = face
            self._triangulate_face(ctx, loops)

        out = self._collect(ctx, polygons)
        stats.triangles = len(out)
        stats.time_total = time.perf_counter() - t0
        logger.info("triangulated %d faces into %d triangles (%d diagnostics)",
                    stats.faces, stats.triangles, len(diagnostics))
        return out

    # ------------------------------------------------------------------
    def _build_loops(self, ctx, polygons: PolygonArray) -> List[List[Optional[int]]]:
        """Create one node cycle per loop; return the loop heads per face."""
        vertex_indices = polygons.coordinate_indices.tolist()
        strips = polygons.strip_counts.tolist()
        heads: List[Optional[int]] = []
        pos = 0
        for count in strips:
            if count == 0:
                heads.append(None)
                continue
            loop = ctx.make_loop_header()
            last = ctx.loops[loop]
            for _ in range(count):
                ind = ctx.make_node(vertex_indices[pos])
                ctx.insert_after(last, ind)
                ctx.common[ind] = pos
                last = ind
                pos += 1
            ctx.delete_hook(loop)
            heads.append(ctx.loops[loop])

        faces = []
        start = 0
        for n in polygons.contour_counts.tolist():
            faces.append(heads[start:start + n])
            start += n
        return faces

    def _degenerate(self, ctx, message: str, **details) -> None:
        ctx.stats.degenerate_loops += 1
        ctx.diagnostics.record(DegenerateFace, ctx.face, message, **details)

    def _triangulate_face(self, ctx, loops: List[Optional[int]]) -> None:
        cfg = self.config
        stats = ctx.stats
        stats.faces += 1
        stats.loops += len(loops)
        ctx.ccw_loop = True
        ctx.chains.clear()

        if loops[0] is None:
            self._degenerate(ctx, "outer loop is empty", loop=0, nodes=0)
            return
        if len(loops) == 1:
            n = ctx.loop_length(loops[0])
            if n < 3:
                self._degenerate(ctx, "loop with fewer than three vertices skipped", loop=0, nodes=n)
                return
            if simple_face(ctx, loops[0]):
                stats.simple_faces += 1
                return

        ctx.loops = []
        for i, ind in enumerate(loops):
            if ind is None:
                self._degenerate(ctx, f"hole {i} is empty; ignored", loop=i, nodes=0)
                continue
            ctx.loops.append(ind)
            n = preprocess_loop(ctx, len(ctx.loops) - 1)
            if n >= 3:
                continue
            ctx.loops.pop()
            if i == 0:
                self._degenerate(ctx, "outer loop has fewer than three distinct vertices",
                                 loop=0, nodes=n)
                return
            self._degenerate(ctx, f"hole {i} has fewer than three distinct vertices; ignored",
                             loop=i, nodes=n)
        num_loops = len(ctx.loops)

        normal = project_face(ctx, 0, num_loops)
        clean_face(ctx, 0, num_loops, cfg.snap_tolerance)

        if num_loops == 1:
            determine_orientation(ctx, ctx.loops[0])
            ctx.oracle.prepare_edges(0, 0)
        else:
            adjust_orientation(ctx, 0, num_loops, strict=cfg.strict_loop_order)
            ctx.oracle.prepare_edges(0, num_loops)

        for i in range(num_loops):
            classify_angles(ctx, ctx.loops[i])
        if num_loops > 1:
            construct_bridges(ctx, 0, num_loops)

        ctx.reset_poly_list(ctx.loops[0])
        ctx.oracle.prepare_points(0)
        classify_ears(ctx, ctx.loops[0])
        logger.debug("face %d: %d loops, %d points, normal %s",
                     ctx.face, num_loops, ctx.num_points, normal)
        self._clip(ctx)

    def _clip(self, ctx) -> None:
        """Run the clipping loop on ``ctx.loops[0]`` and all chains split off it."""
        cap = self.config.max_iterations_factor * ctx.num_nodes + ITERATION_SLACK
        steps = 0
        reset = False
        done = _emit_triangle_loop(ctx, ctx.loops[0])
        while True:
            if done:
                ind = ctx.get_next_chain()
                if ind is None:
                    return
                if _emit_triangle_loop(ctx, ind):
                    continue
                ctx.reset_poly_list(ind)
                ctx.loops[0] = ind
                ctx.oracle.prepare_points(0)
                classify_ears(ctx, ind)
                reset = False
                done = False

            steps += 1
            if steps > cap:
                self._force_fans(ctx, cap)
                return
            clipped, done = clip_ear(ctx)
            if clipped:
                reset = False
                continue

            ind = ctx.get_node()
            ctx.reset_poly_list(ind)
            if not reset:
                # try again from scratch
                ctx.stats.reclassifications += 1
                classify_ears(ctx, ind)
                reset = True
                continue
            # no ear even after reclassification
            ctx.loops[0] = ind
            hopeless, split = desperate(ctx, ind, 0)
            if split:
                done = True
            elif hopeless:
                lets_hope(ctx, ind)
            else:
                reset = False

    def _force_fans(self, ctx, cap: int) -> None:
        """Close the current loop and every pending chain by a triangle fan."""
        ctx.diagnostics.record(
            IterationCapExceeded, ctx.face,
            f"clipping loop exceeded {cap} iterations; remaining loops fanned",
            cap=cap,
        )
        pending = [ctx.get_node()]
        while True:
            ind = ctx.get_next_chain()
            if ind is None:
                break
            pending.append(ind)
        for head in pending:
            nodes = list(ctx.loop_nodes(head))
            for k in range(1, len(nodes) - 1):
                ctx.store_triangle(nodes[0], nodes[k], nodes[k + 1])
            ctx.stats.forced_fans += 1
        ctx.queue.clear()

    def _collect(self, ctx, polygons: PolygonArray) -> TriangleArray:
        """Map the emitted node triangles back to the caller's index spaces."""
        if ctx.triangles:
            tris = np.asarray(ctx.triangles, dtype=np.int64)
            common = np.asarray(ctx.common, dtype=np.int64)[tris]
        else:
            common = np.zeros((0, 3), dtype=np.int64)
        coord_idx = polygons.coordinate_indices[common].reshape(-1, 3)
        attrs = {name: idx[common].reshape(-1, 3)
                 for name, idx in polygons.attribute_indices.items()}
        return TriangleArray(
            coordinate_indices=coord_idx,
            attribute_indices=attrs,
            coordinates=polygons.coordinates,
            stats=ctx.stats,
            diagnostics=ctx.diagnostics,
            attribute_data=polygons.attribute_data,
        )


def triangulate(polygons: PolygonArray, config: Optional[TriangulatorConfig] = None,
                **overrides) -> TriangleArray:
    """Triangulate ``polygons`` with a throwaway Triangulator."""
    return Triangulator(config, **overrides).triangulate(polygons)


def triangulate_polygon(outer, holes=(), config: Optional[TriangulatorConfig] = None,
                        **overrides) -> np.ndarray:
    """Triangulate one polygon given by vertex lists.

    Parameters
    ----------
    outer : (N, 2) or (N, 3) array_like
        Vertices of the outer boundary.
    holes : sequence of array_like
        Vertices of every hole.

    Returns
    -------
    (M, 3) ndarray of int64
        Indices into the concatenation of ``outer`` and ``holes``.
    """
    polygons = PolygonArray.from_polygon(outer, holes)
    return triangulate(polygons, config, **overrides).coordinate_indices
