"""Tests of the individual pipeline stages: node arena, projection,
cleaning, orientation and the fallback ladder."""
import numpy as np
import pytest

from fist.core.clean import clean_face, snap_points
from fist.core.context import TriangulationContext
from fist.core.desperate import (
    exists_cross_over, exists_split, handle_cross_over, handle_split, lets_hope, winding_number,
)
from fist.core.ear_queue import EarQueue
from fist.core.earclip import classify_angles
from fist.core.errors import IrreducibleLastResort, LoopOrderingError, SelfIntersectingLoop
from fist.core.orientation import adjust_orientation, determine_orientation, polygon_area
from fist.core.projection import determine_normal, project_face, projection_frame
from fist.core.reflex import ReflexOracle
from fist.core.triangulator import preprocess_loop


def _loop_ctx(vertices, *loops):
    ctx = TriangulationContext(np.asarray(vertices, dtype=float))
    for loop in loops:
        header = ctx.make_loop_header()
        last = ctx.loops[header]
        for v in loop:
            ind = ctx.make_node(v)
            ctx.insert_after(last, ind)
            last = ind
        ctx.delete_hook(header)
    return ctx


def _indices(ctx, head):
    return [ctx.index[n] for n in ctx.loop_nodes(head)]


SQUARE = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]


def test_loop_building_and_swap():
    ctx = _loop_ctx(SQUARE, [0, 1, 2, 3])
    head = ctx.loops[0]
    assert _indices(ctx, head) == [0, 1, 2, 3]
    ctx.swap_links(head)
    assert _indices(ctx, head) == [0, 3, 2, 1]


def test_rotate_links_merges_and_splits():
    ctx = _loop_ctx(SQUARE + SQUARE, [0, 1, 2, 3], [4, 5, 6, 7])
    a, b = ctx.loops
    ctx.rotate_links(a, b)
    assert ctx.loop_length(a) == 8
    ctx.rotate_links(a, b)
    assert ctx.loop_length(a) == 4 and ctx.loop_length(b) == 4


def test_preprocess_removes_repeats_including_wraparound():
    ctx = _loop_ctx(SQUARE, [0, 0, 1, 2, 2, 2, 3, 0])
    assert preprocess_loop(ctx, 0) == 4
    assert sorted(_indices(ctx, ctx.loops[0])) == [0, 1, 2, 3]


def test_determine_normal_of_planar_and_tilted_loops():
    ctx = _loop_ctx(SQUARE, [0, 1, 2, 3])
    n = determine_normal(ctx, ctx.loops[0])
    assert np.allclose(np.abs(n), [0.0, 0.0, 1.0])

    tilted = [(0, 0, 0), (1, 0, 1), (1, 1, 1), (0, 1, 0)]
    ctx = _loop_ctx(tilted, [0, 1, 2, 3])
    n = determine_normal(ctx, ctx.loops[0])
    assert np.allclose(np.abs(n), np.array([1.0, 0.0, 1.0]) / np.sqrt(2.0))


def test_degenerate_loop_normal_defaults_to_z():
    line = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
    ctx = _loop_ctx(line, [0, 1, 2])
    assert np.allclose(determine_normal(ctx, ctx.loops[0]), [0.0, 0.0, 1.0])


@pytest.mark.parametrize('normal', [(0, 0, 1), (0, 0, -1), (1, 0, 0), (0.3, -0.4, 0.866)])
def test_projection_frame_is_orthonormal(normal):
    n3 = np.asarray(normal, dtype=float)
    n3 /= np.linalg.norm(n3)
    frame = projection_frame(n3)
    assert np.allclose(frame @ frame.T, np.eye(3))
    assert np.allclose(frame[2], n3)


def test_project_and_clean_sort_points():
    verts = [(2, 0, 0), (2, 2, 0), (0, 2, 0), (0, 0, 0), (2, 0, 0)]
    ctx = _loop_ctx(verts, [0, 1, 2, 3, 4])
    project_face(ctx, 0, 1)
    assert ctx.num_points == 5
    removed = clean_face(ctx, 0, 1)
    assert removed == 1
    assert ctx.points == sorted(ctx.points)
    idx = _indices(ctx, ctx.loops[0])
    # first and last node now share a point
    assert idx[0] == idx[-1]
    assert ctx.stats.duplicates_removed == 1


def test_snap_points_merges_chains():
    pts = np.array([[0.0, 0.0], [0.05, 0.0], [0.1, 0.0], [1.0, 1.0]])
    snapped = snap_points(pts, 0.06)
    assert np.array_equal(snapped[0], snapped[1])
    assert np.array_equal(snapped[1], snapped[2])
    assert np.array_equal(snapped[3], pts[3])
    assert snap_points(pts, 0.0) is pts


def test_clean_with_snap_tolerance():
    verts = [(0, 0, 0), (1, 0, 0), (1.0 + 1e-7, 1e-7, 0), (1, 1, 0), (0, 1, 0)]
    ctx = _loop_ctx(verts, [0, 1, 2, 3, 4])
    project_face(ctx, 0, 1)
    assert clean_face(ctx, 0, 1, snap_tolerance=1e-5) == 1


def _prepared(vertices, *loops):
    ctx = _loop_ctx(vertices, *loops)
    project_face(ctx, 0, len(loops))
    clean_face(ctx, 0, len(loops))
    return ctx


def test_determine_orientation_makes_loop_ccw():
    ctx = _prepared(SQUARE, [3, 2, 1, 0])
    head = ctx.loops[0]
    flipped = polygon_area(ctx, head) < 0.0
    determine_orientation(ctx, head)
    assert polygon_area(ctx, head) == pytest.approx(1.0)
    assert ctx.ccw_loop is not flipped


def test_adjust_orientation_outer_ccw_holes_cw():
    verts = [(0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0),
             (1, 1, 0), (3, 1, 0), (3, 3, 0), (1, 3, 0)]
    ctx = _prepared(verts, [0, 1, 2, 3], [4, 5, 6, 7])
    adjust_orientation(ctx, 0, 2)
    assert polygon_area(ctx, ctx.loops[0]) == pytest.approx(16.0)
    assert polygon_area(ctx, ctx.loops[1]) == pytest.approx(-4.0)


def test_adjust_orientation_strict_and_lenient():
    verts = [(1, 1, 0), (3, 1, 0), (3, 3, 0), (1, 3, 0),
             (0, 0, 0), (4, 0, 0), (4, 4, 0), (0, 4, 0)]
    ctx = _prepared(verts, [0, 1, 2, 3], [4, 5, 6, 7])
    with pytest.raises(LoopOrderingError):
        adjust_orientation(ctx, 0, 2, strict=True)

    ctx = _prepared(verts, [0, 1, 2, 3], [4, 5, 6, 7])
    hole_head = ctx.loops[0]
    adjust_orientation(ctx, 0, 2, strict=False)
    assert ctx.loops[1] == hole_head
    assert polygon_area(ctx, ctx.loops[0]) == pytest.approx(16.0)


def test_winding_number():
    ctx = _prepared(SQUARE, [0, 1, 2, 3])
    determine_orientation(ctx, ctx.loops[0])
    inside = tuple(np.mean(ctx.points, axis=0))
    far = (ctx.points[0][0] - 5.0, ctx.points[0][1])
    assert winding_number(ctx, ctx.loops[0], inside) == 1
    assert winding_number(ctx, ctx.loops[0], far) == 0


def _ready_for_clipping(vertices, loop):
    ctx = _prepared(vertices, loop)
    determine_orientation(ctx, ctx.loops[0])
    classify_angles(ctx, ctx.loops[0])
    ctx.queue = EarQueue()
    ctx.oracle = ReflexOracle(ctx)
    ctx.oracle.prepare_edges(0, 1)
    ctx.oracle.prepare_points(0)
    return ctx


def test_split_along_valid_diagonal():
    ctx = _ready_for_clipping(SQUARE, [0, 1, 2, 3])
    head = ctx.loops[0]
    found = exists_split(ctx, head)
    assert found is not None
    ind1, i1, ind2, i2 = found
    assert ctx.next[ind1] != ind2 and ctx.prev[ind1] != ind2
    handle_split(ctx, *found)
    assert len(ctx.chains) == 2
    assert [ctx.loop_length(c) for c in ctx.chains] == [3, 3]
    assert ctx.stats.splits == 1


def test_lets_hope_queues_a_convex_corner():
    events = []
    ctx = _ready_for_clipping(SQUARE, [0, 1, 2, 3])
    ctx.diagnostics.sink = events.append
    lets_hope(ctx, ctx.loops[0])
    entry = ctx.queue.pop()
    assert entry[0] == 0.0
    assert ctx.angle[entry[1]] > 0
    assert [e.kind for e in events] == [IrreducibleLastResort]
    assert ctx.stats.last_resorts == 1


def test_cross_over_is_detected_in_pentagram(pentagram_polygon):
    verts = np.column_stack([pentagram_polygon, np.zeros(5)])
    ctx = _ready_for_clipping(verts, [0, 1, 2, 3, 4])
    found = exists_cross_over(ctx, ctx.loops[0])
    assert found is not None
    handle_cross_over(ctx, *found)
    assert ctx.loop_length(found[0]) == 4
    assert len(ctx.triangles) == 1
    assert len(ctx.queue) == 1
    assert len(ctx.diagnostics.of_kind(SelfIntersectingLoop)) == 1


def test_reflex_oracle_tracks_reflex_nodes():
    dart = [(0, 0, 0), (2, 1, 0), (4, 0, 0), (2, 3, 0)]
    ctx = _ready_for_clipping(dart, [0, 1, 2, 3])
    nodes = list(ctx.loop_nodes(ctx.loops[0]))
    reflex = [n for n in nodes if ctx.angle[n] < 0]
    assert len(reflex) == 1
    assert len(ctx.oracle) == 1
    assert reflex[0] in ctx.oracle
    assert all(n not in ctx.oracle for n in nodes if n != reflex[0])
    ctx.oracle.delete_reflex_vertex(reflex[0])
    assert reflex[0] not in ctx.oracle
