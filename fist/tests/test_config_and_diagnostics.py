import random
import warnings

import numpy as np
import pytest

from fist.core.config import EarOrder, TriangulatorConfig
from fist.core.diagnostics import DiagnosticEvent, Diagnostics
from fist.core.errors import (
    DegenerateFace, NoValidBridge, SelfIntersectingLoop, TriangulationWarning,
)
from fist.core.polygon_array import PolygonArray
from fist.core.stats import TriangulationStats, format_stats_table


def test_ear_order_parse():
    assert EarOrder.parse('Sorted') is EarOrder.SORTED
    assert EarOrder.parse(1) is EarOrder.RANDOM
    assert EarOrder.parse(EarOrder.SEQUENCE) is EarOrder.SEQUENCE
    with pytest.raises(ValueError):
        EarOrder.parse('fastest')


def test_config_defaults_and_validation():
    cfg = TriangulatorConfig()
    assert cfg.ear_order is EarOrder.SEQUENCE
    assert cfg.strict_loop_order
    assert cfg.snap_tolerance == 0.0
    with pytest.raises(ValueError):
        TriangulatorConfig(epsilon=-1.0)
    with pytest.raises(ValueError):
        TriangulatorConfig(snap_tolerance=-0.5)
    with pytest.raises(ValueError):
        TriangulatorConfig(max_iterations_factor=0)


def test_config_rng():
    rng = random.Random(1)
    assert TriangulatorConfig(rng=rng, seed=9).make_rng() is rng
    a = TriangulatorConfig(seed=9).make_rng().random()
    b = TriangulatorConfig(seed=9).make_rng().random()
    assert a == b


def test_diagnostics_sink_and_log(caplog):
    seen = []
    diag = Diagnostics(sink=seen.append)
    with caplog.at_level('WARNING', logger='fist'):
        event = diag.record(NoValidBridge, 2, "hole outside", point=7)
    assert seen == [event]
    assert isinstance(event, DiagnosticEvent)
    assert event.name == 'NoValidBridge'
    assert event.details == {'point': 7}
    assert "NoValidBridge (face 2): hole outside" in caplog.text
    assert len(diag) == 1


def test_diagnostics_warnings_and_filtering():
    diag = Diagnostics(emit_warnings=True)
    with pytest.warns(SelfIntersectingLoop):
        diag.record(SelfIntersectingLoop, 0, "crossing")
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        diag.record(DegenerateFace, 1, "two vertices")
    assert [e.face for e in diag.of_kind(TriangulationWarning)] == [0, 1]
    assert [e.face for e in diag.of_kind(DegenerateFace)] == [1]


def test_stats_merge_and_table():
    a = TriangulationStats(faces=2, triangles=5, splits=1)
    b = TriangulationStats(faces=1, triangles=3)
    a.merge(b)
    d = a.to_dict()
    assert d['faces'] == 3 and d['triangles'] == 8
    assert d['fallback_rate'] == pytest.approx(1 / 3)
    table = format_stats_table(d)
    assert table.splitlines()[0].startswith('counter')
    assert 'fallback_rate' in table
    assert format_stats_table({}) == "<no stats>"


def test_polygon_array_defaults():
    polys = PolygonArray([(0, 0), (1, 0), (0, 1)])
    assert polys.coordinates.shape == (3, 3)
    np.testing.assert_array_equal(polys.coordinate_indices, [0, 1, 2])
    assert polys.num_faces == 1 and polys.num_loops == 1
    polys.validate()


def test_polygon_array_validation():
    coords = np.zeros((4, 2))
    with pytest.raises(ValueError):
        PolygonArray(coords, strip_counts=[3]).validate()
    with pytest.raises(ValueError):
        PolygonArray(coords, strip_counts=[2, 2], contour_counts=[1]).validate()
    with pytest.raises(ValueError):
        PolygonArray(coords, coordinate_indices=[0, 1, 2, 4]).validate()
    with pytest.raises(ValueError):
        PolygonArray(coords, attribute_indices={'normal': [0, 1]}).validate()
    with pytest.raises(ValueError):
        PolygonArray(np.zeros((4, 4)))


def test_polygon_array_from_loops_and_reverse():
    coords = np.arange(16, dtype=float).reshape(8, 2)
    polys = PolygonArray.from_loops(coords, [[0, 1, 2, 3], [4, 5, 6, 7]], color=np.arange(8) + 100)
    assert polys.num_faces == 1 and polys.num_loops == 2
    polys.reverse()
    np.testing.assert_array_equal(polys.coordinate_indices, [3, 2, 1, 0, 7, 6, 5, 4])
    np.testing.assert_array_equal(polys.attribute_indices['color'], [103, 102, 101, 100, 107, 106, 105, 104])


def test_from_polygon_concatenates_rings():
    polys = PolygonArray.from_polygon([(0, 0), (4, 0), (4, 4)], [[(1, 1), (2, 1), (1, 2)]])
    assert polys.coordinates.shape == (6, 3)
    np.testing.assert_array_equal(polys.strip_counts, [3, 3])
    np.testing.assert_array_equal(polys.contour_counts, [2])
