"""Smoke test to ensure the top-level package import works and exposes the
flat API layer (`fist/__init__.py`)."""


def test_import_fist_smoke():
    import fist
    assert hasattr(fist, 'triangulate_polygon')
    assert hasattr(fist, 'PolygonArray')
    assert issubclass(fist.LoopOrderingError, ValueError)
    assert isinstance(fist.__version__, str)


def test_top_level_triangulate():
    import fist
    tris = fist.triangulate_polygon([(0, 0), (2, 0), (2, 2), (1, 3), (0, 2)])
    assert tris.shape == (3, 3)


def test_lazy_visualization_proxy():
    import pytest
    pytest.importorskip('matplotlib')
    import fist
    assert callable(fist.visualization.plot_triangulation)
