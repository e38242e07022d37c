import numpy as np
import pytest

pytest.importorskip('matplotlib')

from fist.core.triangulator import triangulate_polygon  # noqa: E402
from fist.core.visualization import flatten_points, plot_triangulation  # noqa: E402


def test_plot_triangulation_writes_png(tmp_path):
    pts = np.array([(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (1.0, 3.0), (0.0, 2.0)])
    tris = triangulate_polygon(pts)
    out = tmp_path / "tri.png"
    plot_triangulation(pts, tris, str(out))
    assert out.exists() and out.stat().st_size > 0


def test_plot_without_triangles(tmp_path):
    out = tmp_path / "empty.png"
    plot_triangulation(np.zeros((3, 2)), np.zeros((0, 3), dtype=int), str(out))
    assert out.exists()


def test_flatten_points_drops_thinnest_axis():
    pts = np.array([(0.0, 5.0, 0.0), (0.0, 6.0, 1.0), (0.0, 5.0, 2.0)])
    np.testing.assert_array_equal(flatten_points(pts), pts[:, 1:])
    with pytest.raises(ValueError):
        flatten_points(np.zeros((3, 4)))
