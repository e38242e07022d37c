import json
import logging

import pytest

from fist.core.cli import main
from fist.core.io import read_obj_polygons


STAR_OBJ = """\
v 0 2 0
v 0.6 0.8 0
v 1.9 0.6 0
v 0.9 -0.3 0
v 1.2 -1.6 0
v 0 -0.8 0
v -1.2 -1.6 0
v -0.9 -0.3 0
v -1.9 0.6 0
v -0.6 0.8 0
f 1 2 3 4 5 6 7 8 9 10
"""


@pytest.fixture(autouse=True)
def restore_fist_logger():
    # main() attaches a stdout handler through configure_logging
    log = logging.getLogger('fist')
    handlers = list(log.handlers)
    propagate = log.propagate
    yield
    log.handlers[:] = handlers
    log.propagate = propagate


@pytest.fixture
def star_obj(tmp_path):
    path = tmp_path / "star.obj"
    path.write_text(STAR_OBJ)
    return path


def test_cli_writes_obj(star_obj, tmp_path):
    out = tmp_path / "out.obj"
    assert main([str(star_obj), str(out), '--log-level', 'WARNING']) == 0
    tris = read_obj_polygons(str(out))
    assert len(tris.strip_counts) == 8
    assert set(tris.strip_counts.tolist()) == {3}


def test_cli_writes_vtk_and_stats(star_obj, tmp_path, capsys):
    out = tmp_path / "out.vtk"
    rc = main([str(star_obj), str(out), '--ear-order', 'sorted', '--stats', '--log-level', 'ERROR'])
    assert rc == 0
    assert "CELLS 8 32" in out.read_text()
    printed = capsys.readouterr().out
    assert "triangles" in printed
    assert "ears_clipped" in printed


def test_cli_config_json(star_obj, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({'ear_order': 'random', 'seed': 3}))
    out = tmp_path / "out.obj"
    assert main([str(star_obj), str(out), '--config-json', str(cfg), '--log-level', 'ERROR']) == 0


def test_cli_rejects_unknown_output_format(star_obj, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main([str(star_obj), str(tmp_path / "out.stl")])
    assert excinfo.value.code == 2


def test_cli_reports_missing_input(tmp_path):
    assert main([str(tmp_path / "missing.obj"), str(tmp_path / "out.obj"), '--log-level', 'CRITICAL']) == 1


def test_cli_plot(star_obj, tmp_path):
    pytest.importorskip('matplotlib')
    png = tmp_path / "star.png"
    assert main([str(star_obj), str(tmp_path / "out.obj"), '--plot', str(png), '--log-level', 'ERROR']) == 0
    assert png.exists()
