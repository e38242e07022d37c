import datetime
import io
import logging
import pathlib
import sys

import numpy as np
import pytest

if sys.version_info < (3, 8):
    pytest.exit("Python >= 3.8 is required to run tests. Current version: {}".format(sys.version.replace("\n", " ")))


LOG_DIR = pathlib.Path(__file__).parent / "test-logs"


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # Attach the TestReport (with .outcome) to the item so fixtures can see the
    # outcome in teardown.
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)


@pytest.fixture(autouse=True)
def capture_test_logs(request):
    """Capture the 'fist' logger family for each test into an in-memory
    buffer and write it to a file only when the test fails.
    """
    fist_root = logging.getLogger('fist')
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    fist_root.addHandler(handler)
    prev_level = fist_root.level
    fist_root.setLevel(logging.DEBUG)

    try:
        yield
    finally:
        fist_root.removeHandler(handler)
        fist_root.setLevel(prev_level)

        rep = getattr(request.node, "rep_call", None)
        if rep is not None and getattr(rep, "outcome", None) == "failed":
            LOG_DIR.mkdir(exist_ok=True)
            nodeid = request.node.nodeid.replace("::", "__").replace("/", "_")
            ts = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
            fname = LOG_DIR / "{}__{}.log".format(nodeid, ts)
            with open(fname, "w", encoding="utf-8") as f:
                f.write("=== Test: {}\n".format(request.node.nodeid))
                f.write("=== Timestamp: {}\n\n".format(ts))
                f.write(buf.getvalue())


def triangles_area(coords, tris):
    """Sum of signed triangle areas in the xy-plane."""
    p = np.asarray(coords, dtype=float)[:, :2]
    t = np.asarray(tris, dtype=int).reshape(-1, 3)
    a, b, c = p[t[:, 0]], p[t[:, 1]], p[t[:, 2]]
    return 0.5 * np.sum((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0]))


def star(n_tips, r_outer=2.0, r_inner=1.0):
    """Vertices of a simple star polygon with ``n_tips`` tips, CCW."""
    angles = np.linspace(0.0, 2.0 * np.pi, 2 * n_tips, endpoint=False) + 0.5 * np.pi
    radii = np.where(np.arange(2 * n_tips) % 2 == 0, r_outer, r_inner)
    return np.column_stack([radii * np.cos(angles), radii * np.sin(angles)])


def pentagram():
    """Self-intersecting five-point star: every second vertex of a pentagon."""
    angles = np.linspace(0.0, 2.0 * np.pi, 5, endpoint=False) + 0.5 * np.pi
    pentagon = np.column_stack([np.cos(angles), np.sin(angles)])
    return pentagon[[0, 2, 4, 1, 3]]


@pytest.fixture
def square_with_hole():
    outer = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
    hole = [(1.0, 1.0), (1.0, 3.0), (3.0, 3.0), (3.0, 1.0)]
    return outer, hole


@pytest.fixture
def area_of():
    return triangles_area


@pytest.fixture
def star_polygon():
    return star


@pytest.fixture
def pentagram_polygon():
    return pentagram()
