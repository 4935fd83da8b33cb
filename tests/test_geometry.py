import numpy as np
import pytest

from halley_fractal.geometry import (
    MS_EDGES,
    cell_codes,
    connect_segments,
    simplify_path,
    simplify_tolerance,
    smooth_path,
    trace_contours,
    trace_level_paths,
)

# edge midpoint -> the two corners (tl, tr, br, bl bit names) it lies between
EDGE_CORNERS = {
    (0.5, 0.0): ("tl", "tr"),
    (1.0, 0.5): ("tr", "br"),
    (0.5, 1.0): ("bl", "br"),
    (0.0, 0.5): ("tl", "bl"),
}

DIAMOND = np.array([[0, 0, 0], [0, 1, 0], [0, 0, 0]], dtype=float)


def corners_for(code):
    return {"tl": bool(code & 8), "tr": bool(code & 4), "br": bool(code & 2), "bl": bool(code & 1)}


def grid_for(code):
    c = corners_for(code)
    return np.array([[c["tl"], c["tr"]], [c["bl"], c["br"]]], dtype=float)


@pytest.mark.parametrize("code", range(16))
def test_cell_code_round_trip(code):
    assert cell_codes(grid_for(code), 0.5)[0, 0] == code


@pytest.mark.parametrize("code", range(16))
def test_segments_cross_differing_edges(code):
    """Every segment endpoint sits on an edge whose corners disagree."""
    segs = trace_contours(grid_for(code), 0.5)
    if code in (0, 15):
        assert segs == []
        return
    assert len(segs) == (2 if code in (5, 10) else 1)
    corners = corners_for(code)
    crossed = {mid for mid, (a, b) in EDGE_CORNERS.items() if corners[a] != corners[b]}
    endpoints = {tuple(float(v) for v in p) for seg in segs for p in seg}
    assert endpoints == crossed


def test_table_shape():
    assert len(MS_EDGES) == 16
    assert all(len(MS_EDGES[c]) == 2 for c in (5, 10))


def test_small_grids_have_no_cells():
    assert trace_contours(np.zeros((1, 5)), 0.5) == []
    assert trace_contours(np.zeros((4, 1)), 0.5) == []


def test_diamond_traces_closed_loop():
    paths = connect_segments(trace_contours(DIAMOND, 0.5))
    assert paths == [[(1, 0.5), (0.5, 1), (1, 1.5), (1.5, 1), (1, 0.5)]]


def test_stitch_unit_square_with_reversed_segments():
    segments = [
        ((0, 0), (1, 0)),
        ((1, 1), (1, 0)),
        ((1, 1), (0, 1)),
        ((0, 0), (0, 1)),
    ]
    assert connect_segments(segments) == [[(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]]


def test_stitch_within_tolerance():
    segments = [((0, 0), (1, 0)), ((1.004, 0.003), (2, 0))]
    paths = connect_segments(segments)
    assert len(paths) == 1
    assert paths[0][-1] == (2, 0)


def test_stitch_prefers_lowest_index():
    segments = [((0, 0), (1, 0)), ((5, 5), (6, 6)), ((1, 0), (1, 1)), ((1, 0), (2, 0))]
    paths = connect_segments(segments)
    assert paths[0] == [(0, 0), (1, 0), (1, 1)]
    assert [(5, 5), (6, 6)] in paths
    assert [(1, 0), (2, 0)] in paths


def test_stitch_empty():
    assert connect_segments([]) == []


def test_simplify_collapses_collinear():
    line = [(float(i), 2.0 * i) for i in range(10)]
    assert simplify_path(line, 0.1) == [line[0], line[-1]]


def test_simplify_keeps_short_paths():
    assert simplify_path([(0, 0), (1, 1)], 5.0) == [(0, 0), (1, 1)]


def test_simplify_drops_small_bumps_and_is_idempotent():
    pts = [(0, 0), (1, 0.05), (2, 0), (2, 1), (2, 2), (1, 2), (0, 2)]
    once = simplify_path(pts, 0.2)
    assert once == [(0, 0), (2, 0), (2, 2), (0, 2)]
    assert simplify_path(once, 0.2) == once


def test_simplify_keeps_endpoints_and_subset():
    rng = np.random.default_rng(7)
    pts = [tuple(p) for p in rng.uniform(0, 10, size=(40, 2)).tolist()]
    out = simplify_path(pts, 0.5)
    assert out[0] == pts[0] and out[-1] == pts[-1]
    assert all(p in pts for p in out)


@pytest.mark.parametrize(
    "w, h, mode, expected",
    [
        (300, 300, "filled", 0.375),
        (300, 300, "outline", 0.3),
        (100, 50, "filled", 0.3),
        (100, 50, "outline", 0.2),
        (1600, 900, "filled", 2.0),
        (1600, 900, "outline", 1.6),
    ],
)
def test_simplify_tolerance(w, h, mode, expected):
    assert simplify_tolerance(w, h, mode) == pytest.approx(expected)


def test_simplify_tolerance_unknown_mode():
    with pytest.raises(ValueError):
        simplify_tolerance(10, 10, "dense")


def test_smooth_degenerate_inputs():
    assert smooth_path([]) == ""
    assert smooth_path([(1, 1)]) == ""
    assert smooth_path([(0, 0), (1, 2)]) == "M0.00,0.00 L1.00,2.00"


def test_smooth_three_points():
    d = smooth_path([(0, 0), (3, 0), (3, 3)])
    assert d == "M0.00,0.00 C0.50,0.00 2.50,-0.50 3.00,0.00 C3.50,0.50 3.00,2.50 3.00,3.00"


def test_smooth_closed_suffix():
    d = smooth_path([(0, 0), (3, 0), (3, 3)], closed=True)
    assert d.endswith(" Z")
    assert d.count("C") == 2


def test_trace_level_paths_diamond():
    paths = trace_level_paths(DIAMOND, 0.5, 0.3, closed=True)
    assert len(paths) == 1
    assert paths[0].startswith("M1.00,0.50 ")
    assert paths[0].endswith(" Z")


def test_trace_level_paths_drops_degenerate():
    # a straight contour simplifies to two points
    step = np.array([[0, 0, 0], [1, 1, 1]], dtype=float)
    assert trace_level_paths(step, 0.5, 0.2) == []
    # a coarse tolerance collapses the diamond too
    assert trace_level_paths(DIAMOND, 0.5, 1.0) == []


def test_stitch_across_bucket_boundary():
    """Endpoints on either side of zero still match within tolerance."""
    segments = [((-1.0, -1.0), (-0.004, 0.003)), ((0.004, -0.002), (1.0, 1.0))]
    assert connect_segments(segments) == [[(-1.0, -1.0), (0.004, -0.002), (1.0, 1.0)]]
