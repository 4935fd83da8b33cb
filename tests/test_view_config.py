from pathlib import Path

import pytest

from halley_fractal.config import RenderConfig, config_from_dict, load_config, save_config
from halley_fractal.functions import UnknownFunctionError
from halley_fractal.render import RenderParameters, ViewBounds
from halley_fractal.view import DEFAULT_BOUNDS, canvas_dimensions, pan, recenter, with_bounds, zoom

ROOT = Path(__file__).resolve().parents[1]


def as_tuple(b: ViewBounds):
    return (b.min_x, b.max_x, b.min_y, b.max_y)


@pytest.mark.parametrize(
    "aspect, expected",
    [
        ("1:1", (300, 300)),
        ("4:3", (300, 225)),
        ("16:9", (300, 169)),
        ("21:9", (300, 129)),
        ("9:16", (169, 300)),
        ("3:2", (300, 300)),
    ],
)
def test_canvas_dimensions(aspect, expected):
    assert canvas_dimensions(300, aspect) == expected


def test_zoom_keeps_center():
    z = zoom(DEFAULT_BOUNDS, 2.0)
    assert as_tuple(z) == (-1.5, 1.5, -1.5, 1.5)
    back = zoom(z, 0.5)
    assert as_tuple(back) == pytest.approx(as_tuple(DEFAULT_BOUNDS))


def test_zoom_rejects_non_positive():
    with pytest.raises(ValueError):
        zoom(DEFAULT_BOUNDS, 0)


def test_pan_quarter_width():
    right = pan(DEFAULT_BOUNDS, 1, 0)
    assert as_tuple(right) == (-1.5, 4.5, -3.0, 3.0)
    up = pan(DEFAULT_BOUNDS, 0, 1)
    assert as_tuple(up) == (-3.0, 3.0, -1.5, 4.5)


def test_recenter_on_corner_pixel():
    b = recenter(DEFAULT_BOUNDS, 0, 0, 10, 10)
    assert as_tuple(b) == (-4.5, -1.5, 1.5, 4.5)


def test_with_bounds_replaces_only_bounds():
    params = RenderParameters("z³ - 1", DEFAULT_BOUNDS, 8, 6, 20, "neon")
    moved = with_bounds(params, zoom(DEFAULT_BOUNDS, 4))
    assert moved.bounds.width == pytest.approx(1.5)
    assert (moved.width, moved.height, moved.max_iter, moved.color_scheme) == (8, 6, 20, params.color_scheme)


def test_default_config():
    cfg = config_from_dict(None)
    params = cfg.to_params()
    assert params.function_name == "z³ - 1"
    assert (params.width, params.height) == (300, 300)
    assert as_tuple(params.bounds) == (-3.0, 3.0, -3.0, 3.0)


def test_config_normalizes_formula_and_merges_bounds():
    cfg = config_from_dict({"formula": "z^4 - 1", "bounds": {"min_x": -1}, "aspect_ratio": "16:9"})
    params = cfg.to_params()
    assert params.function_name == "z⁴ - 1"
    assert as_tuple(params.bounds) == (-1, 3.0, -3.0, 3.0)
    assert (params.width, params.height) == (300, 169)


def test_config_explicit_size_wins():
    cfg = config_from_dict({"width": 40, "height": 30, "resolution": 999})
    assert cfg.dimensions() == (40, 30)


@pytest.mark.parametrize(
    "data, error",
    [
        ({"colour": "red"}, ValueError),
        ({"aspect_ratio": "5:4"}, ValueError),
        ({"bounds": {"min_x": 4}}, ValueError),
        ({"max_iter": 0}, ValueError),
        ({"color_scheme": "sepia"}, ValueError),
        ({"formula": "tan(z)"}, UnknownFunctionError),
        (["not", "a", "mapping"], ValueError),
    ],
)
def test_bad_config(data, error):
    with pytest.raises(error):
        config_from_dict(data)


def test_yaml_round_trip(tmp_path):
    cfg = config_from_dict({"formula": "cos(z) - 1", "max_iter": 80, "color_scheme": "plasma"})
    path = tmp_path / "preset.yaml"
    save_config(cfg, path)
    assert "cos(z) - 1" in path.read_text(encoding="utf-8")
    assert load_config(path) == cfg


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == RenderConfig()


@pytest.mark.parametrize("path", sorted((ROOT / "configs").glob("*.yaml")), ids=lambda p: p.name)
def test_shipped_presets_load(path):
    cfg = load_config(path)
    params = cfg.to_params()
    assert params.max_iter > 0
    assert params.width > 0 and params.height > 0
