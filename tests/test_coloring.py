import numpy as np
import pytest

from halley_fractal.coloring import (
    ColorScheme,
    color_key,
    colorize_counts,
    get_color,
    hsl_to_rgb,
    palette,
)

ALL_SCHEMES = list(ColorScheme)


@pytest.mark.parametrize("scheme", ALL_SCHEMES)
def test_capped_is_black(scheme):
    assert get_color(50, 50, scheme) == (0, 0, 0)
    assert get_color(75, 50, scheme) == (0, 0, 0)


@pytest.mark.parametrize("scheme", ALL_SCHEMES)
def test_channels_in_range(scheme):
    max_iter = 97
    for it in range(max_iter):
        rgb = get_color(it, max_iter, scheme)
        assert len(rgb) == 3
        assert all(isinstance(c, int) and 0 <= c <= 255 for c in rgb), (it, rgb)


def test_grayscale_ramp():
    assert get_color(0, 50, "grayscale") == (0, 0, 0)
    assert get_color(25, 50, "grayscale") == (127, 127, 127)


def test_ocean_start():
    assert get_color(0, 10, ColorScheme.OCEAN) == (0, 100, 150)


def test_fire_midpoint():
    assert get_color(25, 50, ColorScheme.FIRE) == (255, 130, 0)


def test_plasma_red_starts_mid():
    assert get_color(0, 10, ColorScheme.PLASMA)[0] == 128


def test_hsl_primary():
    assert hsl_to_rgb(120, 100, 50) == (0, 255, 0)
    assert hsl_to_rgb(240, 100, 50) == (0, 0, 255)


def test_unknown_scheme_rejected():
    with pytest.raises(ValueError):
        get_color(1, 10, "sepia")


def test_color_key():
    assert color_key((1, 22, 255)) == "rgb(1,22,255)"


@pytest.mark.parametrize("scheme", ALL_SCHEMES)
def test_palette_matches_get_color(scheme):
    lut = palette(20, scheme)
    assert lut.shape == (21, 3)
    for i in range(21):
        assert tuple(int(c) for c in lut[i]) == get_color(i, 20, scheme)


def test_colorize_counts_shape_and_alpha():
    counts = np.array([[1, 2, 10], [10, 3, 0]], dtype=np.int32)
    rgba = colorize_counts(counts, 10, ColorScheme.RAINBOW)
    assert rgba.shape == (2, 3, 4)
    assert rgba.dtype == np.uint8
    assert np.all(rgba[..., 3] == 255)
    assert tuple(rgba[0, 2, :3]) == (0, 0, 0)
    assert tuple(int(c) for c in rgba[1, 1, :3]) == get_color(3, 10, "rainbow")
