# halley_fractal/coloring.py
from __future__ import annotations

import math
from enum import Enum
from typing import Tuple

import numpy as np

from .utils import clamp

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)


class ColorScheme(str, Enum):
    RAINBOW = "rainbow"
    FIRE = "fire"
    OCEAN = "ocean"
    NEON = "neon"
    GRAYSCALE = "grayscale"
    PLASMA = "plasma"


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """
    h in degrees [0, 360), s and l in percent. Channels are floored to ints.
    """
    s /= 100
    l /= 100
    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = l - c / 2

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return (
        math.floor((r + m) * 255),
        math.floor((g + m) * 255),
        math.floor((b + m) * 255),
    )


def get_color(iterations: int, max_iter: int, scheme: ColorScheme | str) -> RGB:
    """
    Map an iteration count to RGB. Counts at or above max_iter are the
    non-convergent sentinel and always come back black.
    """
    if iterations >= max_iter:
        return BLACK

    scheme = ColorScheme(scheme)
    t = iterations / max_iter

    if scheme is ColorScheme.RAINBOW:
        return hsl_to_rgb(t * 360, 80, 50)
    if scheme is ColorScheme.FIRE:
        return (
            math.floor(min(255, t * 3 * 255)),
            math.floor(clamp((t - 0.33) * 3 * 255, 0, 255)),
            math.floor(clamp((t - 0.66) * 3 * 255, 0, 255)),
        )
    if scheme is ColorScheme.OCEAN:
        return (
            math.floor(t * 100),
            math.floor(100 + t * 155),
            math.floor(150 + t * 105),
        )
    if scheme is ColorScheme.NEON:
        return hsl_to_rgb((t * 180 + 180) % 360, 100, 50 + t * 30)
    if scheme is ColorScheme.GRAYSCALE:
        v = math.floor(t * 255)
        return (v, v, v)
    # plasma: three sinusoids a third of a turn apart
    return (
        math.floor(128 + 127 * math.sin(t * math.pi * 2)),
        math.floor(128 + 127 * math.sin(t * math.pi * 2 + 2.094)),
        math.floor(128 + 127 * math.sin(t * math.pi * 2 + 4.188)),
    )


def color_key(rgb: RGB) -> str:
    """SVG color string; also the grouping key for vector export."""
    r, g, b = rgb
    return f"rgb({r},{g},{b})"


def palette(max_iter: int, scheme: ColorScheme | str) -> np.ndarray:
    """Lookup table of shape (max_iter + 1, 3); row i is get_color(i, ...)."""
    lut = np.zeros((max_iter + 1, 3), dtype=np.uint8)
    for i in range(max_iter + 1):
        lut[i] = get_color(i, max_iter, scheme)
    return lut


def colorize_counts(counts: np.ndarray, max_iter: int, scheme: ColorScheme | str) -> np.ndarray:
    """
    Map an iteration-count array of shape (H, W) to an RGBA uint8 buffer of
    shape (H, W, 4), alpha fully opaque.
    """
    counts = np.asarray(counts)
    lut = palette(max_iter, scheme)
    idx = np.clip(counts, 0, max_iter).astype(np.intp)
    rgba = np.empty(counts.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = lut[idx]
    rgba[..., 3] = 255
    return rgba
