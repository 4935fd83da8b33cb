"""Navigation of the view window: zoom, pan, recenter, and canvas sizing."""

from __future__ import annotations

from dataclasses import replace

from .render import RenderParameters, ViewBounds, pixel_to_complex

DEFAULT_BOUNDS = ViewBounds(-3.0, 3.0, -3.0, 3.0)

PAN_FRACTION = 0.25

# (width, height) as a fraction of the resolution; the larger side is the resolution
ASPECT_RATIOS = {
    "1:1": (1.0, 1.0),
    "4:3": (1.0, 3 / 4),
    "16:9": (1.0, 9 / 16),
    "21:9": (1.0, 9 / 21),
    "9:16": (9 / 16, 1.0),
}


def _round_half_up(v: float) -> int:
    return int(v + 0.5)


def canvas_dimensions(resolution: int, aspect: str = "1:1") -> tuple[int, int]:
    """Pixel size for a resolution and aspect label; unknown labels fall back to 1:1."""
    fx, fy = ASPECT_RATIOS.get(aspect, ASPECT_RATIOS["1:1"])
    return _round_half_up(resolution * fx), _round_half_up(resolution * fy)


def zoom(bounds: ViewBounds, factor: float) -> ViewBounds:
    """Keep the center; factor > 1 zooms in, factor < 1 zooms out."""
    if factor <= 0:
        raise ValueError(f"Zoom factor must be positive, got {factor}")
    cx, cy = bounds.center
    half_x = bounds.width / factor / 2
    half_y = bounds.height / factor / 2
    return ViewBounds(cx - half_x, cx + half_x, cy - half_y, cy + half_y)


def pan(bounds: ViewBounds, dx: float, dy: float) -> ViewBounds:
    """Shift by dx/dy quarter-widths; positive dy moves the window up."""
    shift_x = dx * bounds.width * PAN_FRACTION
    shift_y = dy * bounds.height * PAN_FRACTION
    return ViewBounds(
        bounds.min_x + shift_x,
        bounds.max_x + shift_x,
        bounds.min_y + shift_y,
        bounds.max_y + shift_y,
    )


def recenter(bounds: ViewBounds, px: float, py: float, width: int, height: int, factor: float = 2.0) -> ViewBounds:
    """Center on pixel (px, py) of a width x height canvas and zoom in by factor."""
    z = pixel_to_complex(bounds, width, height, px, py)
    half_x = bounds.width / factor / 2
    half_y = bounds.height / factor / 2
    return ViewBounds(z.re - half_x, z.re + half_x, z.im - half_y, z.im + half_y)


def with_bounds(params: RenderParameters, bounds: ViewBounds) -> RenderParameters:
    return replace(params, bounds=bounds)
