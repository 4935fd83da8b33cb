"""Rendering primitives: view bounds, render parameters, basin grids and rasters."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .coloring import ColorScheme, colorize_counts
from .complex_ops import Complex
from .functions import get_function
from .iterators import iterate_halley
from .tasks import CancelToken, Job, RenderTask, rescale

logger = logging.getLogger(__name__)

# number of row chunks a render is split into when chunk_rows is not given
DEFAULT_CHUNKS = 32


@dataclass(frozen=True)
class ViewBounds:
    """Window of the complex plane: real axis [min_x, max_x], imaginary [min_y, max_y]."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def __post_init__(self):
        values = (self.min_x, self.max_x, self.min_y, self.max_y)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Bounds must be finite: {values}")
        if self.min_x >= self.max_x or self.min_y >= self.max_y:
            raise ValueError(f"Invalid bounds: min values must be less than max values: {values}")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2


@dataclass(frozen=True)
class RenderParameters:
    """Everything that determines a single render."""

    function_name: str
    bounds: ViewBounds
    width: int
    height: int
    max_iter: int
    color_scheme: ColorScheme = ColorScheme.RAINBOW

    def __post_init__(self):
        for field in ("width", "height", "max_iter"):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"{field} must be a positive integer, got {value!r}")
        object.__setattr__(self, "color_scheme", ColorScheme(self.color_scheme))


@dataclass(frozen=True)
class Grid:
    """
    Iteration counts for one render, shape (height, width), row 0 at max_y.

    The array is read-only once built.
    """

    counts: np.ndarray
    params: RenderParameters

    @property
    def width(self) -> int:
        return self.params.width

    @property
    def height(self) -> int:
        return self.params.height

    @property
    def max_iter(self) -> int:
        return self.params.max_iter

    def levels(self) -> list[int]:
        """Distinct iteration counts, ascending."""
        return [int(v) for v in np.unique(self.counts)]


@dataclass(frozen=True)
class RenderResult:
    grid: Grid
    rgba: np.ndarray


def pixel_to_complex(bounds: ViewBounds, width: int, height: int, px: float, py: float) -> Complex:
    """Pixel (px, py) -> point in the window; py = 0 is the top edge (max_y)."""
    x = bounds.min_x + px * ((bounds.max_x - bounds.min_x) / width)
    y = bounds.max_y - py * ((bounds.max_y - bounds.min_y) / height)
    return Complex(x, y)


def grid_job(
    params: RenderParameters,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> Job:
    """
    Job that builds the basin grid row chunk by row chunk.

    The function name is resolved before the job starts, so an unknown name
    raises UnknownFunctionError here and no grid is allocated.
    """
    func = get_function(params.function_name)
    if chunk_rows is not None and chunk_rows <= 0:
        raise ValueError(f"chunk_rows must be positive, got {chunk_rows}")
    chunk = chunk_rows or max(1, params.height // DEFAULT_CHUNKS)
    return _grid_steps(params, func, chunk, token)


def _grid_steps(params, func, chunk, token) -> Job:
    width, height, max_iter = params.width, params.height, params.max_iter
    bounds = params.bounds
    x_step = (bounds.max_x - bounds.min_x) / width
    y_step = (bounds.max_y - bounds.min_y) / height
    xs = [bounds.min_x + px * x_step for px in range(width)]

    counts = np.empty((height, width), dtype=np.int32)

    for start in range(0, height, chunk):
        if token is not None:
            token.raise_if_cancelled()
        end = min(start + chunk, height)
        for py in range(start, end):
            y = bounds.max_y - py * y_step
            counts[py] = [iterate_halley(Complex(x, y), func, max_iter) for x in xs]
        yield end * 100 // height

    counts.setflags(write=False)
    capped = int(np.count_nonzero(counts >= max_iter))
    logger.debug(
        "grid %s %dx%d max_iter=%d: %d/%d pixels capped",
        func.name, width, height, max_iter, capped, counts.size,
    )
    return Grid(counts=counts, params=params)


def colorize(grid: Grid, scheme: Optional[ColorScheme | str] = None) -> np.ndarray:
    """RGBA buffer (height, width, 4) for a grid; defaults to the grid's own scheme."""
    scheme = grid.params.color_scheme if scheme is None else ColorScheme(scheme)
    return colorize_counts(grid.counts, grid.max_iter, scheme)


def raster_job(
    params: RenderParameters,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> Job:
    steps = grid_job(params, token, chunk_rows)

    def run():
        grid = yield from rescale(steps, 0, 95)
        return RenderResult(grid=grid, rgba=colorize(grid))

    return run()


def render_grid(
    params: RenderParameters,
    on_progress: Optional[Callable[[int], None]] = None,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> Grid:
    return RenderTask(lambda tok: grid_job(params, tok, chunk_rows), on_progress, token).run()


def render_image(
    params: RenderParameters,
    on_progress: Optional[Callable[[int], None]] = None,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> RenderResult:
    return RenderTask(lambda tok: raster_job(params, tok, chunk_rows), on_progress, token).run()
