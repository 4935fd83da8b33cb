"""
SVG export of basin grids.

Two documents are produced from the same grid:
- filled: every non-black connected region as rectangles (exact)
- contours: smoothed iso-lines between successive iteration levels (lossy)
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional
from xml.sax.saxutils import escape, quoteattr

import numpy as np

from .coloring import BLACK, ColorScheme, color_key, get_color
from .geometry import simplify_tolerance, trace_level_paths
from .regions import RLE_MIN_CELLS, Region, iter_regions, row_runs
from .render import Grid, RenderParameters, grid_job
from .tasks import CancelToken, Job, RenderTask, rescale

logger = logging.getLogger(__name__)

CELL_SIZE = "1.1"
# regions between two cancellation checks while emitting the filled document
REGION_BATCH = 256
# contour levels between two progress reports
LEVEL_BATCH = 5


def _header(grid: Grid, title: str, note: str) -> List[str]:
    p = grid.params
    b = p.bounds
    formula = escape(p.function_name)
    return [
        '<?xml version="1.0" encoding="UTF-8"?>\n',
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {p.width} {p.height}" '
        f'width="{p.width}" height="{p.height}">\n',
        f"  <title>{escape(title)} - {formula}</title>\n",
        f"  <desc>Formula: {formula} | Bounds: [{b.min_x:.6f}, {b.max_x:.6f}] × "
        f"[{b.min_y:.6f}, {b.max_y:.6f}] | Iterations: {p.max_iter} | {note}</desc>\n",
        '  <rect width="100%" height="100%" fill="black"/>\n',
    ]


def region_elements(region: Region) -> str:
    """
    Markup for one region: a lone rect, a group of per-cell rects, or for
    large regions a group of one rect per horizontal run.
    """
    fill = quoteattr(region.color)
    if len(region.cells) == 1:
        x, y = region.cells[0]
        return f'  <rect x="{x}" y="{y}" width="{CELL_SIZE}" height="{CELL_SIZE}" fill={fill}/>\n'

    lines = [f"  <g fill={fill}>\n"]
    if len(region.cells) < RLE_MIN_CELLS:
        for x, y in region.cells:
            lines.append(f'    <rect x="{x}" y="{y}" width="{CELL_SIZE}" height="{CELL_SIZE}"/>\n')
    else:
        for x, y, length in row_runs(region.cells):
            lines.append(f'    <rect x="{x}" y="{y}" width="{length + 0.1:.1f}" height="{CELL_SIZE}"/>\n')
    lines.append("  </g>\n")
    return "".join(lines)


def color_bands(grid: Grid, scheme: ColorScheme) -> List[tuple[str, List[int]]]:
    """Group iteration levels sharing one non-black color, in ascending level order."""
    bands: dict[str, List[int]] = {}
    for level in grid.levels():
        rgb = get_color(level, grid.max_iter, scheme)
        if rgb == BLACK:
            continue
        bands.setdefault(color_key(rgb), []).append(level)
    return list(bands.items())


def _band_outline_steps(grid: Grid, scheme: ColorScheme, token: Optional[CancelToken], out: List[str]) -> Job:
    bands = color_bands(grid, scheme)
    tolerance = simplify_tolerance(grid.width, grid.height, "filled")
    out.append('  <g fill="none" stroke-width="0.5">\n')
    for i, (color, levels) in enumerate(bands, start=1):
        if token is not None:
            token.raise_if_cancelled()
        mask = np.isin(grid.counts, levels).astype(np.uint8)
        for d in trace_level_paths(mask, 0.5, tolerance, closed=True):
            out.append(f'    <path d="{d}" stroke={quoteattr(color)}/>\n')
        yield i * 100 // len(bands)
    out.append("  </g>\n")


def filled_document_job(
    grid: Grid,
    scheme: Optional[ColorScheme | str] = None,
    token: Optional[CancelToken] = None,
    band_outlines: bool = False,
) -> Job:
    scheme = grid.params.color_scheme if scheme is None else ColorScheme(scheme)
    out = _header(grid, "Halley's Method Fractal", "Traced with smooth curves")

    n_regions = 0
    for region in iter_regions(grid.counts, grid.max_iter, scheme):
        out.append(region_elements(region))
        n_regions += 1
        if n_regions % REGION_BATCH == 0:
            if token is not None:
                token.raise_if_cancelled()
            seed_row = region.cells[0][1]
            yield seed_row * 60 // grid.height
    yield 60

    if band_outlines:
        yield from rescale(_band_outline_steps(grid, scheme, token, out), 60, 100)

    out.append("</svg>\n")
    logger.debug("filled svg: %d regions, %d chars", n_regions, sum(len(s) for s in out))
    return "".join(out)


def contour_document_job(
    grid: Grid,
    scheme: Optional[ColorScheme | str] = None,
    token: Optional[CancelToken] = None,
) -> Job:
    scheme = grid.params.color_scheme if scheme is None else ColorScheme(scheme)
    out = _header(grid, "Halley's Method Fractal Contours", "Contour-traced vector paths")
    out.append('  <g fill="none" stroke-width="0.5">\n')

    tolerance = simplify_tolerance(grid.width, grid.height, "outline")
    levels = grid.levels()
    n_paths = 0
    for i, level in enumerate(levels):
        rgb = get_color(level, grid.max_iter, scheme)
        if rgb != BLACK:
            stroke = quoteattr(color_key(rgb))
            for d in trace_level_paths(grid.counts, level + 0.5, tolerance, closed=False):
                out.append(f'    <path d="{d}" stroke={stroke}/>\n')
                n_paths += 1
        if i % LEVEL_BATCH == 0:
            if token is not None:
                token.raise_if_cancelled()
            yield i * 100 // len(levels)

    out.append("  </g>\n</svg>\n")
    logger.debug("contour svg: %d levels, %d paths", len(levels), n_paths)
    return "".join(out)


def filled_svg_job(
    params: RenderParameters,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
    band_outlines: bool = False,
) -> Job:
    steps = grid_job(params, token, chunk_rows)

    def run():
        grid = yield from rescale(steps, 0, 40)
        return (yield from rescale(filled_document_job(grid, token=token, band_outlines=band_outlines), 40, 100))

    return run()


def contour_svg_job(
    params: RenderParameters,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> Job:
    steps = grid_job(params, token, chunk_rows)

    def run():
        grid = yield from rescale(steps, 0, 50)
        return (yield from rescale(contour_document_job(grid, token=token), 50, 100))

    return run()


def filled_svg(grid: Grid, scheme: Optional[ColorScheme | str] = None, band_outlines: bool = False) -> str:
    return RenderTask(lambda tok: filled_document_job(grid, scheme, tok, band_outlines)).run()


def contour_svg(grid: Grid, scheme: Optional[ColorScheme | str] = None) -> str:
    return RenderTask(lambda tok: contour_document_job(grid, scheme, tok)).run()


def export_filled_svg(
    params: RenderParameters,
    on_progress: Optional[Callable[[int], None]] = None,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
    band_outlines: bool = False,
) -> str:
    return RenderTask(
        lambda tok: filled_svg_job(params, tok, chunk_rows, band_outlines), on_progress, token
    ).run()


def export_contour_svg(
    params: RenderParameters,
    on_progress: Optional[Callable[[int], None]] = None,
    token: Optional[CancelToken] = None,
    chunk_rows: Optional[int] = None,
) -> str:
    return RenderTask(lambda tok: contour_svg_job(params, tok, chunk_rows), on_progress, token).run()
