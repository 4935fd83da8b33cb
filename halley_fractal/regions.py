"""
Connected same-count regions of a basin grid, and their run-length encoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

import numpy as np

from .coloring import BLACK, ColorScheme, color_key, get_color

Cell = Tuple[int, int]

# Regions below this many cells are written cell by cell; larger ones as row runs.
RLE_MIN_CELLS = 50


@dataclass
class Region:
    color: str
    iterations: int
    cells: List[Cell]

    def __len__(self) -> int:
        return len(self.cells)


def iter_regions(counts: np.ndarray, max_iter: int, scheme: ColorScheme | str) -> Iterator[Region]:
    """
    Yield 4-connected regions of equal iteration count, in row-major order of
    their first cell. Regions whose color is black are skipped.

    Uses an explicit stack, so region size is not limited by recursion depth.
    """
    counts = np.asarray(counts)
    height, width = counts.shape
    values = counts.tolist()
    visited = np.zeros((height, width), dtype=bool)
    colors: Dict[int, Tuple[int, int, int]] = {}

    for y in range(height):
        row = values[y]
        for x in range(width):
            if visited[y, x]:
                continue

            it = row[x]
            rgb = colors.get(it)
            if rgb is None:
                rgb = colors[it] = get_color(it, max_iter, scheme)
            if rgb == BLACK:
                visited[y, x] = True
                continue

            cells: List[Cell] = []
            stack = [(x, y)]
            while stack:
                cx, cy = stack.pop()
                if cx < 0 or cx >= width or cy < 0 or cy >= height:
                    continue
                if visited[cy, cx] or values[cy][cx] != it:
                    continue

                visited[cy, cx] = True
                cells.append((cx, cy))

                stack.append((cx + 1, cy))
                stack.append((cx - 1, cy))
                stack.append((cx, cy + 1))
                stack.append((cx, cy - 1))

            yield Region(color=color_key(rgb), iterations=it, cells=cells)


def find_regions(counts: np.ndarray, max_iter: int, scheme: ColorScheme | str) -> List[Region]:
    return list(iter_regions(counts, max_iter, scheme))


def row_runs(cells: List[Cell]) -> List[Tuple[int, int, int]]:
    """
    Run-length encode cells by row.

    Returns (x_start, y, length) for each maximal horizontal run; rows appear
    in the order they are first seen in `cells`, runs left to right.
    """
    rows: Dict[int, List[int]] = {}
    for x, y in cells:
        rows.setdefault(y, []).append(x)

    runs = []
    for y, xs in rows.items():
        xs.sort()
        start = end = xs[0]
        for x in xs[1:]:
            if x == end + 1:
                end = x
            else:
                runs.append((start, y, end - start + 1))
                start = end = x
        runs.append((start, y, end - start + 1))
    return runs
