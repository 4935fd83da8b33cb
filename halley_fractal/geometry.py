"""
Contour geometry for halley_fractal.

Given a scalar grid, this module turns level sets into vector curves:
- marching-squares segments at a threshold
- segments stitched into polylines
- Ramer-Douglas-Peucker simplification
- Catmull-Rom smoothing into SVG cubic path data

Main entrypoint:
    trace_level_paths(values, threshold, tolerance, closed) -> list[str]
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]
Segment = Tuple[Point, Point]

STITCH_TOLERANCE = 0.01
TENSION = 0.5

# Corner weights: top-left 8, top-right 4, bottom-right 2, bottom-left 1.
# Entries are (x1, y1, x2, y2) in cell-local coordinates, y growing downward.
# 5 and 10 are the saddle cases and always get two segments.
MS_EDGES: Tuple[Tuple[Tuple[float, float, float, float], ...], ...] = (
    (),                                           # 0
    ((0, 0.5, 0.5, 1),),                          # 1  bl
    ((1, 0.5, 0.5, 1),),                          # 2  br
    ((0, 0.5, 1, 0.5),),                          # 3  bl br
    ((0.5, 0, 1, 0.5),),                          # 4  tr
    ((0, 0.5, 0.5, 0), (0.5, 1, 1, 0.5)),         # 5  tr bl (saddle)
    ((0.5, 0, 0.5, 1),),                          # 6  tr br
    ((0, 0.5, 0.5, 0),),                          # 7  all but tl
    ((0, 0.5, 0.5, 0),),                          # 8  tl
    ((0.5, 0, 0.5, 1),),                          # 9  tl bl
    ((0, 0.5, 0.5, 1), (0.5, 0, 1, 0.5)),         # 10 tl br (saddle)
    ((0.5, 0, 1, 0.5),),                          # 11 all but tr
    ((0, 0.5, 1, 0.5),),                          # 12 tl tr
    ((0.5, 1, 1, 0.5),),                          # 13 all but br
    ((0, 0.5, 0.5, 1),),                          # 14 all but bl
    (),                                           # 15
)


def cell_codes(values: np.ndarray, threshold: float) -> np.ndarray:
    """
    Marching-squares case code for every 2x2 cell.

    Args:
        values: (H, W) scalar grid
        threshold: corners with value >= threshold count as inside

    Returns:
        (H-1, W-1) int array of codes in 0..15
    """
    above = (np.asarray(values) >= threshold).astype(np.int8)
    tl = above[:-1, :-1]
    tr = above[:-1, 1:]
    br = above[1:, 1:]
    bl = above[1:, :-1]
    return tl * 8 + tr * 4 + br * 2 + bl


def trace_contours(values: np.ndarray, threshold: float) -> List[Segment]:
    """Segments of the threshold level set, in row-major cell order, grid coordinates."""
    values = np.asarray(values)
    if values.ndim != 2 or values.shape[0] < 2 or values.shape[1] < 2:
        return []
    codes = cell_codes(values, threshold)
    segments: List[Segment] = []
    ys, xs = np.nonzero((codes != 0) & (codes != 15))
    for y, x in zip(ys.tolist(), xs.tolist()):
        for x1, y1, x2, y2 in MS_EDGES[codes[y, x]]:
            segments.append(((x + x1, y + y1), (x + x2, y + y2)))
    return segments


def points_match(a: Point, b: Point, tol: float = STITCH_TOLERANCE) -> bool:
    return abs(a[0] - b[0]) < tol and abs(a[1] - b[1]) < tol


class _EndpointIndex:
    """Buckets segment endpoints by tolerance-sized cells for neighbour lookup."""

    def __init__(self, segments: Sequence[Segment], tol: float):
        self.tol = tol
        self.starts: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        self.ends: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        for i, (p, q) in enumerate(segments):
            self.starts[self._key(p)].append(i)
            self.ends[self._key(q)].append(i)

    def _key(self, p: Point) -> Tuple[int, int]:
        return (math.floor(p[0] / self.tol), math.floor(p[1] / self.tol))

    def candidates(self, table, p: Point):
        kx, ky = self._key(p)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                yield from table.get((kx + dx, ky + dy), ())


def connect_segments(segments: Sequence[Segment], tol: float = STITCH_TOLERANCE) -> List[List[Point]]:
    """
    Greedily chain segments into polylines.

    Each path starts at the lowest-indexed unused segment and grows from its
    open end by the lowest-indexed unused segment with a coincident endpoint;
    a segment matched at its far end is appended reversed.
    """
    if not segments:
        return []

    index = _EndpointIndex(segments, tol)
    used = [False] * len(segments)

    def find_connecting(p: Point) -> Optional[Tuple[int, bool]]:
        best: Optional[Tuple[int, bool]] = None
        for i in index.candidates(index.starts, p):
            if not used[i] and points_match(p, segments[i][0], tol):
                if best is None or i < best[0]:
                    best = (i, False)
        for i in index.candidates(index.ends, p):
            if not used[i] and points_match(p, segments[i][1], tol):
                if best is None or i < best[0]:
                    best = (i, True)
        return best

    paths: List[List[Point]] = []
    for start in range(len(segments)):
        if used[start]:
            continue

        path: List[Point] = []
        current: Optional[int] = start
        reverse = False

        while current is not None and not used[current]:
            used[current] = True
            p, q = segments[current]
            head, tail = (q, p) if reverse else (p, q)
            path.append(head)
            nxt = find_connecting(tail)
            if nxt is None:
                path.append(tail)
                current = None
            else:
                current, reverse = nxt

        if len(path) >= 2:
            paths.append(path)

    return paths


def _sq_seg_dist(p: Point, a: Point, b: Point) -> float:
    """Squared distance from p to segment ab (to a itself when ab is degenerate)."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return (p[0] - a[0]) ** 2 + (p[1] - a[1]) ** 2
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    proj_x = a[0] + t * dx
    proj_y = a[1] + t * dy
    return (p[0] - proj_x) ** 2 + (p[1] - proj_y) ** 2


def simplify_path(points: Sequence[Point], tolerance: float) -> List[Point]:
    """Ramer-Douglas-Peucker simplification."""
    if len(points) <= 2:
        return list(points)

    first = points[0]
    last = points[-1]
    max_dist = 0.0
    max_idx = 0
    for i in range(1, len(points) - 1):
        dist = _sq_seg_dist(points[i], first, last)
        if dist > max_dist:
            max_dist = dist
            max_idx = i

    if max_dist > tolerance * tolerance:
        left = simplify_path(points[: max_idx + 1], tolerance)
        right = simplify_path(points[max_idx:], tolerance)
        return left[:-1] + right

    return [first, last]


def simplify_tolerance(width: int, height: int, mode: str = "outline") -> float:
    """RDP tolerance for a canvas: coarser for filled band outlines than for contour export."""
    size = max(width, height)
    if mode == "filled":
        return max(0.3, size / 800)
    if mode == "outline":
        return max(0.2, size / 1000)
    raise ValueError(f"Unknown simplify mode: {mode}")


def _fmt(v: float) -> str:
    return f"{v:.2f}"


def smooth_path(points: Sequence[Point], closed: bool = False) -> str:
    """
    SVG path data through the points using Catmull-Rom -> cubic Bezier control
    points; neighbours are clamped at both ends of the list.
    """
    n = len(points)
    if n < 2:
        return ""
    if n == 2:
        (x0, y0), (x1, y1) = points
        return f"M{_fmt(x0)},{_fmt(y0)} L{_fmt(x1)},{_fmt(y1)}"

    parts = [f"M{_fmt(points[0][0])},{_fmt(points[0][1])}"]
    for i in range(n - 1):
        p0 = points[max(0, i - 1)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(n - 1, i + 2)]

        cp1x = p1[0] + (p2[0] - p0[0]) * TENSION / 3
        cp1y = p1[1] + (p2[1] - p0[1]) * TENSION / 3
        cp2x = p2[0] - (p3[0] - p1[0]) * TENSION / 3
        cp2y = p2[1] - (p3[1] - p1[1]) * TENSION / 3
        parts.append(
            f"C{_fmt(cp1x)},{_fmt(cp1y)} {_fmt(cp2x)},{_fmt(cp2y)} {_fmt(p2[0])},{_fmt(p2[1])}"
        )

    d = " ".join(parts)
    if closed:
        d += " Z"
    return d


def trace_level_paths(
    values: np.ndarray,
    threshold: float,
    tolerance: float,
    closed: bool = False,
    min_points: int = 3,
) -> List[str]:
    """
    Full pipeline for one level: trace -> stitch -> simplify -> smooth.

    Paths left with fewer than min_points after simplification are dropped.
    """
    paths = connect_segments(trace_contours(values, threshold))
    out = []
    for path in paths:
        simplified = simplify_path(path, tolerance)
        if len(simplified) < min_points:
            continue
        d = smooth_path(simplified, closed)
        if d:
            out.append(d)
    return out
