"""Ruling lines: classification, collapsing and intersection finding."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

# pyright: reportUnknownMemberType=false
# pyright: reportUntypedFunctionDecorator=false
import numba  # type: ignore
import numpy as np

from .geometry_utils import Point, Rectangle, feq

# Segments within this many degrees of an axis are snapped onto it.
ANGLE_SNAP_DEGREES = 1.0

# Maps an intersection point to (horizontal index, vertical index).
IntersectionIndex = Dict[Point, Tuple[int, int]]


def _within(value: float, target: float, tolerance: float) -> bool:
    return abs(value - target) <= tolerance


@dataclass(eq=False)
class Ruling:
    """A straight line segment drawn on the page.

    Rulings compare by identity: two rulings with the same coordinates are
    still different edges. Nearly horizontal or vertical segments are snapped
    onto their axis on construction and their endpoints ordered so that
    ``start <= end``.
    """

    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self) -> None:
        self._normalize()

    def _normalize(self) -> None:
        angle = self.angle
        if any(_within(angle, a, ANGLE_SNAP_DEGREES) for a in (0.0, 180.0, 360.0)):
            self.y2 = self.y1
        elif any(_within(angle, a, ANGLE_SNAP_DEGREES) for a in (90.0, 270.0)):
            self.x2 = self.x1

        if self.horizontal and self.x1 > self.x2:
            self.x1, self.x2 = self.x2, self.x1
        elif self.vertical and self.y1 > self.y2:
            self.y1, self.y2 = self.y2, self.y1

    @property
    def angle(self) -> float:
        degrees = math.degrees(math.atan2(self.y2 - self.y1, self.x2 - self.x1))
        return degrees + 360.0 if degrees < 0 else degrees

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    @property
    def horizontal(self) -> bool:
        return self.length > 0 and feq(self.y1, self.y2)

    @property
    def vertical(self) -> bool:
        return self.length > 0 and feq(self.x1, self.x2)

    @property
    def oblique(self) -> bool:
        return not (self.horizontal or self.vertical)

    @property
    def position(self) -> float:
        """Coordinate on the orthogonal axis (y for horizontal, x for vertical)."""
        return self.x1 if self.vertical else self.y1

    @property
    def start(self) -> float:
        return self.y1 if self.vertical else self.x1

    @property
    def end(self) -> float:
        return self.y2 if self.vertical else self.x2

    def with_extent(self, start: float, end: float) -> "Ruling":
        """Copy of the ruling spanning ``start`` to ``end`` on its own axis."""
        if self.vertical:
            return replace(self, y1=start, y2=end)
        return replace(self, x1=start, x2=end)

    def crop_to(self, area: Rectangle) -> Optional["Ruling"]:
        """Clip the ruling to ``area``; None when it lies outside."""
        if not area.intersects_line(self):
            return None
        if self.vertical:
            return self.with_extent(max(self.start, area.top), min(self.end, area.bottom))
        return self.with_extent(max(self.start, area.left), min(self.end, area.right))

    def __repr__(self) -> str:
        return f"Ruling(({self.x1:.2f}, {self.y1:.2f}) -> ({self.x2:.2f}, {self.y2:.2f}))"


def split_rulings(rulings: Sequence[Ruling]) -> Tuple[List[Ruling], List[Ruling]]:
    """Split into (horizontal, vertical); oblique rulings are dropped."""
    horizontal: List[Ruling] = []
    vertical: List[Ruling] = []
    for ruling in rulings:
        if ruling.horizontal:
            horizontal.append(ruling)
        elif ruling.vertical:
            vertical.append(ruling)
    return horizontal, vertical


def collapse_oriented_rulings(
    rulings: Sequence[Ruling],
    axis_expand: float,
    orthogonal_expand: float,
    min_length: float = 0.0,
) -> List[Ruling]:
    """Fuse same-orientation rulings that are collinear and close together.

    Two rulings merge when their positions differ by at most
    ``orthogonal_expand`` and, once both are lengthened by ``axis_expand`` at
    each end, their extents overlap. The merged ruling keeps the position of
    the ruling it grew from. The input rulings are left untouched.
    """
    ordered = sorted(rulings, key=lambda r: (r.position, r.start))
    collapsed: List[Ruling] = []

    for ruling in ordered:
        if ruling.length == 0:
            continue

        target = None
        for i in range(len(collapsed) - 1, -1, -1):
            candidate = collapsed[i]
            if ruling.position - candidate.position > orthogonal_expand:
                break
            if ruling.start <= candidate.end + 2 * axis_expand and (
                candidate.start <= ruling.end + 2 * axis_expand
            ):
                target = i
                break

        if target is None:
            collapsed.append(ruling)
        else:
            last = collapsed[target]
            collapsed[target] = last.with_extent(
                min(last.start, ruling.start), max(last.end, ruling.end)
            )

    return [r for r in collapsed if r.length >= min_length]


def _to_array(rulings: Sequence[Ruling]) -> np.ndarray[Any, np.dtype[np.float64]]:
    if not rulings:
        return np.empty((0, 4), dtype=np.float64)
    return np.array([(r.x1, r.y1, r.x2, r.y2) for r in rulings], dtype=np.float64)


@numba.jit(nopython=True, cache=True)
def intersection_matrix_numba(
    h_lines: np.ndarray[Any, np.dtype[np.float64]],
    v_lines: np.ndarray[Any, np.dtype[np.float64]],
    h_expand: float,
    v_expand: float,
) -> np.ndarray[Any, np.dtype[np.bool_]]:  # type: ignore
    """Pairwise test of expanded horizontal against expanded vertical lines."""
    n = h_lines.shape[0]
    m = v_lines.shape[0]
    hits = np.zeros((n, m), dtype=np.bool_)

    for i in range(n):
        y = h_lines[i, 1]
        left = h_lines[i, 0] - h_expand
        right = h_lines[i, 2] + h_expand
        for j in range(m):
            x = v_lines[j, 0]
            top = v_lines[j, 1] - v_expand
            bottom = v_lines[j, 3] + v_expand
            if left <= x <= right and top <= y <= bottom:
                hits[i, j] = True

    return hits


def find_intersections(
    horizontals: Sequence[Ruling],
    verticals: Sequence[Ruling],
    h_expand: float,
    v_expand: float,
) -> IntersectionIndex:
    """Index every point where a horizontal ruling meets a vertical one.

    The values are positions in ``horizontals`` and ``verticals``, so they
    identify rulings independently of their coordinates. When two pairs land
    on the same rounded point the first one (horizontal order, then vertical)
    is kept.
    """
    intersections: IntersectionIndex = {}
    if not horizontals or not verticals:
        return intersections

    hits = intersection_matrix_numba(
        _to_array(horizontals), _to_array(verticals), float(h_expand), float(v_expand)
    )
    for i, j in np.argwhere(hits):
        point = Point(verticals[j].x1, horizontals[i].y1)
        if point not in intersections:
            intersections[point] = (int(i), int(j))

    return intersections


__all__ = [
    "IntersectionIndex",
    "Ruling",
    "collapse_oriented_rulings",
    "find_intersections",
    "split_rulings",
]
