"""Lattice table extraction: tables delimited by drawn ruling lines.

The pipeline runs in five steps, all local to a single :meth:`extract` call:

1. collapse nearly collinear rulings of each orientation until stable,
2. index the points where horizontal and vertical rulings meet,
3. find the minimal closed rectangle anchored at each point (the cells),
4. add gap cells where a row is missing its left border,
5. merge adjacent cells into regions by tracing their outer boundary.
"""

from __future__ import annotations

import itertools
from collections import Counter
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .config import LatticeConfig
from .geometry_utils import (
    Cell,
    Point,
    Rectangle,
    column_major_key,
    feq,
    row_major_key,
    sort_rectangles,
)
from .logging_config import get_logger
from .page import Page
from .ruling import (
    IntersectionIndex,
    Ruling,
    collapse_oriented_rulings,
    find_intersections,
    split_rulings,
)
from .table import Table
from .text import merge_words

logger = get_logger(__name__)

MAGIC_HEURISTIC_NUMBER = 0.65
PERPENDICULAR_EXPAND_AMOUNT = 2.0
# Cells are widened to the right by 1% when collecting their text so a
# trailing glyph sitting on the border is not cut off.
CELL_TEXT_WIDEN_FACTOR = 1.01


class TableLike(Protocol):
    """Anything reporting a row and column count."""

    @property
    def row_count(self) -> int: ...

    @property
    def col_count(self) -> int: ...


class ExtractionAlgorithm(Protocol):
    """A table extractor, e.g. the text-alignment (stream) baseline."""

    def extract(self, page: Page) -> Sequence[TableLike]: ...


def _collapse_until_stable(
    rulings: List[Ruling],
    axis_expand: float,
    orthogonal_expand: float,
    min_length: float,
) -> List[Ruling]:
    while True:
        count = len(rulings)
        rulings = collapse_oriented_rulings(
            rulings, axis_expand, orthogonal_expand, min_length
        )
        if len(rulings) == count:
            return rulings


def _find_cell_at(
    top_left: Point,
    south: Sequence[Point],
    east: Sequence[Point],
    intersections: IntersectionIndex,
) -> Optional[Cell]:
    """Smallest closed rectangle with ``top_left`` as its top-left corner."""
    h_index, v_index = intersections[top_left]

    for bottom_left in south:
        # same vertical ruling runs down from top_left
        if intersections[bottom_left][1] != v_index:
            continue
        for top_right in east:
            # same horizontal ruling runs right from top_left
            if intersections[top_right][0] != h_index:
                continue
            bottom_right = Point(top_right.x, bottom_left.y)
            expected = (intersections[bottom_left][0], intersections[top_right][1])
            if intersections.get(bottom_right) == expected:
                return Cell.from_points(top_left, bottom_right)

    return None


def find_cells(
    horizontal_rulings: Sequence[Ruling],
    vertical_rulings: Sequence[Ruling],
    horizontal_expand: float = PERPENDICULAR_EXPAND_AMOUNT,
    vertical_expand: float = PERPENDICULAR_EXPAND_AMOUNT,
) -> List[Cell]:
    """Find the cells bounded by the given rulings, gap cells included."""
    intersections = find_intersections(
        horizontal_rulings, vertical_rulings, horizontal_expand, vertical_expand
    )
    points = sorted(intersections, key=row_major_key)
    cells: List[Cell] = []

    for i, top_left in enumerate(points):
        rest = points[i + 1 :]
        south = [p for p in rest if p.x == top_left.x and p.y > top_left.y]
        east = [p for p in rest if p.y == top_left.y and p.x > top_left.x]
        cell = _find_cell_at(top_left, south, east, intersections)
        if cell is not None:
            cells.append(cell)

    gaps = find_gaps(cells)
    if gaps:
        cells = sort_rectangles(cells + gaps)

    return cells


def _is_within(x: float, start: float, end: float) -> bool:
    if start < end:
        return start <= x <= end
    return end <= x <= start


def same_row(cell: Rectangle, candidate: Rectangle) -> bool:
    """Vertical ranges overlap, and not only along a shared border."""
    if not (
        _is_within(cell.top, candidate.top, candidate.bottom)
        or _is_within(cell.bottom, candidate.top, candidate.bottom)
        or _is_within(candidate.top, cell.top, cell.bottom)
        or _is_within(candidate.bottom, cell.top, cell.bottom)
    ):
        return False
    return not feq(cell.top, candidate.bottom) and not feq(cell.bottom, candidate.top)


def find_neighbour(
    cell: Cell, cells: Sequence[Cell], on_left: bool = True
) -> Optional[Cell]:
    """Closest cell in the same row on the requested side of ``cell``."""
    best: Optional[Cell] = None
    for candidate in cells:
        if candidate is cell or not same_row(cell, candidate):
            continue
        if on_left:
            if cell.left >= candidate.right and (
                best is None or candidate.right > best.right
            ):
                best = candidate
        elif cell.right <= candidate.left and (
            best is None or candidate.left < best.left
        ):
            best = candidate
    return best


def find_gaps(cells: Sequence[Cell]) -> List[Cell]:
    """Cells missing at the start of a row or between two cells of a row."""
    if not cells:
        return []

    gaps: List[Cell] = []
    table_left = min(c.left for c in cells)
    for cell in cells:
        if cell.is_empty():
            continue
        neighbour = find_neighbour(cell, cells, on_left=True)
        if neighbour is None:
            if not feq(cell.left, table_left):
                gaps.append(
                    Cell(cell.top, table_left, cell.left - table_left, cell.height)
                )
        elif not feq(neighbour.right, cell.left):
            gaps.append(
                Cell(cell.top, neighbour.right, cell.left - neighbour.right, cell.height)
            )

    return gaps


def _pair_along(
    vertices: Sequence[Point],
    sort_key: Callable[[Point], tuple],
    line_key: Callable[[Point], float],
) -> Dict[int, int]:
    """Pair consecutive vertices on each line into edges, keyed both ways."""
    ordered = sorted(range(len(vertices)), key=lambda i: sort_key(vertices[i]))
    partners: Dict[int, int] = {}
    for _, group in itertools.groupby(ordered, key=lambda i: line_key(vertices[i])):
        members = list(group)
        for a, b in zip(members[0::2], members[1::2]):
            partners[a] = b
            partners[b] = a
    return partners


def _trace_polygons(
    vertex_count: int, h_edges: Dict[int, int], v_edges: Dict[int, int]
) -> List[List[int]]:
    """Walk closed loops alternating vertical and horizontal edges."""
    polygons: List[List[int]] = []
    pending = set(h_edges) & set(v_edges)

    while pending:
        start = min(pending)
        polygon = [start]
        current, follow_vertical, closed = start, True, False

        for _ in range(vertex_count):
            following = (v_edges if follow_vertical else h_edges).get(current)
            if following is None:
                break
            follow_vertical = not follow_vertical
            if following == start:
                closed = True
                break
            polygon.append(following)
            current = following

        pending.difference_update(polygon)
        if closed:
            polygons.append(polygon)

    return polygons


def find_spreadsheets_from_cells(cells: Sequence[Rectangle]) -> List[Rectangle]:
    """Bounding rectangles of the maximal groups of adjacent cells.

    Corners shared by an even number of cells are interior and cancel out;
    the rest are vertices of the outer boundary of each group. Pairing those
    vertices along rows and columns gives the boundary edges, which are
    walked into closed polygons. Non-rectangular groups are reported as their
    bounding box.
    """
    unique = list({c.bounds_key(): c for c in cells}.values())

    corner_counts: Counter = Counter()
    for cell in unique:
        corner_counts.update(cell.points())
    vertices = sorted(p for p, n in corner_counts.items() if n % 2 == 1)

    h_edges = _pair_along(vertices, row_major_key, lambda p: p.y)
    v_edges = _pair_along(vertices, column_major_key, lambda p: p.x)

    rectangles: List[Rectangle] = []
    for polygon in _trace_polygons(len(vertices), h_edges, v_edges):
        xs = [vertices[i].x for i in polygon]
        ys = [vertices[i].y for i in polygon]
        rectangles.append(Rectangle.from_corners(min(xs), min(ys), max(xs), max(ys)))

    return rectangles


class LatticeExtractionAlgorithm:
    """Extract tables whose rows and columns are separated by ruling lines.

    An instance holds only its frozen configuration, so one configured
    extractor can serve several threads at once.
    """

    def __init__(self, config: Optional[LatticeConfig] = None):
        self.config = config or LatticeConfig()

    def with_max_gap_between_aligned_horizontal_rulings(
        self, gap: float
    ) -> "LatticeExtractionAlgorithm":
        return type(self)(
            replace(self.config, max_gap_between_aligned_horizontal_rulings=gap)
        )

    def with_max_gap_between_aligned_vertical_rulings(
        self, gap: float
    ) -> "LatticeExtractionAlgorithm":
        return type(self)(
            replace(self.config, max_gap_between_aligned_vertical_rulings=gap)
        )

    def with_min_row_height(self, height: float) -> "LatticeExtractionAlgorithm":
        return type(self)(replace(self.config, min_row_height=height))

    def with_min_column_width(self, width: float) -> "LatticeExtractionAlgorithm":
        return type(self)(replace(self.config, min_column_width=width))

    def _log(self, message: str) -> None:
        if self.config.verbose:
            logger.info(message)
        else:
            logger.debug(message)

    def normalize_rulings(self, rulings: Sequence[Ruling]):
        """Split rulings by orientation and collapse each set until stable."""
        horizontals, verticals = split_rulings(rulings)
        h_expand = self.config.horizontal_expand_amount
        v_expand = self.config.vertical_expand_amount

        horizontals = _collapse_until_stable(
            horizontals, h_expand, v_expand, self.config.min_row_height
        )
        verticals = _collapse_until_stable(
            verticals, v_expand, h_expand, self.config.min_column_width
        )
        return horizontals, verticals

    def extract(
        self, page: Page, rulings: Optional[Sequence[Ruling]] = None
    ) -> List[Table]:
        """Extract the tables on ``page``, using ``rulings`` if given.

        Args:
            page: Page supplying text, page number and, by default, rulings.
            rulings: Explicit rulings to use instead of ``page.rulings``.

        Returns:
            Tables in loose top-to-bottom, left-to-right order.
        """
        if rulings is None:
            rulings = page.rulings

        horizontals, verticals = self.normalize_rulings(rulings)
        self._log(
            f"page {page.page_number}: {len(horizontals)} horizontal and "
            f"{len(verticals)} vertical rulings after collapsing"
        )

        cells = find_cells(
            horizontals,
            verticals,
            self.config.horizontal_expand_amount,
            self.config.vertical_expand_amount,
        )
        areas = find_spreadsheets_from_cells(cells)
        self._log(f"page {page.page_number}: {len(cells)} cells in {len(areas)} regions")

        tables: List[Table] = []
        for area in areas:
            table_cells: List[Cell] = []
            for cell in cells:
                if cell.intersects(area):
                    text = page.get_text(cell.widened(CELL_TEXT_WIDEN_FACTOR))
                    cell.text_elements = merge_words(text)
                    table_cells.append(cell)

            tables.append(
                Table(
                    area,
                    table_cells,
                    [r for r in horizontals if area.intersects_line(r)],
                    [r for r in verticals if area.intersects_line(r)],
                    page.page_number,
                )
            )

        return sort_rectangles(tables)

    def tabularity_score(
        self, page: Page, baseline: ExtractionAlgorithm
    ) -> Optional[float]:
        """Agreement between ruling-defined and text-defined table shape.

        Returns the mean of the column ratio and the row ratio between this
        extractor and ``baseline`` on the text-bounded part of the page, or
        None when either finds nothing or the baseline reports zero rows or
        columns.

        The ruled side runs with this extractor's own configuration, so the
        tolerances and minimum sizes used for extraction also apply here.
        """
        text_area = page.text_bounds()
        if text_area is None:
            return None

        region = page.get_area(text_area)
        tables = self.extract(region)
        if not tables:
            return None
        rows_by_lines, cols_by_lines = tables[0].row_count, tables[0].col_count

        baseline_tables = baseline.extract(region)
        if not baseline_tables:
            return None
        rows_without_lines = baseline_tables[0].row_count
        cols_without_lines = baseline_tables[0].col_count
        if rows_without_lines == 0 or cols_without_lines == 0:
            self._log(f"page {page.page_number}: baseline reported an empty table")
            return None

        ratio = (
            cols_by_lines / cols_without_lines + rows_by_lines / rows_without_lines
        ) / 2
        self._log(
            f"page {page.page_number}: {rows_by_lines}x{cols_by_lines} by lines, "
            f"{rows_without_lines}x{cols_without_lines} without, ratio {ratio:.3f}"
        )
        return ratio

    def is_tabular(self, page: Page, baseline: ExtractionAlgorithm) -> bool:
        """Whether ``page`` looks like a genuine ruled table."""
        ratio = self.tabularity_score(page, baseline)
        if ratio is None:
            return False
        return MAGIC_HEURISTIC_NUMBER < ratio < 1 / MAGIC_HEURISTIC_NUMBER

    def __repr__(self) -> str:
        return "lattice"


__all__ = [
    "ExtractionAlgorithm",
    "LatticeExtractionAlgorithm",
    "TableLike",
    "find_cells",
    "find_gaps",
    "find_neighbour",
    "find_spreadsheets_from_cells",
    "same_row",
]
