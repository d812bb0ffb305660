"""Geometry primitives for lattice table extraction.

Coordinates follow the PDF page convention used by PyMuPDF: x grows to the
right and y grows downwards, so ``top < bottom`` for any proper rectangle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

# the below ignores are due to `numba` constraints
# pyright: reportUnknownMemberType=false
# pyright: reportUntypedFunctionDecorator=false
import numba  # type: ignore
import numpy as np

if TYPE_CHECKING:
    from .ruling import Ruling

# Coordinates are compared after rounding to this many decimals.
COORDINATE_DECIMALS = 2
EPSILON = 0.01
VERTICAL_COMPARISON_THRESHOLD = 0.4


def round_coord(value: float) -> float:
    """Round a coordinate the way every point comparison expects it."""
    return round(float(value), COORDINATE_DECIMALS)


def feq(a: float, b: float) -> bool:
    """Float equality within ``EPSILON``."""
    return abs(a - b) < EPSILON


def _compare(a: float, b: float) -> int:
    return (a > b) - (a < b)


# Numba-optimized geometric operations
@numba.jit(nopython=True, cache=True)
def rect_intersects_numba(
    x0_1: float,
    y0_1: float,
    x1_1: float,
    y1_1: float,
    x0_2: float,
    y0_2: float,
    x1_2: float,
    y1_2: float,
) -> bool:  # type: ignore
    """Check if the interiors of two rectangles overlap."""
    return not (x1_1 <= x0_2 or x1_2 <= x0_1 or y1_1 <= y0_2 or y1_2 <= y0_1)


@numba.jit(nopython=True, cache=True)
def rect_contains_numba(
    x0_o: float,
    y0_o: float,
    x1_o: float,
    y1_o: float,
    x0_i: float,
    y0_i: float,
    x1_i: float,
    y1_i: float,
) -> bool:  # type: ignore
    """Check if outer rectangle contains inner rectangle."""
    return x0_o <= x0_i and y0_o <= y0_i and x1_o >= x1_i and y1_o >= y1_i


@numba.jit(nopython=True, cache=True)
def segment_touches_rect_numba(
    sx0: float,
    sy0: float,
    sx1: float,
    sy1: float,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
) -> bool:  # type: ignore
    """Check if an axis-aligned segment meets a closed rectangle."""
    return (
        min(sx0, sx1) <= x1
        and max(sx0, sx1) >= x0
        and min(sy0, sy1) <= y1
        and max(sy0, sy1) >= y0
    )


@dataclass(frozen=True, order=True, slots=True)
class Point:
    """A page coordinate whose components are rounded on construction.

    Rounding happens once, here, so hashing, equality and both sort orders
    agree with each other. The natural ``order=True`` ordering is
    column-major; use :func:`row_major_key` for the row-major one.
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", round_coord(self.x))
        object.__setattr__(self, "y", round_coord(self.y))


def row_major_key(point: Point) -> Tuple[float, float]:
    """Sort key ordering points by y, then x."""
    return (point.y, point.x)


def column_major_key(point: Point) -> Tuple[float, float]:
    """Sort key ordering points by x, then y."""
    return (point.x, point.y)


@dataclass
class Rectangle:
    """Axis-aligned rectangle stored as top, left, width and height."""

    top: float
    left: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, left: float, top: float, right: float, bottom: float):
        return cls(top, left, right - left, bottom - top)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_empty(self) -> bool:
        """True for a degenerate rectangle with no interior."""
        return self.width <= 0 or self.height <= 0

    def to_tuple(self) -> Tuple[float, float, float, float]:
        """Return ``(x0, y0, x1, y1)`` as PyMuPDF orders a rect."""
        return (
            float(self.left),
            float(self.top),
            float(self.right),
            float(self.bottom),
        )

    def bounds_key(self) -> Tuple[float, float, float, float]:
        """Rounded geometry, used to deduplicate rectangles by value."""
        return (
            round_coord(self.top),
            round_coord(self.left),
            round_coord(self.width),
            round_coord(self.height),
        )

    def points(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in clockwise order starting at the top-left."""
        return (
            Point(self.left, self.top),
            Point(self.right, self.top),
            Point(self.right, self.bottom),
            Point(self.left, self.bottom),
        )

    def intersects(self, other: "Rectangle") -> bool:
        if self.is_empty() or other.is_empty():
            return False
        return rect_intersects_numba(*self.to_tuple(), *other.to_tuple())

    def contains(self, other: "Rectangle") -> bool:
        return rect_contains_numba(*self.to_tuple(), *other.to_tuple())

    def intersects_line(self, ruling: "Ruling") -> bool:
        """Whether a horizontal or vertical ruling meets this closed rectangle."""
        return segment_touches_rect_numba(
            float(ruling.x1),
            float(ruling.y1),
            float(ruling.x2),
            float(ruling.y2),
            *self.to_tuple(),
        )

    def vertical_overlap(self, other: "Rectangle") -> float:
        return max(0.0, min(self.bottom, other.bottom) - max(self.top, other.top))

    def widened(self, factor: float) -> "Rectangle":
        """Copy of the rectangle with its width scaled to the right."""
        return Rectangle(self.top, self.left, self.width * factor, self.height)


def ill_defined_order(a: Rectangle, b: Rectangle) -> int:
    """Loose top-to-bottom, left-to-right comparison of two rectangles.

    Rectangles that overlap vertically by more than a sliver are ordered by
    their left edge; all others by their bottom edge. The relation is not
    transitive, which is fine for a stable merge sort.
    """
    if a.bounds_key() == b.bounds_key():
        return 0
    if a.vertical_overlap(b) > VERTICAL_COMPARISON_THRESHOLD:
        return _compare(a.left, b.left)
    return _compare(a.bottom, b.bottom)


def sort_rectangles(rects: Iterable[Any]) -> List[Any]:
    """Sort rectangles (or subclasses) with :func:`ill_defined_order`."""
    return sorted(rects, key=cmp_to_key(ill_defined_order))


def bounds(rects: Sequence[Rectangle]) -> Optional[Rectangle]:
    """Smallest rectangle containing every rectangle in ``rects``."""
    if not rects:
        return None
    corners: np.ndarray[Any, np.dtype[np.float64]] = np.array(
        [r.to_tuple() for r in rects], dtype=np.float64
    )
    x0, y0 = corners[:, 0].min(), corners[:, 1].min()
    x1, y1 = corners[:, 2].max(), corners[:, 3].max()
    return Rectangle.from_corners(float(x0), float(y0), float(x1), float(y1))


@dataclass
class Cell(Rectangle):
    """A table cell and the text chunks found inside it."""

    text_elements: list = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def from_points(cls, top_left: Point, bottom_right: Point) -> "Cell":
        return cls(
            top_left.y,
            top_left.x,
            bottom_right.x - top_left.x,
            bottom_right.y - top_left.y,
        )

    @property
    def text(self) -> str:
        """Cell text, one output line per text line inside the cell."""
        lines: List[List[Any]] = []
        for chunk in sorted(self.text_elements, key=lambda c: (c.top, c.left)):
            if lines and lines[-1][-1].vertical_overlap(chunk) > 0:
                lines[-1].append(chunk)
            else:
                lines.append([chunk])
        return "\n".join(
            " ".join(c.text for c in sorted(line, key=lambda c: c.left))
            for line in lines
        )


__all__ = [
    "Cell",
    "EPSILON",
    "Point",
    "Rectangle",
    "bounds",
    "column_major_key",
    "feq",
    "ill_defined_order",
    "round_coord",
    "row_major_key",
    "sort_rectangles",
]
