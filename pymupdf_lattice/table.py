"""Tables recovered from ruling lines."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .geometry_utils import Cell, Rectangle, round_coord
from .ruling import Ruling


class Table(Rectangle):
    """A table region: its area, the cells inside it and the rulings crossing it.

    Rows and columns are the distinct top and left edges of the cells, so a
    cell spanning several columns occupies the slot of its leftmost column and
    leaves the others empty.
    """

    extraction_method = "lattice"

    def __init__(
        self,
        area: Rectangle,
        cells: Sequence[Cell],
        horizontal_rulings: Sequence[Ruling],
        vertical_rulings: Sequence[Ruling],
        page_number: int,
    ):
        super().__init__(area.top, area.left, area.width, area.height)
        self.cells = list(cells)
        self.horizontal_rulings = list(horizontal_rulings)
        self.vertical_rulings = list(vertical_rulings)
        self.page_number = page_number
        self._row_edges = sorted({round_coord(c.top) for c in self.cells})
        self._col_edges = sorted({round_coord(c.left) for c in self.cells})

    @property
    def row_count(self) -> int:
        return len(self._row_edges)

    @property
    def col_count(self) -> int:
        return len(self._col_edges)

    @property
    def rows(self) -> List[List[Optional[Cell]]]:
        """Cells laid out row-major; empty slots are None."""
        grid: List[List[Optional[Cell]]] = [
            [None] * self.col_count for _ in range(self.row_count)
        ]
        row_index = {edge: i for i, edge in enumerate(self._row_edges)}
        col_index = {edge: j for j, edge in enumerate(self._col_edges)}
        for cell in self.cells:
            grid[row_index[round_coord(cell.top)]][col_index[round_coord(cell.left)]] = cell
        return grid

    def extract(self) -> List[List[str]]:
        """Cell text as a list of rows, empty slots as empty strings."""
        return [[c.text if c is not None else "" for c in row] for row in self.rows]

    def __repr__(self) -> str:
        return (
            f"Table(page={self.page_number}, bbox=({self.left:.2f}, {self.top:.2f}, "
            f"{self.right:.2f}, {self.bottom:.2f}), "
            f"{self.row_count}x{self.col_count})"
        )


__all__ = ["Table"]
