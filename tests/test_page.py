"""Tests for pages, text merging, tables and rectangle ordering."""

from __future__ import annotations

import pytest

from pymupdf_lattice.geometry_utils import (
    Cell,
    Point,
    Rectangle,
    bounds,
    sort_rectangles,
)
from pymupdf_lattice.page import Page
from pymupdf_lattice.ruling import Ruling
from pymupdf_lattice.table import Table
from pymupdf_lattice.text import TextElement, merge_words


def element(left, top, width, text, height=10):
    return TextElement(top, left, width, height, text)


class TestMergeWords:
    def test_close_glyphs_form_one_chunk(self):
        glyphs = [
            element(0, 0, 5, "a"),
            element(5, 0, 5, "b"),
            element(10.5, 0, 5, "c"),
        ]

        (chunk,) = merge_words(glyphs)

        assert chunk.text == "abc"
        assert chunk.to_tuple() == (0, 0, 15.5, 10)
        assert len(chunk.elements) == 3

    def test_small_gap_becomes_a_space(self):
        words = [element(0, 0, 20, "Total"), element(22.5, 0, 20, "due")]

        (chunk,) = merge_words(words)

        assert chunk.text == "Total due"

    def test_wide_gap_splits_chunks(self):
        words = [element(0, 0, 20, "left"), element(60, 0, 20, "right")]

        assert [c.text for c in merge_words(words)] == ["left", "right"]

    def test_lines_are_kept_apart_and_blanks_dropped(self):
        words = [
            element(0, 20, 20, "second"),
            element(0, 0, 20, "first"),
            element(25, 0, 5, "  "),
        ]

        assert [c.text for c in merge_words(words)] == ["first", "second"]


class TestCellText:
    def test_lines_joined_by_newline(self):
        cell = Cell(0, 0, 100, 50)
        cell.text_elements = merge_words(
            [
                element(5, 25, 20, "two"),
                element(5, 5, 20, "line"),
                element(40, 5, 20, "one"),
            ]
        )

        assert cell.text == "line one\ntwo"

    def test_empty_cell_has_no_text(self):
        assert Cell(0, 0, 10, 10).text == ""


class TestPage:
    @pytest.fixture
    def page(self) -> Page:
        return Page(
            area=Rectangle.from_corners(0, 0, 200, 200),
            page_number=2,
            rulings=[Ruling(0, 50, 200, 50), Ruling(150, 0, 150, 40)],
            text=[element(10, 10, 30, "inside"), element(90, 45, 30, "straddles")],
        )

    def test_get_text_returns_contained_elements(self, page: Page):
        area = Rectangle.from_corners(0, 0, 100, 40)

        assert [t.text for t in page.get_text(area)] == ["inside"]
        assert len(page.get_text()) == 2

    def test_get_area_clips_rulings(self, page: Page):
        region = page.get_area(Rectangle.from_corners(0, 0, 100, 100))

        assert region.page_number == 2
        (ruling,) = region.rulings
        assert (ruling.x1, ruling.y1, ruling.x2, ruling.y2) == (0, 50, 100, 50)
        assert [t.text for t in region.text] == ["inside"]
        # the original page is untouched
        assert page.rulings[0].x2 == 200

    def test_text_bounds(self, page: Page):
        assert page.text_bounds().to_tuple() == (10, 10, 120, 55)
        assert Page(area=page.area).text_bounds() is None


class TestTable:
    def test_rows_place_spanning_cells_in_first_slot(self):
        cells = [
            Cell(0, 0, 100, 20),
            Cell(20, 0, 50, 20),
            Cell(20, 50, 50, 20),
        ]
        cells[0].text_elements = merge_words([element(5, 5, 20, "header")])
        table = Table(Rectangle(0, 0, 100, 40), cells, [], [], 3)

        assert (table.row_count, table.col_count) == (2, 2)
        assert table.rows[0][1] is None
        assert table.extract() == [["header", ""], ["", ""]]
        assert repr(table) == "Table(page=3, bbox=(0.00, 0.00, 100.00, 40.00), 2x2)"


class TestGeometry:
    def test_points_are_rounded(self):
        assert Point(1.004, 2.0049) == Point(1.0, 2.0)
        assert hash(Point(1.004, 2.0)) == hash(Point(1.0, 2.0))

    def test_intersects_is_strict(self):
        a = Rectangle(0, 0, 10, 10)

        assert a.intersects(Rectangle(5, 5, 10, 10))
        assert not a.intersects(Rectangle(0, 10, 10, 10))
        assert not a.intersects(Rectangle(5, 5, 0, 0))

    def test_sort_rectangles_reading_order(self):
        lower = Rectangle(100, 0, 50, 50)
        right = Rectangle(0, 200, 50, 50)
        left = Rectangle(10, 0, 50, 50)

        assert sort_rectangles([lower, right, left]) == [left, right, lower]

    def test_bounds(self):
        rects = [Rectangle(10, 20, 5, 5), Rectangle(0, 40, 10, 30)]

        assert bounds(rects).to_tuple() == (20, 0, 50, 30)
        assert bounds([]) is None
