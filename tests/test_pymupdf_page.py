"""End-to-end tests reading PDFs drawn with PyMuPDF."""

from __future__ import annotations

import pymupdf
import pytest

from pymupdf_lattice import ExtractionError, LatticeConfig, extract_tables
from pymupdf_lattice.pymupdf_page import extract_rulings, page_from_pymupdf

from tests.pdf_fixtures import PDFTestFixtures

pytestmark = [pytest.mark.integration, pytest.mark.requires_pdf]


@pytest.fixture
def fixtures(tmp_path):
    manager = PDFTestFixtures(tmp_path / "pdfs")
    manager.setup()
    yield manager
    manager.cleanup_all()


def test_page_adapter_reads_rulings_and_words(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_pdf_with_grid(rows=2, cols=3)

    with pymupdf.open(str(pdf_path)) as doc:
        page = page_from_pymupdf(doc[0])

    assert page.page_number == 1
    assert page.area.to_tuple() == (0, 0, 612, 792)
    horizontals = [r for r in page.rulings if r.horizontal]
    verticals = [r for r in page.rulings if r.vertical]
    assert len(horizontals) == 3
    assert len(verticals) == 4
    assert sorted(r.position for r in horizontals) == pytest.approx([50, 150, 250], abs=0.5)
    words = sorted(t.text for t in page.text)
    assert words == sorted(f"R{r}C{c}" for r in range(2) for c in range(3))


def test_drawn_rectangles_become_rulings(fixtures: PDFTestFixtures):
    def builder(doc):
        page = doc.new_page(width=612, height=792)
        page.draw_rect(pymupdf.Rect(100, 100, 300, 200), color=(0, 0, 0))
        # a filled hairline box is a single line
        page.draw_rect(pymupdf.Rect(100, 300, 300, 301), color=None, fill=(0, 0, 0))

    pdf_path = fixtures._provide_fixture("boxes.pdf", builder)

    with pymupdf.open(str(pdf_path)) as doc:
        rulings = extract_rulings(doc[0])

    assert len(rulings) == 5
    assert sum(r.horizontal for r in rulings) == 3
    assert sum(r.vertical for r in rulings) == 2


@pytest.mark.smoke
def test_extract_tables_from_grid(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_pdf_with_grid(rows=2, cols=3)

    tables = extract_tables(pdf_path)

    assert len(tables) == 1
    table = tables[0]
    assert (table.row_count, table.col_count) == (2, 3)
    assert table.to_tuple() == pytest.approx((50, 50, 350, 250), abs=0.5)
    assert table.extract() == [
        ["R0C0", "R0C1", "R0C2"],
        ["R1C0", "R1C1", "R1C2"],
    ]


def test_extract_tables_page_selection(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_pdf_with_two_pages()

    assert len(extract_tables(pdf_path)) == 1
    assert extract_tables(pdf_path, pages=[1]) == []
    (table,) = extract_tables(pdf_path, pages=[0])
    assert table.page_number == 1
    assert (table.row_count, table.col_count) == (3, 2)


def test_extract_tables_rejects_out_of_range_page(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_pdf_with_two_pages()

    with pytest.raises(ValueError, match="out of range"):
        extract_tables(pdf_path, pages=[2])


def test_extract_tables_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_tables(tmp_path / "missing.pdf")


def test_extract_tables_corrupt_file(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_corrupt_pdf()

    with pytest.raises(ExtractionError):
        extract_tables(pdf_path)


def test_extract_tables_reports_progress(fixtures: PDFTestFixtures):
    pdf_path = fixtures.create_pdf_with_two_pages()
    calls = []

    def record(done, total):
        calls.append((done, total))

    extract_tables(pdf_path, config=LatticeConfig(progress_callback=record))

    assert calls == [(1, 2), (2, 2)]
