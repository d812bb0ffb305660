"""Build a :class:`Page` from a PyMuPDF page."""

from __future__ import annotations

from typing import Any, Iterator, List

import pymupdf  # type: ignore

from .geometry_utils import Rectangle
from .page import Page
from .ruling import Ruling
from .text import TextElement

# Filled rectangles thinner than this are drawn lines, not boxes.
THIN_RECT_THRESHOLD = 2.0


def _rect_to_rulings(rect: "pymupdf.Rect") -> Iterator[Ruling]:
    """Rulings for a drawn rectangle: its centre line if thin, else its sides."""
    x0, y0, x1, y1 = rect.x0, rect.y0, rect.x1, rect.y1
    if rect.height <= THIN_RECT_THRESHOLD and rect.width > rect.height:
        y = (y0 + y1) / 2
        yield Ruling(x0, y, x1, y)
    elif rect.width <= THIN_RECT_THRESHOLD and rect.height > rect.width:
        x = (x0 + x1) / 2
        yield Ruling(x, y0, x, y1)
    else:
        yield Ruling(x0, y0, x1, y0)
        yield Ruling(x1, y0, x1, y1)
        yield Ruling(x0, y1, x1, y1)
        yield Ruling(x0, y0, x0, y1)


def extract_rulings(page: "pymupdf.Page") -> List[Ruling]:
    """Horizontal and vertical rulings among the page's vector drawings."""
    rulings: List[Ruling] = []
    for drawing in page.get_drawings():
        for item in drawing.get("items", ()):
            kind = item[0]
            if kind == "l":
                p1, p2 = item[1], item[2]
                rulings.append(Ruling(p1.x, p1.y, p2.x, p2.y))
            elif kind == "re":
                rulings.extend(_rect_to_rulings(pymupdf.Rect(item[1])))
            elif kind == "qu":
                rulings.extend(_rect_to_rulings(item[1].rect))
    return [r for r in rulings if not r.oblique]


def extract_text_elements(page: "pymupdf.Page") -> List[TextElement]:
    """One text element per word reported by PyMuPDF."""
    elements: List[TextElement] = []
    words: List[Any] = page.get_text("words")
    for x0, y0, x1, y1, word, *_ in words:
        elements.append(TextElement(y0, x0, x1 - x0, y1 - y0, word))
    return elements


def page_from_pymupdf(page: "pymupdf.Page") -> Page:
    """Snapshot a PyMuPDF page's rulings and words into a :class:`Page`."""
    bounds = page.rect
    return Page(
        area=Rectangle.from_corners(bounds.x0, bounds.y0, bounds.x1, bounds.y1),
        page_number=page.number + 1,
        rulings=extract_rulings(page),
        text=extract_text_elements(page),
    )


__all__ = ["extract_rulings", "extract_text_elements", "page_from_pymupdf"]
