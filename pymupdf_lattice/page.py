"""In-memory page holding the rulings and text fragments of one PDF page."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .geometry_utils import Rectangle, bounds
from .ruling import Ruling
from .text import TextElement


@dataclass
class Page:
    """A page, or a rectangular area of one.

    Attributes:
        area: Region of the page this object covers.
        page_number: 1-based page ordinal in the source document.
        rulings: Line segments inside ``area``.
        text: Text elements inside ``area``.
    """

    area: Rectangle
    page_number: int = 1
    rulings: List[Ruling] = field(default_factory=list)
    text: List[TextElement] = field(default_factory=list)

    def get_text(self, area: Optional[Rectangle] = None) -> List[TextElement]:
        """Text elements lying entirely inside ``area`` (all text if None)."""
        if area is None:
            return list(self.text)
        return [t for t in self.text if area.contains(t)]

    def get_area(self, area: Rectangle) -> "Page":
        """Sub-page restricted to ``area``, with rulings clipped to it."""
        cropped = (r.crop_to(area) for r in self.rulings)
        return Page(
            area=area,
            page_number=self.page_number,
            rulings=[r for r in cropped if r is not None],
            text=self.get_text(area),
        )

    def text_bounds(self) -> Optional[Rectangle]:
        """Smallest rectangle containing every text element."""
        return bounds(self.text)


__all__ = ["Page"]
