"""Positioned text fragments and their merging into word-level chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from .geometry_utils import Rectangle

DEFAULT_X_TOLERANCE = 3.0
DEFAULT_SPACE_TOLERANCE = 1.0


@dataclass
class TextElement(Rectangle):
    """A glyph or word as delivered by the page source."""

    text: str = ""


@dataclass
class TextChunk(Rectangle):
    """A run of adjacent text elements on one line."""

    text: str = ""
    elements: List[TextElement] = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def from_elements(
        cls, elements: Sequence[TextElement], space_tolerance: float
    ) -> "TextChunk":
        text = ""
        last = None
        for element in elements:
            if last is not None and element.left - last.right > space_tolerance:
                text += " "
            text += element.text
            last = element

        left = min(e.left for e in elements)
        top = min(e.top for e in elements)
        right = max(e.right for e in elements)
        bottom = max(e.bottom for e in elements)
        return cls(top, left, right - left, bottom - top, text, list(elements))


def _iter_lines(elements: Sequence[TextElement]) -> Iterator[List[TextElement]]:
    """Group elements whose vertical ranges overlap into lines."""
    current: List[TextElement] = []
    line_top = line_bottom = 0.0

    for element in sorted(elements, key=lambda e: (e.top, e.left)):
        if current and element.top < line_bottom and element.bottom > line_top:
            current.append(element)
            line_top = min(line_top, element.top)
            line_bottom = max(line_bottom, element.bottom)
            continue
        if current:
            yield sorted(current, key=lambda e: e.left)
        current = [element]
        line_top, line_bottom = element.top, element.bottom

    if current:
        yield sorted(current, key=lambda e: e.left)


def merge_words(
    elements: Sequence[TextElement],
    x_tolerance: float = DEFAULT_X_TOLERANCE,
    space_tolerance: float = DEFAULT_SPACE_TOLERANCE,
) -> List[TextChunk]:
    """Merge text elements into chunks.

    Elements on the same line join the current chunk while the horizontal gap
    to the previous element is at most ``x_tolerance``; a gap wider than
    ``space_tolerance`` inside a chunk becomes a single space.
    """
    chunks: List[TextChunk] = []

    for line in _iter_lines([e for e in elements if e.text.strip()]):
        word = [line[0]]
        for element in line[1:]:
            if element.left - word[-1].right > x_tolerance:
                chunks.append(TextChunk.from_elements(word, space_tolerance))
                word = [element]
            else:
                word.append(element)
        chunks.append(TextChunk.from_elements(word, space_tolerance))

    return chunks


__all__ = ["TextChunk", "TextElement", "merge_words"]
