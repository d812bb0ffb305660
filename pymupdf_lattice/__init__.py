"""Top-level package for ruled (lattice) table extraction."""

from __future__ import annotations

from importlib import metadata

from .api import ExtractionError, extract_tables
from .config import LatticeConfig
from .geometry_utils import Cell, Point, Rectangle
from .lattice import ExtractionAlgorithm, LatticeExtractionAlgorithm
from .page import Page
from .pymupdf_page import page_from_pymupdf
from .ruling import Ruling
from .table import Table
from .text import TextChunk, TextElement, merge_words

__all__ = [
    "Cell",
    "ExtractionAlgorithm",
    "ExtractionError",
    "LatticeConfig",
    "LatticeExtractionAlgorithm",
    "Page",
    "Point",
    "Rectangle",
    "Ruling",
    "Table",
    "TextChunk",
    "TextElement",
    "extract_tables",
    "merge_words",
    "page_from_pymupdf",
    "__version__",
]

try:  # pragma: no cover - metadata only available when installed
    __version__ = metadata.version("pymupdf-lattice")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for local dev
    __version__ = "1.0.0"
