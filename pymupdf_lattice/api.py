"""Public facing API helpers for lattice table extraction from PDF files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import pymupdf  # type: ignore

from .config import LatticeConfig
from .lattice import LatticeExtractionAlgorithm
from .logging_config import get_logger
from .pymupdf_page import page_from_pymupdf
from .table import Table

logger = get_logger(__name__)


class ExtractionError(RuntimeError):
    """Raised when a PDF cannot be opened or read."""


def extract_tables(
    pdf_path: str | Path,
    *,
    pages: Optional[Sequence[int]] = None,
    config: Optional[LatticeConfig] = None,
) -> List[Table]:
    """Extract ruled tables from ``pdf_path``.

    Args:
        pdf_path: PDF file to read.
        pages: 0-based page numbers to process; all pages when None.
        config: Extraction tolerances and progress reporting.

    Returns:
        Tables of every processed page, in page order.
    """
    pdf_path = Path(pdf_path).resolve()
    if not pdf_path.exists():
        raise FileNotFoundError(f"Input PDF not found: {pdf_path}")

    config = config or LatticeConfig()
    algorithm = LatticeExtractionAlgorithm(config)

    try:
        doc = pymupdf.open(str(pdf_path))
    except RuntimeError as exc:
        raise ExtractionError(f"Failed to open {pdf_path}: {exc}") from exc

    with doc:
        page_numbers = list(range(doc.page_count)) if pages is None else list(pages)
        for pno in page_numbers:
            if not 0 <= pno < doc.page_count:
                raise ValueError(
                    f"page number {pno} out of range for {doc.page_count} pages"
                )

        tables: List[Table] = []
        for done, pno in enumerate(page_numbers, start=1):
            try:
                page = page_from_pymupdf(doc[pno])
            except RuntimeError as exc:
                raise ExtractionError(f"Failed to read page {pno}: {exc}") from exc

            found = algorithm.extract(page)
            if config.verbose:
                logger.info(f"Page {pno}: found {len(found)} tables")
            tables.extend(found)

            if config.progress_callback is not None:
                config.progress_callback(done, len(page_numbers))

    return tables


__all__ = ["ExtractionError", "extract_tables"]
