"""Configuration for controlling lattice table extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

# Rulings closer than this along their own axis are treated as one line.
DEFAULT_MAX_GAP_BETWEEN_ALIGNED_RULINGS = 2.0


@dataclass(frozen=True, slots=True)
class LatticeConfig:
    """Tolerances and runtime options for the lattice extractor.

    The configuration is immutable once built; use ``dataclasses.replace`` or
    the ``with_*`` builders on the extractor to derive a new one.

    Attributes:
        max_gap_between_aligned_horizontal_rulings: Largest gap between two
            collinear horizontal rulings that still fuses them.
        max_gap_between_aligned_vertical_rulings: Same for vertical rulings.
        min_row_height: Horizontal rulings shorter than this are discarded.
        min_column_width: Vertical rulings shorter than this are discarded.
        progress_callback: Optional callback function that receives
            (current_page, total_pages) for progress reporting.
        verbose: Log pipeline stages at INFO instead of DEBUG.
    """

    max_gap_between_aligned_horizontal_rulings: float = (
        DEFAULT_MAX_GAP_BETWEEN_ALIGNED_RULINGS
    )
    max_gap_between_aligned_vertical_rulings: float = (
        DEFAULT_MAX_GAP_BETWEEN_ALIGNED_RULINGS
    )
    min_row_height: float = 0.0
    min_column_width: float = 0.0
    progress_callback: Optional[Callable[[int, int], None]] = field(
        default=None, compare=False
    )
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in (
            "max_gap_between_aligned_horizontal_rulings",
            "max_gap_between_aligned_vertical_rulings",
            "min_row_height",
            "min_column_width",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def horizontal_expand_amount(self) -> float:
        return self.max_gap_between_aligned_horizontal_rulings / 2

    @property
    def vertical_expand_amount(self) -> float:
        return self.max_gap_between_aligned_vertical_rulings / 2


__all__ = ["LatticeConfig"]
