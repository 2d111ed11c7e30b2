"""
Module: compiler.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing draw operations, pages and the
    finished document.

Key Classes:
    - FontSpec: Font name and size handed to the text measurer
    - TextRun: Text placed at a page coordinate
    - RuleLine: Horizontal or vertical rule
    - PagePlan: Complete page layout
    - TocEntry: Table-of-contents row with predicted page number
    - LayoutResult: Final layout output

Coordinates are millimetres with y measured downward from the page top.
For text, y is the baseline.

Dependencies:
    - dataclasses (std)

Used By:
    - compiler.layout.cursor: Creates PagePlans
    - compiler.layout.assembler: Creates LayoutResult
    - compiler.output.backend: Renders PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class FontSpec:
    """
    Font selection for measuring and drawing text.

    Attributes:
        name: Backend font name, e.g. "Helvetica"
        size: Font size in points
    """

    name: str = "Helvetica"
    size: float = 11.0

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"font size must be positive: {self.size}")


class Align(str, Enum):
    """Horizontal anchor of a TextRun relative to its x coordinate."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextRun:
    """
    A run of text placed on a page.

    Attributes:
        x: Anchor x in mm (meaning depends on align)
        y: Baseline y in mm from page top
        text: Text to draw (single line)
        font: Font to draw with
        color: RGB colour 0-255
        align: Anchor alignment
    """

    x: float
    y: float
    text: str
    font: FontSpec
    color: RGB = (0, 0, 0)
    align: Align = Align.LEFT


@dataclass(frozen=True)
class RuleLine:
    """A straight line between two page points (mm)."""

    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB = (0, 0, 0)
    width: float = 0.3


DrawOp = Union[TextRun, RuleLine]


class PageKind(str, Enum):
    """Role of a page inside the compiled report."""

    COVER = "cover"
    TOC = "toc"
    RECORD = "record"


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page index (0-indexed)
        kind: Cover, TOC or record page
        ops: Draw operations in placement order
        footer: Footer stamp (None for unnumbered pages)
        record_index: Index of the record laid out on this page, if any

    Example:
        >>> page = PagePlan(index=2, kind=PageKind.RECORD, ops=(run,))
        >>> page.number
        3
    """

    index: int
    kind: PageKind
    ops: Tuple[DrawOp, ...] = ()
    footer: Optional[TextRun] = None
    record_index: Optional[int] = None

    @property
    def number(self) -> int:
        """Human page number (1-indexed)."""
        return self.index + 1

    @property
    def text_runs(self) -> Tuple[TextRun, ...]:
        """Text operations only, excluding the footer."""
        return tuple(op for op in self.ops if isinstance(op, TextRun))

    @property
    def is_empty(self) -> bool:
        """Check if page has no draw operations."""
        return len(self.ops) == 0


@dataclass(frozen=True)
class TocEntry:
    """
    One table-of-contents row.

    The page number is predicted before any record body is laid out and
    is never revised afterwards.

    Attributes:
        record_index: Position of the record in the input list
        topic: Topic text shown in the row
        page_number: Predicted 1-indexed starting page
    """

    record_index: int
    topic: str
    page_number: int


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Ordered PagePlans
        page_width: Page width in mm
        page_height: Page height in mm
        toc: Predicted TOC entries (empty for single-record documents)
        record_pages: record index -> real page numbers it occupies
        warnings: Warning messages collected during layout

    Example:
        >>> result.page_count
        5
        >>> result.record_start_pages
        (3, 4, 5)
    """

    pages: Tuple[PagePlan, ...]
    page_width: float
    page_height: float
    toc: Tuple[TocEntry, ...] = ()
    record_pages: Dict[int, List[int]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def record_start_pages(self) -> Tuple[int, ...]:
        """Real first page number of each record, in input order."""
        return tuple(self.record_pages[i][0] for i in sorted(self.record_pages))
