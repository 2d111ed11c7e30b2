"""
Module: compiler.layout.config

Purpose:
    Configuration for the page layout engine.
    Defines page dimensions, margins, vertical steps, break thresholds,
    text styles and the report's fixed labels.

Key Classes:
    - LayoutConfig: Immutable geometry configuration (millimetres)
    - TextStyles: Fonts and colours for each kind of block
    - DocumentLabels: Report strings and the long date format

Dependencies:
    - dataclasses (std)

Used By:
    - compiler.layout.cursor: Page breaking
    - compiler.layout.toc: TOC page count simulation
    - compiler.layout.assembler: Document composition
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .models import RGB, FontSpec


# A4 portrait in millimetres
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

PRIMARY_COLOR: RGB = (8, 145, 178)
TEXT_COLOR: RGB = (55, 65, 81)
MUTED_COLOR: RGB = (107, 114, 128)
RULE_COLOR: RGB = (229, 231, 235)

_MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def format_long_date(value: Optional[date]) -> str:
    """
    Format a date as a Spanish long date.

    Example:
        >>> format_long_date(date(2026, 10, 19))
        '19 de octubre de 2026'
    """
    if value is None:
        return ""
    return f"{value.day} de {_MONTHS_ES[value.month - 1]} de {value.year}"


@dataclass(frozen=True)
class TextStyles:
    """Fonts and colours used by the assembler."""

    cover_title: FontSpec = FontSpec("Helvetica-Bold", 24)
    cover_summary: FontSpec = FontSpec("Helvetica", 16)
    cover_date: FontSpec = FontSpec("Helvetica", 12)
    toc_title: FontSpec = FontSpec("Helvetica-Bold", 18)
    toc_row: FontSpec = FontSpec("Helvetica", 12)
    record_title: FontSpec = FontSpec("Helvetica-Bold", 20)
    metadata: FontSpec = FontSpec("Helvetica", 12)
    section_heading: FontSpec = FontSpec("Helvetica-Bold", 14)
    body: FontSpec = FontSpec("Helvetica", 11)
    footer: FontSpec = FontSpec("Helvetica", 10)

    accent_color: RGB = PRIMARY_COLOR
    text_color: RGB = TEXT_COLOR
    muted_color: RGB = MUTED_COLOR
    rule_color: RGB = RULE_COLOR


@dataclass(frozen=True)
class DocumentLabels:
    """
    Fixed strings printed in the report.

    Placeholders are filled with str.format().
    """

    title: str = "Planes de Clase"
    summary: str = "Compilación de {count} planes"
    generated: str = "Generado el {date}"
    toc_title: str = "Índice"
    toc_row: str = "{number}. {topic}"
    toc_page: str = "Página {page}"
    teacher: str = "Docente: {value}"
    course: str = "Curso: {value}"
    date: str = "Fecha: {value}"
    objectives: str = "Objetivos (Logros)"
    content: str = "Contenido"
    resources: str = "Recursos"
    footer: str = "Página {number}"

    def section_heading(self, key: str) -> str:
        """Heading label for a LessonPlan section key."""
        return getattr(self, key)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    All lengths are millimetres. Text y positions are baselines.

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: First baseline on a fresh page
        margin_bottom: Distance from page bottom to the body limit
        margin_left: Left content edge
        margin_right: Right margin
        title_height: Vertical step after a page title
        metadata_line_height: Step per metadata line (Docente/Curso/Fecha)
        metadata_gap: Extra space after the metadata block
        section_heading_height: Step after a section heading
        line_height: Step per wrapped body line
        section_gap: Extra space after a section body
        section_break_y: A section starting below this y opens a new page
            (None disables the rule)
        toc_row_height: Step per TOC row
        toc_break_y: Last y at which a TOC row may be placed on a page
        cover_title_y: Cover title baseline
        cover_summary_y: Cover summary baseline
        cover_date_y: Cover generation date baseline
        footer_y: Footer baseline

    Example:
        >>> config = LayoutConfig()
        >>> config.content_width
        170.0
        >>> config.body_limit
        270.0
    """

    # Page dimensions
    page_width: float = A4_WIDTH_MM
    page_height: float = A4_HEIGHT_MM

    # Margins
    margin_top: float = 30.0
    margin_bottom: float = 27.0
    margin_left: float = 20.0
    margin_right: float = 20.0

    # Vertical steps
    title_height: float = 20.0
    metadata_line_height: float = 10.0
    metadata_gap: float = 10.0
    section_heading_height: float = 10.0
    line_height: float = 5.0
    section_gap: float = 10.0

    # Break thresholds
    section_break_y: Optional[float] = 200.0
    toc_row_height: float = 10.0
    toc_break_y: float = 250.0

    # Fixed positions
    cover_title_y: float = 50.0
    cover_summary_y: float = 70.0
    cover_date_y: float = 90.0
    footer_y: float = 285.0

    styles: TextStyles = field(default_factory=TextStyles)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.available_height <= 0:
            raise ValueError("Margins exceed page height")
        steps = (
            self.title_height, self.metadata_line_height, self.section_heading_height,
            self.line_height, self.toc_row_height,
        )
        if min(steps) <= 0:
            raise ValueError("Vertical steps must be positive")
        if self.metadata_gap < 0 or self.section_gap < 0:
            raise ValueError("Gaps must be non-negative")
        if self.section_heading_height + self.line_height > self.available_height:
            raise ValueError("A section heading and one body line must fit on a page")
        if not (self.body_limit < self.footer_y < self.page_height):
            raise ValueError(
                f"footer_y must lie between the body limit ({self.body_limit}) "
                f"and the page bottom ({self.page_height}): {self.footer_y}"
            )
        if not (self.margin_top <= self.toc_break_y <= self.body_limit - self.toc_row_height):
            raise ValueError(f"toc_break_y outside the usable area: {self.toc_break_y}")
        if self.margin_top + self.title_height > self.toc_break_y:
            raise ValueError("TOC title leaves no room for rows")

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_right(self) -> float:
        """Right content edge."""
        return self.page_width - self.margin_right

    @property
    def body_limit(self) -> float:
        """Lowest y any block may reach."""
        return self.page_height - self.margin_bottom

    @property
    def available_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.body_limit - self.margin_top

    @property
    def toc_limit(self) -> float:
        """Lowest y a TOC row may reach."""
        return self.toc_break_y + self.toc_row_height
