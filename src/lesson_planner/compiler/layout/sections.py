"""
Module: compiler.layout.sections

Purpose:
    Lay out one section (heading + wrapped body lines) through a
    PageCursor, continuing on the next page when the body overflows.

Key Functions:
    - render_section(): Place a heading and its body lines

Key Classes:
    - SectionStyle: Fonts, colours and vertical steps for a section

Rules:
    1. A section starting below section_break_y opens a new page
    2. Heading and first body line are reserved together, so a heading
       never sits alone at the bottom of a page
    3. Each body line is then placed individually; a body may start on
       one page and finish on the next

Used By:
    - compiler.layout.assembler: Record composition
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import LayoutConfig
from .cursor import PageCursor
from .models import RGB, FontSpec, RuleLine, TextRun

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionStyle:
    """
    Appearance and spacing of a section.

    Attributes:
        heading_font: Font for the heading
        body_font: Font for body lines
        heading_color: Heading colour
        body_color: Body colour
        heading_height: Step after the heading (mm)
        line_height: Step per body line (mm)
        gap_after: Space after the last body line (mm)
        break_below: Start a new page if the section would begin below this y
    """

    heading_font: FontSpec
    body_font: FontSpec
    heading_color: RGB
    body_color: RGB
    heading_height: float
    line_height: float
    gap_after: float
    break_below: Optional[float] = None

    @classmethod
    def from_config(cls, config: LayoutConfig) -> SectionStyle:
        """Build the body-section style from a layout config."""
        styles = config.styles
        return cls(
            heading_font=styles.section_heading,
            body_font=styles.body,
            heading_color=styles.accent_color,
            body_color=styles.text_color,
            heading_height=config.section_heading_height,
            line_height=config.line_height,
            gap_after=config.section_gap,
            break_below=config.section_break_y,
        )


def render_section(
    cursor: PageCursor,
    heading: str,
    body_lines: Sequence[str],
    style: SectionStyle,
) -> int:
    """
    Place a section heading followed by its body lines.

    Args:
        cursor: Cursor positioned where the section should start
        heading: Heading label
        body_lines: Pre-wrapped body lines (may be empty)
        style: Section appearance and spacing

    Returns:
        Index of the page holding the section's last line

    Example:
        >>> last_page = render_section(cursor, "Contenido", lines, style)
    """
    x = cursor.config.margin_left

    if style.break_below is not None and cursor.y > style.break_below:
        logger.debug(f"Section '{heading}' starts below {style.break_below}mm, new page")
        cursor.break_page()

    # Keep heading with its first line
    first_block = style.heading_height + (style.line_height if body_lines else 0.0)
    cursor.ensure(first_block)

    _, y = cursor.advance(style.heading_height)
    cursor.place(TextRun(x=x, y=y, text=heading, font=style.heading_font, color=style.heading_color))

    for line in body_lines:
        _, y = cursor.advance(style.line_height)
        if line:
            cursor.place(TextRun(x=x, y=y, text=line, font=style.body_font, color=style.body_color))

    cursor.skip(style.gap_after)
    return cursor.page_index


def render_heading_rule(cursor: PageCursor, y: float, color: RGB) -> None:
    """Draw a rule under a title placed at baseline y."""
    config = cursor.config
    rule_y = y + 3.0
    cursor.place(RuleLine(
        x1=config.margin_left,
        y1=rule_y,
        x2=config.content_right,
        y2=rule_y,
        color=color,
        width=0.5,
    ))
