"""
Module: compiler.output.renderer

Purpose:
    Render a LayoutResult to PDF bytes using ReportLab.
    Each PagePlan becomes one PDF page with its text runs and rules
    drawn at their planned positions, followed by the footer stamp.

Key Functions:
    - render_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - compiler.layout.models: LayoutResult, PagePlan

Used By:
    - compiler.output.backend: ReportLabBackend.encode_document
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Sequence

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from lesson_planner.compiler.layout.models import (
    Align,
    LayoutResult,
    PagePlan,
    RuleLine,
    TextRun,
)

logger = logging.getLogger(__name__)


def render_pdf(
    layout: LayoutResult,
    *,
    images: Optional[Sequence[bytes]] = None,
    title: Optional[str] = None,
) -> bytes:
    """
    Render layout result to PDF bytes.

    Vector mode (images=None) draws every operation as PDF text.
    Image mode draws one pre-rasterized PNG per page, full bleed,
    in page order.

    Args:
        layout: Layout result from the assembler
        images: Optional PNG bytes, one per page
        title: Optional PDF document title

    Returns:
        PDF file contents

    Raises:
        ValueError: If images are given but their count differs from the page count

    Example:
        >>> data = render_pdf(layout)
        >>> data[:5]
        b'%PDF-'
    """
    if images is not None and len(images) != layout.page_count:
        raise ValueError(f"Expected {layout.page_count} page images, got {len(images)}")
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    page_width_pt = layout.page_width * mm
    page_height_pt = layout.page_height * mm

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(page_width_pt, page_height_pt))
    if title:
        c.setTitle(title)

    for i, page in enumerate(layout.pages):
        if images is not None:
            _draw_page_image(c, images[i], page_width_pt, page_height_pt)
        else:
            _render_page(c, page, page_height_pt)
        c.showPage()

    c.save()
    logger.debug(f"Rendered {layout.page_count} pages ({'image' if images is not None else 'vector'} mode)")
    return buf.getvalue()


def _render_page(c: canvas.Canvas, page: PagePlan, page_height_pt: float) -> None:
    """Draw every operation of a page, then its footer."""
    for op in page.ops:
        if isinstance(op, TextRun):
            _draw_text(c, op, page_height_pt)
        elif isinstance(op, RuleLine):
            _draw_rule(c, op, page_height_pt)
    if page.footer is not None:
        _draw_text(c, page.footer, page_height_pt)


def _draw_text(c: canvas.Canvas, run: TextRun, page_height_pt: float) -> None:
    """
    Draw a text run at its baseline.

    Args:
        c: ReportLab canvas
        run: Text run with mm coordinates
        page_height_pt: Page height for Y coordinate transformation
    """
    c.saveState()
    c.setFont(run.font.name, run.font.size)
    c.setFillColorRGB(*_rgb(run.color))

    x_pt = run.x * mm
    y_pt = _transform_y(page_height_pt, run.y)
    if run.align is Align.CENTER:
        c.drawCentredString(x_pt, y_pt, run.text)
    elif run.align is Align.RIGHT:
        c.drawRightString(x_pt, y_pt, run.text)
    else:
        c.drawString(x_pt, y_pt, run.text)
    c.restoreState()


def _draw_rule(c: canvas.Canvas, rule: RuleLine, page_height_pt: float) -> None:
    c.saveState()
    c.setStrokeColorRGB(*_rgb(rule.color))
    c.setLineWidth(rule.width * mm)
    c.line(
        rule.x1 * mm,
        _transform_y(page_height_pt, rule.y1),
        rule.x2 * mm,
        _transform_y(page_height_pt, rule.y2),
    )
    c.restoreState()


def _draw_page_image(
    c: canvas.Canvas,
    png: bytes,
    page_width_pt: float,
    page_height_pt: float,
) -> None:
    """Draw a rasterized page over the whole page area."""
    reader = ImageReader(io.BytesIO(png))
    c.drawImage(reader, 0, 0, width=page_width_pt, height=page_height_pt)


def _rgb(color: tuple[int, int, int]) -> tuple[float, float, float]:
    """Convert 0-255 RGB to ReportLab's 0-1 floats."""
    r, g, b = color
    return r / 255.0, g / 255.0, b / 255.0


def _transform_y(page_height_pt: float, y_mm: float) -> float:
    """
    Convert top-down mm Y coordinate to bottom-up PDF Y.

    Args:
        page_height_pt: Page height in points
        y_mm: Y position from top in mm

    Returns:
        Y position from bottom in points
    """
    return page_height_pt - y_mm * mm
