"""
Module: compiler.output.raster

Purpose:
    Rasterize a PagePlan to a PNG image with Pillow. Used by the
    single-plan export, which embeds each page as an image.

Key Functions:
    - rasterize_page(): Draw one page to PNG bytes

Dependencies:
    - PIL: Image drawing
    - compiler.layout.models: PagePlan
"""

from __future__ import annotations

import io
import logging
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from lesson_planner.compiler.layout.models import Align, PagePlan, RuleLine, TextRun

logger = logging.getLogger(__name__)

DEFAULT_DPI = 150
MM_PER_INCH = 25.4
PT_PER_INCH = 72.0

_ANCHORS = {
    Align.LEFT: "ls",
    Align.CENTER: "ms",
    Align.RIGHT: "rs",
}


def rasterize_page(
    page: PagePlan,
    page_width_mm: float,
    page_height_mm: float,
    *,
    dpi: int = DEFAULT_DPI,
) -> bytes:
    """
    Draw a page onto a white RGB image and encode it as PNG.

    Args:
        page: Page plan to draw
        page_width_mm: Page width in mm
        page_height_mm: Page height in mm
        dpi: Output resolution

    Returns:
        PNG bytes

    Example:
        >>> png = rasterize_page(layout.pages[0], 210, 297, dpi=100)
        >>> png[:4]
        b'\\x89PNG'
    """
    if dpi <= 0:
        raise ValueError(f"dpi must be positive: {dpi}")

    size = (_mm_to_px(page_width_mm, dpi), _mm_to_px(page_height_mm, dpi))
    img = Image.new("RGB", size, color="white")
    draw = ImageDraw.Draw(img)

    ops = list(page.ops)
    if page.footer is not None:
        ops.append(page.footer)

    for op in ops:
        if isinstance(op, TextRun):
            draw.text(
                (_mm_to_px(op.x, dpi), _mm_to_px(op.y, dpi)),
                op.text,
                fill=op.color,
                font=_font(_pt_to_px(op.font.size, dpi)),
                anchor=_ANCHORS[op.align],
            )
        elif isinstance(op, RuleLine):
            draw.line(
                [
                    (_mm_to_px(op.x1, dpi), _mm_to_px(op.y1, dpi)),
                    (_mm_to_px(op.x2, dpi), _mm_to_px(op.y2, dpi)),
                ],
                fill=op.color,
                width=max(1, _mm_to_px(op.width, dpi)),
            )

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    logger.debug(f"Rasterized page {page.number} at {size[0]}x{size[1]}px")
    return buf.getvalue()


@lru_cache(maxsize=32)
def _font(size_px: int) -> ImageFont.FreeTypeFont:
    """Pillow's bundled scalable font at the given pixel size."""
    return ImageFont.load_default(size=size_px)


def _mm_to_px(value_mm: float, dpi: int) -> int:
    return round(value_mm / MM_PER_INCH * dpi)


def _pt_to_px(value_pt: float, dpi: int) -> int:
    return max(1, round(value_pt / PT_PER_INCH * dpi))
