"""
Module: compiler.output.backend

Purpose:
    The rendering backend seen by the layout engine and the controller:
    text measurement (synchronous, used during layout) plus rasterization
    and document encoding (asynchronous, awaited by the controller).
    Blocking ReportLab and Pillow work runs in the default executor.

Key Classes:
    - RenderingBackend: Protocol the controller depends on
    - ReportLabBackend: ReportLab + Pillow implementation

Any failure inside the backend surfaces as RenderingBackendError.
No retries are attempted.

Dependencies:
    - reportlab: Font metrics and PDF encoding
    - PIL: Rasterization
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Optional, Protocol, Sequence

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from lesson_planner.compiler.errors import RenderingBackendError
from lesson_planner.compiler.layout.models import FontSpec, LayoutResult, PagePlan

from .raster import DEFAULT_DPI, rasterize_page
from .renderer import render_pdf

logger = logging.getLogger(__name__)


class RenderingBackend(Protocol):
    """Capabilities the compiler needs from a rendering backend."""

    def measure_text_width(self, text: str, font: FontSpec) -> float:
        """Width of text in mm."""
        ...

    async def rasterize(self, page: PagePlan, layout: LayoutResult) -> bytes:
        """Rasterize one page of layout to image bytes."""
        ...

    async def encode_document(
        self,
        layout: LayoutResult,
        images: Optional[Sequence[bytes]] = None,
    ) -> bytes:
        """Encode the ordered pages into the final binary document."""
        ...


class ReportLabBackend:
    """
    Rendering backend producing PDF with ReportLab.

    Measurement uses ReportLab's standard font metrics, so wrapped lines
    match what the PDF canvas draws.

    Attributes:
        dpi: Rasterization resolution for image-mode documents
        title: PDF metadata title

    Example:
        >>> backend = ReportLabBackend()
        >>> backend.measure_text_width("Hola", FontSpec("Helvetica", 12)) > 0
        True
    """

    def __init__(self, *, dpi: int = DEFAULT_DPI, title: Optional[str] = None) -> None:
        self.dpi = dpi
        self.title = title

    def measure_text_width(self, text: str, font: FontSpec) -> float:
        try:
            width_pt = pdfmetrics.stringWidth(text, font.name, font.size)
        except Exception as e:
            raise RenderingBackendError(
                f"Cannot measure text in font {font.name!r}: {e}"
            ) from e
        return width_pt / mm

    async def rasterize(self, page: PagePlan, layout: LayoutResult) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None,
                partial(
                    rasterize_page,
                    page,
                    layout.page_width,
                    layout.page_height,
                    dpi=self.dpi,
                ),
            )
        except Exception as e:
            raise RenderingBackendError(f"Failed to rasterize page {page.number}: {e}") from e

    async def encode_document(
        self,
        layout: LayoutResult,
        images: Optional[Sequence[bytes]] = None,
    ) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(
                None,
                partial(render_pdf, layout, images=images, title=self.title),
            )
        except Exception as e:
            raise RenderingBackendError(f"Failed to encode PDF: {e}") from e
        logger.debug(f"Encoded {layout.page_count} pages into {len(data)} bytes")
        return data
