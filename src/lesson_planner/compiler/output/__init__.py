"""
Module: compiler.output

Purpose:
    PDF rendering for compiled reports.
    Converts LayoutResult to PDF bytes using ReportLab, with Pillow
    rasterization for image-mode (single plan) documents.

Key Functions:
    - render_pdf(): Render layout to PDF bytes
    - rasterize_page(): Render one page to PNG bytes

Key Classes:
    - RenderingBackend: Protocol used by the controller
    - ReportLabBackend: Default backend

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - compiler.layout.models: LayoutResult

Used By:
    - compiler.controller: Export pipeline
"""

from .renderer import render_pdf
from .raster import rasterize_page
from .backend import RenderingBackend, ReportLabBackend

__all__ = [
    "render_pdf",
    "rasterize_page",
    "RenderingBackend",
    "ReportLabBackend",
]
