"""
Module: compiler.layout

Purpose:
    Page layout and composition for lesson plan reports.
    Converts records into positioned page plans.

Key Functions:
    - wrap_text(): Break text into lines that fit a width
    - render_section(): Place a heading and its body through a cursor
    - predict_toc(): Predict each record's starting page

Key Classes:
    - LayoutConfig: Configuration for page layout
    - PageCursor: Vertical position and page breaking
    - DocumentAssembler: Cover, TOC and record composition
    - PagePlan / LayoutResult: Layout output

Dependencies:
    - lesson_planner.core.models: LessonPlan

Used By:
    - compiler.controller: Export pipeline
"""

from .config import DocumentLabels, LayoutConfig, TextStyles, format_long_date
from .models import (
    Align,
    FontSpec,
    LayoutResult,
    PageKind,
    PagePlan,
    RuleLine,
    TextRun,
    TocEntry,
)
from .wrapper import MeasureFn, fit_text, wrap_text
from .cursor import PageCursor
from .sections import SectionStyle, render_section
from .toc import predict_toc, toc_page_count
from .assembler import AssemblerState, DocumentAssembler

__all__ = [
    # Config
    "LayoutConfig",
    "TextStyles",
    "DocumentLabels",
    "format_long_date",
    # Models
    "Align",
    "FontSpec",
    "TextRun",
    "RuleLine",
    "PageKind",
    "PagePlan",
    "TocEntry",
    "LayoutResult",
    # Functions
    "MeasureFn",
    "wrap_text",
    "fit_text",
    "render_section",
    "predict_toc",
    "toc_page_count",
    # Classes
    "PageCursor",
    "SectionStyle",
    "AssemblerState",
    "DocumentAssembler",
]
