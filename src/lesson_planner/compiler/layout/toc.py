"""
Module: compiler.layout.toc

Purpose:
    Predict the page on which each record's section begins, before any
    record body has been laid out, so the table of contents can be
    printed ahead of the content it indexes.

Key Functions:
    - toc_page_count(): Pages the TOC itself needs
    - predict_toc(): TocEntry per record

Policy:
    Every record is assumed to occupy exactly one page:

        page = COVER_PAGES + toc_pages + record_index + 1

    This is a best-effort estimate computed once. When a record really
    spans several pages, every later record's printed page drifts from
    its TOC entry; the assembler reports the drift but never revises
    the TOC.

Used By:
    - compiler.layout.assembler: TOC composition
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from lesson_planner.core.models import LessonPlan

from .config import LayoutConfig
from .cursor import PageCursor
from .models import PageKind, TocEntry

logger = logging.getLogger(__name__)

# The cover is always a single page
COVER_PAGES = 1


def toc_page_count(record_count: int, config: LayoutConfig) -> int:
    """
    Count the pages the table of contents needs for record_count rows.

    Runs the same cursor steps the assembler uses for the real TOC:
    a title block, then one fixed-height row per record, breaking
    before a row that would pass toc_break_y.

    Args:
        record_count: Number of TOC rows
        config: Layout configuration

    Returns:
        Number of TOC pages (0 when there are no records)

    Example:
        >>> toc_page_count(3, LayoutConfig())
        1
    """
    if record_count <= 0:
        return 0

    cursor = PageCursor(config, limit=config.toc_limit)
    cursor.new_page(PageKind.TOC)
    cursor.advance(config.title_height)
    for _ in range(record_count):
        cursor.advance(config.toc_row_height)
    return len(cursor.finish())


def predict_toc(
    records: Sequence[LessonPlan],
    config: LayoutConfig,
) -> Tuple[TocEntry, ...]:
    """
    Predict TOC entries for records in submission order.

    Args:
        records: Records to index
        config: Layout configuration

    Returns:
        One TocEntry per record; page numbers increase by exactly 1

    Example:
        >>> [e.page_number for e in predict_toc(three_records, LayoutConfig())]
        [3, 4, 5]
    """
    toc_pages = toc_page_count(len(records), config)
    first_page = COVER_PAGES + toc_pages + 1

    entries = tuple(
        TocEntry(record_index=i, topic=record.topic, page_number=first_page + i)
        for i, record in enumerate(records)
    )

    logger.debug(
        f"Predicted TOC: {len(entries)} entries on {toc_pages} page(s), "
        f"records from page {first_page}"
    )
    return entries
