"""
Module: compiler.layout.assembler

Purpose:
    Compose a complete report: cover page, table of contents and one
    section per record, then stamp every record page with its real
    page number.

Key Classes:
    - DocumentAssembler: One-shot composer driven by an ExportJob
    - AssemblerState: Phases of a composition

State machine:
    Bulk:   IDLE -> COMPOSING_COVER -> COMPOSING_TOC
                 -> COMPOSING_RECORD (once per record) -> FINALIZING -> DONE
    Single: IDLE -> COMPOSING_RECORD -> FINALIZING -> DONE

    No phase may be skipped. An assembler composes exactly one document;
    create a new one for every export.

Dependencies:
    - compiler.layout.cursor: PageCursor
    - compiler.layout.sections: render_section
    - compiler.layout.toc: predict_toc
    - compiler.layout.wrapper: wrap_text, fit_text

Used By:
    - compiler.controller: Export pipeline
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from lesson_planner.compiler.errors import AssemblyStateError, EmptyInputError
from lesson_planner.compiler.job import ExportJob
from lesson_planner.core.models import LessonPlan

from .config import DocumentLabels, LayoutConfig, format_long_date
from .cursor import PageCursor
from .models import Align, LayoutResult, PageKind, PagePlan, RuleLine, TextRun, TocEntry
from .sections import SectionStyle, render_heading_rule, render_section
from .toc import predict_toc
from .wrapper import MeasureFn, fit_text, wrap_text

logger = logging.getLogger(__name__)

# Space kept between a TOC topic and its page label
TOC_LABEL_GAP_MM = 5.0


class AssemblerState(str, Enum):
    """Phases of a document composition."""

    IDLE = "idle"
    COMPOSING_COVER = "composing_cover"
    COMPOSING_TOC = "composing_toc"
    COMPOSING_RECORD = "composing_record"
    FINALIZING = "finalizing"
    DONE = "done"


_TRANSITIONS: Dict[AssemblerState, Tuple[AssemblerState, ...]] = {
    AssemblerState.COMPOSING_COVER: (AssemblerState.COMPOSING_TOC,),
    AssemblerState.COMPOSING_TOC: (AssemblerState.COMPOSING_RECORD,),
    AssemblerState.COMPOSING_RECORD: (AssemblerState.COMPOSING_RECORD, AssemblerState.FINALIZING),
    AssemblerState.FINALIZING: (AssemblerState.DONE,),
    AssemblerState.DONE: (),
}


class DocumentAssembler:
    """
    Compose a report from lesson plan records.

    Layout decisions are synchronous and deterministic: the same job
    and measure function always produce the same pages.

    Attributes:
        config: Layout configuration
        labels: Report strings
        state: Current phase
        history: Every phase entered, in order

    Example:
        >>> assembler = DocumentAssembler(LayoutConfig(), backend.measure_text_width)
        >>> layout = assembler.assemble(job)
        >>> layout.record_start_pages
        (3, 4, 5)
    """

    def __init__(
        self,
        config: LayoutConfig,
        measure: MeasureFn,
        labels: Optional[DocumentLabels] = None,
    ) -> None:
        self.config = config
        self.labels = labels or DocumentLabels()
        self._measure = measure
        self._section_style = SectionStyle.from_config(config)
        self._single = False
        self._record_pages: Dict[int, List[int]] = {}
        self.state = AssemblerState.IDLE
        self.history: List[AssemblerState] = [AssemblerState.IDLE]

    # ─────────────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────────────

    def assemble(self, job: ExportJob) -> LayoutResult:
        """
        Compose the multi-record report.

        Args:
            job: Records and generation date

        Returns:
            LayoutResult with cover, TOC and record pages

        Raises:
            EmptyInputError: If the job has no records (nothing is laid out)
            AssemblyStateError: If this assembler was already used
        """
        if not job.records:
            raise EmptyInputError("Cannot compile a report with no lesson plans")
        self._start(single=False)

        logger.info(f"Assembling report for {job.record_count} lesson plans")

        front = PageCursor(self.config, limit=self.config.toc_limit)

        self._transition(AssemblerState.COMPOSING_COVER)
        self._compose_cover(front, job)

        self._transition(AssemblerState.COMPOSING_TOC)
        toc = predict_toc(job.records, self.config)
        self._compose_toc(front, toc)
        front_pages = front.finish()

        expected_first = toc[0].page_number if toc else None
        if expected_first is not None and expected_first != len(front_pages) + 1:
            # toc_page_count and _compose_toc walk the same steps
            raise AssemblyStateError(
                f"TOC occupies {len(front_pages) - 1} page(s) but the prediction assumed "
                f"records start on page {expected_first}"
            )

        body = PageCursor(self.config, on_finalize=self._stamp_page, first_index=len(front_pages))
        for index, record in enumerate(job.records):
            self._transition(AssemblerState.COMPOSING_RECORD)
            self._compose_record(body, index, record)

        self._transition(AssemblerState.FINALIZING)
        pages = front_pages + body.finish()
        warnings = self._check_toc_drift(toc)
        result = self._result(pages, toc, warnings)

        self._transition(AssemblerState.DONE)
        logger.info(f"Assembled {result.page_count} pages ({len(front_pages)} front matter)")
        return result

    def assemble_single(self, record: LessonPlan, generated_on: date) -> LayoutResult:
        """
        Compose a standalone document for one record.

        No cover and no table of contents; the record's pages are
        numbered from 1 and the generation date closes the document.

        Args:
            record: Lesson plan to lay out
            generated_on: Date printed at the end

        Returns:
            LayoutResult with record pages only
        """
        self._start(single=True)

        cursor = PageCursor(self.config, on_finalize=self._stamp_page)
        self._transition(AssemblerState.COMPOSING_RECORD)
        self._compose_record(cursor, 0, record)

        styles = self.config.styles
        text = self.labels.generated.format(date=format_long_date(generated_on))
        _, y = cursor.advance(self.config.metadata_line_height)
        cursor.place(TextRun(
            x=self.config.page_width / 2,
            y=y,
            text=text,
            font=styles.footer,
            color=styles.muted_color,
            align=Align.CENTER,
        ))

        self._transition(AssemblerState.FINALIZING)
        result = self._result(cursor.finish(), (), [])

        self._transition(AssemblerState.DONE)
        logger.info(f"Assembled single plan '{record.topic}' on {result.page_count} page(s)")
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # State machine
    # ─────────────────────────────────────────────────────────────────────────

    def _start(self, *, single: bool) -> None:
        if self.state is not AssemblerState.IDLE:
            raise AssemblyStateError(
                f"Assembler already used (state={self.state.value}); create a new one per export"
            )
        self._single = single

    def _transition(self, target: AssemblerState) -> None:
        if self.state is AssemblerState.IDLE:
            allowed = (
                (AssemblerState.COMPOSING_RECORD,) if self._single
                else (AssemblerState.COMPOSING_COVER,)
            )
        else:
            allowed = _TRANSITIONS[self.state]
        if target not in allowed:
            raise AssemblyStateError(f"Illegal transition {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)

    # ─────────────────────────────────────────────────────────────────────────
    # Composition
    # ─────────────────────────────────────────────────────────────────────────

    def _compose_cover(self, cursor: PageCursor, job: ExportJob) -> None:
        config = self.config
        styles = config.styles
        center = config.page_width / 2

        cursor.new_page(PageKind.COVER)
        cursor.place(TextRun(
            x=center, y=config.cover_title_y, text=self.labels.title,
            font=styles.cover_title, color=styles.accent_color, align=Align.CENTER,
        ))
        rule_y = config.cover_title_y + 6.0
        cursor.place(RuleLine(
            x1=config.margin_left, y1=rule_y, x2=config.content_right, y2=rule_y,
            color=styles.accent_color, width=0.8,
        ))
        cursor.place(TextRun(
            x=center, y=config.cover_summary_y,
            text=self.labels.summary.format(count=job.record_count),
            font=styles.cover_summary, color=styles.text_color, align=Align.CENTER,
        ))
        cursor.place(TextRun(
            x=center, y=config.cover_date_y,
            text=self.labels.generated.format(date=format_long_date(job.generated_on)),
            font=styles.cover_date, color=styles.text_color, align=Align.CENTER,
        ))

    def _compose_toc(self, cursor: PageCursor, toc: Tuple[TocEntry, ...]) -> None:
        config = self.config
        styles = config.styles
        font = styles.toc_row

        cursor.new_page(PageKind.TOC)
        _, y = cursor.advance(config.title_height)
        cursor.place(TextRun(
            x=config.margin_left, y=y, text=self.labels.toc_title,
            font=styles.toc_title, color=styles.accent_color,
        ))

        for entry in toc:
            page_label = self.labels.toc_page.format(page=entry.page_number)
            label_width = self._measure(page_label, font)
            row_width = config.content_width - label_width - TOC_LABEL_GAP_MM
            row_text = self.labels.toc_row.format(number=entry.record_index + 1, topic=entry.topic)
            if row_width > 0:
                row_text = fit_text(row_text, row_width, font, self._measure)

            _, y = cursor.advance(config.toc_row_height)
            cursor.place(TextRun(
                x=config.margin_left, y=y, text=row_text,
                font=font, color=styles.text_color,
            ))
            cursor.place(TextRun(
                x=config.content_right, y=y, text=page_label,
                font=font, color=styles.text_color, align=Align.RIGHT,
            ))

    def _compose_record(self, cursor: PageCursor, index: int, record: LessonPlan) -> None:
        config = self.config
        styles = config.styles
        x = config.margin_left

        cursor.new_page(PageKind.RECORD, record_index=index)

        # Heading: the topic, wrapped if it is wider than the content area
        title_lines = wrap_text(record.topic, config.content_width, styles.record_title, self._measure) or [""]
        y = config.margin_top
        for i, line in enumerate(title_lines):
            step = config.title_height if i == len(title_lines) - 1 else config.metadata_line_height
            _, y = cursor.advance(step)
            if line:
                cursor.place(TextRun(
                    x=x, y=y, text=line, font=styles.record_title, color=styles.accent_color,
                ))
        render_heading_rule(cursor, y, styles.rule_color)

        # Metadata block, only once per record
        metadata = (
            self.labels.teacher.format(value=record.teacher),
            self.labels.course.format(value=record.course),
            self.labels.date.format(value=format_long_date(record.date)),
        )
        for line in metadata:
            _, y = cursor.advance(config.metadata_line_height)
            cursor.place(TextRun(x=x, y=y, text=line, font=styles.metadata, color=styles.text_color))
        cursor.skip(config.metadata_gap)

        for key, text in record.sections:
            lines = wrap_text(text, config.content_width, styles.body, self._measure)
            render_section(cursor, self.labels.section_heading(key), lines, self._section_style)

        logger.debug(f"Record {index} ('{record.topic}') ends on page {cursor.page_index + 1}")

    def _stamp_page(self, page: PagePlan) -> PagePlan:
        """Footer-stamp a finalized record page with its real number."""
        if page.kind is not PageKind.RECORD:
            return page
        if page.record_index is not None:
            self._record_pages.setdefault(page.record_index, []).append(page.number)

        styles = self.config.styles
        footer = TextRun(
            x=self.config.page_width / 2,
            y=self.config.footer_y,
            text=self.labels.footer.format(number=page.number),
            font=styles.footer,
            color=styles.muted_color,
            align=Align.CENTER,
        )
        return replace(page, footer=footer)

    # ─────────────────────────────────────────────────────────────────────────
    # Finalization
    # ─────────────────────────────────────────────────────────────────────────

    def _check_toc_drift(self, toc: Tuple[TocEntry, ...]) -> List[str]:
        """Compare predicted and real start pages; the TOC itself is never revised."""
        warnings: List[str] = []
        for entry in toc:
            actual = self._record_pages[entry.record_index][0]
            if actual != entry.page_number:
                warnings.append(
                    f"Record {entry.record_index + 1} ('{entry.topic}') listed on page "
                    f"{entry.page_number} but starts on page {actual}"
                )
        if warnings:
            logger.warning(
                f"Table of contents drifted for {len(warnings)} of {len(toc)} records "
                f"(records longer than one page)"
            )
        return warnings

    def _result(
        self,
        pages: Tuple[PagePlan, ...],
        toc: Tuple[TocEntry, ...],
        warnings: List[str],
    ) -> LayoutResult:
        return LayoutResult(
            pages=pages,
            page_width=self.config.page_width,
            page_height=self.config.page_height,
            toc=toc,
            record_pages={k: list(v) for k, v in self._record_pages.items()},
            warnings=warnings,
        )
