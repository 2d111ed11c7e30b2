"""
Unit tests for DocumentAssembler.

Covers the bulk report (cover, TOC, records), the single-record document,
footer stamping, TOC drift reporting and the composition state machine.
"""

import logging

import pytest

from lesson_planner.compiler.errors import AssemblyStateError, EmptyInputError
from lesson_planner.compiler.job import ExportJob
from lesson_planner.compiler.layout import (
    Align,
    AssemblerState,
    DocumentAssembler,
    DocumentLabels,
    LayoutConfig,
    PageKind,
)
from lesson_planner.core.models import LessonPlan


def _texts(page):
    return [r.text for r in page.text_runs]


def _find(page, text):
    return next(r for r in page.text_runs if r.text == text)


@pytest.fixture
def assembler(layout_config, fake_measure):
    return DocumentAssembler(layout_config, fake_measure)


class TestBulkReportStructure:
    """Page structure of the multi-record report."""

    def test_assemble_when_one_short_record_then_three_pages(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory("Fracciones")], generated_on=generated_on)

        # Act
        layout = assembler.assemble(job)

        # Assert
        assert [p.kind for p in layout.pages] == [PageKind.COVER, PageKind.TOC, PageKind.RECORD]
        assert layout.toc[0].page_number == 3
        assert layout.record_start_pages == (3,)
        assert layout.pages[2].footer.text == "Página 3"
        assert layout.warnings == []

    def test_cover_shows_title_count_and_generation_date(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory("A"), plan_factory("B")], generated_on=generated_on)

        # Act
        cover = assembler.assemble(job).pages[0]

        # Assert
        assert _texts(cover) == [
            "Planes de Clase",
            "Compilación de 2 planes",
            "Generado el 19 de octubre de 2026",
        ]
        assert all(r.align is Align.CENTER for r in cover.text_runs)
        assert [r.y for r in cover.text_runs] == [50.0, 70.0, 90.0]

    def test_cover_and_toc_pages_have_no_footer(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory()], generated_on=generated_on)

        # Act
        layout = assembler.assemble(job)

        # Assert
        assert layout.pages[0].footer is None
        assert layout.pages[1].footer is None

    def test_toc_lists_each_record_with_predicted_page(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records(
            [plan_factory("Fracciones"), plan_factory("Decimales"), plan_factory("Porcentajes")],
            generated_on=generated_on,
        )

        # Act
        layout = assembler.assemble(job)
        toc_page = layout.pages[1]

        # Assert
        assert layout.record_start_pages == (3, 4, 5)
        assert layout.warnings == []
        assert _texts(toc_page) == [
            "Índice",
            "1. Fracciones", "Página 3",
            "2. Decimales", "Página 4",
            "3. Porcentajes", "Página 5",
        ]
        assert _find(toc_page, "Índice").y == 30.0
        assert _find(toc_page, "1. Fracciones").y == 50.0
        page_label = _find(toc_page, "Página 3")
        assert page_label.align is Align.RIGHT
        assert page_label.x == 190.0

    def test_toc_row_when_topic_too_long_then_truncated(self, assembler, plan_factory, generated_on):
        # Arrange
        topic = "Tema " + "muy largo " * 20
        job = ExportJob.from_records([plan_factory(topic)], generated_on=generated_on)

        # Act
        toc_page = assembler.assemble(job).pages[1]

        # Assert
        row = toc_page.text_runs[1]
        assert row.text.endswith("...")
        assert len(row.text) * 2.0 <= 170 - len("Página 3") * 2.0 - 5.0

    def test_toc_when_22_records_then_spills_onto_second_page(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory(f"Tema {i}") for i in range(22)], generated_on=generated_on)

        # Act
        layout = assembler.assemble(job)

        # Assert
        assert [p.kind for p in layout.pages[:4]] == [
            PageKind.COVER, PageKind.TOC, PageKind.TOC, PageKind.RECORD,
        ]
        second_toc = layout.pages[2]
        assert _texts(second_toc) == ["22. Tema 21", "Página 25"]
        assert second_toc.text_runs[0].y == 30.0
        assert layout.record_start_pages[0] == 4
        assert layout.toc[0].page_number == 4


class TestRecordLayout:
    """Vertical layout of one record."""

    def test_short_record_positions(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory("Fracciones")], generated_on=generated_on)

        # Act
        page = assembler.assemble(job).pages[2]

        # Assert
        assert [(r.text, r.y) for r in page.text_runs] == [
            ("Fracciones", 30.0),
            ("Docente: Ana Pérez", 50.0),
            ("Curso: 5to B", 60.0),
            ("Fecha: 15 de marzo de 2026", 70.0),
            ("Objetivos (Logros)", 90.0),
            ("Comprender fracciones equivalentes.", 100.0),
            ("Contenido", 115.0),
            ("Suma de fracciones con igual denominador.", 125.0),
            ("Recursos", 140.0),
            ("Pizarra y regletas.", 150.0),
        ]

    def test_record_when_text_fields_empty_then_headings_still_drawn(self, assembler, generated_on):
        # Arrange
        job = ExportJob.from_records([LessonPlan(topic="Vacío")], generated_on=generated_on)

        # Act
        page = assembler.assemble(job).pages[2]

        # Assert
        assert _texts(page) == [
            "Vacío", "Docente: ", "Curso: ", "Fecha: ",
            "Objetivos (Logros)", "Contenido", "Recursos",
        ]

    def test_record_when_60_content_lines_then_spans_two_pages(
        self, assembler, plan_factory, long_content, generated_on,
    ):
        # Arrange
        job = ExportJob.from_records(
            [plan_factory("Largo", content=long_content(60))],
            generated_on=generated_on,
        )

        # Act
        layout = assembler.assemble(job)

        # Assert
        first, second = layout.pages[2], layout.pages[3]
        assert layout.record_pages == {0: [3, 4]}
        body_first = [r for r in first.text_runs if r.text.startswith("palabras")]
        body_second = [r for r in second.text_runs if r.text.startswith("palabras")]
        assert len(body_first) == 29
        assert (body_first[0].y, body_first[-1].y) == (125.0, 265.0)
        assert len(body_second) == 31
        assert (body_second[0].y, body_second[-1].y) == (30.0, 180.0)
        assert _find(second, "Recursos").y == 195.0
        assert first.footer.text == "Página 3"
        assert second.footer.text == "Página 4"

    def test_metadata_appears_only_on_first_page_of_record(
        self, assembler, plan_factory, long_content, generated_on,
    ):
        # Arrange
        job = ExportJob.from_records([plan_factory(content=long_content(60))], generated_on=generated_on)

        # Act
        layout = assembler.assemble(job)

        # Assert
        assert "Docente: Ana Pérez" in _texts(layout.pages[2])
        assert not any(t.startswith("Docente") for t in _texts(layout.pages[3]))

    def test_long_topic_wraps_title(self, assembler, plan_factory, generated_on):
        # Arrange - 100 characters at 2mm each do not fit 170mm
        topic = " ".join(["tema"] * 20) + " final"

        # Act
        page = assembler.assemble(
            ExportJob.from_records([plan_factory(topic)], generated_on=generated_on)
        ).pages[2]

        # Assert
        title_runs = page.text_runs[:2]
        assert [r.y for r in title_runs] == [30.0, 40.0]
        assert " ".join(r.text for r in title_runs) == topic
        assert _find(page, "Docente: Ana Pérez").y == 60.0

    def test_record_pages_respect_body_limit(
        self, assembler, plan_factory, long_content, generated_on, layout_config,
    ):
        # Arrange
        records = [plan_factory(f"Tema {i}", content=long_content(15 * i)) for i in range(6)]

        # Act
        layout = assembler.assemble(ExportJob.from_records(records, generated_on=generated_on))

        # Assert
        for page in layout.pages:
            for run in page.text_runs:
                assert layout_config.margin_top <= run.y < layout_config.body_limit
            if page.kind is PageKind.RECORD:
                assert page.footer.y == layout_config.footer_y


class TestTocDrift:
    """TOC predictions assume one page per record and are never revised."""

    def test_drift_when_first_record_overflows_then_warning_and_next_starts_later(
        self, assembler, plan_factory, long_content, generated_on, caplog,
    ):
        # Arrange
        job = ExportJob.from_records(
            [plan_factory("Largo", content=long_content(60)), plan_factory("Corto")],
            generated_on=generated_on,
        )

        # Act
        with caplog.at_level(logging.WARNING):
            layout = assembler.assemble(job)

        # Assert
        assert [e.page_number for e in layout.toc] == [3, 4]
        assert layout.record_start_pages == (3, 5)
        assert len(layout.warnings) == 1
        assert "'Corto'" in layout.warnings[0]
        assert "starts on page 5" in layout.warnings[0]
        assert "Página 4" in _texts(layout.pages[1])
        assert "drifted" in caplog.text

    def test_footer_numbers_are_real_page_numbers_despite_drift(
        self, assembler, plan_factory, long_content, generated_on,
    ):
        # Arrange
        job = ExportJob.from_records(
            [plan_factory("Largo", content=long_content(60)), plan_factory("Corto")],
            generated_on=generated_on,
        )

        # Act
        layout = assembler.assemble(job)

        # Assert
        record_pages = [p for p in layout.pages if p.kind is PageKind.RECORD]
        assert [p.footer.text for p in record_pages] == ["Página 3", "Página 4", "Página 5"]


class TestOrderingAndDeterminism:

    def test_records_appear_in_input_order(self, fake_measure, plan_factory, long_content, generated_on):
        # Arrange
        topics = ["C", "A", "B", "E", "D"]
        records = [plan_factory(t, content=long_content(10 * i)) for i, t in enumerate(topics)]
        job = ExportJob.from_records(records, generated_on=generated_on)

        # Act
        layout = DocumentAssembler(LayoutConfig(), fake_measure).assemble(job)

        # Assert
        starts = layout.record_start_pages
        assert list(starts) == sorted(starts)
        first_runs = [layout.pages[n - 1].text_runs[0].text for n in starts]
        assert first_runs == topics
        record_indices = [p.record_index for p in layout.pages if p.kind is PageKind.RECORD]
        assert record_indices == sorted(record_indices)

    def test_assembling_same_job_twice_gives_identical_layout(
        self, fake_measure, plan_factory, long_content, generated_on,
    ):
        # Arrange
        job = ExportJob.from_records(
            [plan_factory("Uno", content=long_content(60)), plan_factory("Dos")],
            generated_on=generated_on,
        )

        # Act
        first = DocumentAssembler(LayoutConfig(), fake_measure).assemble(job)
        second = DocumentAssembler(LayoutConfig(), fake_measure).assemble(job)

        # Assert
        assert first == second

    def test_custom_labels_are_used(self, fake_measure, plan_factory, generated_on):
        # Arrange
        labels = DocumentLabels(title="Lesson Plans", footer="Page {number}")
        job = ExportJob.from_records([plan_factory()], generated_on=generated_on)

        # Act
        layout = DocumentAssembler(LayoutConfig(), fake_measure, labels).assemble(job)

        # Assert
        assert layout.pages[0].text_runs[0].text == "Lesson Plans"
        assert layout.pages[2].footer.text == "Page 3"


class TestSingleRecordDocument:
    """Tests for assemble_single()."""

    def test_single_has_record_pages_only_numbered_from_one(self, assembler, plan_factory, generated_on):
        # Act
        layout = assembler.assemble_single(plan_factory("Fracciones"), generated_on)

        # Assert
        assert [p.kind for p in layout.pages] == [PageKind.RECORD]
        assert layout.toc == ()
        assert layout.pages[0].footer.text == "Página 1"
        assert layout.pages[0].text_runs[0].y == 30.0

    def test_single_ends_with_generation_date(self, assembler, plan_factory, generated_on):
        # Act
        page = assembler.assemble_single(plan_factory(), generated_on).pages[-1]

        # Assert
        last = page.text_runs[-1]
        assert last.text == "Generado el 19 de octubre de 2026"
        assert last.align is Align.CENTER
        assert last.y == 165.0

    def test_single_when_long_content_then_two_pages(self, assembler, plan_factory, long_content, generated_on):
        # Act
        layout = assembler.assemble_single(plan_factory(content=long_content(60)), generated_on)

        # Assert
        assert layout.page_count == 2
        assert [p.footer.text for p in layout.pages] == ["Página 1", "Página 2"]
        assert layout.record_pages == {0: [1, 2]}


class TestStateMachine:
    """Tests for assembler phases and reuse."""

    def test_bulk_history_visits_every_phase_in_order(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory("A"), plan_factory("B")], generated_on=generated_on)

        # Act
        assembler.assemble(job)

        # Assert
        assert assembler.history == [
            AssemblerState.IDLE,
            AssemblerState.COMPOSING_COVER,
            AssemblerState.COMPOSING_TOC,
            AssemblerState.COMPOSING_RECORD,
            AssemblerState.COMPOSING_RECORD,
            AssemblerState.FINALIZING,
            AssemblerState.DONE,
        ]
        assert assembler.state is AssemblerState.DONE

    def test_single_history_skips_cover_and_toc(self, assembler, plan_factory, generated_on):
        # Act
        assembler.assemble_single(plan_factory(), generated_on)

        # Assert
        assert assembler.history == [
            AssemblerState.IDLE,
            AssemblerState.COMPOSING_RECORD,
            AssemblerState.FINALIZING,
            AssemblerState.DONE,
        ]

    def test_reuse_after_done_then_raises(self, assembler, plan_factory, generated_on):
        # Arrange
        job = ExportJob.from_records([plan_factory()], generated_on=generated_on)
        assembler.assemble(job)

        # Act / Assert
        with pytest.raises(AssemblyStateError, match="already used"):
            assembler.assemble(job)
        with pytest.raises(AssemblyStateError):
            assembler.assemble_single(plan_factory(), generated_on)

    def test_illegal_transition_then_raises(self, assembler):
        # Arrange
        assembler._start(single=False)

        # Act / Assert
        with pytest.raises(AssemblyStateError, match="Illegal transition"):
            assembler._transition(AssemblerState.COMPOSING_RECORD)

    def test_empty_job_then_empty_input_error_and_state_untouched(self, assembler, generated_on):
        # Arrange
        job = ExportJob.from_records([], generated_on=generated_on)

        # Act / Assert
        with pytest.raises(EmptyInputError):
            assembler.assemble(job)
        assert assembler.state is AssemblerState.IDLE
