"""
Unit tests for section rendering (heading + body through the cursor).
"""

from dataclasses import replace

import pytest

from lesson_planner.compiler.layout import (
    PageCursor,
    PageKind,
    SectionStyle,
    render_section,
)


@pytest.fixture
def style(layout_config) -> SectionStyle:
    return SectionStyle.from_config(layout_config)


@pytest.fixture
def cursor(layout_config) -> PageCursor:
    c = PageCursor(layout_config)
    c.new_page(PageKind.RECORD, record_index=0)
    return c


class TestRenderSection:
    """Tests for render_section()."""

    def test_section_places_heading_then_lines(self, cursor, style):
        # Arrange
        cursor.y = 90.0

        # Act
        last_page = render_section(cursor, "Objetivos (Logros)", ["uno", "dos"], style)
        pages = cursor.finish()

        # Assert
        runs = pages[0].text_runs
        assert [(r.text, r.y) for r in runs] == [
            ("Objetivos (Logros)", 90.0),
            ("uno", 100.0),
            ("dos", 105.0),
        ]
        assert runs[0].font == style.heading_font
        assert runs[1].font == style.body_font
        assert last_page == 0

    def test_section_adds_gap_after_body(self, cursor, style):
        # Arrange
        cursor.y = 90.0

        # Act
        render_section(cursor, "Contenido", ["uno"], style)

        # Assert - heading 10 + line 5 + gap 10
        assert cursor.y == 115.0

    def test_section_when_body_empty_then_heading_only(self, cursor, style):
        # Arrange
        cursor.y = 140.0

        # Act
        render_section(cursor, "Recursos", [], style)
        pages = cursor.finish()

        # Assert
        assert [r.text for r in pages[0].text_runs] == ["Recursos"]

    def test_section_when_blank_line_then_space_kept_without_run(self, cursor, style):
        # Arrange
        cursor.y = 90.0

        # Act
        render_section(cursor, "Contenido", ["uno", "", "dos"], style)
        pages = cursor.finish()

        # Assert
        assert [(r.text, r.y) for r in pages[0].text_runs] == [
            ("Contenido", 90.0),
            ("uno", 100.0),
            ("dos", 110.0),
        ]

    def test_section_when_starting_below_threshold_then_new_page(self, cursor, style):
        # Arrange
        cursor.y = 205.0

        # Act
        last_page = render_section(cursor, "Recursos", ["pizarra"], style)
        pages = cursor.finish()

        # Assert
        assert last_page == 1
        assert pages[0].is_empty
        assert pages[1].text_runs[0].text == "Recursos"
        assert pages[1].text_runs[0].y == 30.0

    def test_section_when_starting_at_threshold_then_same_page(self, cursor, style):
        # Arrange
        cursor.y = 200.0

        # Act
        last_page = render_section(cursor, "Recursos", ["pizarra"], style)

        # Assert
        assert last_page == 0

    def test_section_when_heading_and_first_line_dont_fit_then_both_move(self, cursor, style):
        # Arrange - no threshold, heading alone would fit at 260 but not with a line
        style = replace(style, break_below=None)
        cursor.y = 257.0

        # Act
        render_section(cursor, "Contenido", ["uno", "dos"], style)
        pages = cursor.finish()

        # Assert
        assert pages[0].is_empty
        assert [(r.text, r.y) for r in pages[1].text_runs] == [
            ("Contenido", 30.0),
            ("uno", 40.0),
            ("dos", 45.0),
        ]

    def test_section_when_body_overflows_then_continues_on_next_page(self, cursor, style):
        # Arrange
        cursor.y = 115.0
        lines = [f"linea {i}" for i in range(60)]

        # Act
        last_page = render_section(cursor, "Contenido", lines, style)
        pages = cursor.finish()

        # Assert - 29 lines from y=125 to 265, the remaining 31 from 30 to 180
        first, second = pages
        body_first = first.text_runs[1:]
        assert len(body_first) == 29
        assert body_first[0].y == 125.0
        assert body_first[-1].y == 265.0
        assert len(second.text_runs) == 31
        assert second.text_runs[0].y == 30.0
        assert second.text_runs[-1].y == 180.0
        assert [r.text for r in body_first + second.text_runs] == lines
        assert last_page == 1
        assert second.record_index == 0
