import pytest
import sys
from datetime import date
from pathlib import Path
from typing import Optional

# Add src to sys.path so we can import lesson_planner
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from lesson_planner.compiler.layout import LayoutConfig  # noqa: E402
from lesson_planner.core.models import LessonPlan  # noqa: E402

# Fake text metrics: every character is 2mm wide, so 85 characters fill
# the default 170mm content width.
CHAR_WIDTH_MM = 2.0

# 8-character word; nine of them (with spaces) make one 80-character line
FILLER_WORD = "palabras"


def fake_measure_width(text, font):
    return len(text) * CHAR_WIDTH_MM


# Common test fixtures
@pytest.fixture
def fake_measure():
    """Deterministic measure function independent of any font backend."""
    return fake_measure_width


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Default A4 layout."""
    return LayoutConfig()


@pytest.fixture
def generated_on() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def plan_factory():
    """Factory to create lesson plans with short one-line sections."""
    def _create(
        topic: str = "Fracciones",
        *,
        content: str = "Suma de fracciones con igual denominador.",
        objectives: str = "Comprender fracciones equivalentes.",
        resources: str = "Pizarra y regletas.",
        record_id: Optional[str] = None,
    ) -> LessonPlan:
        return LessonPlan(
            teacher="Ana Pérez",
            course="5to B",
            topic=topic,
            date=date(2026, 3, 15),
            objectives=objectives,
            content=content,
            resources=resources,
            id=record_id,
        )
    return _create


@pytest.fixture
def long_content():
    """Body text that wraps to exactly 60 lines under fake_measure."""
    def _create(lines: int = 60) -> str:
        return " ".join([FILLER_WORD] * (9 * lines))
    return _create
