"""
Module: compiler.job

Purpose:
    Immutable description of one export request. Everything the
    assembler needs travels in this value; there is no shared state
    between exports.

Key Classes:
    - ExportJob: Record snapshot plus generation date
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Tuple

from lesson_planner.core.models import LessonPlan


@dataclass(frozen=True)
class ExportJob:
    """
    One export request (immutable).

    The generation date is part of the job so that compiling the same
    job twice yields identical documents.

    Attributes:
        records: Records in report order
        generated_on: Date printed on the cover and used in file names

    Example:
        >>> job = ExportJob.from_records(plans, generated_on=date(2026, 10, 19))
        >>> job.record_count
        3
    """

    records: Tuple[LessonPlan, ...]
    generated_on: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        """Validate job on construction."""
        if not isinstance(self.records, tuple):
            raise TypeError(f"records must be a tuple, got {type(self.records).__name__}")
        for i, record in enumerate(self.records):
            if not isinstance(record, LessonPlan):
                raise TypeError(f"records[{i}] is not a LessonPlan: {record!r}")
        if not isinstance(self.generated_on, date):
            raise TypeError(f"generated_on must be a date: {self.generated_on!r}")

    @classmethod
    def from_records(
        cls,
        records: Iterable[LessonPlan],
        generated_on: Optional[date] = None,
    ) -> ExportJob:
        """Snapshot any iterable of records into a job."""
        if generated_on is None:
            return cls(records=tuple(records))
        return cls(records=tuple(records), generated_on=generated_on)

    @property
    def record_count(self) -> int:
        return len(self.records)
