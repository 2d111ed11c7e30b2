"""
Core Models Package

Immutable, validated data models.

All models in this package are frozen dataclasses. This ensures:
1. No accidental mutation while a report is being laid out
2. The same record list can be compiled twice with identical results
"""

from .records import LessonPlan, RecordError, STORE_FIELD_NAMES

__all__ = [
    "LessonPlan",
    "RecordError",
    "STORE_FIELD_NAMES",
]
