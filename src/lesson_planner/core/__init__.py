"""
Lesson Planner Core Package

Shared data models used by the loader, the layout engine and the
export controller.

**DESIGN NOTES:**

1. **Immutable Records**
   - Records are frozen dataclasses, taken as a snapshot at export time
   - The layout engine reads them and never mutates them

2. **Mapping Lives at the Edge**
   - The record store speaks Spanish field names (docente, tema, ...)
   - `LessonPlan.from_dict()` maps them once; everything downstream uses
     the English attribute names
"""

from .models import LessonPlan, RecordError

__all__ = [
    "LessonPlan",
    "RecordError",
]
