"""Loading of record-store snapshots into LessonPlan values."""

from .loader import LoaderError, find_plan, load_plans, parse_snapshot

__all__ = [
    "LoaderError",
    "find_plan",
    "load_plans",
    "parse_snapshot",
]
