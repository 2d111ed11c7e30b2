"""
Module: records

Purpose:
    Provides the LessonPlan dataclass - the record passed from the loader
    to the layout engine. Represents one lesson plan entry with its
    metadata and three free-text sections. Immutable.

Key Functions:
    - LessonPlan.from_dict(): Build from store fields (Spanish or English keys)
    - LessonPlan.to_dict(): Serialize back to store field names
    - LessonPlan.sections: Ordered (key, text) pairs for layout

Dependencies:
    - dataclasses (std)
    - datetime (std)

Used By:
    - compiler.loading.loader
    - compiler.layout.assembler
    - compiler.layout.toc
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple


class RecordError(ValueError):
    """Raised when a record cannot be mapped to a LessonPlan."""
    pass


# Store (NocoDB) column name -> LessonPlan attribute
STORE_FIELD_NAMES: Dict[str, str] = {
    "docente": "teacher",
    "curso": "course",
    "tema": "topic",
    "fecha": "date",
    "objetivos": "objectives",
    "contenido": "content",
    "recursos": "resources",
}

_TEXT_FIELDS = ("teacher", "course", "topic", "objectives", "content", "resources")


@dataclass(frozen=True)
class LessonPlan:
    """
    Lesson plan record (immutable).

    Text fields are free-form and may be empty: missing values are kept
    as empty strings so the report still shows an empty section.

    Attributes:
        teacher: Teacher name ("docente")
        course: Course or group ("curso")
        topic: Lesson topic, used as heading and TOC label ("tema")
        date: Lesson date, or None when the store has none ("fecha")
        objectives: Learning objectives ("objetivos")
        content: Lesson content ("contenido")
        resources: Required resources ("recursos")
        id: Opaque store identifier, never used for layout

    Example:
        >>> plan = LessonPlan.from_dict({"tema": "Fracciones", "fecha": "2024-03-15"})
        >>> plan.topic, plan.date
        ('Fracciones', datetime.date(2024, 3, 15))
    """

    teacher: str = ""
    course: str = ""
    topic: str = ""
    date: Optional[date] = None
    objectives: str = ""
    content: str = ""
    resources: str = ""
    id: Optional[str] = None

    @property
    def sections(self) -> Tuple[Tuple[str, str], ...]:
        """Body sections in render order as (key, text) pairs."""
        return (
            ("objectives", self.objectives),
            ("content", self.content),
            ("resources", self.resources),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to store field names.

        Returns:
            Dict keyed by Spanish column names, date as ISO string or "".
        """
        d: Dict[str, Any] = {
            "docente": self.teacher,
            "curso": self.course,
            "tema": self.topic,
            "fecha": self.date.isoformat() if self.date else "",
            "objetivos": self.objectives,
            "contenido": self.content,
            "recursos": self.resources,
        }
        if self.id is not None:
            d["id"] = self.id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, record_id: Any = None) -> LessonPlan:
        """
        Build a LessonPlan from a store row.

        Accepts the store's Spanish column names or the English attribute
        names. Unknown keys are ignored.

        Args:
            data: Field mapping for one record
            record_id: Identifier from the record envelope, if any

        Returns:
            LessonPlan instance

        Raises:
            RecordError: If data is not a mapping or the date is unparseable
        """
        if not isinstance(data, dict):
            raise RecordError(f"Record fields must be an object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            attr = STORE_FIELD_NAMES.get(key, key)
            if attr in _TEXT_FIELDS or attr == "date":
                values[attr] = value

        kwargs: Dict[str, Any] = {
            attr: _as_text(values.get(attr)) for attr in _TEXT_FIELDS
        }
        kwargs["date"] = _parse_date(values.get("date"))

        if record_id is None:
            record_id = data.get("id", data.get("Id"))
        kwargs["id"] = str(record_id) if record_id is not None else None
        return cls(**kwargs)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or datetime) string; empty values map to None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        # Store may return "2024-03-15" or "2024-03-15T00:00:00Z"
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise RecordError(f"Invalid date: {value!r}") from e
