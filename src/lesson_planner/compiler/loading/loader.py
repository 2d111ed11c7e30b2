"""
Module: compiler.loading.loader

Purpose:
    Load lesson plans from a record-store snapshot on disk.
    The snapshot is the JSON the store returned: either a NocoDB v3
    list response ({"records": [{"id": ..., "fields": {...}}]}) or a
    plain array of field objects.

Key Functions:
    - load_plans(): Load every plan from a snapshot file
    - parse_snapshot(): Map decoded JSON to LessonPlan values
    - find_plan(): Pick one plan by id

Key Classes:
    - LoaderError: Exception for loading failures

Dependencies:
    - json (std)
    - lesson_planner.core.models: LessonPlan
    - lesson_planner.core.schemas: Snapshot validation

Used By:
    - lesson_planner.__main__: CLI
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

from lesson_planner.core.models import LessonPlan, RecordError
from lesson_planner.core.schemas import ValidationError, validate_snapshot

logger = logging.getLogger(__name__)


class LoaderError(Exception):
    """Error loading lesson plans from a snapshot."""
    pass


def load_plans(path: Path) -> List[LessonPlan]:
    """
    Load all lesson plans from a snapshot file.

    Args:
        path: Path to the JSON snapshot

    Returns:
        Plans in the order the store returned them

    Raises:
        LoaderError: If the file is missing or unreadable, not JSON, or fails validation

    Example:
        >>> plans = load_plans(Path("records.json"))
        >>> plans[0].topic
        'Fracciones'
    """
    if not path.exists():
        raise LoaderError(f"Snapshot file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoaderError(f"Cannot read snapshot {path}: {e}") from e

    plans = parse_snapshot(data, source=str(path))
    logger.info(f"Loaded {len(plans)} lesson plans from {path}")
    return plans


def parse_snapshot(data: Any, *, source: str = "snapshot") -> List[LessonPlan]:
    """
    Map a decoded snapshot to LessonPlan values.

    Args:
        data: Decoded JSON
        source: Source identifier for error messages

    Returns:
        List of LessonPlan

    Raises:
        LoaderError: If data fails schema validation or a record is malformed
    """
    try:
        validate_snapshot(data)
    except ValidationError as e:
        raise LoaderError(f"Invalid snapshot in {source} at '{e.path}': {e}") from e

    plans: List[LessonPlan] = []
    if isinstance(data, dict):
        rows = [(row.get("id"), row["fields"]) for row in data["records"]]
    else:
        rows = [(None, row) for row in data]

    for i, (record_id, fields) in enumerate(rows):
        try:
            plans.append(LessonPlan.from_dict(fields, record_id=record_id))
        except RecordError as e:
            raise LoaderError(f"Record {i} in {source}: {e}") from e

    return plans


def find_plan(plans: Sequence[LessonPlan], plan_id: str) -> LessonPlan:
    """
    Find a plan by store id.

    Raises:
        LoaderError: If no plan has this id
    """
    for plan in plans:
        if plan.id == plan_id:
            return plan
    raise LoaderError(f"No lesson plan with id {plan_id!r}")
