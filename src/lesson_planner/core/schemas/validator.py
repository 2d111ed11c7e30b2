"""
Schema Validation Utilities

Validates record snapshots (the JSON handed over by the record store)
against `lesson_plans.schema.json` before any record is mapped.

Fail fast on any schema violation: a snapshot that does not match is
rejected as a whole rather than partially compiled.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_snapshot(data: Any) -> None:
    """
    Validate a record snapshot.

    The top level is a oneOf (store response or plain array), so the
    reported error is the most specific one found inside its branches.

    Args:
        data: Decoded JSON (object with "records" or a plain list)

    Raises:
        ValidationError: If data does not match the schema
    """
    schema = _load_schema("lesson_plans")
    validator = jsonschema.Draft202012Validator(schema)
    errors = list(_leaf_errors(validator.iter_errors(data)))
    if errors:
        first = max(errors, key=lambda e: len(e.absolute_path))
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )


def _leaf_errors(errors: Iterable[jsonschema.ValidationError]) -> Iterator[jsonschema.ValidationError]:
    """Flatten oneOf/anyOf errors into the errors of their branches."""
    for error in errors:
        if error.context:
            yield from _leaf_errors(error.context)
        else:
            yield error
