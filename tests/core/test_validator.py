"""
Unit Tests for Schema Validation

Tests for the snapshot validator module.
"""

import pytest

from lesson_planner.core.schemas import ValidationError, validate_snapshot


class TestValidateSnapshot:
    """Tests for validate_snapshot function."""

    def test_valid_nocodb_response_passes(self):
        validate_snapshot({"records": [{"id": "rec1", "fields": {"tema": "A", "recursos": None}}]})

    def test_valid_plain_array_passes(self):
        validate_snapshot([{"tema": "A"}, {}])

    def test_scalar_snapshot_fails(self):
        with pytest.raises(ValidationError):
            validate_snapshot("records")

    def test_wrong_field_type_reports_path(self):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            validate_snapshot([{"tema": "A"}, {"contenido": ["lista"]}])

        # Assert
        assert exc_info.value.path == "1.contenido"
        assert exc_info.value.errors
