"""JSON schema validation for record snapshots."""

from .validator import ValidationError, validate_snapshot

__all__ = ["ValidationError", "validate_snapshot"]
