"""
Module: compiler.errors

Purpose:
    Exception hierarchy for report compilation. Every failure that aborts
    an export derives from ExportError so callers can catch one type.

Key Classes:
    - ExportError: Base class
    - EmptyInputError: Bulk export requested with zero records
    - RenderingBackendError: Measurement, rasterization or encoding failed
    - AssemblyStateError: Assembler driven through an illegal transition
"""

from __future__ import annotations


class ExportError(Exception):
    """Error during report export."""
    pass


class EmptyInputError(ExportError):
    """Bulk export invoked with no records; no document is produced."""
    pass


class RenderingBackendError(ExportError):
    """The rendering backend failed; the export is abandoned without output."""
    pass


class AssemblyStateError(ExportError):
    """Document assembler used out of order or reused after completion."""
    pass
