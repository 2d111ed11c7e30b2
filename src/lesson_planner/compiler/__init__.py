"""
Lesson plan report compiler.

Pipeline: ExportJob → DocumentAssembler (layout) → RenderingBackend → PDF file

Main entry points:
    - export_plans(): Bulk report with cover and table of contents
    - export_plan(): Standalone document for one plan
"""

from .config import CompilerConfig
from .controller import ExportResult, bulk_filename, export_plan, export_plans, single_filename
from .errors import AssemblyStateError, EmptyInputError, ExportError, RenderingBackendError
from .job import ExportJob

__all__ = [
    "CompilerConfig",
    "ExportJob",
    "ExportResult",
    "export_plans",
    "export_plan",
    "bulk_filename",
    "single_filename",
    "ExportError",
    "EmptyInputError",
    "RenderingBackendError",
    "AssemblyStateError",
]
