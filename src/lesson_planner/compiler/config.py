"""
Module: compiler.config

Purpose:
    Configuration dataclass for the export pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - CompilerConfig: Output location, layout and backend settings

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - compiler.controller: Export pipeline
    - lesson_planner.__main__: CLI
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .layout import DocumentLabels, LayoutConfig


@dataclass(frozen=True)
class CompilerConfig:
    """
    Configuration for exporting reports (immutable).

    Attributes:
        output_dir: Directory receiving the PDF (created if missing)
        layout: Page geometry and text styles
        labels: Report strings
        raster_dpi: Resolution of image-mode (single plan) pages
        write_metadata: Whether to write a JSON sidecar next to the PDF
        overwrite: Replace an existing file instead of adding a suffix

    Example:
        >>> config = CompilerConfig(output_dir=Path("output"))
        >>> config.layout.content_width
        170.0
    """

    output_dir: Path = Path("output")
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    labels: DocumentLabels = field(default_factory=DocumentLabels)
    raster_dpi: int = 150
    write_metadata: bool = True
    overwrite: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not (36 <= self.raster_dpi <= 600):
            raise ValueError(f"raster_dpi must be 36-600: {self.raster_dpi}")
