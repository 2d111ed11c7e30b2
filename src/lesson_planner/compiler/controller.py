"""
Module: compiler.controller

Purpose:
    Orchestrate an export from records to a PDF file on disk.
    Snapshot → Assemble → Encode (async backend) → Write

Key Functions:
    - export_plans(): Bulk report with cover and table of contents
    - export_plan(): Standalone document for one plan
    - bulk_filename() / single_filename(): Output file names

Key Classes:
    - ExportResult: Complete export result

Nothing is written when layout or the backend fails; the file appears
only once the whole document has been encoded.

Dependencies:
    - compiler.layout: DocumentAssembler
    - compiler.output: ReportLabBackend

Used By:
    - lesson_planner.__main__: CLI
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence

from lesson_planner.core.models import LessonPlan

from .config import CompilerConfig
from .errors import EmptyInputError, ExportError, RenderingBackendError
from .job import ExportJob
from .layout import DocumentAssembler, FontSpec, LayoutResult, MeasureFn
from .output import RenderingBackend, ReportLabBackend

logger = logging.getLogger(__name__)

BULK_FILENAME = "todos-los-planes-de-clase-{date}.pdf"
SINGLE_FILENAME = "plan-clase-{slug}.pdf"

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]+')
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExportResult:
    """
    Complete export result (immutable).

    Attributes:
        pdf_path: Path to the written PDF
        page_count: Number of pages in the document
        layout: Page plans the PDF was encoded from
        metadata: Export metadata dictionary
        warnings: Layout warnings (e.g. table of contents drift)
        metadata_path: Path to the JSON sidecar, if written

    Example:
        >>> result = asyncio.run(export_plans(job, config))
        >>> print(f"Wrote {result.page_count} pages to {result.pdf_path}")
    """
    pdf_path: Path
    page_count: int
    layout: LayoutResult
    metadata: dict
    warnings: tuple[str, ...]
    metadata_path: Optional[Path] = None


async def export_plans(
    job: ExportJob,
    config: CompilerConfig,
    backend: Optional[RenderingBackend] = None,
) -> ExportResult:
    """
    Export every record of a job as one report.

    Pipeline:
    1. Reject empty jobs before any layout
    2. Assemble cover, table of contents and record pages
    3. Encode the document with the backend (vector text)
    4. Write the PDF and, optionally, its metadata

    Args:
        job: Records snapshot and generation date
        config: Export configuration
        backend: Rendering backend (ReportLabBackend if omitted)

    Returns:
        ExportResult with path and metadata

    Raises:
        EmptyInputError: If the job has no records
        RenderingBackendError: If measuring or encoding fails (no file is written)
        ExportError: If the output cannot be written (a PDF without its metadata is removed)

    Example:
        >>> job = ExportJob.from_records(plans, generated_on=date(2026, 10, 19))
        >>> result = asyncio.run(export_plans(job, CompilerConfig(output_dir=Path("out"))))
        >>> result.pdf_path.name
        'todos-los-planes-de-clase-2026-10-19.pdf'
    """
    if not job.records:
        raise EmptyInputError("No lesson plans to export")

    start_time = time.perf_counter()
    backend = backend or _default_backend(config)
    logger.info(f"Starting bulk export of {job.record_count} lesson plans")

    assembler = DocumentAssembler(config.layout, _checked_measure(backend), config.labels)
    layout = assembler.assemble(job)

    data = await _encode(backend, layout)

    pdf_path = _write_pdf(config, bulk_filename(job.generated_on), data)
    metadata = _build_metadata(job.records, job.generated_on, layout, mode="bulk")
    metadata_path = _attach_metadata(pdf_path, metadata) if config.write_metadata else None

    elapsed = time.perf_counter() - start_time
    logger.info(f"Bulk export completed in {elapsed:.2f}s: {pdf_path}")

    return ExportResult(
        pdf_path=pdf_path,
        page_count=layout.page_count,
        layout=layout,
        metadata=metadata,
        warnings=tuple(layout.warnings),
        metadata_path=metadata_path,
    )


async def export_plan(
    record: LessonPlan,
    config: CompilerConfig,
    backend: Optional[RenderingBackend] = None,
    generated_on: Optional[date] = None,
) -> ExportResult:
    """
    Export one record as a standalone document.

    Each page is rasterized in order, then the images are encoded into
    the PDF one per page.

    Args:
        record: Lesson plan to export
        config: Export configuration
        backend: Rendering backend (ReportLabBackend if omitted)
        generated_on: Date printed at the end (today if omitted)

    Returns:
        ExportResult with path and metadata

    Raises:
        RenderingBackendError: If measuring, rasterizing or encoding fails (no file is written)
        ExportError: If the output cannot be written (a PDF without its metadata is removed)
    """
    start_time = time.perf_counter()
    backend = backend or _default_backend(config)
    generated_on = generated_on or date.today()
    logger.info(f"Starting single export of '{record.topic}'")

    assembler = DocumentAssembler(config.layout, _checked_measure(backend), config.labels)
    layout = assembler.assemble_single(record, generated_on)

    # Pages are rasterized sequentially to keep their order
    images: List[bytes] = []
    for page in layout.pages:
        try:
            images.append(await backend.rasterize(page, layout))
        except RenderingBackendError:
            raise
        except Exception as e:
            raise RenderingBackendError(f"Failed to rasterize page {page.number}: {e}") from e
    logger.debug(f"Rasterized {len(images)} page(s)")

    data = await _encode(backend, layout, images)

    pdf_path = _write_pdf(config, single_filename(record.topic), data)
    metadata = _build_metadata((record,), generated_on, layout, mode="single")
    metadata_path = _attach_metadata(pdf_path, metadata) if config.write_metadata else None

    elapsed = time.perf_counter() - start_time
    logger.info(f"Single export completed in {elapsed:.2f}s: {pdf_path}")

    return ExportResult(
        pdf_path=pdf_path,
        page_count=layout.page_count,
        layout=layout,
        metadata=metadata,
        warnings=tuple(layout.warnings),
        metadata_path=metadata_path,
    )


def bulk_filename(generated_on: date) -> str:
    """
    File name of a bulk report.

    Example:
        >>> bulk_filename(date(2026, 10, 19))
        'todos-los-planes-de-clase-2026-10-19.pdf'
    """
    return BULK_FILENAME.format(date=generated_on.isoformat())


def single_filename(topic: str) -> str:
    """
    File name of a single-plan document.

    Whitespace runs become hyphens and the result is lowercased.
    Characters that are invalid in file names are dropped.

    Example:
        >>> single_filename("Fracciones Equivalentes")
        'plan-clase-fracciones-equivalentes.pdf'
    """
    slug = _UNSAFE_CHARS.sub("", topic.strip())
    slug = _WHITESPACE.sub("-", slug).lower()
    return SINGLE_FILENAME.format(slug=slug or "sin-tema")


def _default_backend(config: CompilerConfig) -> ReportLabBackend:
    return ReportLabBackend(dpi=config.raster_dpi, title=config.labels.title)


def _checked_measure(backend: RenderingBackend) -> MeasureFn:
    """Measure function that reports backend failures as RenderingBackendError."""
    def measure(text: str, font: FontSpec) -> float:
        try:
            return backend.measure_text_width(text, font)
        except RenderingBackendError:
            raise
        except Exception as e:
            raise RenderingBackendError(f"Failed to measure text: {e}") from e
    return measure


async def _encode(
    backend: RenderingBackend,
    layout: LayoutResult,
    images: Optional[Sequence[bytes]] = None,
) -> bytes:
    """Encode the document, normalizing any backend failure."""
    try:
        return await backend.encode_document(layout, images=images)
    except RenderingBackendError:
        raise
    except Exception as e:
        raise RenderingBackendError(f"Failed to encode document: {e}") from e


def _write_pdf(config: CompilerConfig, filename: str, data: bytes) -> Path:
    """
    Write PDF bytes into the output directory.

    An existing file gets a numbered sibling unless overwrite is enabled.

    Raises:
        ExportError: If the directory or file cannot be written
    """
    output_dir = Path(config.output_dir)
    path = output_dir / filename
    if path.exists() and not config.overwrite:
        stem, suffix = path.stem, path.suffix
        counter = 1
        while (output_dir / f"{stem} ({counter}){suffix}").exists():
            counter += 1
        path = output_dir / f"{stem} ({counter}){suffix}"

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return path


def _build_metadata(
    records: Sequence[LessonPlan],
    generated_on: date,
    layout: LayoutResult,
    *,
    mode: str,
) -> dict:
    """
    Build metadata dictionary for an exported document.

    Contains:
    - Export mode and dates
    - Page counts
    - Per record: predicted and real start page, and every page it spans

    Args:
        records: Exported records in order
        generated_on: Generation date printed in the document
        layout: Layout result
        mode: "bulk" or "single"

    Returns:
        Metadata dictionary ready for JSON serialization
    """
    from lesson_planner import __version__

    predicted = {entry.record_index: entry.page_number for entry in layout.toc}
    record_details = []
    for index, record in enumerate(records):
        pages = layout.record_pages.get(index, [])
        record_details.append({
            "id": record.id,
            "topic": record.topic,
            "toc_page": predicted.get(index),
            "start_page": pages[0] if pages else None,
            "pages": list(pages),
        })

    return {
        "generated_at": datetime.now().isoformat(),
        "generated_on": generated_on.isoformat(),
        "mode": mode,
        "record_count": len(records),
        "page_count": layout.page_count,
        "front_matter_pages": layout.page_count - sum(len(p) for p in layout.record_pages.values()),
        "records": record_details,
        "warnings": list(layout.warnings),
        "compiler_version": __version__,
    }


def _write_metadata(pdf_path: Path, metadata: dict) -> Path:
    """
    Write metadata JSON next to the PDF.

    Raises:
        ExportError: If writing fails

    Example:
        >>> _write_metadata(Path("out/plan-clase-fracciones.pdf"), metadata)
        # Creates out/plan-clase-fracciones.json
    """
    metadata_path = pdf_path.with_suffix(".json")
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        metadata_path.unlink(missing_ok=True)
        raise ExportError(f"Failed to write metadata: {e}") from e
    return metadata_path


def _attach_metadata(pdf_path: Path, metadata: dict) -> Path:
    """Write the metadata sidecar, removing the PDF if that fails."""
    try:
        return _write_metadata(pdf_path, metadata)
    except ExportError:
        pdf_path.unlink(missing_ok=True)
        raise
