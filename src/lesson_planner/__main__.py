"""
Command line entry point.

Usage:
    python -m lesson_planner export records.json --out output/
    python -m lesson_planner export records.json --out output/ --id 42
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from lesson_planner import __version__
from lesson_planner.compiler import (
    CompilerConfig,
    ExportError,
    ExportJob,
    export_plan,
    export_plans,
)
from lesson_planner.compiler.loading import LoaderError, find_plan, load_plans

logger = logging.getLogger("lesson_planner")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lesson_planner",
        description="Compile lesson plans into paginated PDF reports",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Export a record snapshot to PDF")
    export.add_argument("snapshot", type=Path, help="JSON snapshot of the record store")
    export.add_argument("--out", type=Path, default=Path("output"), help="Output directory")
    export.add_argument("--id", dest="plan_id", help="Export only the plan with this id")
    export.add_argument("--date", type=_parse_date, help="Generation date (default: today)")
    export.add_argument("--no-metadata", action="store_true", help="Skip the JSON sidecar")
    export.add_argument("--overwrite", action="store_true", help="Replace an existing PDF")
    export.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = CompilerConfig(
        output_dir=args.out,
        write_metadata=not args.no_metadata,
        overwrite=args.overwrite,
    )

    try:
        plans = load_plans(args.snapshot)
        if args.plan_id is not None:
            plan = find_plan(plans, args.plan_id)
            result = asyncio.run(export_plan(plan, config, generated_on=args.date))
        else:
            job = ExportJob.from_records(plans, generated_on=args.date)
            result = asyncio.run(export_plans(job, config))
    except (ExportError, LoaderError) as e:
        logger.error(str(e))
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    print(f"{result.pdf_path} ({result.page_count} pages)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
