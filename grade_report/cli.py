"""Command-line entrypoint for grade analysis."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from grade_report.application.use_cases import ReportContext, GenerateReportUseCase
from grade_report.config import SETTINGS
from grade_report.domain.repositories import GradeRecordRepository
from grade_report.domain.services import ReportAggregator
from grade_report.errors import GradeReportError
from grade_report.infrastructure.fetching import is_remote
from grade_report.infrastructure.repositories.excel_repositories import (
    ExcelGradeRepository,
    RemoteGradeRepository,
)
from grade_report.presentation.summary_report import export_json, render_text

logger = logging.getLogger("grade_report")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise a gradesheet: averages, toppers and total discrepancies")
    parser.add_argument("source", type=str, help="Path to an Excel gradesheet, or an http(s) / Google Sheets URL")
    parser.add_argument("--export", choices=["json"], help="Export format")
    parser.add_argument("--class", dest="class_filter", type=str, default=None, help="Only include this class number")
    parser.add_argument("--output", type=Path, default=None, help="Export destination (default: grade_report.json)")
    parser.add_argument("--cohort", type=str, default=None, help="Batch substring used for branch averages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_repository(source: str, class_filter: str | None) -> GradeRecordRepository:
    if is_remote(source):
        return RemoteGradeRepository(source, class_filter=class_filter)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found at {source}")
    return ExcelGradeRepository(path, class_filter=class_filter)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cohort_filter = SETTINGS.cohort_filter
    if args.cohort:
        cohort_filter = replace(cohort_filter, cohort=args.cohort)

    try:
        repository = build_repository(args.source, args.class_filter)
        context = ReportContext(
            repository=repository,
            aggregator=ReportAggregator(cohort_filter=cohort_filter, top_n=SETTINGS.top_n),
        )
        response = GenerateReportUseCase(context).execute()
    except (OSError, GradeReportError) as exc:
        logger.error("Error processing %s: %s", args.source, exc)
        return 1

    print(render_text(response.report, response.record_count, cohort=cohort_filter.cohort, top_n=SETTINGS.top_n))

    if args.export == "json":
        try:
            target = export_json(response.report, args.output)
        except OSError as exc:
            logger.error("Error writing JSON file: %s", exc)
        else:
            print(f"Report exported to {target}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
