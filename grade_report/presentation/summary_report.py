"""Renderers for the grade summary report."""
from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Mapping, Sequence

from grade_report.config import SETTINGS
from grade_report.domain.models import QUANTITIES, StudentRecord
from grade_report.domain.results import SummaryReport


def ordinal(rank: int) -> str:
    return {1: "1st", 2: "2nd", 3: "3rd"}.get(rank, f"{rank}th")


def _percent(value: float, max_mark: float) -> float:
    return (value / max_mark) * 100


def render_text(
    report: SummaryReport,
    record_count: int,
    max_marks: Mapping[str, float] | None = None,
    cohort: str | None = None,
    top_n: int | None = None,
) -> str:
    max_marks = max_marks or SETTINGS.max_marks
    cohort = cohort or SETTINGS.cohort_filter.cohort
    top_n = SETTINGS.top_n if top_n is None else top_n
    lines = [
        "========== GRADE ANALYSIS REPORT ==========",
        f"Total Records Processed: {record_count}",
        "",
        "=== DISCREPANCIES ===",
    ]

    if not report.discrepancies:
        lines.append("No discrepancies found.")
    else:
        lines.append(f"Found {len(report.discrepancies)} discrepancies:")
        for idx, record in enumerate(report.discrepancies, start=1):
            lines.append(f"{idx}. Emplid: {record.student_id}, Name: {record.name}")
            lines.append(
                f"   Given Total: {record.total_given:.2f}, Computed Total: {record.total_computed:.2f}, "
                f"Difference: {record.difference:.2f}"
            )
    lines.append("")

    lines.append("=== GENERAL AVERAGES ===")
    for quantity, average in report.general_averages.items():
        max_mark = max_marks[quantity]
        lines.append(f"{quantity}: {average:.2f} / {max_mark:.0f} ({_percent(average, max_mark):.2f}%)")
    lines.append("")

    total_max = max_marks["Total"]
    lines.append(f"=== BRANCH-WISE AVERAGES ({cohort} Single Degree) ===")
    if not report.branch_averages:
        lines.append("No branch data available.")
    else:
        for branch in sorted(report.branch_averages):
            average = report.branch_averages[branch]
            lines.append(f"{branch}: {average:.2f} / {total_max:.0f} ({_percent(average, total_max):.2f}%)")
    lines.append("")

    lines.append(f"=== TOP {top_n} STUDENTS BY COMPONENT ===")
    for quantity in QUANTITIES:
        lines.append(f"--- {quantity} ---")
        toppers = report.component_toppers.get(quantity, ())
        if not toppers:
            lines.append("No data available.")
            continue
        max_mark = max_marks[quantity]
        for topper in toppers:
            lines.append(
                f"{ordinal(topper.rank)}: {topper.name} ({topper.student_id}) - "
                f"{topper.marks:.2f} / {max_mark:.0f} ({_percent(topper.marks, max_mark):.2f}%)"
            )
        lines.append("")

    return "\n".join(lines)


def record_to_dict(record: StudentRecord) -> dict[str, object]:
    return {
        "Emplid": record.student_id,
        "Name": record.name,
        "Branch": record.branch,
        "Batch": record.batch,
        "ClassNo": record.class_no,
        "Quiz": record.quiz,
        "MidSem": record.mid_sem,
        "LabTest": record.lab_test,
        "WeeklyLabs": record.weekly_labs,
        "PreCompre": record.pre_compre,
        "Compre": record.compre,
        "TotalGiven": record.total_given,
        "TotalComputed": record.total_computed,
        "HasDiscrepancy": record.has_discrepancy,
    }


def report_to_dict(report: SummaryReport) -> dict[str, object]:
    payload: dict[str, object] = {
        "generalAverages": dict(report.general_averages),
        "branchAverages": dict(report.branch_averages),
        "componentToppers": {
            quantity: [
                {"Emplid": r.student_id, "Name": r.name, "Marks": r.marks, "Rank": r.rank}
                for r in ranks
            ]
            for quantity, ranks in report.component_toppers.items()
        },
    }
    if report.discrepancies:
        payload["discrepancies"] = [record_to_dict(record) for record in report.discrepancies]
    return payload


def render_json(report: SummaryReport) -> str:
    return json.dumps(report_to_dict(report), indent=2)


def export_json(report: SummaryReport, path: Path | None = None) -> Path:
    target = Path(path or SETTINGS.export_path)
    target.write_text(render_json(report), encoding="utf-8")
    return target


def discrepancies_to_rows(discrepancies: Sequence[StudentRecord]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for record in discrepancies:
        rows.append(
            {
                "emplid": record.student_id,
                "name": record.name,
                "branch": record.branch,
                "class_no": record.class_no,
                "total_given": f"{record.total_given:.2f}",
                "total_computed": f"{record.total_computed:.2f}",
                "difference": f"{record.difference:.2f}",
            }
        )
    return rows


def render_csv(discrepancies: Sequence[StudentRecord]) -> bytes:
    rows = discrepancies_to_rows(discrepancies)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")
