"""Application services orchestrating the grade report workflow."""
from __future__ import annotations

from dataclasses import dataclass

from grade_report.application.dto import ReportResponse
from grade_report.domain.repositories import GradeRecordRepository
from grade_report.domain.services import ReportAggregator


@dataclass(slots=True)
class ReportContext:
    repository: GradeRecordRepository
    aggregator: ReportAggregator


class GenerateReportUseCase:
    def __init__(self, context: ReportContext) -> None:
        self._context = context

    def execute(self) -> ReportResponse:
        records = self._context.repository.list_records()
        report = self._context.aggregator.aggregate(records)
        return ReportResponse(report=report, records=records)
