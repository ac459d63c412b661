"""Concurrent grade aggregation and reporting toolkit."""
from grade_report.application.use_cases import GenerateReportUseCase, ReportContext
from grade_report.domain.services import ReportAggregator
from grade_report.infrastructure.repositories.excel_repositories import (
    ExcelGradeRepository,
    RemoteGradeRepository,
)

__all__ = [
    "GenerateReportUseCase",
    "ReportContext",
    "ReportAggregator",
    "ExcelGradeRepository",
    "RemoteGradeRepository",
]
