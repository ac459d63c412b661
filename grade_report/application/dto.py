"""Application-level DTOs for grade reporting."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from grade_report.domain.models import StudentRecord
from grade_report.domain.results import SummaryReport


@dataclass(slots=True, frozen=True)
class ReportResponse:
    report: SummaryReport
    records: Sequence[StudentRecord]

    @property
    def record_count(self) -> int:
        return len(self.records)
