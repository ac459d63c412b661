"""Excel-backed repositories for grade records."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Sequence

from grade_report.domain.models import StudentRecord
from grade_report.domain.repositories import GradeRecordRepository
from grade_report.infrastructure.fetching import fetch_workbook
from grade_report.infrastructure.parsing.gradesheet import gradesheet_to_records
from grade_report.infrastructure.parsing.utils import ensure_bytes


class ExcelGradeRepository(GradeRecordRepository):
    def __init__(self, source: BytesIO | Path | bytes, class_filter: str | None = None) -> None:
        self._source = ensure_bytes(source)
        self._class_filter = class_filter

    def list_records(self) -> Sequence[StudentRecord]:
        return gradesheet_to_records(BytesIO(self._source), class_filter=self._class_filter)


class RemoteGradeRepository(GradeRecordRepository):
    def __init__(
        self,
        url: str,
        class_filter: str | None = None,
        fetcher: Callable[[str], bytes] = fetch_workbook,
    ) -> None:
        self._url = url
        self._class_filter = class_filter
        self._fetcher = fetcher

    def list_records(self) -> Sequence[StudentRecord]:
        payload = self._fetcher(self._url)
        return gradesheet_to_records(BytesIO(payload), class_filter=self._class_filter)
