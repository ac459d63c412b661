"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import StudentRecord


class GradeRecordRepository(Protocol):
    """Provides validated grade records parsed from a gradesheet."""

    def list_records(self) -> Sequence[StudentRecord]:
        ...
