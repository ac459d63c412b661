"""Central configuration for the grade report package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from grade_report.domain.models import CohortFilter

# Cohort heuristics are free-text matches on the batch and branch labels.
TARGET_COHORT = os.getenv("GRADE_REPORT_COHORT", "2024")
JOINT_BRANCH_SEPARATORS = ("&", "+")

MAX_MARKS = {
    "Quiz": 30.0,
    "MidSem": 75.0,
    "LabTest": 60.0,
    "WeeklyLabs": 30.0,
    "PreCompre": 195.0,
    "Compre": 105.0,
    "Total": 300.0,
}

EXPORT_PATH = Path(os.getenv("GRADE_REPORT_EXPORT", "grade_report.json"))


@dataclass(slots=True, frozen=True)
class Settings:
    cohort_filter: CohortFilter
    top_n: int
    max_marks: dict[str, float]
    fetch_timeout: float
    export_path: Path


SETTINGS = Settings(
    cohort_filter=CohortFilter(cohort=TARGET_COHORT, joint_separators=JOINT_BRANCH_SEPARATORS),
    top_n=3,
    max_marks=dict(MAX_MARKS),
    fetch_timeout=30.0,
    export_path=EXPORT_PATH,
)
