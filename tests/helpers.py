from __future__ import annotations

from pathlib import Path

import pandas as pd

from grade_report.domain.models import StudentRecord


def make_record(
    student_id: str,
    quiz: float = 0.0,
    mid_sem: float = 0.0,
    lab_test: float = 0.0,
    weekly_labs: float = 0.0,
    pre_compre: float = 0.0,
    compre: float = 0.0,
    total: float | None = None,
    branch: str = "CS",
    batch: str = "2024 Batch",
    class_no: str = "1001",
    name: str | None = None,
) -> StudentRecord:
    if total is None:
        total = quiz + mid_sem + lab_test + weekly_labs + pre_compre + compre
    return StudentRecord(
        student_id=student_id,
        name=name or f"Student {student_id}",
        branch=branch,
        batch=batch,
        class_no=class_no,
        quiz=quiz,
        mid_sem=mid_sem,
        lab_test=lab_test,
        weekly_labs=weekly_labs,
        pre_compre=pre_compre,
        compre=compre,
        total_given=total,
    )


HEADER = [
    "Emplid", "Name", "Branch", "Batch", "Class", "Quiz", "MidSem",
    "LabTest", "WeeklyLabs", "PreCompre", "Compre", "Total",
]


def write_gradesheet(path: Path, rows: list[list[object]], title: str | None = "Grade Sheet") -> Path:
    body: list[list[object]] = []
    if title is not None:
        body.append([title] + [None] * (len(HEADER) - 1))
    body.append(list(HEADER))
    body.extend(rows)
    pd.DataFrame(body).to_excel(path, header=False, index=False, engine="openpyxl")
    return path
