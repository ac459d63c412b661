"""Gradesheet Excel parser producing canonical student records."""
from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from grade_report.domain.models import StudentRecord
from grade_report.errors import GradesheetError, NoRecordsError
from grade_report.infrastructure.parsing.utils import clean_cell, ensure_bytes, is_numeric, parse_mark

logger = logging.getLogger(__name__)

EMPLID_COL = 0
NAME_COL = 1
BRANCH_COL = 2
BATCH_COL = 3
CLASS_NO_COL = 4
QUIZ_COL = 5
MID_SEM_COL = 6
LAB_TEST_COL = 7
WEEKLY_LABS_COL = 8
PRE_COMPRE_COL = 9
COMPRE_COL = 10
TOTAL_COL = 11

MARK_COLUMNS = (
    ("quiz", "Quiz", QUIZ_COL),
    ("mid_sem", "MidSem", MID_SEM_COL),
    ("lab_test", "LabTest", LAB_TEST_COL),
    ("weekly_labs", "WeeklyLabs", WEEKLY_LABS_COL),
    ("pre_compre", "PreCompre", PRE_COMPRE_COL),
    ("compre", "Compre", COMPRE_COL),
    ("total_given", "Total", TOTAL_COL),
)


def read_gradesheet_raw(source: BytesIO | Path) -> pd.DataFrame:
    try:
        xls = pd.ExcelFile(source, engine="openpyxl")
    except (InvalidFileException, zipfile.BadZipFile, ValueError) as exc:
        raise GradesheetError(f"failed to open workbook: {exc}") from exc
    if not xls.sheet_names:
        raise GradesheetError("no sheets found in the Excel file")
    return pd.read_excel(
        xls,
        sheet_name=xls.sheet_names[0],
        header=None,
        dtype=str,
        keep_default_na=False,
    )


def find_data_start(rows: Sequence[Sequence[object]]) -> int:
    """Index of the first row whose id cell is numeric, or 0 if none is."""
    for idx, row in enumerate(rows):
        if len(row) > EMPLID_COL and is_numeric(row[EMPLID_COL]):
            return idx
    return 0


def parse_student_row(row: Sequence[object]) -> StudentRecord:
    marks: dict[str, float] = {}
    for attr, label, col in MARK_COLUMNS:
        try:
            marks[attr] = parse_mark(row[col])
        except ValueError as exc:
            raise ValueError(f"invalid {label} mark: {exc}") from exc
    return StudentRecord(
        student_id=clean_cell(row[EMPLID_COL]),
        name=clean_cell(row[NAME_COL]),
        branch=clean_cell(row[BRANCH_COL]),
        batch=clean_cell(row[BATCH_COL]),
        class_no=clean_cell(row[CLASS_NO_COL]),
        **marks,
    )


def _trim_trailing_blanks(row: Sequence[object]) -> list[object]:
    cells = list(row)
    while cells and not clean_cell(cells[-1]):
        cells.pop()
    return cells


def rows_to_records(rows: Iterable[Sequence[object]], class_filter: str | None = None) -> list[StudentRecord]:
    # The sheet is read as a rectangle; trim padding so short rows stay short.
    rows = [_trim_trailing_blanks(row) for row in rows]
    start = find_data_start(rows)

    records: list[StudentRecord] = []
    for idx in range(start, len(rows)):
        row = rows[idx]
        if len(row) <= TOTAL_COL or not clean_cell(row[EMPLID_COL]):
            continue
        try:
            record = parse_student_row(row)
        except ValueError as exc:
            logger.warning("Skipping row %d - %s", idx + 1, exc)
            continue
        if class_filter and record.class_no != class_filter:
            continue
        records.append(record)

    if not records:
        raise NoRecordsError("no valid records found in the file")
    return records


def gradesheet_to_records(source: BytesIO | Path | bytes, class_filter: str | None = None) -> Sequence[StudentRecord]:
    raw_bytes = ensure_bytes(source)
    dataframe = read_gradesheet_raw(BytesIO(raw_bytes))
    records = rows_to_records(dataframe.itertuples(index=False, name=None), class_filter=class_filter)
    logger.info("Parsed %d records from gradesheet", len(records))
    return records
