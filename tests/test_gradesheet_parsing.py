import logging
from pathlib import Path

import pytest

from grade_report.errors import GradesheetError, NoRecordsError
from grade_report.infrastructure.parsing.gradesheet import (
    find_data_start,
    gradesheet_to_records,
    rows_to_records,
)
from grade_report.infrastructure.parsing.utils import ensure_bytes, is_numeric, parse_mark
from grade_report.infrastructure.repositories.excel_repositories import (
    ExcelGradeRepository,
    RemoteGradeRepository,
)

from tests.helpers import HEADER, write_gradesheet


def row(emplid, quiz="10", total="60", class_no="1001", branch="CS", batch="2024"):
    return [emplid, f"Name {emplid}", branch, batch, class_no, quiz, "10", "10", "10", "10", "10", total]


def test_parse_mark_treats_blank_as_zero():
    assert parse_mark("") == 0.0
    assert parse_mark("  ") == 0.0
    assert parse_mark(None) == 0.0
    assert parse_mark(" 12.5 ") == 12.5
    with pytest.raises(ValueError):
        parse_mark("abs")


def test_is_numeric():
    assert is_numeric("41220240001")
    assert is_numeric(" 3.5")
    assert not is_numeric("Emplid")
    assert not is_numeric("")


def test_ensure_bytes_rejects_unknown_source():
    with pytest.raises(TypeError):
        ensure_bytes("not-a-path-object")  # type: ignore[arg-type]


def test_find_data_start_skips_headers():
    rows = [["Grade Sheet"], HEADER, row("1001"), row("1002")]
    assert find_data_start(rows) == 2


def test_find_data_start_defaults_to_first_row():
    assert find_data_start([["x"], ["y"]]) == 0


def test_rows_to_records_computes_totals():
    records = rows_to_records([HEADER, row("1", quiz="10", total="60"), row("2", quiz="15", total="70")])

    assert [r.student_id for r in records] == ["1", "2"]
    assert records[0].total_computed == pytest.approx(60)
    assert not records[0].has_discrepancy
    assert records[1].total_computed == pytest.approx(65)
    assert records[1].has_discrepancy


def test_rows_to_records_skips_bad_rows(caplog):
    rows = [
        HEADER,
        row("1"),
        row("2", quiz="absent"),
        ["3", "Short row"],
        row(""),
        row("4", quiz=""),
    ]

    with caplog.at_level(logging.WARNING):
        records = rows_to_records(rows)

    assert [r.student_id for r in records] == ["1", "4"]
    assert records[1].quiz == 0.0
    assert "Skipping row 3 - invalid Quiz mark" in caplog.text


def test_rows_to_records_class_filter():
    rows = [row("1", class_no="1001"), row("2", class_no="1002"), row("3", class_no="1001")]

    records = rows_to_records(rows, class_filter="1001")

    assert [r.student_id for r in records] == ["1", "3"]


def test_rows_to_records_raises_when_nothing_survives():
    with pytest.raises(NoRecordsError, match="no valid records"):
        rows_to_records([HEADER, row("1", class_no="1001")], class_filter="9999")


def test_gradesheet_to_records_reads_first_sheet(tmp_path: Path):
    path = write_gradesheet(
        tmp_path / "grades.xlsx",
        [
            [41220240001, "Asha", "CS", "2024", "1001", 20, 50, 40, 20, 100, 60, 290],
            [41220240002, "Ravi", "CS & ECE", "2024", "1002", 25, 60, 45, 25, 120, 70, 350],
        ],
    )

    records = gradesheet_to_records(path)

    assert [r.student_id for r in records] == ["41220240001", "41220240002"]
    assert records[0].name == "Asha"
    assert records[0].quiz == pytest.approx(20)
    assert records[1].total_given == pytest.approx(350)
    assert records[1].has_discrepancy


def test_gradesheet_to_records_rejects_non_workbook():
    with pytest.raises(GradesheetError):
        gradesheet_to_records(b"definitely not a workbook")


def test_excel_repository_applies_class_filter(tmp_path: Path):
    path = write_gradesheet(
        tmp_path / "grades.xlsx",
        [
            [1, "A", "CS", "2024", "1001", 1, 1, 1, 1, 1, 1, 6],
            [2, "B", "CS", "2024", "1002", 2, 2, 2, 2, 2, 2, 12],
        ],
        title=None,
    )

    repository = ExcelGradeRepository(path, class_filter="1002")

    assert [r.student_id for r in repository.list_records()] == ["2"]


def test_remote_repository_uses_fetcher(tmp_path: Path):
    path = write_gradesheet(
        tmp_path / "grades.xlsx",
        [[7, "G", "EEE", "2024", "1001", 3, 3, 3, 3, 3, 3, 18]],
    )
    seen = []

    def fetcher(url: str) -> bytes:
        seen.append(url)
        return path.read_bytes()

    repository = RemoteGradeRepository("https://example.com/grades.xlsx", fetcher=fetcher)

    records = repository.list_records()

    assert seen == ["https://example.com/grades.xlsx"]
    assert records[0].branch == "EEE"
