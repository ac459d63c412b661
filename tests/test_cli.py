import json
from pathlib import Path

from grade_report.cli import main

from tests.helpers import write_gradesheet


def test_cli_prints_report_and_exports_json(tmp_path: Path, capsys):
    source = write_gradesheet(
        tmp_path / "grades.xlsx",
        [
            [1, "Asha", "CS", "2024", "1001", 20, 50, 40, 20, 100, 60, 295],
            [2, "Ravi", "EEE", "2024", "1001", 25, 60, 45, 25, 120, 70, 345],
            [3, "Mina", "CS", "2024", "1002", 10, 10, 10, 10, 10, 10, 60],
        ],
    )
    output = tmp_path / "report.json"

    code = main([str(source), "--export", "json", "--output", str(output), "--class", "1001"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Total Records Processed: 2" in out
    assert "Difference: 5.00" in out
    assert f"Report exported to {output}" in out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["branchAverages"] == {"CS": 295, "EEE": 345}


def test_cli_cohort_override(tmp_path: Path, capsys):
    source = write_gradesheet(
        tmp_path / "grades.xlsx",
        [[1, "Asha", "MECH", "2023 batch", "1001", 1, 1, 1, 1, 1, 1, 6]],
    )

    code = main([str(source), "--cohort", "2023"])

    assert code == 0
    out = capsys.readouterr().out
    assert "=== BRANCH-WISE AVERAGES (2023 Single Degree) ===" in out
    assert "MECH: 6.00 / 300" in out


def test_cli_missing_file(tmp_path: Path):
    assert main([str(tmp_path / "nope.xlsx")]) == 1


def test_cli_no_valid_records(tmp_path: Path):
    source = write_gradesheet(tmp_path / "empty.xlsx", [])

    assert main([str(source)]) == 1


def test_cli_unreadable_source(tmp_path: Path, caplog):
    source = tmp_path / "dir.xlsx"
    source.mkdir()

    assert main([str(source)]) == 1
    assert "Error processing" in caplog.text


def test_cli_export_failure_is_logged(tmp_path: Path, capsys, caplog):
    source = write_gradesheet(
        tmp_path / "grades.xlsx",
        [[1, "Asha", "CS", "2024", "1001", 1, 1, 1, 1, 1, 1, 6]],
    )
    output = tmp_path / "missing-dir" / "report.json"

    code = main([str(source), "--export", "json", "--output", str(output)])

    assert code == 0
    out = capsys.readouterr().out
    assert "Total Records Processed: 1" in out
    assert "Report exported" not in out
    assert not output.exists()
    assert "Error writing JSON file" in caplog.text
