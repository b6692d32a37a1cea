"""Tests for CSV and XLSX loading."""

from datetime import date, datetime, time
from pathlib import Path

import openpyxl
import pytest

from src.spreadsheet.columns import SpreadsheetError, UnsupportedFileError
from src.spreadsheet.loader import load_table, render_cell
from src.spreadsheet.rows import process_table


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "jobs.csv"
    path.write_text(
        "Organization,Date,Start Time,End Time\n"
        "\n"
        "Acme Corp,6/24/2025,10:00 AM,11:30 AM\n"
        ",,,\n"
        "\"Globex, Inc.\",June 25th,2:00 PM,3:00 PM\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    path = tmp_path / "jobs.xlsx"
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.append(["Organization", "Date", "Start Time", "End Time", "Attendees"])
    sheet.append(["Acme Corp", datetime(2025, 6, 24), time(14, 30), time(16, 0), 12.0])
    sheet.append([None, None, None, None, None])
    workbook.save(path)
    return path


class TestRenderCell:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            ("Acme", "Acme"),
            (3.0, "3"),
            (2.5, "2.5"),
            (7, "7"),
            (date(2025, 6, 24), "2025-06-24"),
            (datetime(2025, 6, 24), "2025-06-24"),
            (datetime(2025, 6, 24, 9, 5), "2025-06-24 9:05 AM"),
            (time(0, 30), "12:30 AM"),
            (time(12, 0), "12:00 PM"),
            (time(23, 15), "11:15 PM"),
        ],
    )
    def test_render(self, value: object, expected: str) -> None:
        assert render_cell(value) == expected


class TestLoadCsv:
    def test_blank_lines_skipped(self, csv_file: Path) -> None:
        rows = load_table(csv_file)
        assert rows == [
            ["Organization", "Date", "Start Time", "End Time"],
            ["Acme Corp", "6/24/2025", "10:00 AM", "11:30 AM"],
            ["Globex, Inc.", "June 25th", "2:00 PM", "3:00 PM"],
        ]

    def test_byte_order_mark_is_dropped(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.csv"
        path.write_text("Organization\nAcme\n", encoding="utf-8-sig")
        assert load_table(path)[0] == ["Organization"]

    def test_extension_is_case_insensitive(self, tmp_path: Path) -> None:
        path = tmp_path / "JOBS.CSV"
        path.write_text("Client\nAcme\n", encoding="utf-8")
        assert load_table(str(path)) == [["Client"], ["Acme"]]

    def test_end_to_end(self, csv_file: Path) -> None:
        result = process_table(load_table(csv_file))
        assert [r.job_name for r in result.records] == ["Acme Corp", "Globex, Inc."]
        assert result.records[1].time == "2:00 PM - 3:00 PM"


class TestLoadXlsx:
    def test_cells_are_rendered(self, xlsx_file: Path) -> None:
        rows = load_table(xlsx_file)
        assert rows == [
            ["Organization", "Date", "Start Time", "End Time", "Attendees"],
            ["Acme Corp", "2025-06-24", "2:30 PM", "4:00 PM", "12"],
        ]

    def test_end_to_end(self, xlsx_file: Path) -> None:
        result = process_table(load_table(xlsx_file))
        assert len(result.records) == 1
        record = result.records[0]
        assert record.date == "2025-06-24"
        assert record.time == "2:30 PM - 4:00 PM"


class TestLoadErrors:
    @pytest.mark.parametrize("name", ["jobs.txt", "jobs.xls", "jobs"])
    def test_unsupported_extension(self, tmp_path: Path, name: str) -> None:
        path = tmp_path / name
        path.write_text("Organization\nAcme\n")
        with pytest.raises(UnsupportedFileError, match="Unsupported file format"):
            load_table(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpreadsheetError, match="missing.csv"):
            load_table(tmp_path / "missing.csv")

    def test_corrupt_workbook(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"this is not a zip archive")
        with pytest.raises(SpreadsheetError):
            load_table(path)

    def test_unsupported_is_a_spreadsheet_error(self) -> None:
        assert issubclass(UnsupportedFileError, SpreadsheetError)
