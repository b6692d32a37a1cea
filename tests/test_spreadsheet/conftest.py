"""Pytest fixtures for spreadsheet tests."""

import pytest

from src.spreadsheet.columns import ColumnMap, build_column_map


@pytest.fixture
def header() -> list[str]:
    return ["Organization", "Date", "Start Time", "End Time", "Location", "Notes", "Extra"]


@pytest.fixture
def column_map(header: list[str]) -> ColumnMap:
    return build_column_map(header)


@pytest.fixture
def sheet_rows(header: list[str]) -> list[list[str]]:
    """A small table: header, two jobs, a blank row and a row with no key fields."""
    return [
        header,
        ["Acme Corp", "6/24/2025", "10:00 AM", "11:30 AM", "Zoom", "Bring laptop", ""],
        ["", "", "", "", "", "", ""],
        ["Globex", "June 25th", "2:00 PM", "", "Room 5", "", "3:30 PM"],
        ["", "", "", "", "Hall B", "", ""],
    ]
