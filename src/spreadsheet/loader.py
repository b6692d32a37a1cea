"""Decode uploaded spreadsheet files into a 2-D array of cells.

CSV files are read with the stdlib csv module; XLSX workbooks with openpyxl
(first worksheet, cached values rather than formulas). Excel date and time
cells are rendered as text the row extractor understands.
"""

import csv
import logging
import zipfile
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from src.extraction.time_parser import to_12_hour
from src.spreadsheet.columns import SpreadsheetError, UnsupportedFileError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")


def _render_time(value: time) -> str:
    return to_12_hour(f"{value.hour:02d}:{value.minute:02d}")


def render_cell(value: Any) -> str:
    """Render an Excel cell value as text.

    Dates become ``YYYY-MM-DD``, times ``H:MM AM/PM``, whole-number floats
    lose their ``.0``, and empty cells become "".
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return f"{value.date().isoformat()} {_render_time(value.time())}"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return _render_time(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_blank(row: list[str]) -> bool:
    return not row or all(not cell.strip() for cell in row)


def load_csv(path: Path) -> list[list[str]]:
    """Read a CSV file, skipping empty lines."""
    with path.open(newline="", encoding="utf-8-sig") as f:
        return [row for row in csv.reader(f) if not _is_blank(row)]


def load_xlsx(path: Path) -> list[list[str]]:
    """Read the first worksheet of an XLSX workbook."""
    workbook = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
    try:
        worksheet = workbook.worksheets[0]
        rows: list[list[str]] = []
        for values in worksheet.iter_rows(values_only=True):
            rows.append([render_cell(value) for value in values])
    finally:
        workbook.close()

    # Trailing blank rows are common in edited workbooks
    while rows and _is_blank(rows[-1]):
        rows.pop()
    return rows


def load_table(path: str | Path) -> list[list[str]]:
    """
    Load a spreadsheet file as rows of text cells.

    Args:
        path: Path to a ``.csv`` or ``.xlsx`` file.

    Returns:
        2-D list of cells, header row first.

    Raises:
        UnsupportedFileError: For any other extension.
        SpreadsheetError: If the file cannot be read.
    """
    path = Path(path)
    extension = path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(
            f"Unsupported file format {extension or '(none)'!r}. "
            f"Please use {', '.join(SUPPORTED_EXTENSIONS)} files."
        )

    try:
        rows = load_csv(path) if extension == ".csv" else load_xlsx(path)
    except (
        OSError,
        UnicodeDecodeError,
        csv.Error,
        zipfile.BadZipFile,
        InvalidFileException,
    ) as e:
        raise SpreadsheetError(f"Failed to read {path.name}: {e}") from e

    logger.debug("Loaded %d rows from %s", len(rows), path.name)
    return rows
