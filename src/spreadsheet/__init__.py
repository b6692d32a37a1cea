"""Spreadsheet uploads: column mapping and row-to-record extraction.

Usage:
    from src.spreadsheet import load_table, process_table

    result = process_table(load_table("jobs.xlsx"))
    for record in result.records:
        ...
"""

from src.spreadsheet.columns import (
    FIELD_KEYWORDS,
    ColumnMap,
    SpreadsheetError,
    UnsupportedFileError,
    build_column_map,
)
from src.spreadsheet.loader import load_table
from src.spreadsheet.rows import SheetResult, extract_row, is_date_value, process_table

__all__ = [
    "FIELD_KEYWORDS",
    "ColumnMap",
    "SheetResult",
    "SpreadsheetError",
    "UnsupportedFileError",
    "build_column_map",
    "extract_row",
    "is_date_value",
    "load_table",
    "process_table",
]
