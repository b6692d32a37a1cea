"""Row-to-record extraction for uploaded spreadsheets.

Converts each data row into a RawRecord using a ColumnMap. Time is
assembled from whichever time columns the sheet has, with time-shaped
values in unmapped columns used to fill gaps; useful unmapped cells are
copied into details.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from src.extraction.config import ExtractionConfig
from src.extraction.schemas import RawRecord
from src.spreadsheet.columns import ColumnMap, SpreadsheetError, build_column_map, cell_text

logger = logging.getLogger(__name__)

_DATE_WORDS = ("date", "day", "today", "tomorrow", "yesterday")

_DATE_PATTERNS = [
    re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}"),
    re.compile(r"\d{1,2}-\d{1,2}-\d{2,4}"),
    re.compile(r"\d{4}-\d{1,2}-\d{1,2}"),
    re.compile(
        r"\b(january|february|march|april|may|june|july|august"
        r"|september|october|november|december)\b"
    ),
    re.compile(r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b"),
    re.compile(r"\b(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b"),
    re.compile(r"\b(mon|tue|wed|thu|fri|sat|sun)\b"),
]

# "am"/"pm" as a token, so "team" or "camp" do not count
_PERIOD_TOKEN = re.compile(r"(?<![a-z])[ap]\.?m\.?(?![a-z])", re.IGNORECASE)
_CLOCK = re.compile(r"\d{1,2}:\d{2}")

_USEFUL_INFO = re.compile(r"meeting|zoom|teams|rate|contact|phone|email|\$\d+", re.IGNORECASE)


def is_date_value(value: str) -> bool:
    """True when a cell value looks like a date rather than a time."""
    if not value:
        return False
    lowered = value.lower().strip()
    if any(word in lowered for word in _DATE_WORDS):
        return True
    return any(pattern.search(lowered) for pattern in _DATE_PATTERNS)


def is_time_value(value: str) -> bool:
    """True when a cell value looks like a clock time and not a date."""
    if not value:
        return False
    if not (_PERIOD_TOKEN.search(value) or _CLOCK.search(value)):
        return False
    return not is_date_value(value)


def _mapped(row: list[Any], column_map: ColumnMap, name: str) -> str | None:
    index = column_map.get(name)
    if index is None:
        return None
    return cell_text(row[index]) if index < len(row) else ""


def _time_cell(row: list[Any], column_map: ColumnMap, name: str) -> str:
    """A mapped time cell, treated as blank when it holds a date."""
    value = _mapped(row, column_map, name) or ""
    return "" if is_date_value(value) else value


def _assemble_time(row: list[Any], column_map: ColumnMap) -> str:
    time_range = _mapped(row, column_map, "timeRange") or ""
    start = _time_cell(row, column_map, "startTime")
    end = _time_cell(row, column_map, "endTime")
    generic = _time_cell(row, column_map, "time")

    captured = {time_range, start, end, generic}
    claimed = column_map.claimed
    extras = [
        value
        for index, value in ((i, cell_text(c)) for i, c in enumerate(row))
        if index not in claimed and value not in captured and is_time_value(value)
    ]

    if time_range:
        result = time_range
    elif start and end:
        result = f"{start} - {end}"
    elif start:
        result = start
        if extras:
            result += f" - {extras.pop(0)}"
    elif end:
        result = f"End: {end}"
    else:
        result = generic

    if extras:
        if result:
            result += f" ({', '.join(extras)})"
        else:
            result = " - ".join(extras)

    return result


def _assemble_details(
    row: list[Any], column_map: ColumnMap, min_length: int,
) -> str | None:
    parts: list[str] = []

    mapped = _mapped(row, column_map, "details")
    if mapped:
        parts.append(mapped)

    claimed = column_map.claimed
    for index, cell in enumerate(row):
        if index in claimed:
            continue
        value = cell_text(cell)
        if len(value) > min_length and _USEFUL_INFO.search(value):
            parts.append(value)

    return "\n\n".join(parts) if parts else None


def extract_row(
    row: list[Any],
    column_map: ColumnMap,
    config: ExtractionConfig | None = None,
) -> RawRecord | None:
    """
    Convert one data row into a RawRecord.

    Time precedence: a combined time-range column; start and end columns
    joined as "start - end"; start alone plus the first time-shaped value
    from an unmapped column; "End: <end>"; a generic time column. Any other
    time-shaped unmapped values are appended in parentheses.

    Args:
        row: Cells of one data row.
        column_map: Mapping built from the header row.
        config: Extraction configuration (for the details cell threshold).

    Returns:
        RawRecord, or None when the row is blank or yields no job name,
        date or time.
    """
    if not row or all(not cell_text(cell) for cell in row):
        return None

    min_length = (config or ExtractionConfig()).useful_cell_min_length

    time = _assemble_time(row, column_map)
    record = RawRecord(
        date=_mapped(row, column_map, "date"),
        time=time or None,
        job_name=_mapped(row, column_map, "jobName"),
        location=_mapped(row, column_map, "location"),
        details=_assemble_details(row, column_map, min_length),
    )

    if not (record.job_name or record.date or record.time):
        return None
    return record


@dataclass
class SheetResult:
    """Outcome of processing one table.

    Attributes:
        records: One RawRecord per kept row, in row order.
        skipped: Data rows that were blank or had no job name, date or time.
        total: Data rows examined (header excluded).
    """

    records: list[RawRecord] = field(default_factory=list)
    skipped: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "events": [record.to_dict() for record in self.records],
            "skipped": self.skipped,
            "totalCount": len(self.records),
        }


def process_table(
    rows: list[list[Any]],
    config: ExtractionConfig | None = None,
) -> SheetResult:
    """
    Extract records from a whole table whose first row is the header.

    Args:
        rows: 2-D array of cells.
        config: Extraction configuration.

    Returns:
        SheetResult with the kept records and row counts.

    Raises:
        SpreadsheetError: If there are fewer than two rows or the header
            row is empty.
    """
    if not rows or len(rows) < 2:
        raise SpreadsheetError("File appears to be empty or has no data rows")

    config = config or ExtractionConfig()
    column_map = build_column_map(rows[0])

    result = SheetResult(total=len(rows) - 1)
    for row in rows[1:]:
        record = extract_row(row, column_map, config)
        if record is None:
            result.skipped += 1
        else:
            result.records.append(record)

    logger.info(
        "Processed %d rows: %d records, %d skipped",
        result.total, len(result.records), result.skipped,
    )
    return result
