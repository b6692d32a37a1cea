"""Header-to-field mapping for uploaded spreadsheets.

Each header cell is lower-cased, trimmed and tested against fixed keyword
lists per canonical field. Substring matching is loose:
"Event Start Time" and "start" both map to ``startTime``; a header that
contains "date" never maps to a time field, and a header that looks like a
time column never maps to ``date``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

logger = logging.getLogger(__name__)


class SpreadsheetError(ValueError):
    """Raised when an uploaded table cannot be processed at all."""

    pass


class UnsupportedFileError(SpreadsheetError):
    """Raised for a file extension the loader cannot decode."""

    pass


# Canonical field -> header keywords. Field order is the matching order.
FIELD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "jobName": (
        "organization", "customer", "client", "company",
        "job title", "event", "title", "subject",
    ),
    "date": (
        "date", "event date", "scheduled date", "day", "when",
        "begin date", "start date",
    ),
    "startTime": (
        "start time", "begin time", "scheduled start",
        "captioner connection time", "start", "begin",
    ),
    "endTime": ("end time", "finish time", "scheduled end", "end", "finish"),
    "timeRange": ("time range", "times", "schedule time", "event time"),
    "time": ("time", "scheduled time"),
    "location": ("location", "venue", "address", "platform", "meeting platform"),
    "details": (
        "details", "description", "notes", "job description",
        "meeting info", "special instructions", "comments",
    ),
}

TIME_FIELDS = frozenset({"startTime", "endTime", "timeRange", "time"})


def cell_text(value: Any) -> str:
    """Render a cell as trimmed text; empty cells become ""."""
    if value is None:
        return ""
    return str(value).strip()


@dataclass
class ColumnMap:
    """
    Canonical field name -> zero-based column index for one header row.

    Each field maps to at most one column. Built once per file and
    discarded after the file is processed.
    """

    indices: dict[str, int] = field(default_factory=dict)

    def get(self, name: str) -> int | None:
        return self.indices.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.indices

    def __iter__(self) -> Iterator[str]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def claimed(self) -> frozenset[int]:
        """Column indices used by any field."""
        return frozenset(self.indices.values())

    def to_dict(self) -> dict[str, int]:
        return dict(self.indices)


def _excluded(field_name: str, header: str) -> bool:
    is_date_column = "date" in header
    if is_date_column and field_name in TIME_FIELDS:
        return True
    if field_name == "date" and not is_date_column:
        return "time" in header or "am" in header or "pm" in header
    return False


def build_column_map(header_row: list[Any]) -> ColumnMap:
    """
    Map header cells to canonical fields.

    Args:
        header_row: First row of the table.

    Returns:
        ColumnMap where the first matching header wins for each field.

    Raises:
        SpreadsheetError: If the header row has no non-blank cells.
    """
    headers = [cell_text(h).lower() for h in header_row or []]
    if not any(headers):
        raise SpreadsheetError("Header row is empty")

    indices: dict[str, int] = {}
    for index, header in enumerate(headers):
        if not header:
            continue
        for field_name, keywords in FIELD_KEYWORDS.items():
            if field_name in indices or _excluded(field_name, header):
                continue
            if any(keyword in header for keyword in keywords):
                indices[field_name] = index

    logger.debug("Column map built: %s", indices)
    return ColumnMap(indices)
