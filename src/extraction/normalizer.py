"""Date normalization and the record normalization step.

Converts free-form date references from emails and spreadsheets ("24th of
June", "June 24th", "6/24/25") into ISO ``YYYY-MM-DD`` strings, and turns a
RawRecord into a NormalizedRecord with 24-hour start/end times.

The year used for dates written without one is always passed in by the
caller; nothing here reads the system clock.
"""

from __future__ import annotations

import re
from datetime import date

from src.extraction.schemas import NormalizedRecord, RawRecord
from src.extraction.time_parser import normalize_date_format, parse_time_range

# Month name → number mapping
MONTH_MAP: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4,
    "jun": 6, "jul": 7, "aug": 8, "sep": 9,
    "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

_DAY_OF_MONTH = re.compile(r"(\d{1,2})(?:st|nd|rd|th)?\s+of\s+([A-Za-z]+)", re.IGNORECASE)
_MONTH_DAY = re.compile(
    r"([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b(?:,?\s+(\d{4})\b)?",
    re.IGNORECASE,
)
_SLASH_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2,4})")
_ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
_STRICT_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def month_number(name: str) -> int | None:
    """Look up a month by full name or abbreviation ("June", "jun", "Sept")."""
    return MONTH_MAP.get(name.strip().lower().rstrip("."))


def is_iso_date(value: str) -> bool:
    """True when value is a real calendar date in ``YYYY-MM-DD`` form."""
    if not value or not _STRICT_ISO.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _iso(year: int, month: int, day: int) -> str | None:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year}-{month:02d}-{day:02d}"


class DateNormalizer:
    """
    Stateless normalizer for free-form dates.

    Tries, in order: "<day><ordinal> of <Month>", "<Month> <day><ordinal>"
    (with an optional trailing year), "MM/DD/YYYY" or "MM/DD/YY", and
    "YYYY-MM-DD". Unmatched input is returned verbatim, so callers must
    treat a non-ISO result as a normalization failure.

    Args:
        reference_year: Year applied to dates written without one.
    """

    def __init__(self, reference_year: int):
        self._year = reference_year

    @property
    def reference_year(self) -> int:
        return self._year

    def normalize(self, date_string: str) -> str:
        """
        Normalize a date string.

        Args:
            date_string: Raw date text.

        Returns:
            ISO date, or the original string if no pattern matches.
        """
        if not date_string or not date_string.strip():
            return date_string

        for fn in (
            self._try_day_of_month,
            self._try_month_day,
            self._try_slash_date,
            self._try_iso,
        ):
            result = fn(date_string)
            if result is not None:
                return result

        return date_string

    def _try_day_of_month(self, text: str) -> str | None:
        """Match '24th of June', '1 of sept'."""
        for m in _DAY_OF_MONTH.finditer(text):
            month = month_number(m.group(2))
            if month is None:
                continue
            result = _iso(self._year, month, int(m.group(1)))
            if result is not None:
                return result
        return None

    def _try_month_day(self, text: str) -> str | None:
        """Match 'June 24th', 'jun 24', 'Tuesday, June 24, 2025'."""
        for m in _MONTH_DAY.finditer(text):
            month = month_number(m.group(1))
            if month is None:
                continue
            year = int(m.group(3)) if m.group(3) else self._year
            result = _iso(year, month, int(m.group(2)))
            if result is not None:
                return result
        return None

    def _try_slash_date(self, text: str) -> str | None:
        """Match '06/24/2025', '6/24/25' (two-digit years are 20YY)."""
        m = _SLASH_DATE.search(text)
        if not m:
            return None
        month, day, year = (int(g) for g in m.groups())
        if year < 100:
            year += 2000
        return _iso(year, month, day)

    def _try_iso(self, text: str) -> str | None:
        """Match '2025-06-24'; a value that is exactly ISO is returned unchanged."""
        if _STRICT_ISO.match(text.strip()):
            return text.strip()
        m = _ISO_DATE.search(text)
        if not m:
            return None
        year, month, day = (int(g) for g in m.groups())
        return _iso(year, month, day)


def normalize_date(date_string: str, current_year: int) -> str:
    """
    Normalize a free-form date to ``YYYY-MM-DD``.

    Args:
        date_string: Raw date text (e.g., "June 24th").
        current_year: Year applied when the text has none.

    Returns:
        ISO date string, or the original string if unparseable.
    """
    return DateNormalizer(current_year).normalize(date_string)


def normalize_record(record: RawRecord, reference_year: int) -> NormalizedRecord:
    """
    Convert a RawRecord into a NormalizedRecord.

    The date goes through the free-form normalizer and then the delimited
    numeric normalizer; anything still not ISO becomes "". The time goes
    through the time range parser; start and end are set together or not
    at all.

    Args:
        record: Extractor output.
        reference_year: Year applied to dates written without one.

    Returns:
        NormalizedRecord with machine-sortable values.
    """
    raw_date = (record.date or "").strip()
    iso_date = normalize_date(raw_date, reference_year) if raw_date else ""
    if not is_iso_date(iso_date):
        iso_date = normalize_date_format(raw_date) or ""
        if not is_iso_date(iso_date):
            iso_date = ""

    parsed = parse_time_range(record.time or "")
    if parsed.is_valid and parsed.start_time and parsed.end_time:
        start_time, end_time = parsed.start_time, parsed.end_time
    else:
        start_time = end_time = ""

    return NormalizedRecord(
        date=iso_date,
        start_time=start_time,
        end_time=end_time,
        job_name=(record.job_name or "").strip(),
        location=(record.location or "").strip(),
        details=record.details or "",
    )
