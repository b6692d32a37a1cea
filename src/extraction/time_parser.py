"""Time range parsing for free-form event times.

Turns expressions such as "10:00 AM - 11:30 AM", "10-3pm", "2-230pm",
"8am-9am" or "2:30 PM" into a 24-hour start/end pair. Parsers are tried in
a fixed order (strict range, flexible range, single clock time, single
loose token); the first that succeeds wins. A single time gets an implicit
one-hour duration, wrapping past midnight within ``HH:MM``.

Also hosts the delimited numeric date normalizer used for spreadsheet and
form values such as "06/24/2025" or "24-06-2025".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from src.extraction.schemas import INVALID_TIME, ParsedTime

# "10:00 AM - 11:30 AM", "19:00 - 22:30"
_STRICT_RANGE = re.compile(
    r"(\d{1,2}):(\d{2})\s*(AM|PM)?\s*-\s*(\d{1,2}):(\d{2})\s*(AM|PM)?",
    re.IGNORECASE,
)

# "10:00 AM", "19:00"
_SINGLE_CLOCK = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)?", re.IGNORECASE)

# "a", "am", "a.m.", "PM", "p.m" not embedded in a word
_PERIOD_MARKER = re.compile(r"(?<![a-z])([ap])\.?(?:m\.?)?(?![a-z])", re.IGNORECASE)

_DASHES = re.compile(r"[–—]")
_WORD_TO = re.compile(r"\s+to\s+", re.IGNORECASE)
_SPACED_HYPHEN = re.compile(r"\s*-\s*")

# "230pm", "8 a.m.", "1430": one compact token and nothing else
_COMPACT_TOKEN = re.compile(r"^\d{1,4}(?::\d{2})?\s*(?:[ap]\.?m?\.?)?$", re.IGNORECASE)


@dataclass(frozen=True)
class LooseTime:
    """A parsed loose time token.

    Attributes:
        hour: Hour as written (1-12 when a period applies, else 0-23).
        minutes: Minutes 0-59.
        period: "am"/"pm" (explicit or inherited), or None for 24-hour reading.
        explicit: Whether the token itself carried the period marker.
        hhmm: Resolved 24-hour ``HH:MM``.
    """

    hour: int
    minutes: int
    period: str | None
    explicit: bool
    hhmm: str


def _to_24_hour(hour: int, minutes: int, period: str | None) -> str | None:
    """Apply an optional AM/PM period and validate the result."""
    if period == "pm" and hour != 12:
        hour += 12
    elif period == "am" and hour == 12:
        hour = 0

    if not 0 <= hour <= 23 or not 0 <= minutes <= 59:
        return None
    return f"{hour:02d}:{minutes:02d}"


def _normalize_period(marker: str | None) -> str | None:
    if not marker:
        return None
    return "am" if marker.lower().startswith("a") else "pm"


def _opposite(period: str) -> str:
    return "am" if period == "pm" else "pm"


def add_hours(hhmm: str, hours: int = 1) -> str:
    """Add whole hours to an ``HH:MM`` value, wrapping at 24:00."""
    hour_str, minute_str = hhmm.split(":")
    hour = (int(hour_str) + hours) % 24
    return f"{hour:02d}:{int(minute_str):02d}"


def to_12_hour(hhmm: str) -> str:
    """Render ``HH:MM`` as "H:MM AM/PM" (e.g. "14:30" -> "2:30 PM")."""
    hour_str, minute_str = hhmm.split(":")
    hour = int(hour_str)
    period = "AM" if hour < 12 else "PM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{minute_str} {period}"


def parse_loose_time(raw: str, inherited_period: str | None = None) -> LooseTime | None:
    """
    Parse a compact time token such as "2", "230", "1430", "2pm" or "2:30 p.m.".

    Digits without a colon are split by count: one or two digits are the
    hour, three digits are one hour digit plus two minute digits, four or
    more digits end in two minute digits.

    Args:
        raw: The token text.
        inherited_period: Period to apply when the token has no marker.

    Returns:
        LooseTime, or None when the token is not a valid time.
    """
    token = (raw or "").strip().lower()
    if not token:
        return None

    marker = _PERIOD_MARKER.search(token)
    explicit_period = None
    if marker:
        explicit_period = _normalize_period(marker.group(1))
        token = token[: marker.start()] + token[marker.end():]
    period = explicit_period or inherited_period

    digits = re.sub(r"[^0-9:]", "", token)
    if not any(ch.isdigit() for ch in digits):
        return None

    if ":" in digits:
        parts = digits.split(":")
        hour_part, minute_part = parts[0], parts[1] or "0"
        if not hour_part.isdigit() or not minute_part.isdigit():
            return None
        hour, minutes = int(hour_part), int(minute_part)
    elif len(digits) <= 2:
        hour, minutes = int(digits), 0
    elif len(digits) == 3:
        hour, minutes = int(digits[0]), int(digits[1:])
    else:
        hour, minutes = int(digits[:-2]), int(digits[-2:])

    if period is not None:
        if not 1 <= hour <= 12:
            return None
    elif not 0 <= hour <= 23:
        return None

    hhmm = _to_24_hour(hour, minutes, period)
    if hhmm is None:
        return None

    return LooseTime(
        hour=hour,
        minutes=minutes,
        period=period,
        explicit=explicit_period is not None,
        hhmm=hhmm,
    )


def _parse_strict_range(text: str) -> ParsedTime | None:
    """Match "H:MM [AM|PM] - H:MM [AM|PM]"; a missing marker is taken from the other side."""
    match = _STRICT_RANGE.search(text)
    if not match:
        return None

    start_h, start_m, start_marker, end_h, end_m, end_marker = match.groups()
    start_period = _normalize_period(start_marker or end_marker)
    end_period = _normalize_period(end_marker or start_marker)

    start = _to_24_hour(int(start_h), int(start_m), start_period)
    end = _to_24_hour(int(end_h), int(end_m), end_period)
    if start is None or end is None:
        return None
    return ParsedTime(start_time=start, end_time=end, is_valid=True)


def _parse_flexible_range(text: str) -> ParsedTime | None:
    """Match loose ranges: "10-3pm", "2-230pm", "8am-9am", "2 to 3:30 pm", "14-1530".

    The right token is parsed first; the left token inherits its period
    unless it has its own. A marker-less left hour greater than the right
    hour takes the opposite period ("10-3pm" is 10am to 3pm).
    """
    normalized = _DASHES.sub("-", text)
    normalized = _WORD_TO.sub("-", normalized)
    normalized = _SPACED_HYPHEN.sub("-", normalized).strip()

    parts = normalized.split("-")
    if len(parts) != 2:
        return None
    left_raw, right_raw = parts

    right = parse_loose_time(right_raw)
    if right is None:
        return None

    left = parse_loose_time(left_raw, right.period)
    if left is None:
        return None

    if not left.explicit and right.period and left.hour > right.hour:
        left = parse_loose_time(left_raw, _opposite(right.period))
        if left is None:
            return None

    return ParsedTime(start_time=left.hhmm, end_time=right.hhmm, is_valid=True)


def _parse_single_clock(text: str) -> ParsedTime | None:
    """Match a single "H:MM [AM|PM]" and give it a one-hour duration."""
    match = _SINGLE_CLOCK.search(text)
    if not match:
        return None

    hour, minutes, marker = match.groups()
    start = _to_24_hour(int(hour), int(minutes), _normalize_period(marker))
    if start is None:
        return None
    return ParsedTime(start_time=start, end_time=add_hours(start, 1), is_valid=True)


def _parse_single_loose(text: str) -> ParsedTime | None:
    """Match a single compact token ("230pm", "8am") with a one-hour duration."""
    if not _COMPACT_TOKEN.match(text):
        return None
    token = parse_loose_time(text)
    if token is None:
        return None
    return ParsedTime(start_time=token.hhmm, end_time=add_hours(token.hhmm, 1), is_valid=True)


_TIME_PARSERS: tuple[Callable[[str], ParsedTime | None], ...] = (
    _parse_strict_range,
    _parse_flexible_range,
    _parse_single_clock,
    _parse_single_loose,
)


def parse_time_range(time_string: str) -> ParsedTime:
    """
    Parse a free-form time expression into 24-hour start and end times.

    Args:
        time_string: Raw time text (e.g., "10:00 AM - 11:30 AM", "10-3pm").

    Returns:
        ParsedTime with both times set and ``is_valid=True``, or an
        invalid ParsedTime with no times when nothing matched.
    """
    if not time_string or not time_string.strip():
        return INVALID_TIME

    text = time_string.strip()
    for parser in _TIME_PARSERS:
        result = parser(text)
        if result is not None:
            return result

    return INVALID_TIME


# Delimited numeric date formats, tried in order. A format whose values fail
# validation falls through to the next one, so "24-06-2025" reaches DD-MM-YYYY.
_MDY_DASH = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2,4})$")
_MDY_SLASH = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$")
_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_DASH = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")


def normalize_date_format(date_string: str) -> str | None:
    """
    Normalize a delimited numeric date to ``YYYY-MM-DD``.

    Accepts MM-DD-YY(YY), MM/DD/YY(YY), YYYY-MM-DD and DD-MM-YYYY. Two-digit
    years below 50 map to 20YY, the rest to 19YY.

    Args:
        date_string: Raw date text.

    Returns:
        ISO date string, or None when no format yields a valid date.
    """
    if not date_string:
        return None

    text = date_string.strip()
    for pattern in (_MDY_DASH, _MDY_SLASH, _YMD, _DMY_DASH):
        match = pattern.match(text)
        if not match:
            continue

        first, second, third = (int(g) for g in match.groups())
        if pattern is _YMD:
            year, month, day = first, second, third
        elif pattern is _DMY_DASH:
            day, month, year = first, second, third
        else:
            month, day, year = first, second, third
            if year < 100:
                year += 2000 if year < 50 else 1900

        if 1 <= month <= 12 and 1 <= day <= 31 and year >= 1900:
            return f"{year}-{month:02d}-{day:02d}"

    return None
