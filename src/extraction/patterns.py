"""Heuristic event extraction for captioning-job emails.

Recognizes two email dialects plus a generic fallback:

- "Organization" dialect: ``Organization:``, ``Captioner Connection Time:``,
  ``Scheduled Start:`` / ``Scheduled End:`` labelled lines.
- "Customer" dialect: ``Customer``, ``Job Title``, ``Location`` table rows
  with a "2:00 PM to 3:30 PM" header and a "Tuesday, June 24, 2025" header.
- Generic: time-range-shaped text anywhere, subject-like lines, and as a
  last resort the longest short phrase left once dates and times are gone.

Each field has an ordered tuple of named rules. A rule returns the field
value or None, and the first value found wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from src.extraction.config import ExtractionConfig
from src.extraction.normalizer import MONTH_MAP
from src.extraction.schemas import RawRecord
from src.extraction.time_parser import parse_time_range, to_12_hour

logger = logging.getLogger(__name__)


def _label(label: str, *, colon: bool = False) -> re.Pattern[str]:
    """Compile a line-anchored "Label: value" / "Label value" pattern."""
    separator = r"[ \t]*:[ \t]*" if colon else r"(?:[ \t]*:[ \t]*|[ \t]+)"
    return re.compile(
        rf"^[ \t]*{label}{separator}(\S[^\n]*?)[ \t]*$",
        re.IGNORECASE | re.MULTILINE,
    )


# Organization dialect
_ORGANIZATION = _label("Organization", colon=True)
_CONNECTION_TIME = _label("Captioner Connection Time", colon=True)
_SCHEDULED_START = _label("Scheduled Start", colon=True)
_SCHEDULED_END = _label("Scheduled End", colon=True)
_EVENT = _label("Event", colon=True)

# Customer dialect
_CUSTOMER = _label("Customer")
_JOB_TITLE = _label("Job Title")
_LOCATION = _label("Location")
_CLIENT = _label("Client")
_MEETING_LINK = _label("Meeting Link")

# Shared labelled fields
_SERVICE_TYPE = _label("Service Type", colon=True)
_SERVICE = _label("Service")
_MEETING_NUMBER = _label("Meeting Number", colon=True)
_PASSWORD = _label("Password", colon=True)
_DIAL_IN = _label("Dial-In Info", colon=True)
_ACCESS_CODE = _label("Phone Access Code", colon=True)
_RATE = re.compile(
    r"^[ \t]*Rate(?:[ \t]*:)?[ \t]*\$?[ \t]*([0-9][0-9,]*(?:\.[0-9]+)?)",
    re.IGNORECASE | re.MULTILINE,
)
_POC = re.compile(
    r"^[ \t]*On-Site POCs?(?:[ \t]*:)?[ \t]*([^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)

# Lines that start another labelled field; they end a multi-line POC block.
_NEXT_LABEL = re.compile(
    r"^[ \t]*(?:Organization|Customer|Client|Job Title|Event|Service|Location|Rate|"
    r"Meeting|Password|Dial-In|Phone Access|Scheduled|Captioner|Contact|Notes?)\b",
    re.IGNORECASE,
)

# "2:00 PM to 3:30 PM"
_HEADER_TIME_RANGE = re.compile(
    r"(\d{1,2}:\d{2}\s*(?:AM|PM))\s+to\s+(\d{1,2}:\d{2}\s*(?:AM|PM))",
    re.IGNORECASE,
)
# "Tuesday, June 24, 2025"
_HEADER_DATE = re.compile(r"\b([A-Za-z]+day,\s+[A-Za-z]+\.?\s+\d{1,2},\s+\d{4})\b")
_CLOCK_TIME = re.compile(r"\d{1,2}:\d{2}\s*(?:AM|PM)", re.IGNORECASE)
_CLOCK_TIME_WORD = re.compile(r"\b\d{1,2}:\d{2}\s*(?:AM|PM)\b", re.IGNORECASE)
_SLASH_DATE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b")

# Any hyphen / dash / "to" separated pair of time-ish tokens
_RANGE_CANDIDATE = re.compile(
    r"(?<![\d/:.\-])"
    r"\d{1,4}(?::\d{2})?\s*(?:[ap]\.?m\.?)?"
    r"\s*(?:-|–|—|\bto\b)\s*"
    r"\d{1,4}(?::\d{2})?(?:\s*[ap]\.?m\.?)?"
    r"(?![\d/:])",
    re.IGNORECASE,
)
_HAS_TIME_MARK = re.compile(r":|[ap]\.?m", re.IGNORECASE)
# "1430-1530": unmarked 24-hour pairs need four digits on both sides
_MILITARY_RANGE = re.compile(r"^(\d{4})\s*(?:-|–|—|to)\s*(\d{4})$", re.IGNORECASE)

_MONTH_NAMES = "|".join(sorted(MONTH_MAP, key=len, reverse=True))
_MONTH_DAY_YEAR = re.compile(rf"\b(?:{_MONTH_NAMES})\.?\s+\d{{1,2}},?\s+\d{{4}}\b", re.IGNORECASE)
_MONTH_DAY = re.compile(rf"\b(?:{_MONTH_NAMES})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?\b", re.IGNORECASE)
_DAY_OF_MONTH = re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+of\s+(?:{_MONTH_NAMES})\b", re.IGNORECASE)

_SUBJECT_LINE = re.compile(
    r"^[ \t]*(?:(?:fwd?|fw)[ \t]*:[ \t]*)*(?:subject|re)[ \t]*:[ \t]*([^\n.!?]{5,50})",
    re.IGNORECASE | re.MULTILINE,
)
_MEETING_LINE = re.compile(
    r"^[ \t]*(?:meeting|event)[ \t]*:[ \t]*([^\n.!?]{5,50})",
    re.IGNORECASE | re.MULTILINE,
)
_REPLY_PREFIX = re.compile(r"^(?:(?:re|fwd?|fw)[ \t]*:[ \t]*)+", re.IGNORECASE)

_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE),
    re.compile(r"(?<![\w.-])[\w-]+\.zoom\.us/[^\s<>\"']+", re.IGNORECASE),
    re.compile(r"teams\.microsoft\.com/[^\s<>\"']+", re.IGNORECASE),
    re.compile(r"meet\.google\.com/[^\s<>\"']+", re.IGNORECASE),
    re.compile(r"(?<![\w.-])(?:[\w-]+\.)?webex\.com/[^\s<>\"']+", re.IGNORECASE),
)

# Removed before the longest-phrase job-name heuristic
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"https?://\S+|(?<![\w.-])[\w.-]+@[\w-]+\.[\w.]+\b|(?<![\w.-])[\w-]+\.(?:zoom\.us|com|org|gov)/\S*", re.IGNORECASE),
    _RANGE_CANDIDATE,
    re.compile(r"\d{1,2}:\d{2}(?:\s*[ap]\.?m\.?)?", re.IGNORECASE),
    re.compile(r"\b\d{1,4}\s*[ap]\.?m\.?(?![a-z])", re.IGNORECASE),
    re.compile(r"\b\d{1,4}[/-]\d{1,2}[/-]\d{2,4}\b"),
    _DAY_OF_MONTH,
    re.compile(rf"\b(?:{_MONTH_NAMES})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?\b", re.IGNORECASE),
    re.compile(r"\b(?:mon|tues|wednes|thurs|fri|satur|sun)day\b,?", re.IGNORECASE),
)
_PHRASE_SPLIT = re.compile(r"[\n\r.,;:!?|()\[\]<>\"\t]+")


def _first(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def is_real_value(value: str | None) -> bool:
    """True for a non-empty value that is not an "N/A" placeholder."""
    return bool(value and value.strip() and "n/a" not in value.lower())


@dataclass(frozen=True)
class Rule:
    """A named matcher for one field; returns the value or None."""

    name: str
    match: Callable[[str], str | None]


# ── Job name rules ─────────────────────────────────────


def match_organization(text: str) -> str | None:
    """Organization dialect: "Organization: <name>"."""
    return _first(_ORGANIZATION, text)


def match_customer(text: str) -> str | None:
    """Customer dialect: "Customer <name>"."""
    return _first(_CUSTOMER, text)


def _clean_name(value: str) -> str | None:
    cleaned = _REPLY_PREFIX.sub("", value.strip())
    cleaned = re.sub(r"^[:\-\s]+|[:\-\s]+$", "", cleaned)
    return cleaned or None


def match_subject_line(text: str) -> str | None:
    """Generic: "Subject: ..." or "Re: ..." lines."""
    value = _first(_SUBJECT_LINE, text)
    return _clean_name(value) if value else None


def match_meeting_line(text: str) -> str | None:
    """Generic: "Meeting: ..." or "Event: ..." lines."""
    value = _first(_MEETING_LINE, text)
    return _clean_name(value) if value else None


def longest_phrase(text: str, min_words: int = 2, max_words: int = 5) -> str | None:
    """
    Pick the longest phrase of min_words..max_words words once URLs,
    addresses, dates and times are stripped out.

    Best-effort only: on free text this can return something that is not
    a meaningful event name.
    """
    stripped = text
    for pattern in _NOISE_PATTERNS:
        stripped = pattern.sub(" ", stripped)

    best = ""
    for chunk in _PHRASE_SPLIT.split(stripped):
        words = [w.strip("-'*_#") for w in chunk.split()]
        words = [w for w in words if w and any(ch.isalpha() for ch in w)]
        if not min_words <= len(words) <= max_words:
            continue
        phrase = " ".join(words)
        if len(phrase) > len(best):
            best = phrase
    return best or None


# ── Time rules ─────────────────────────────────────────


def _join_times(start: str, end: str) -> str:
    start_clock = _CLOCK_TIME.search(start)
    end_clock = _CLOCK_TIME.search(end)
    if start_clock and end_clock:
        return f"{start_clock.group(0)} to {end_clock.group(0)}"
    return f"{start} - {end}"


def match_connection_time(text: str) -> str | None:
    """Organization dialect: Captioner Connection Time through Scheduled End."""
    start = _first(_CONNECTION_TIME, text)
    end = _first(_SCHEDULED_END, text)
    if start and end:
        return _join_times(start, end)
    return None


def match_header_time_range(text: str) -> str | None:
    """Customer dialect: a "2:00 PM to 3:30 PM" header line."""
    match = _HEADER_TIME_RANGE.search(text)
    if not match:
        return None
    return f"{match.group(1).strip()} to {match.group(2).strip()}"


def match_scheduled_times(text: str) -> str | None:
    """Organization dialect without a connection time: Scheduled Start/End."""
    start = _first(_SCHEDULED_START, text)
    end = _first(_SCHEDULED_END, text)
    if start and end:
        return _join_times(start, end)
    return None


def _is_military_range(candidate: str) -> bool:
    match = _MILITARY_RANGE.match(candidate.strip())
    if not match:
        return False
    # "2024-2025" is a span of years
    return not all(token.startswith(("19", "20")) for token in match.groups())


def match_time_range_anywhere(text: str) -> str | None:
    """Generic: the first time-range-shaped substring the range parser accepts.

    The result is rendered back as "H:MM AM/PM to H:MM AM/PM".
    """
    for match in _RANGE_CANDIDATE.finditer(text):
        candidate = match.group(0)
        if not (_HAS_TIME_MARK.search(candidate) or _is_military_range(candidate)):
            continue
        parsed = parse_time_range(candidate)
        if parsed.is_valid and parsed.start_time and parsed.end_time:
            return f"{to_12_hour(parsed.start_time)} to {to_12_hour(parsed.end_time)}"
    return None


def match_single_time(text: str) -> str | None:
    """Generic: any single "H:MM AM/PM" in the text."""
    match = _CLOCK_TIME_WORD.search(text)
    return match.group(0) if match else None


# ── Date rules ─────────────────────────────────────────


def match_header_date(text: str) -> str | None:
    """Customer dialect: a "Tuesday, June 24, 2025" header line."""
    return _first(_HEADER_DATE, text)


def match_date_in_start_time(text: str) -> str | None:
    """Organization dialect: an M/D/YYYY date inside the start time value."""
    start = _first(_CONNECTION_TIME, text) or _first(_SCHEDULED_START, text)
    if not start:
        return None
    match = _SLASH_DATE.search(start)
    return match.group(0) if match else None


def match_date_anywhere(text: str) -> str | None:
    """Generic: M/D/YYYY, "June 24, 2025", "June 24th" or "24th of June"."""
    for pattern in (_SLASH_DATE, _MONTH_DAY_YEAR, _MONTH_DAY, _DAY_OF_MONTH):
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


# ── Location rules ─────────────────────────────────────


def match_location_line(text: str) -> str | None:
    """Explicit "Location <value>" unless the value is just "remote"."""
    value = _first(_LOCATION, text)
    if value and value.lower() != "remote":
        return value
    return None


def match_meeting_number(text: str) -> str | None:
    """A meeting number makes the event a virtual meeting."""
    value = _first(_MEETING_NUMBER, text)
    if is_real_value(value):
        return f"Virtual Meeting - ID: {value}"
    return None


def match_remote(text: str) -> str | None:
    """The word "remote" anywhere marks the event as remote."""
    if re.search(r"\bremote\b", text, re.IGNORECASE):
        return "Remote/Virtual"
    return None


JOB_NAME_RULES: tuple[Rule, ...] = (
    Rule("organization", match_organization),
    Rule("customer", match_customer),
    Rule("subject_line", match_subject_line),
    Rule("meeting_line", match_meeting_line),
)

TIME_RULES: tuple[Rule, ...] = (
    Rule("connection_time", match_connection_time),
    Rule("header_time_range", match_header_time_range),
    Rule("scheduled_times", match_scheduled_times),
    Rule("time_range_anywhere", match_time_range_anywhere),
    Rule("single_time", match_single_time),
)

DATE_RULES: tuple[Rule, ...] = (
    Rule("header_date", match_header_date),
    Rule("date_in_start_time", match_date_in_start_time),
    Rule("date_anywhere", match_date_anywhere),
)

LOCATION_RULES: tuple[Rule, ...] = (
    Rule("location_line", match_location_line),
    Rule("meeting_number", match_meeting_number),
    Rule("remote", match_remote),
)


def resolve(rules: tuple[Rule, ...], text: str, field: str = "") -> str | None:
    """Return the value of the first rule that matches, in rule order."""
    for rule in rules:
        value = rule.match(text)
        if value:
            logger.debug("Field %s matched by rule %s", field or "?", rule.name)
            return value
    return None


# ── Details ────────────────────────────────────────────


def _poc_lines(text: str) -> list[str]:
    """Collect an On-Site POC value, continuing onto following lines."""
    match = _POC.search(text)
    if not match:
        return []

    lines = [match.group(1).strip()]
    for line in text[match.end():].splitlines()[1:]:
        if not line.strip() or _NEXT_LABEL.match(line):
            break
        lines.append(line.strip())
    return [line for line in lines if is_real_value(line)]


def find_meeting_link(text: str) -> str | None:
    """Prefer a literal URL anywhere in the text over a labelled field."""
    for pattern in _URL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).rstrip(".,;")

    labelled = _first(_MEETING_LINK, text)
    if is_real_value(labelled) and labelled.lower() != "meeting link":
        return labelled
    return None


def original_schedule(text: str) -> str | None:
    """The Scheduled Start superseded by a different connection time."""
    connection = _first(_CONNECTION_TIME, text)
    scheduled = _first(_SCHEDULED_START, text)
    if connection and scheduled and _first(_SCHEDULED_END, text) and scheduled != connection:
        return scheduled
    return None


def build_details(text: str) -> str | None:
    """
    Assemble detail sections in a fixed order, skipping empty ones.

    Sections: Event title, Service, Meeting Info, Rate, Contact,
    Meeting Link, Original Schedule. Values that are blank or "N/A" are
    left out, and a section with nothing left is omitted entirely.
    """
    sections: list[str] = []

    title = _first(_JOB_TITLE, text) or _first(_EVENT, text)
    if is_real_value(title):
        sections.append(f"Event: {title}")

    service = _first(_SERVICE_TYPE, text) or _first(_SERVICE, text)
    if is_real_value(service):
        sections.append(f"Service: {service}")

    meeting_lines = [
        f"{label}: {value}"
        for label, value in (
            ("Meeting Number", _first(_MEETING_NUMBER, text)),
            ("Password", _first(_PASSWORD, text)),
            ("Dial-in", _first(_DIAL_IN, text)),
            ("Access Code", _first(_ACCESS_CODE, text)),
        )
        if is_real_value(value)
    ]
    if meeting_lines:
        sections.append("Meeting Info:\n" + "\n".join(meeting_lines))

    rate = _first(_RATE, text)
    if rate:
        sections.append(f"Rate: ${rate}")

    contact_lines: list[str] = []
    client = _first(_CLIENT, text)
    if is_real_value(client):
        contact_lines.append(f"Client: {client}")
    pocs = _poc_lines(text)
    if pocs:
        contact_lines.append("POC: " + ", ".join(pocs))
    if contact_lines:
        sections.append("Contact:\n" + "\n".join(contact_lines))

    link = find_meeting_link(text)
    if link:
        sections.append(f"Meeting Link: {link}")

    schedule = original_schedule(text)
    if schedule:
        sections.append(f"Original Schedule: {schedule}")

    return "\n\n".join(sections) if sections else None


class HeuristicExtractor:
    """
    Regex-based calendar event extractor for email text.

    Stateless: the same text always yields the same RawRecord, and no
    input raises. Fields nothing matched are left as None.

    Usage:
        extractor = HeuristicExtractor()
        record = extractor.extract(email_body)
    """

    def __init__(self, config: ExtractionConfig | None = None):
        self._config = config or ExtractionConfig()

    def extract(self, text: str) -> RawRecord:
        """
        Extract an event record from an email body.

        Args:
            text: Arbitrary email text.

        Returns:
            RawRecord with every field that could be found.
        """
        if not text or not text.strip():
            return RawRecord()

        job_name = resolve(JOB_NAME_RULES, text, "job_name")
        if not job_name:
            job_name = longest_phrase(
                text,
                self._config.name_phrase_min_words,
                self._config.name_phrase_max_words,
            )
            if job_name:
                logger.debug("Field job_name matched by rule longest_phrase")

        return RawRecord(
            date=resolve(DATE_RULES, text, "date"),
            time=resolve(TIME_RULES, text, "time"),
            job_name=job_name,
            location=resolve(LOCATION_RULES, text, "location"),
            details=build_details(text),
        )


def extract(text: str) -> RawRecord:
    """Extract an event record with the default configuration."""
    return HeuristicExtractor().extract(text)
