"""Schema definitions for extracted calendar events.

Provides the RawRecord produced by the extractors, the NormalizedRecord
consumed by calendar writers, and the ParsedTime result of the time range
parser. Attributes are snake_case; ``to_dict``/``from_dict`` use the wire
names (``jobName``, ``startTime``, ...) expected by collaborators.
"""

from dataclasses import dataclass, fields, replace
from typing import Any

# Python attribute -> wire field name
RAW_FIELD_NAMES: dict[str, str] = {
    "date": "date",
    "time": "time",
    "job_name": "jobName",
    "location": "location",
    "details": "details",
    "color_id": "colorId",
}


@dataclass(frozen=True)
class RawRecord:
    """
    A best-effort extraction result prior to machine normalization.

    Every field is optional. ``None`` means "not found"; an empty string
    means "found but blank" (e.g. a mapped spreadsheet cell with no value).

    Attributes:
        date: Free-form date text (e.g., "June 24th").
        time: Free-form time text (e.g., "10am-3pm", "10:00 AM to 11:30 AM").
        job_name: Organization / customer / event name.
        location: Venue or virtual meeting description.
        details: Free-text sections joined by blank lines.
        color_id: Opaque calendar colour tag, passed through untouched.
    """

    date: str | None = None
    time: str | None = None
    job_name: str | None = None
    location: str | None = None
    details: str | None = None
    color_id: str | None = None

    def with_values(self, **values: str | None) -> "RawRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **values)

    def is_empty(self) -> bool:
        """True when no field carries a non-blank value."""
        return not any(
            (getattr(self, f.name) or "").strip() for f in fields(self)
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to a wire-format dict, omitting fields that were not found."""
        result: dict[str, str] = {}
        for attr, wire in RAW_FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                result[wire] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawRecord":
        """
        Create RawRecord from a wire-format (or snake_case) dictionary.

        Non-string values are ignored; callers that need strict validation
        of untrusted input should validate before calling this.

        Args:
            data: Dictionary with record fields.

        Returns:
            RawRecord instance.
        """
        values: dict[str, str] = {}
        for attr, wire in RAW_FIELD_NAMES.items():
            value = data.get(wire, data.get(attr))
            if isinstance(value, str):
                values[attr] = value
        return cls(**values)


@dataclass(frozen=True)
class NormalizedRecord:
    """
    A fully machine-readable calendar event.

    ``start_time`` and ``end_time`` are either both ``HH:MM`` (24-hour,
    zero-padded) or both empty; never one without the other.

    Attributes:
        date: ISO ``YYYY-MM-DD`` date, or "" when the date was unparseable.
        start_time: Start of the event, ``HH:MM``.
        end_time: End of the event, ``HH:MM`` (start + 1 hour when absent).
        job_name: Event name.
        location: Event location.
        details: Free-text description.
    """

    date: str = ""
    start_time: str = ""
    end_time: str = ""
    job_name: str = ""
    location: str = ""
    details: str = ""

    def __post_init__(self) -> None:
        if bool(self.start_time) != bool(self.end_time):
            raise ValueError("start_time and end_time must both be set or both be empty")

    def to_dict(self) -> dict[str, str]:
        """Convert to the wire format consumed by calendar writers."""
        return {
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "jobName": self.job_name,
            "location": self.location,
            "details": self.details,
        }


@dataclass(frozen=True)
class ParsedTime:
    """Result of parsing a time expression into a 24-hour start/end pair."""

    start_time: str | None = None
    end_time: str | None = None
    is_valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"isValid": self.is_valid}
        if self.start_time is not None:
            result["startTime"] = self.start_time
        if self.end_time is not None:
            result["endTime"] = self.end_time
        return result


INVALID_TIME = ParsedTime()
