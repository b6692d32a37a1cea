"""Tests for the date normalizer and record normalization."""

import pytest

from src.extraction.normalizer import (
    DateNormalizer,
    is_iso_date,
    month_number,
    normalize_date,
    normalize_record,
)
from src.extraction.schemas import NormalizedRecord, RawRecord


class TestNormalizeDate:
    """Free-form dates to ISO, echoing unparseable input."""

    def test_day_of_month(self) -> None:
        assert normalize_date("24th of June", 2025) == "2025-06-24"

    def test_month_day(self) -> None:
        assert normalize_date("June 24th", 2025) == "2025-06-24"

    def test_both_orders_agree(self) -> None:
        assert normalize_date("24th of June", 2025) == normalize_date("June 24th", 2025)

    def test_abbreviations(self) -> None:
        assert normalize_date("Sept 5", 2025) == "2025-09-05"
        assert normalize_date("1st of dec", 2024) == "2024-12-01"
        assert normalize_date("Jan. 3rd", 2026) == "2026-01-03"

    def test_explicit_year_wins_over_reference(self) -> None:
        assert normalize_date("Tuesday, June 24, 2025", 2030) == "2025-06-24"

    def test_slash_date_four_digit_year(self) -> None:
        assert normalize_date("06/24/2025", 2000) == "2025-06-24"

    def test_slash_date_two_digit_year(self) -> None:
        assert normalize_date("6/24/25", 2000) == "2025-06-24"

    def test_iso_is_idempotent(self) -> None:
        assert normalize_date("2025-06-24", 2025) == "2025-06-24"
        assert normalize_date(normalize_date("June 24th", 2025), 2025) == "2025-06-24"

    def test_reference_year_is_used(self) -> None:
        assert normalize_date("June 24th", 2031) == "2031-06-24"

    @pytest.mark.parametrize("text", ["next Tuesday", "tbd", "", "Blah 12"])
    def test_unparseable_is_echoed(self, text: str) -> None:
        assert normalize_date(text, 2025) == text

    def test_out_of_range_slash_date_is_echoed(self) -> None:
        assert normalize_date("13/45/2025", 2025) == "13/45/2025"


class TestDateNormalizer:
    def test_reference_year_property(self) -> None:
        assert DateNormalizer(2025).reference_year == 2025

    def test_month_number(self) -> None:
        assert month_number("September") == 9
        assert month_number("sept") == 9
        assert month_number("Jun.") == 6
        assert month_number("Smarch") is None

    def test_is_iso_date(self) -> None:
        assert is_iso_date("2025-06-24")
        assert not is_iso_date("2025-02-30")
        assert not is_iso_date("2025-6-24")
        assert not is_iso_date("June 24th")


class TestNormalizeRecord:
    """RawRecord to NormalizedRecord."""

    def test_full_record(self) -> None:
        raw = RawRecord(
            date="June 24th",
            time="10-3pm",
            job_name=" Acme Corp ",
            location="Room 204",
            details="Event: Town Hall",
        )
        result = normalize_record(raw, 2025)
        assert result == NormalizedRecord(
            date="2025-06-24",
            start_time="10:00",
            end_time="15:00",
            job_name="Acme Corp",
            location="Room 204",
            details="Event: Town Hall",
        )

    def test_day_first_numeric_date(self) -> None:
        result = normalize_record(RawRecord(date="24-06-2025"), 2025)
        assert result.date == "2025-06-24"

    def test_unparseable_date_becomes_empty(self) -> None:
        result = normalize_record(RawRecord(date="sometime soon"), 2025)
        assert result.date == ""

    def test_unparseable_time_leaves_both_empty(self) -> None:
        result = normalize_record(RawRecord(time="after lunch"), 2025)
        assert (result.start_time, result.end_time) == ("", "")

    def test_single_time_gets_one_hour(self) -> None:
        result = normalize_record(RawRecord(time="2:30 PM"), 2025)
        assert (result.start_time, result.end_time) == ("14:30", "15:30")

    def test_empty_record(self) -> None:
        assert normalize_record(RawRecord(), 2025) == NormalizedRecord()

    def test_wire_format(self) -> None:
        result = normalize_record(RawRecord(date="2025-06-24", time="8am-9am"), 2025)
        assert result.to_dict() == {
            "date": "2025-06-24",
            "startTime": "08:00",
            "endTime": "09:00",
            "jobName": "",
            "location": "",
            "details": "",
        }
