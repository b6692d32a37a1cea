"""Tests for merging the heuristic baseline with oracle enrichment."""

from src.extraction.merge import merge
from src.extraction.schemas import RawRecord


class TestMerge:
    """Field-level overlay of enrichment onto the baseline."""

    def test_field_level_fallback(self) -> None:
        baseline = RawRecord(job_name="Acme", date="")
        enrichment = RawRecord(job_name="", date="2025-06-24")
        merged = merge(baseline, enrichment)
        assert merged.job_name == "Acme"
        assert merged.date == "2025-06-24"

    def test_none_enrichment_returns_baseline(self) -> None:
        baseline = RawRecord(job_name="Acme", time="10-3pm")
        assert merge(baseline, None) is baseline

    def test_usable_enrichment_wins(self) -> None:
        baseline = RawRecord(job_name="Hello Team", location="Remote/Virtual")
        enrichment = RawRecord(job_name="Acme Corp")
        merged = merge(baseline, enrichment)
        assert merged.job_name == "Acme Corp"
        assert merged.location == "Remote/Virtual"

    def test_whitespace_enrichment_is_ignored(self) -> None:
        merged = merge(RawRecord(time="10-3pm"), RawRecord(time="   "))
        assert merged.time == "10-3pm"

    def test_enrichment_values_are_trimmed(self) -> None:
        merged = merge(RawRecord(), RawRecord(location="  Room 5 \n"))
        assert merged.location == "Room 5"

    def test_fills_fields_baseline_missed(self) -> None:
        merged = merge(RawRecord(job_name="Acme"), RawRecord(color_id="5", details="Notes"))
        assert merged == RawRecord(job_name="Acme", details="Notes", color_id="5")

    def test_empty_enrichment_leaves_baseline(self) -> None:
        baseline = RawRecord(job_name="Acme", date="June 24th")
        assert merge(baseline, RawRecord()) == baseline
