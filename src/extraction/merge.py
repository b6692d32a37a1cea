"""Field-by-field merge of the heuristic baseline with oracle enrichment.

The baseline always comes from the deterministic extractor. An enrichment
value replaces the baseline value only when it is present and non-blank;
a missing or unusable enrichment leaves the baseline untouched.
"""

from dataclasses import fields

from src.extraction.schemas import RawRecord


def _usable(value: str | None) -> bool:
    return isinstance(value, str) and bool(value.strip())


def merge(baseline: RawRecord, enrichment: RawRecord | None) -> RawRecord:
    """
    Overlay enrichment values onto the baseline record.

    Args:
        baseline: Heuristic extractor output.
        enrichment: Oracle output, or None when the oracle failed.

    Returns:
        New RawRecord where each field is the trimmed enrichment value if
        usable, otherwise the baseline value.
    """
    if enrichment is None:
        return baseline

    overrides: dict[str, str] = {}
    for f in fields(RawRecord):
        value = getattr(enrichment, f.name)
        if _usable(value):
            overrides[f.name] = value.strip()

    return baseline.with_values(**overrides) if overrides else baseline
