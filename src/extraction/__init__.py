"""Calendar event extraction from emails.

A deterministic heuristic extractor produces a baseline RawRecord; an
optional LLM oracle may improve individual fields; the normalization step
turns the result into machine-sortable dates and 24-hour times.

Usage:
    from src.extraction import EventExtractionService, normalize_record

    service = EventExtractionService()
    record = await service.extract_email(email_text)
    event = normalize_record(record, reference_year=2025)
"""

from src.extraction.schemas import INVALID_TIME, NormalizedRecord, ParsedTime, RawRecord
from src.extraction.time_parser import normalize_date_format, parse_time_range
from src.extraction.normalizer import DateNormalizer, normalize_date, normalize_record
from src.extraction.patterns import HeuristicExtractor, extract
from src.extraction.merge import merge
from src.extraction.config import ExtractionConfig
from src.extraction.service import EventExtractionService

__all__ = [
    "DateNormalizer",
    "EventExtractionService",
    "ExtractionConfig",
    "HeuristicExtractor",
    "INVALID_TIME",
    "NormalizedRecord",
    "ParsedTime",
    "RawRecord",
    "extract",
    "merge",
    "normalize_date",
    "normalize_date_format",
    "normalize_record",
    "parse_time_range",
]
