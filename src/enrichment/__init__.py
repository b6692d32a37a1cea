"""LLM enrichment oracle for email extraction.

The oracle is consulted after the heuristic extractor and is never
authoritative: its values only fill or replace baseline fields when they
are usable, and any failure leaves the baseline in place.

Usage:
    from src.enrichment import EnrichmentClient

    client = EnrichmentClient()
    record = await client.enrich(email_text)  # RawRecord or None
"""

from src.enrichment.circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState
from src.enrichment.config import EnrichmentConfig
from src.enrichment.llm_client import EnrichmentClient, parse_enrichment_response
from src.enrichment.schemas import EnrichmentPayload

__all__ = [
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "EnrichmentClient",
    "EnrichmentConfig",
    "EnrichmentPayload",
    "parse_enrichment_response",
]
