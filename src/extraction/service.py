"""Email extraction service: heuristic baseline, optional oracle, merge.

The service is pure: it takes email text and returns a RawRecord (or a
NormalizedRecord). The heuristic extractor always runs; the LLM oracle is
consulted only when enabled and configured, bounded by a timeout, and any
oracle failure leaves the baseline in place.

Follows the constructor pattern of the other services:
``(config?, enrichment_config?, extractor?, client?)`` with lazy
initialization of the oracle client.
"""

import asyncio
import logging
from typing import Any

from src.enrichment.circuit_breaker import CircuitOpenError
from src.enrichment.config import EnrichmentConfig
from src.extraction.config import ExtractionConfig
from src.extraction.merge import merge
from src.extraction.normalizer import normalize_record
from src.extraction.patterns import HeuristicExtractor
from src.extraction.schemas import NormalizedRecord, RawRecord

logger = logging.getLogger(__name__)


class EventExtractionService:
    """Extract calendar events from email text.

    Methods:
      - ``extract_baseline(text)`` - deterministic heuristic extraction
      - ``extract_email(text)`` - baseline merged with oracle enrichment
      - ``extract_email_normalized(text, reference_year)`` - same, normalized
      - ``get_stats()`` - counters and circuit breaker status
      - ``close()`` - cleanup

    Args:
        config: Extraction configuration. Defaults to ExtractionConfig().
        enrichment_config: Oracle configuration. Defaults to EnrichmentConfig().
        extractor: Heuristic extractor override.
        client: Oracle client override (anything with ``async enrich(text)``).
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        enrichment_config: EnrichmentConfig | None = None,
        extractor: HeuristicExtractor | None = None,
        client: Any = None,
    ) -> None:
        self._config = config or ExtractionConfig()
        self._enrichment_config = enrichment_config
        self._extractor = extractor or HeuristicExtractor(self._config)
        self._client = client
        self._stats = {
            "total_extracted": 0,
            "enriched": 0,
            "baseline_only": 0,
            "errors": 0,
        }

    def _get_enrichment_config(self) -> EnrichmentConfig:
        if self._enrichment_config is None:
            self._enrichment_config = EnrichmentConfig()
        return self._enrichment_config

    def _get_client(self) -> Any:
        """Lazy-initialize the oracle client."""
        if self._client is None:
            from src.enrichment.llm_client import EnrichmentClient

            self._client = EnrichmentClient(self._get_enrichment_config())
        return self._client

    def _should_enrich(self, enrich: bool | None) -> bool:
        wanted = self._config.enrichment_enabled if enrich is None else enrich
        if not wanted:
            return False
        # An injected client is assumed to be ready
        if self._client is not None:
            return True
        if not self._get_enrichment_config().is_configured:
            logger.info("Enrichment requested but no API key configured, using baseline")
            return False
        return True

    def extract_baseline(self, text: str) -> RawRecord:
        """Run only the heuristic extractor."""
        return self._extractor.extract(text)

    async def _enrich(self, text: str) -> RawRecord | None:
        try:
            return await asyncio.wait_for(
                self._get_client().enrich(text),
                timeout=self._config.enrichment_timeout,
            )
        except CircuitOpenError:
            logger.info("Enrichment circuit open, using baseline")
        except asyncio.TimeoutError:
            logger.warning(
                "Enrichment timed out after %.1fs", self._config.enrichment_timeout,
            )
            self._stats["errors"] += 1
        except Exception as e:
            logger.warning("Enrichment failed: %s", e)
            self._stats["errors"] += 1
        return None

    async def extract_email(self, text: str, enrich: bool | None = None) -> RawRecord:
        """Extract an event from an email.

        Pipeline:
          1. Heuristic baseline (always)
          2. Oracle enrichment (if enabled and configured)
          3. Field-by-field merge, enrichment winning only where usable

        Args:
            text: Raw email text.
            enrich: Override ``ExtractionConfig.enrichment_enabled``.

        Returns:
            RawRecord (always succeeds; worst case = baseline).
        """
        self._stats["total_extracted"] += 1
        baseline = self.extract_baseline(text)

        if not text or not text.strip() or not self._should_enrich(enrich):
            self._stats["baseline_only"] += 1
            return baseline

        enrichment = await self._enrich(text)
        if enrichment is None:
            self._stats["baseline_only"] += 1
            return baseline

        self._stats["enriched"] += 1
        return merge(baseline, enrichment)

    async def extract_email_normalized(
        self,
        text: str,
        reference_year: int,
        enrich: bool | None = None,
    ) -> NormalizedRecord:
        """Extract an event and normalize it for calendar writers."""
        record = await self.extract_email(text, enrich=enrich)
        return normalize_record(record, reference_year)

    def get_stats(self) -> dict[str, Any]:
        """Return extraction statistics and circuit breaker state."""
        breaker = getattr(self._client, "breaker", None)
        return {
            **self._stats,
            "circuit": breaker.state.value if breaker is not None else "not_initialized",
        }

    async def close(self) -> None:
        """Clean up the oracle client."""
        if self._client is not None:
            close = getattr(self._client, "close", None)
            if close is not None:
                await close()
            self._client = None
