"""Pytest fixtures for extraction tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.enrichment.circuit_breaker import CircuitBreaker
from src.enrichment.config import EnrichmentConfig
from src.extraction.config import ExtractionConfig
from src.extraction.schemas import RawRecord


@pytest.fixture
def extraction_config() -> ExtractionConfig:
    """Config with enrichment on and a short oracle timeout."""
    return ExtractionConfig(enrichment_enabled=True, enrichment_timeout=0.2)


@pytest.fixture
def enrichment_config() -> EnrichmentConfig:
    """Oracle config with a fake key so enrichment counts as configured."""
    return EnrichmentConfig(openai_api_key="test-openai-key")


@pytest.fixture
def mock_client() -> MagicMock:
    """Stand-in oracle client returning a partial record."""
    client = MagicMock()
    client.enrich = AsyncMock(
        return_value=RawRecord(job_name="Acme Corporation", date="2025-06-24"),
    )
    client.close = AsyncMock()
    client.breaker = CircuitBreaker(failure_threshold=3)
    return client
