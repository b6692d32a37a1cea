"""Pytest fixtures for enrichment tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.enrichment.config import EnrichmentConfig


@pytest.fixture
def openai_config() -> EnrichmentConfig:
    return EnrichmentConfig(
        provider="openai",
        openai_api_key="test-openai-key",
        circuit_failure_threshold=2,
        circuit_recovery_timeout=5.0,
    )


@pytest.fixture
def anthropic_config() -> EnrichmentConfig:
    return EnrichmentConfig(
        provider="anthropic",
        anthropic_api_key="test-anthropic-key",
        circuit_failure_threshold=2,
        circuit_recovery_timeout=5.0,
    )


@pytest.fixture
def mock_openai_sdk() -> MagicMock:
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock()
    sdk.close = AsyncMock()
    return sdk


@pytest.fixture
def mock_anthropic_sdk() -> MagicMock:
    sdk = MagicMock()
    sdk.messages.create = AsyncMock()
    sdk.close = AsyncMock()
    return sdk
