"""Tests for the email extraction service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from src.enrichment.circuit_breaker import CircuitOpenError, CircuitState
from src.enrichment.config import EnrichmentConfig
from src.enrichment.llm_client import EnrichmentClient
from src.extraction.config import ExtractionConfig
from src.extraction.schemas import NormalizedRecord, RawRecord
from src.extraction.service import EventExtractionService

EMAIL = (
    "Organization: Acme Corp\n"
    "Captioner Connection Time: 10:00 AM\n"
    "Scheduled Start: 9:45 AM\n"
    "Scheduled End: 11:30 AM"
)


class TestBaseline:
    """Enrichment disabled: heuristic output only."""

    async def test_disabled_by_default(self, mock_client: MagicMock) -> None:
        service = EventExtractionService(config=ExtractionConfig(), client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corp"
        assert record.time == "10:00 AM to 11:30 AM"
        mock_client.enrich.assert_not_awaited()

    async def test_per_call_override(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        service = EventExtractionService(config=extraction_config, client=mock_client)
        await service.extract_email(EMAIL, enrich=False)
        mock_client.enrich.assert_not_awaited()

    async def test_unconfigured_oracle_is_skipped(
        self, extraction_config: ExtractionConfig,
    ) -> None:
        service = EventExtractionService(
            config=extraction_config,
            enrichment_config=EnrichmentConfig(openai_api_key=None),
        )
        with patch.object(service, "_get_client") as get_client:
            record = await service.extract_email(EMAIL)
        get_client.assert_not_called()
        assert record.job_name == "Acme Corp"
        assert service.get_stats()["baseline_only"] == 1

    async def test_blank_text_skips_oracle(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email("   ")
        assert record == RawRecord()
        mock_client.enrich.assert_not_awaited()


class TestEnrichment:
    """Enrichment enabled: oracle values overlay the baseline."""

    async def test_merges_oracle_values(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corporation"
        assert record.date == "2025-06-24"
        # Baseline kept where the oracle had nothing
        assert record.time == "10:00 AM to 11:30 AM"
        assert "Original Schedule: 9:45 AM" in record.details
        mock_client.enrich.assert_awaited_once_with(EMAIL)
        assert service.get_stats()["enriched"] == 1

    async def test_oracle_none_falls_back(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        mock_client.enrich = AsyncMock(return_value=None)
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corp"
        assert service.get_stats()["baseline_only"] == 1

    async def test_oracle_exception_falls_back(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        mock_client.enrich = AsyncMock(side_effect=RuntimeError("API down"))
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corp"
        assert service.get_stats()["errors"] == 1

    async def test_open_circuit_falls_back_without_error(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        mock_client.enrich = AsyncMock(side_effect=CircuitOpenError("OPEN"))
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corp"
        assert service.get_stats()["errors"] == 0

    async def test_slow_oracle_times_out(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        async def _hang(text: str) -> RawRecord:
            await asyncio.sleep(5)
            return RawRecord(job_name="Too Late")

        mock_client.enrich = _hang
        service = EventExtractionService(config=extraction_config, client=mock_client)
        record = await service.extract_email(EMAIL)
        assert record.job_name == "Acme Corp"
        assert service.get_stats()["errors"] == 1

    async def test_hung_oracle_opens_circuit(self) -> None:
        async def _hang(**kwargs) -> None:
            await asyncio.sleep(5)

        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(side_effect=_hang)
        sdk.close = AsyncMock()
        client = EnrichmentClient(
            EnrichmentConfig(openai_api_key="test-openai-key", circuit_failure_threshold=2),
        )
        client._openai_client = sdk
        service = EventExtractionService(
            config=ExtractionConfig(enrichment_enabled=True, enrichment_timeout=0.05),
            client=client,
        )

        for _ in range(4):
            record = await service.extract_email(EMAIL)
            assert record.job_name == "Acme Corp"

        assert client.breaker.state == CircuitState.OPEN
        assert sdk.chat.completions.create.call_count == 2
        stats = service.get_stats()
        assert stats["errors"] == 2
        assert stats["baseline_only"] == 4
        assert stats["circuit"] == "open"

    async def test_lazy_client_uses_enrichment_config(
        self, extraction_config: ExtractionConfig, enrichment_config: EnrichmentConfig,
    ) -> None:
        service = EventExtractionService(
            config=extraction_config, enrichment_config=enrichment_config,
        )
        client = service._get_client()
        assert client.config is enrichment_config
        assert service._get_client() is client


class TestNormalized:
    async def test_extract_email_normalized(self, mock_client: MagicMock) -> None:
        service = EventExtractionService(client=mock_client)
        event = await service.extract_email_normalized(EMAIL, reference_year=2025)
        assert isinstance(event, NormalizedRecord)
        assert (event.start_time, event.end_time) == ("10:00", "11:30")
        assert event.job_name == "Acme Corp"
        assert event.date == ""


class TestStats:
    async def test_stats_counts(
        self, extraction_config: ExtractionConfig, mock_client: MagicMock,
    ) -> None:
        service = EventExtractionService(config=extraction_config, client=mock_client)
        await service.extract_email(EMAIL)
        await service.extract_email(EMAIL, enrich=False)
        stats = service.get_stats()
        assert stats["total_extracted"] == 2
        assert stats["enriched"] == 1
        assert stats["baseline_only"] == 1
        assert stats["circuit"] == "closed"

    def test_stats_before_client(self) -> None:
        assert EventExtractionService().get_stats()["circuit"] == "not_initialized"

    async def test_close_cleans_up(self, mock_client: MagicMock) -> None:
        service = EventExtractionService(client=mock_client)
        await service.close()
        mock_client.close.assert_awaited_once()
        assert service.get_stats()["circuit"] == "not_initialized"
