"""LLM API abstraction for email enrichment.

Provides one interface over OpenAI (JSON mode) and Anthropic (messages)
with lazy SDK initialization, a circuit breaker, and response validation
against the EnrichmentPayload schema.

SDK imports are deferred to method calls (lazy loading) to avoid import-time
failures when API keys are not configured.
"""

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError

from src.enrichment.circuit_breaker import CircuitBreaker, CircuitOpenError
from src.enrichment.config import EnrichmentConfig
from src.enrichment.prompts import EXTRACTION_PROMPT, SYSTEM_PROMPT
from src.enrichment.schemas import EnrichmentPayload
from src.extraction.schemas import RawRecord

logger = logging.getLogger(__name__)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence."""
    text = raw.strip()
    if "```json" in text:
        text = text.split("```json", 1)[1].split("```", 1)[0]
    elif "```" in text:
        text = text.split("```", 1)[1].split("```", 1)[0]
    return text.strip()


def parse_enrichment_response(raw: str | None, provider: str = "llm") -> RawRecord | None:
    """Parse a raw oracle response into a RawRecord.

    Returns None on any parse/validation failure (graceful degradation):
    empty output, non-JSON output, a JSON value that is not an object, or
    a known field that is not a string.
    """
    if not raw or not raw.strip():
        return None

    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError:
        logger.warning("Failed to parse %s response as JSON", provider)
        return None

    if not isinstance(data, dict):
        logger.warning("Expected a JSON object from %s, got %s", provider, type(data).__name__)
        return None

    try:
        payload = EnrichmentPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Failed to validate %s response: %s", provider, e.error_count())
        return None

    return payload.to_record()


class EnrichmentClient:
    """LLM client that asks the configured provider to extract an event.

    Features:
    - Lazy SDK initialization (import on first use)
    - Circuit breaker shared by both providers
    - Response validation against a Pydantic schema
    - Graceful fallback to None on parse failure

    Args:
        config: Enrichment configuration with provider, API keys and models.
    """

    def __init__(self, config: EnrichmentConfig | None = None) -> None:
        self._config = config or EnrichmentConfig()
        self._openai_client: Any = None
        self._anthropic_client: Any = None
        self._breaker = CircuitBreaker(
            failure_threshold=self._config.circuit_failure_threshold,
            recovery_timeout=self._config.circuit_recovery_timeout,
            name=self._config.provider,
        )

    @property
    def config(self) -> EnrichmentConfig:
        return self._config

    @property
    def breaker(self) -> CircuitBreaker:
        """Access circuit breaker state."""
        return self._breaker

    def _get_openai_client(self) -> Any:
        """Lazy-initialize OpenAI async client."""
        if self._openai_client is None:
            import openai

            api_key = self._config.openai_api_key
            key_str = api_key.get_secret_value() if api_key else None
            self._openai_client = openai.AsyncOpenAI(
                api_key=key_str,
                timeout=self._config.llm_timeout,
            )
        return self._openai_client

    def _get_anthropic_client(self) -> Any:
        """Lazy-initialize Anthropic async client."""
        if self._anthropic_client is None:
            import anthropic

            api_key = self._config.anthropic_api_key
            key_str = api_key.get_secret_value() if api_key else None
            self._anthropic_client = anthropic.AsyncAnthropic(
                api_key=key_str,
                timeout=self._config.llm_timeout,
            )
        return self._anthropic_client

    def build_prompt(self, text: str) -> str:
        """Format the extraction prompt, truncating very long emails."""
        return EXTRACTION_PROMPT.format(text=text[: self._config.max_input_chars])

    async def _complete_openai(self, prompt: str) -> str | None:
        client = self._get_openai_client()
        response = await client.chat.completions.create(
            model=self._config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content

    async def _complete_anthropic(self, prompt: str) -> str | None:
        client = self._get_anthropic_client()
        response = await client.messages.create(
            model=self._config.model,
            max_tokens=self._config.max_output_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
            temperature=0,
        )
        parts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        return "".join(parts) or None

    async def enrich(self, text: str) -> RawRecord | None:
        """Ask the oracle for an event record.

        Args:
            text: Raw email text.

        Returns:
            RawRecord built from the oracle's JSON, or None when the
            response was unusable.

        Raises:
            CircuitOpenError: If the circuit is open.
            Exception: Whatever the SDK raises (network, auth, timeout).
        """
        if not self._breaker.allow():
            raise CircuitOpenError(f"Circuit breaker {self._breaker.name} is OPEN")

        prompt = self.build_prompt(text)
        provider = self._config.provider
        try:
            if provider == "anthropic":
                raw = await self._complete_anthropic(prompt)
            else:
                raw = await self._complete_openai(prompt)
        except (Exception, asyncio.CancelledError):
            # A caller-side timeout cancels the call; it still counts
            self._breaker.record_failure()
            raise

        record = parse_enrichment_response(raw, provider=provider)
        if record is None:
            self._breaker.record_failure()
        else:
            self._breaker.record_success()
        return record

    async def close(self) -> None:
        """Clean up SDK clients."""
        if self._openai_client is not None:
            await self._openai_client.close()
            self._openai_client = None
        if self._anthropic_client is not None:
            await self._anthropic_client.close()
            self._anthropic_client = None
