"""Configuration for the LLM enrichment oracle.

Provides Pydantic settings for the provider choice, API keys, model names,
request limits and circuit breaker tuning. All settings can be overridden
via ENRICHMENT_* environment variables.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnrichmentConfig(BaseSettings):
    """Configuration for the email enrichment oracle.

    Settings can be overridden via environment variables prefixed with ENRICHMENT_.

    Example:
        ENRICHMENT_PROVIDER=anthropic
        ENRICHMENT_ANTHROPIC_API_KEY=sk-ant-...
    """

    model_config = SettingsConfigDict(
        env_prefix="ENRICHMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["openai", "anthropic"] = Field(
        default="openai",
        description="Which LLM API answers enrichment requests",
    )

    # LLM API keys
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key",
    )
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key",
    )

    # Model selection
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model used for enrichment",
    )
    anthropic_model: str = Field(
        default="claude-3-5-haiku-latest",
        description="Anthropic model used for enrichment",
    )

    # Request limits
    llm_timeout: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="SDK-level timeout in seconds for one API call",
    )
    max_input_chars: int = Field(
        default=12_000,
        ge=500,
        description="Email text is truncated to this many characters before sending",
    )
    max_output_tokens: int = Field(
        default=1024,
        ge=64,
        le=8192,
        description="Response token cap for providers that require one",
    )

    # Circuit breaker settings
    circuit_failure_threshold: int = Field(
        default=5,
        ge=1,
        description="Consecutive failures before opening circuit",
    )
    circuit_recovery_timeout: float = Field(
        default=60.0,
        ge=1.0,
        description="Seconds before attempting recovery probe",
    )

    @property
    def api_key(self) -> SecretStr | None:
        """API key for the selected provider."""
        if self.provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key

    @property
    def model(self) -> str:
        """Model name for the selected provider."""
        if self.provider == "anthropic":
            return self.anthropic_model
        return self.openai_model

    @property
    def is_configured(self) -> bool:
        """Check if the selected provider has an API key."""
        return self.api_key is not None
