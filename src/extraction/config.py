"""Configuration for the event extraction engine.

Uses Pydantic settings for environment-based configuration,
following the same pattern as other component configs in the project.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionConfig(BaseSettings):
    """
    Configuration for email and spreadsheet event extraction.

    All settings can be overridden via environment variables with EXTRACTION_ prefix.
    Example: EXTRACTION_ENRICHMENT_ENABLED=true

    Attributes:
        enrichment_enabled: Whether the email path consults the LLM oracle.
        enrichment_timeout: Seconds to wait for the oracle before using the
            heuristic baseline alone.
        name_phrase_min_words: Shortest phrase accepted by the last-resort
            job-name heuristic.
        name_phrase_max_words: Longest phrase accepted by that heuristic.
        useful_cell_min_length: Unmapped spreadsheet cells must be longer
            than this to be copied into details.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRACTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enrichment_enabled: bool = Field(
        default=False,
        description="Consult the LLM enrichment oracle for emails.",
    )
    enrichment_timeout: float = Field(
        default=20.0,
        gt=0.0,
        le=120.0,
        description="Caller-side bound on the oracle call, in seconds.",
    )
    name_phrase_min_words: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Minimum words in a fallback job-name phrase.",
    )
    name_phrase_max_words: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum words in a fallback job-name phrase.",
    )
    useful_cell_min_length: int = Field(
        default=5,
        ge=0,
        description="Unmapped cells must exceed this length to count as details.",
    )

    @model_validator(mode="after")
    def _check_phrase_window(self) -> "ExtractionConfig":
        if self.name_phrase_min_words > self.name_phrase_max_words:
            raise ValueError("name_phrase_min_words must not exceed name_phrase_max_words")
        return self
