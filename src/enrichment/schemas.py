"""Validation schema for enrichment oracle responses.

The oracle's JSON has no enforced schema, so every known field is checked
to be a string (or absent/null) before anything is merged. Unknown keys are
ignored; a known key with any other type rejects the whole response.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.extraction.schemas import RawRecord


class EnrichmentPayload(BaseModel):
    """A RawRecord-shaped oracle response with strictly typed fields."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, strict=True)

    date: str | None = None
    time: str | None = None
    job_name: str | None = Field(default=None, alias="jobName")
    location: str | None = None
    details: str | None = None
    color_id: str | None = Field(default=None, alias="colorId")

    def to_record(self) -> RawRecord:
        """Convert to a RawRecord, keeping None for absent fields."""
        return RawRecord(
            date=self.date,
            time=self.time,
            job_name=self.job_name,
            location=self.location,
            details=self.details,
            color_id=self.color_id,
        )
