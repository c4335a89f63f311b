"""Pydantic response schemas for the event ingestion API."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from event_ingest.ingestion.pipeline import IngestionSummary


class UpcomingEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    start_at: dt.datetime
    category_primary: str
    image_url: str | None = None
    source_url: str | None = None


class IngestResponse(BaseModel):
    """Summary of one ingestion run, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    ingested: int
    venues_upserted: int = Field(alias="venuesUpserted")
    pages_processed: int = Field(alias="pagesProcessed")
    total_pages_reported: int = Field(alias="totalPagesReportedByUpstream")
    max_pages_used: int | None = Field(alias="maxPagesUsed")

    @classmethod
    def from_summary(cls, summary: IngestionSummary) -> IngestResponse:
        return cls(
            ingested=summary.ingested,
            venues_upserted=summary.venues_upserted,
            pages_processed=summary.pages_processed,
            total_pages_reported=summary.total_pages_reported,
            max_pages_used=summary.max_pages_used,
        )


class HealthResponse(BaseModel):
    ok: bool
    sample: list[dict] = []
