"""Protected ingestion triggers.

Both endpoints run the same in-process pipeline; they differ only in how
the caller is authorized and in the page cap applied.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_ingest.api.auth import parse_max_pages, require_bearer, require_key
from event_ingest.api.deps import (
    get_app_settings,
    get_classifier_config,
    get_event_source,
    get_session_maker,
)
from event_ingest.api.schemas import IngestResponse
from event_ingest.classification.config import ClassifierConfig
from event_ingest.config.settings import Settings
from event_ingest.errors import ConfigError
from event_ingest.ingestion.pipeline import run_ingestion
from event_ingest.upstream.ticketmaster import TicketmasterClient

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["ingest"])


async def _run(
    trigger: str,
    max_pages: int,
    settings: Settings,
    source: TicketmasterClient,
    session_factory: async_sessionmaker[AsyncSession],
    classifier_config: ClassifierConfig,
) -> IngestResponse:
    if not settings.ticketmaster_api_key:
        raise ConfigError("Server misconfigured: missing TICKETMASTER_API_KEY")

    logger.info("ingestion_triggered", trigger=trigger, max_pages=max_pages)
    summary = await run_ingestion(
        source,
        session_factory,
        settings,
        max_pages=max_pages,
        classifier_config=classifier_config,
    )
    return IngestResponse.from_summary(summary)


@router.post("/admin/ingest-ticketmaster", response_model=IngestResponse)
async def admin_ingest(
    authorization: str | None = Header(default=None),
    max_pages: str | None = Query(default=None, alias="maxPages"),
    settings: Settings = Depends(get_app_settings),
    source: TicketmasterClient = Depends(get_event_source),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
    classifier_config: ClassifierConfig = Depends(get_classifier_config),
) -> IngestResponse:
    """Run an ingestion pass; authorized by ``Authorization: Bearer <secret>``."""
    require_bearer(authorization, settings.ingest_secret)
    cap = parse_max_pages(max_pages, settings.admin_default_max_pages)
    return await _run("admin", cap, settings, source, session_factory, classifier_config)


@router.get("/cron/ingest-ticketmaster", response_model=IngestResponse)
async def cron_ingest(
    key: str | None = Query(default=None),
    settings: Settings = Depends(get_app_settings),
    source: TicketmasterClient = Depends(get_event_source),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_maker),
    classifier_config: ClassifierConfig = Depends(get_classifier_config),
) -> IngestResponse:
    """Scheduled ingestion pass with the fixed cron page cap; authorized by ``?key=``."""
    require_key(key, settings.cron_secret)
    return await _run("cron", settings.cron_max_pages, settings, source, session_factory, classifier_config)
