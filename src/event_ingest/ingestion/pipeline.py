"""Ingestion run driver: page through upstream events and persist them.

One run walks upstream pages sequentially until the upstream page count
or the caller's page cap is reached.  Each item's venue resolution and
event upsert commit in their own transactions, so a failure part-way
through leaves everything before it durably stored; the error is then
re-raised to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_ingest.classification.config import ClassifierConfig
from event_ingest.config.settings import Settings
from event_ingest.errors import StorageError
from event_ingest.ingestion.events import UpsertOutcome, upsert_event
from event_ingest.ingestion.venues import resolve_venue
from event_ingest.upstream.schemas import TicketmasterEvent
from event_ingest.upstream.ticketmaster import TicketmasterClient

logger = structlog.get_logger()


class RunState(str, Enum):
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@dataclass
class IngestionSummary:
    ingested: int = 0
    venues_upserted: int = 0
    pages_processed: int = 0
    total_pages_reported: int = 0
    max_pages_used: int | None = None
    state: RunState = RunState.RUNNING


async def _ingest_item(
    item: TicketmasterEvent,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    classifier_config: ClassifierConfig | None,
    summary: IngestionSummary,
) -> None:
    async with session_factory() as session:
        async with session.begin():
            resolution = await resolve_venue(session, item.primary_venue, settings)
        if resolution.created:
            summary.venues_upserted += 1

        async with session.begin():
            outcome = await upsert_event(
                session, item, resolution.venue_id, settings, classifier_config
            )
        if outcome is UpsertOutcome.PERSISTED:
            summary.ingested += 1


def _mark_failed(summary: IngestionSummary, log) -> None:
    summary.state = RunState.FAILED
    log.error(
        "ingestion_failed",
        state=summary.state.value,
        pages_processed=summary.pages_processed,
        ingested=summary.ingested,
        venues_upserted=summary.venues_upserted,
        exc_info=True,
    )


async def run_ingestion(
    source: TicketmasterClient,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    max_pages: int | None = None,
    page_size: int | None = None,
    classifier_config: ClassifierConfig | None = None,
) -> IngestionSummary:
    """Run one ingestion pass.

    Args:
        source: Page-at-a-time event source (``fetch_page(page, size)``).
        session_factory: Async session factory for DB access.
        settings: Service settings (target city defaults, page size).
        max_pages: Maximum number of pages to process.  ``None`` walks
            every page the upstream reports.
        page_size: Events per page; ``None`` uses ``settings.page_size``.
        classifier_config: Category classifier configuration.

    Returns:
        Summary with counters and the final ``RunState.DONE`` state.

    Raises:
        UpstreamError: A page fetch failed.
        StorageError: A venue or event write failed.
    """
    summary = IngestionSummary(max_pages_used=max_pages)
    log = logger.bind(max_pages=max_pages)

    page = 0
    total_pages = 1
    try:
        while page < total_pages and (max_pages is None or page < max_pages):
            result = await source.fetch_page(page, page_size)
            total_pages = result.total_pages
            summary.total_pages_reported = total_pages

            for item in result.items:
                await _ingest_item(item, session_factory, settings, classifier_config, summary)

            page += 1
            summary.pages_processed = page
            log.info(
                "page_processed",
                page=page,
                total_pages=total_pages,
                events_on_page=len(result.items),
                ingested=summary.ingested,
            )
    except SQLAlchemyError as e:
        _mark_failed(summary, log)
        raise StorageError(f"Storage failure during ingestion: {e}") from e
    except Exception:
        _mark_failed(summary, log)
        raise

    summary.state = RunState.DONE
    log.info(
        "ingestion_complete",
        state=summary.state.value,
        ingested=summary.ingested,
        venues_upserted=summary.venues_upserted,
        pages_processed=summary.pages_processed,
        total_pages_reported=summary.total_pages_reported,
    )
    return summary
