"""Map upstream events to storage rows and upsert them idempotently.

Rows are keyed by ``(source, source_event_id)``.  Every upsert replaces all
mutable fields, so re-ingesting the same upstream item converges to the
same row.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

import sqlalchemy as sa
import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_ingest.classification.classifier import classify_event
from event_ingest.classification.config import ClassifierConfig
from event_ingest.config.settings import Settings
from event_ingest.errors import StorageError
from event_ingest.models.event import Event
from event_ingest.preprocessing.normalizer import normalize_text
from event_ingest.upstream.schemas import Image, TicketmasterEvent

logger = structlog.get_logger()

SOURCE_TICKETMASTER = "ticketmaster"
UNTITLED = "Untitled"

_IDENTITY_COLUMNS = ("source", "source_event_id")
_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UpsertOutcome(str, Enum):
    PERSISTED = "persisted"
    SKIPPED = "skipped"


def select_best_image(images: list[Image]) -> str | None:
    """Return the URL of the widest image, or None when there are none.

    The sort is stable, so among equally wide images the first listed wins.
    Missing widths count as zero.
    """
    if not images:
        return None
    best = sorted(images, key=lambda img: img.width or 0, reverse=True)[0]
    return best.url


def map_status(code: str | None) -> str:
    if code == "cancelled":
        return "cancelled"
    if code == "postponed":
        return "postponed"
    return "scheduled"


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_event_row(
    item: TicketmasterEvent,
    venue_id: int | None,
    settings: Settings,
    classifier_config: ClassifierConfig | None = None,
) -> dict | None:
    """Map an upstream event to an ``events`` row dict.

    Returns ``None`` when the item has no id or no start timestamp; such
    items are not ingested.
    """
    source_event_id = str(item.id) if item.id else ""
    start_at = item.start_at
    if not source_event_id or start_at is None:
        return None

    title = item.name if item.name is not None else UNTITLED
    price = item.first_price_range
    currency = price.currency if price else None

    return {
        "title": title,
        "title_normalized": normalize_text(title),
        "description": item.info if item.info is not None else item.please_note,
        "start_at": _to_utc(start_at),
        "end_at": _to_utc(item.end_at),
        "timezone": settings.timezone,
        "status": map_status(item.status_code),
        "category_primary": classify_event(item, classifier_config, settings.timezone).value,
        "tags": [],
        "min_price": price.min if price else None,
        "max_price": price.max if price else None,
        "currency": currency if currency is not None else settings.currency,
        "age_restriction": None,
        "image_url": select_best_image(item.images),
        "source": SOURCE_TICKETMASTER,
        "source_event_id": source_event_id,
        "source_url": item.url,
        "venue_id": venue_id,
        "city_normalized": settings.city_normalized,
    }


def _upsert_statement(dialect_name: str, row: dict):
    """Build INSERT ... ON CONFLICT (source, source_event_id) DO UPDATE."""
    insert_fn = _INSERT_BY_DIALECT.get(dialect_name)
    if insert_fn is None:
        raise StorageError(f"Upsert not supported for dialect {dialect_name!r}")

    stmt = insert_fn(Event).values(**row)
    replace = {key: stmt.excluded[key] for key in row if key not in _IDENTITY_COLUMNS}
    replace["updated_at"] = sa.func.now()
    return stmt.on_conflict_do_update(index_elements=list(_IDENTITY_COLUMNS), set_=replace)


async def upsert_event(
    session: AsyncSession,
    item: TicketmasterEvent,
    venue_id: int | None,
    settings: Settings,
    classifier_config: ClassifierConfig | None = None,
) -> UpsertOutcome:
    """Insert or fully replace the stored row for an upstream event.

    Must be called within an active ``session.begin()`` context.

    Returns:
        ``UpsertOutcome.SKIPPED`` if the item lacks an id or start time,
        otherwise ``UpsertOutcome.PERSISTED``.

    Raises:
        StorageError: If the upsert fails.
    """
    row = build_event_row(item, venue_id, settings, classifier_config)
    if row is None:
        return UpsertOutcome.SKIPPED

    stmt = _upsert_statement(session.bind.dialect.name, row)
    try:
        await session.execute(stmt)
    except SQLAlchemyError as e:
        raise StorageError(f"Event upsert failed for {row['source_event_id']}: {e}") from e

    logger.debug(
        "event_upserted",
        source_event_id=row["source_event_id"],
        category=row["category_primary"],
        venue_id=venue_id,
    )
    return UpsertOutcome.PERSISTED
