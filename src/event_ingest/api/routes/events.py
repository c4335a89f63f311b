"""Read endpoint for upcoming events in the target city."""

from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from event_ingest.api.deps import get_app_settings, get_db
from event_ingest.api.schemas import UpcomingEvent
from event_ingest.classification.classifier import Category
from event_ingest.config.settings import Settings
from event_ingest.models.event import Event

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[UpcomingEvent])
async def list_upcoming_events(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    category: Category | None = None,
    limit: int | None = Query(default=None, ge=1),
) -> list[UpcomingEvent]:
    """List events starting from now, soonest first.

    The row count is capped at ``settings.upcoming_limit`` regardless of
    the requested ``limit``.
    """
    row_cap = min(limit or settings.upcoming_limit, settings.upcoming_limit)
    now = datetime.now(timezone.utc)

    stmt = sa.select(Event).where(
        Event.city_normalized == settings.city_normalized,
        Event.start_at >= now,
    )
    if category is not None:
        stmt = stmt.where(Event.category_primary == category.value)
    stmt = stmt.order_by(Event.start_at.asc()).limit(row_cap)

    result = await db.execute(stmt)
    return [UpcomingEvent.model_validate(e) for e in result.scalars().all()]
