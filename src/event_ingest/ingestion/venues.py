"""Venue lookup-or-create keyed by (name, address_line1, normalized city)."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_ingest.config.settings import Settings
from event_ingest.errors import StorageError
from event_ingest.models.venue import Venue
from event_ingest.preprocessing.normalizer import normalize_text
from event_ingest.upstream.schemas import TicketmasterVenue

logger = structlog.get_logger()


@dataclass
class VenueResolution:
    venue_id: int | None
    created: bool = False


async def resolve_venue(
    session: AsyncSession,
    raw_venue: TicketmasterVenue | None,
    settings: Settings,
) -> VenueResolution:
    """Return the id of the venue matching ``raw_venue``, creating it if needed.

    A venue without a name resolves to ``None``.  Lookup and insert are two
    separate statements: concurrent runs that both miss the lookup will each
    insert a row.

    Must be called within an active ``session.begin()`` context.

    Raises:
        StorageError: If the lookup or insert fails.
    """
    if raw_venue is None or not raw_venue.name:
        return VenueResolution(venue_id=None)

    city = raw_venue.city_name or settings.city_name
    city_normalized = normalize_text(city)
    address = raw_venue.address_line1

    try:
        result = await session.execute(
            select(Venue.id)
            .where(
                Venue.name == raw_venue.name,
                Venue.address_line1 == address,
                Venue.city_normalized == city_normalized,
            )
            .limit(1)
        )
        existing_id = result.scalar_one_or_none()
        if existing_id is not None:
            return VenueResolution(venue_id=existing_id)

        venue = Venue(
            name=raw_venue.name,
            address_line1=address,
            city=city,
            city_normalized=city_normalized,
            region=raw_venue.state_code or settings.region,
            postal_code=raw_venue.postal_code,
            country=raw_venue.country_code or settings.country,
            lat=raw_venue.latitude,
            lng=raw_venue.longitude,
            timezone=settings.timezone,
        )
        session.add(venue)
        await session.flush()  # Get auto-generated ID
    except SQLAlchemyError as e:
        raise StorageError(f"Venue resolution failed for {raw_venue.name!r}: {e}") from e

    logger.info("venue_created", venue_id=venue.id, name=venue.name, city=city_normalized)
    return VenueResolution(venue_id=venue.id, created=True)
