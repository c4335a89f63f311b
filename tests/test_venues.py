"""Tests for venue lookup-or-create."""

from sqlalchemy import func, select

from event_ingest.ingestion.venues import resolve_venue
from event_ingest.models.venue import Venue
from event_ingest.upstream.schemas import TicketmasterEvent


def _venue(make_tm_event, **kwargs):
    return TicketmasterEvent.model_validate(make_tm_event(**kwargs)).primary_venue


async def _resolve(session_factory, raw_venue, settings):
    async with session_factory() as session, session.begin():
        return await resolve_venue(session, raw_venue, settings)


async def _venue_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Venue))).scalar_one()


async def test_same_key_resolves_to_one_venue(test_session_factory, settings, make_tm_event):
    first = await _resolve(test_session_factory, _venue(make_tm_event), settings)
    second = await _resolve(test_session_factory, _venue(make_tm_event), settings)

    assert first.created is True
    assert second.created is False
    assert first.venue_id == second.venue_id
    assert await _venue_count(test_session_factory) == 1


async def test_city_is_matched_after_normalization(test_session_factory, settings, make_tm_event):
    first = await _resolve(test_session_factory, _venue(make_tm_event, venue_city="Montréal"), settings)
    second = await _resolve(test_session_factory, _venue(make_tm_event, venue_city="MONTREAL "), settings)
    assert first.venue_id == second.venue_id


async def test_different_address_creates_new_venue(test_session_factory, settings, make_tm_event):
    first = await _resolve(test_session_factory, _venue(make_tm_event, venue_address="1600 Rue Saint-Urbain"), settings)
    second = await _resolve(test_session_factory, _venue(make_tm_event, venue_address="1600 St-Urbain St"), settings)
    assert first.venue_id != second.venue_id
    assert await _venue_count(test_session_factory) == 2


async def test_missing_address_still_deduplicates(test_session_factory, settings, make_tm_event):
    first = await _resolve(test_session_factory, _venue(make_tm_event, venue_address=None), settings)
    second = await _resolve(test_session_factory, _venue(make_tm_event, venue_address=None), settings)
    assert first.venue_id == second.venue_id


async def test_no_venue_or_no_name_resolves_to_none(test_session_factory, settings):
    assert (await _resolve(test_session_factory, None, settings)).venue_id is None

    nameless = TicketmasterEvent.model_validate({"_embedded": {"venues": [{"city": {"name": "Laval"}}]}}).primary_venue
    resolution = await _resolve(test_session_factory, nameless, settings)
    assert resolution.venue_id is None
    assert resolution.created is False
    assert await _venue_count(test_session_factory) == 0


async def test_new_venue_fields_and_defaults(test_session_factory, settings):
    raw = TicketmasterEvent.model_validate({"_embedded": {"venues": [{"name": "Le Belmont"}]}}).primary_venue
    resolution = await _resolve(test_session_factory, raw, settings)

    async with test_session_factory() as session:
        venue = await session.get(Venue, resolution.venue_id)
    assert venue.city == "Montréal"
    assert venue.city_normalized == "montreal"
    assert venue.region == "QC"
    assert venue.country == "CA"
    assert venue.timezone == "America/Toronto"
    assert venue.address_line1 is None
    assert venue.lat is None


async def test_new_venue_copies_upstream_fields(test_session_factory, settings, make_tm_event):
    resolution = await _resolve(test_session_factory, _venue(make_tm_event), settings)

    async with test_session_factory() as session:
        venue = await session.get(Venue, resolution.venue_id)
    assert venue.name == "Maison Symphonique"
    assert venue.postal_code == "H2X 0S1"
    assert venue.lat == 45.5088
    assert venue.lng == -73.5673
