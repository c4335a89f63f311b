"""Shared test fixtures."""

from __future__ import annotations

import datetime as dt

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from event_ingest.api.app import app
from event_ingest.api.deps import get_app_settings, get_db, get_event_source, get_session_maker
from event_ingest.config.settings import Settings
from event_ingest.errors import UpstreamError
from event_ingest.models.base import Base
from event_ingest.models.event import Event
from event_ingest.upstream.schemas import EventsPage


def _tm_event(
    event_id: str | None = "tm-1",
    name: str | None = "Symphony No. 5",
    date_time: str | None = "2026-07-10T18:00:00Z",
    segment: str | None = "Music",
    genre: str | None = None,
    sub_genre: str | None = None,
    venue_name: str | None = "Maison Symphonique",
    venue_address: str | None = "1600 Rue Saint-Urbain",
    venue_city: str | None = "Montréal",
    images: list[dict] | None = None,
    status: str | None = "onsale",
    price: dict | None = None,
) -> dict:
    """Build a Discovery API event dict with the fields the pipeline reads."""
    event: dict = {"type": "event", "url": f"https://www.ticketmaster.ca/event/{event_id}"}
    if event_id is not None:
        event["id"] = event_id
    if name is not None:
        event["name"] = name
    start: dict = {"localDate": "2026-07-10"}
    if date_time is not None:
        start["dateTime"] = date_time
    event["dates"] = {"start": start, "timezone": "America/Toronto"}
    if status is not None:
        event["dates"]["status"] = {"code": status}
    if segment is not None or genre is not None:
        classification: dict = {"primary": True}
        if segment is not None:
            classification["segment"] = {"id": "seg", "name": segment}
        if genre is not None:
            classification["genre"] = {"id": "gen", "name": genre}
        if sub_genre is not None:
            classification["subGenre"] = {"id": "sub", "name": sub_genre}
        event["classifications"] = [classification]
    if images is not None:
        event["images"] = images
    if price is not None:
        event["priceRanges"] = [price]
    if venue_name is not None:
        venue: dict = {
            "name": venue_name,
            "postalCode": "H2X 0S1",
            "state": {"name": "Quebec", "stateCode": "QC"},
            "country": {"name": "Canada", "countryCode": "CA"},
            "location": {"longitude": "-73.5673", "latitude": "45.5088"},
        }
        if venue_address is not None:
            venue["address"] = {"line1": venue_address}
        if venue_city is not None:
            venue["city"] = {"name": venue_city}
        event["_embedded"] = {"venues": [venue]}
    return event


def _tm_page(events: list[dict], total_pages: int | None, number: int = 0) -> dict:
    """Wrap events in a Discovery API search response."""
    page: dict = {"size": 50, "number": number}
    if total_pages is not None:
        page["totalPages"] = total_pages
        page["totalElements"] = len(events) * total_pages
    body: dict = {"page": page}
    if events:
        body["_embedded"] = {"events": events}
    return body


class FakeEventSource:
    """In-memory stand-in for TicketmasterClient.

    ``pages`` maps page index to a response body; missing pages return an
    empty page reporting ``total_pages``.  A page mapped to an exception
    raises it.
    """

    def __init__(self, pages: dict[int, dict | Exception] | None = None, total_pages: int = 1) -> None:
        self.pages = pages or {}
        self.total_pages = total_pages
        self.calls: list[tuple[int, int | None]] = []

    async def fetch_page(self, page_index: int, page_size: int | None = None) -> EventsPage:
        self.calls.append((page_index, page_size))
        body = self.pages.get(page_index)
        if isinstance(body, Exception):
            raise body
        if body is None:
            body = _tm_page([], self.total_pages, page_index)
        return EventsPage.model_validate(body)


@pytest.fixture
def make_tm_event():
    """Factory for Discovery API event dicts."""
    return _tm_event


@pytest.fixture
def make_tm_page():
    """Factory for Discovery API search response dicts."""
    return _tm_page


@pytest.fixture
def settings() -> Settings:
    """Settings with all credentials configured."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        ticketmaster_api_key="test-key",
        ingest_secret="ingest-secret",
        cron_secret="cron-secret",
    )


@pytest.fixture
def fake_source() -> FakeEventSource:
    return FakeEventSource()


@pytest.fixture
def make_source():
    """Factory for FakeEventSource instances with preset pages."""
    return FakeEventSource


@pytest.fixture
def upstream_down() -> UpstreamError:
    return UpstreamError("Ticketmaster fetch failed: 503 unavailable", status_code=503, body="unavailable")


@pytest.fixture
async def test_engine():
    """Create an async SQLite in-memory engine for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the test engine."""
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def api_client(test_engine, test_session_factory, settings, fake_source):
    """Async HTTP client hitting the FastAPI app with test DB, settings and upstream."""

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_maker] = lambda: test_session_factory
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_event_source] = lambda: fake_source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def seeded_db(test_session_factory):
    """Seed upcoming, past and out-of-city events."""
    now = dt.datetime.now(dt.timezone.utc)

    def _event(source_event_id: str, title: str, start_at: dt.datetime, category: str, city: str = "montreal"):
        return Event(
            title=title,
            title_normalized=title.lower(),
            start_at=start_at,
            timezone="America/Toronto",
            status="scheduled",
            category_primary=category,
            tags=[],
            source="ticketmaster",
            source_event_id=source_event_id,
            source_url=f"https://www.ticketmaster.ca/event/{source_event_id}",
            city_normalized=city,
        )

    async with test_session_factory() as session:
        async with session.begin():
            session.add_all(
                [
                    _event("later", "Warehouse Techno Night", now + dt.timedelta(days=10), "nightlife"),
                    _event("soon", "Symphony No. 5", now + dt.timedelta(days=2), "music"),
                    _event("gallery", "Vernissage", now + dt.timedelta(days=5), "art"),
                    _event("past", "Last Week's Show", now - dt.timedelta(days=7), "music"),
                    _event("toronto", "Elsewhere", now + dt.timedelta(days=3), "music", city="toronto"),
                ]
            )
