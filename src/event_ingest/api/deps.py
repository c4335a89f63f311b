"""FastAPI dependency injection for sessions, settings and the event source."""

from collections.abc import AsyncGenerator
from functools import lru_cache
from pathlib import Path

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from event_ingest.classification.config import ClassifierConfig, load_classifier_config
from event_ingest.config.settings import Settings, get_settings
from event_ingest.db.session import get_session_factory
from event_ingest.upstream.ticketmaster import TicketmasterClient


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session for request handling."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Session factory for handlers that commit per item (ingestion runs)."""
    return get_session_factory()


def get_app_settings() -> Settings:
    return get_settings()


def get_event_source(settings: Settings = Depends(get_app_settings)) -> TicketmasterClient:
    return TicketmasterClient(settings)


@lru_cache
def _load_classifier_config(path: Path) -> ClassifierConfig:
    return load_classifier_config(path)


def get_classifier_config(settings: Settings = Depends(get_app_settings)) -> ClassifierConfig:
    return _load_classifier_config(settings.classifier_config_path)
