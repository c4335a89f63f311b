"""Process-wide async engine and session factory.

Both are created lazily from settings on first use and cached.  Ingestion
runs need the factory rather than a single session because every item
commits in its own transaction.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from event_ingest.config.settings import get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine(echo: bool = False) -> AsyncEngine:
    """Return the cached async engine for ``settings.database_url``."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(get_settings().database_url, echo=echo)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return a cached session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections and drop the cached engine and factory.

    ``asyncio.run`` closes its loop on return, so one-shot CLI commands
    must dispose before that happens.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
