"""Health check endpoint."""

import sqlalchemy as sa
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_ingest.api.deps import get_db
from event_ingest.api.schemas import HealthResponse
from event_ingest.errors import StorageError
from event_ingest.models.event import Event

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Probe the events table with a one-row read."""
    try:
        result = await db.execute(sa.select(Event.id).limit(1))
    except SQLAlchemyError as e:
        raise StorageError(str(e)) from e
    return HealthResponse(ok=True, sample=[{"id": event_id} for event_id in result.scalars()])
