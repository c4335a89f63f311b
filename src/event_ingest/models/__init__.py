from event_ingest.models.base import Base
from event_ingest.models.event import Event
from event_ingest.models.venue import Venue

__all__ = [
    "Base",
    "Event",
    "Venue",
]
