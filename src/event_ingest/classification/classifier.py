"""Heuristic category classifier for upstream events.

Assigns exactly one of ``music``, ``nightlife`` or ``art``:

1. An arts/theatre segment wins outright.
2. Otherwise a nightlife score is summed from the local start hour, title
   keywords, venue-type keywords and dance-genre keywords; reaching the
   threshold gives ``nightlife``.
3. Everything else is ``music``.

All keyword checks are case-insensitive substring matches.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo

from event_ingest.classification.config import ClassifierConfig, HourWeights
from event_ingest.upstream.schemas import TicketmasterEvent

DEFAULT_TIMEZONE = "America/Toronto"


class Category(str, Enum):
    MUSIC = "music"
    NIGHTLIFE = "nightlife"
    ART = "art"


def _contains_any(text: str, keywords: list[str]) -> bool:
    lowered = text.lower()
    return any(kw.lower() in lowered for kw in keywords)


def hour_score(start_at: datetime | None, tz_name: str, hours: HourWeights) -> int:
    """Points for the start hour, resolved in the target-city timezone."""
    if start_at is None:
        return 0
    if start_at.tzinfo is None:
        start_at = start_at.replace(tzinfo=timezone.utc)
    local = start_at.astimezone(ZoneInfo(tz_name))
    hour = local.hour
    if hour >= hours.late_night_from:
        return hours.late_night
    if hour >= hours.night_from:
        return hours.night
    if hour >= hours.evening_from:
        return hours.evening
    return 0


def nightlife_score(
    item: TicketmasterEvent,
    config: ClassifierConfig,
    tz_name: str = DEFAULT_TIMEZONE,
) -> int:
    """Sum the weighted nightlife signals for an upstream event."""
    score = hour_score(item.start_at, tz_name, config.hours)

    if _contains_any(item.name or "", config.nightlife_title_keywords):
        score += config.title_weight

    venue = item.primary_venue
    if venue is not None and _contains_any(venue.name or "", config.nightlife_venue_keywords):
        score += config.venue_weight

    if _contains_any(item.genre_text, config.dance_genre_keywords):
        score += config.genre_weight

    return score


def classify_event(
    item: TicketmasterEvent,
    config: ClassifierConfig | None = None,
    tz_name: str = DEFAULT_TIMEZONE,
) -> Category:
    """Return the primary category for an upstream event."""
    config = config or ClassifierConfig()

    if _contains_any(item.segment_name, config.art_segment_keywords):
        return Category.ART

    if nightlife_score(item, config, tz_name) >= config.nightlife_threshold:
        return Category.NIGHTLIFE

    return Category.MUSIC
