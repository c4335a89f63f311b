"""Ticketmaster Discovery API client.

Fetches one page of events around the configured target city.  There is
no retry: any failure raises ``UpstreamError`` and aborts the caller's run.
"""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError

from event_ingest.config.settings import MAX_PAGE_SIZE, Settings
from event_ingest.errors import UpstreamError
from event_ingest.upstream.schemas import EventsPage

logger = structlog.get_logger()

# Response bodies are kept on the error for diagnostics, trimmed to this size
_BODY_PREVIEW_CHARS = 2000


def build_query_params(settings: Settings, page_index: int, page_size: int) -> dict[str, str]:
    """Build the query string for one page of the event search.

    The geographic center, radius, classification filter and sort order
    are fixed by settings; only the page and size vary per call.
    """
    return {
        "apikey": settings.ticketmaster_api_key or "",
        "locale": "*",
        "radius": str(settings.radius_km),
        "unit": "km",
        "latlong": settings.latlong,
        "size": str(page_size),
        "page": str(page_index),
        "sort": "date,asc",
        "classificationName": settings.classification_names,
    }


class TicketmasterClient:
    """Page-at-a-time event source backed by the Discovery API.

    Args:
        settings: Service settings carrying the API key and query constants.
        http_client: Optional pre-built ``httpx.AsyncClient`` (tests pass one
            with a mock transport).  When omitted a client is created per
            request.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http_client = http_client

    async def fetch_page(self, page_index: int, page_size: int | None = None) -> EventsPage:
        """Fetch a single page of upstream events.

        Args:
            page_index: Zero-based page number.
            page_size: Events per page; defaults to ``settings.page_size`` and
                is capped at the upstream maximum.

        Returns:
            Parsed ``EventsPage`` (``items`` and ``total_pages``).

        Raises:
            UpstreamError: Missing API key, transport failure, non-2xx
                status, or a body that is not a valid event search response.
        """
        if not self.settings.ticketmaster_api_key:
            raise UpstreamError("Missing Ticketmaster API key")

        size = min(page_size or self.settings.page_size, MAX_PAGE_SIZE)
        params = build_query_params(self.settings, page_index, size)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(self.settings.ticketmaster_url, params=params)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(self.settings.ticketmaster_url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Ticketmaster request failed: {e}") from e

        if not response.is_success:
            body = response.text[:_BODY_PREVIEW_CHARS]
            raise UpstreamError(
                f"Ticketmaster fetch failed: {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            page = EventsPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError(
                f"Malformed Ticketmaster response: {e}",
                status_code=response.status_code,
                body=response.text[:_BODY_PREVIEW_CHARS],
            ) from e

        logger.debug(
            "page_fetched",
            page=page_index,
            size=size,
            events=len(page.items),
            total_pages=page.total_pages,
        )
        return page
