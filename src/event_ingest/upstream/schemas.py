"""Partial schema for Ticketmaster Discovery API event search responses.

Every field is optional: the upstream payload omits keys freely, so the
models validate whatever is present and the accessor properties supply
the defaults the pipeline relies on.  Unknown fields are ignored and numbers sent
in string fields (ids, coordinates) are coerced to strings.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class NamedRef(_Payload):
    id: str | None = None
    name: str | None = None


class Image(_Payload):
    url: str | None = None
    width: int | None = None
    height: int | None = None
    ratio: str | None = None


class Classification(_Payload):
    primary: bool | None = None
    segment: NamedRef | None = None
    genre: NamedRef | None = None
    sub_genre: NamedRef | None = Field(None, alias="subGenre")


class DateStart(_Payload):
    local_date: str | None = Field(None, alias="localDate")
    local_time: str | None = Field(None, alias="localTime")
    date_time: datetime | None = Field(None, alias="dateTime")


class DateStatus(_Payload):
    code: str | None = None


class Dates(_Payload):
    start: DateStart | None = None
    end: DateStart | None = None
    timezone: str | None = None
    status: DateStatus | None = None


class PriceRange(_Payload):
    type: str | None = None
    currency: str | None = None
    min: float | None = None
    max: float | None = None


class VenueCity(_Payload):
    name: str | None = None


class VenueState(_Payload):
    name: str | None = None
    state_code: str | None = Field(None, alias="stateCode")


class VenueCountry(_Payload):
    name: str | None = None
    country_code: str | None = Field(None, alias="countryCode")


class VenueAddress(_Payload):
    line1: str | None = None


class VenueLocation(_Payload):
    # Ticketmaster sends coordinates as strings
    latitude: str | None = None
    longitude: str | None = None


class TicketmasterVenue(_Payload):
    id: str | None = None
    name: str | None = None
    postal_code: str | None = Field(None, alias="postalCode")
    timezone: str | None = None
    city: VenueCity | None = None
    state: VenueState | None = None
    country: VenueCountry | None = None
    address: VenueAddress | None = None
    location: VenueLocation | None = None

    @property
    def city_name(self) -> str | None:
        return self.city.name if self.city else None

    @property
    def address_line1(self) -> str | None:
        return self.address.line1 if self.address else None

    @property
    def state_code(self) -> str | None:
        return self.state.state_code if self.state else None

    @property
    def country_code(self) -> str | None:
        return self.country.country_code if self.country else None

    @property
    def latitude(self) -> float | None:
        return _to_float(self.location.latitude if self.location else None)

    @property
    def longitude(self) -> float | None:
        return _to_float(self.location.longitude if self.location else None)


class EventEmbedded(_Payload):
    venues: list[TicketmasterVenue] = []


class TicketmasterEvent(_Payload):
    id: str | None = None
    name: str | None = None
    url: str | None = None
    info: str | None = None
    please_note: str | None = Field(None, alias="pleaseNote")
    images: list[Image] = []
    classifications: list[Classification] = []
    dates: Dates | None = None
    price_ranges: list[PriceRange] = Field(default_factory=list, alias="priceRanges")
    embedded: EventEmbedded | None = Field(None, alias="_embedded")

    @property
    def primary_venue(self) -> TicketmasterVenue | None:
        if self.embedded and self.embedded.venues:
            return self.embedded.venues[0]
        return None

    @property
    def primary_classification(self) -> Classification | None:
        return self.classifications[0] if self.classifications else None

    @property
    def segment_name(self) -> str:
        c = self.primary_classification
        if c and c.segment and c.segment.name:
            return c.segment.name
        return ""

    @property
    def genre_text(self) -> str:
        """Genre and subgenre names joined with a space (empty if absent)."""
        c = self.primary_classification
        if c is None:
            return ""
        parts = [ref.name for ref in (c.genre, c.sub_genre) if ref and ref.name]
        return " ".join(parts)

    @property
    def start_at(self) -> datetime | None:
        if self.dates and self.dates.start:
            return self.dates.start.date_time
        return None

    @property
    def end_at(self) -> datetime | None:
        if self.dates and self.dates.end:
            return self.dates.end.date_time
        return None

    @property
    def status_code(self) -> str | None:
        if self.dates and self.dates.status:
            return self.dates.status.code
        return None

    @property
    def first_price_range(self) -> PriceRange | None:
        return self.price_ranges[0] if self.price_ranges else None


class PageInfo(_Payload):
    size: int | None = None
    total_elements: int | None = Field(None, alias="totalElements")
    total_pages: int | None = Field(None, alias="totalPages")
    number: int | None = None


class SearchEmbedded(_Payload):
    events: list[TicketmasterEvent] = []


class EventsPage(_Payload):
    embedded: SearchEmbedded | None = Field(None, alias="_embedded")
    page: PageInfo | None = None

    @property
    def items(self) -> list[TicketmasterEvent]:
        return self.embedded.events if self.embedded else []

    @property
    def total_pages(self) -> int:
        """Upstream-reported page count; a missing value means no pages."""
        if self.page and self.page.total_pages is not None:
            return self.page.total_pages
        return 0


def _to_float(value: str | None) -> float | None:
    """Parse an upstream coordinate string; empty or unparsable gives None."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
