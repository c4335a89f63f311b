"""Venue model -- a place events happen, deduplicated by name/address/city."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_ingest.models.base import Base

if TYPE_CHECKING:
    from event_ingest.models.event import Event


class Venue(Base):
    """A venue created lazily the first time an upstream event mentions it.

    Rows are never updated by the ingestion pipeline.  The lookup key
    ``(name, address_line1, city_normalized)`` is indexed but deliberately
    not unique.
    """

    __tablename__ = "venues"
    __table_args__ = (sa.Index("ix_venues_lookup", "name", "address_line1", "city_normalized"),)

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(sa.String)
    address_line1: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    city: Mapped[str] = mapped_column(sa.String)
    city_normalized: Mapped[str] = mapped_column(sa.String)
    region: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    postal_code: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    country: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    # Geo
    lat: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    timezone: Mapped[str] = mapped_column(sa.String)

    created_at: Mapped[datetime] = mapped_column(sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP"))

    events: Mapped[list[Event]] = relationship("Event", back_populates="venue")
