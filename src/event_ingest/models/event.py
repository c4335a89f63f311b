from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_ingest.models.base import Base

if TYPE_CHECKING:
    from event_ingest.models.venue import Venue


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        sa.UniqueConstraint("source", "source_event_id", name="uq_events_source_event"),
        sa.Index("ix_events_city_start", "city_normalized", "start_at"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    # Display fields
    title: Mapped[str] = mapped_column(sa.String)
    title_normalized: Mapped[str] = mapped_column(sa.String)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    # Scheduling (stored in UTC)
    start_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True))
    end_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    timezone: Mapped[str] = mapped_column(sa.String)
    status: Mapped[str] = mapped_column(sa.String, default="scheduled")

    # Classification -- tags is JSON for SQLite compatibility
    category_primary: Mapped[str] = mapped_column(sa.String)
    tags: Mapped[list] = mapped_column(sa.JSON, default=list)

    # Pricing
    min_price: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    max_price: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    currency: Mapped[str | None] = mapped_column(sa.String, nullable=True)
    age_restriction: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    image_url: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    # Provenance: (source, source_event_id) is the identity key
    source: Mapped[str] = mapped_column(sa.String)
    source_event_id: Mapped[str] = mapped_column(sa.String)
    source_url: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    venue_id: Mapped[int | None] = mapped_column(sa.ForeignKey("venues.id"), nullable=True)
    city_normalized: Mapped[str] = mapped_column(sa.String)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP"))
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP"))

    venue: Mapped[Venue | None] = relationship("Venue", back_populates="events")
