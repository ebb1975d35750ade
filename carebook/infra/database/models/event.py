"""CalendarEvent ORM: one calendar occurrence, derived from a series or ad-hoc."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class CalendarEvent(Base, TimestampMixin):
    """
    series_id is NULL for ad-hoc events; derived events are deleted with their series.
    order_summary / caregiver_summary are denormalized for calendar rendering.
    """

    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_owner_start", "owner_type", "owner_id", "start"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    series_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("event_series.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    owner_type: Mapped[str] = mapped_column(String(32), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start: Mapped[_dt.datetime] = mapped_column(DateTime, nullable=False)
    end: Mapped[_dt.datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text_color: Mapped[str] = mapped_column(String(16), nullable=False, default="#1890FF")
    all_day: Mapped[bool] = mapped_column(nullable=False, default=False)

    order_summary: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    caregiver_summary: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
