"""EventSeries ORM: recurring booking template; the source of truth for its events."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Index, SmallInteger, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class EventSeries(Base, TimestampMixin):
    """
    owner_type: "health_unit" | "collaborator" (owner_id points at the matching table)
    recurrency: 0 one-off | 1 weekly | 2 biweekly | 4 monthly (28 days)
    schedule: [{"start": iso, "end": iso, "week_day"?: 1..7}]
    end_series: {"ending_type": 0 never | 1 on date, "end_date"?: iso}
    """

    __tablename__ = "event_series"
    __table_args__ = (
        Index("ix_event_series_owner", "owner_type", "owner_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    owner_type: Mapped[str] = mapped_column(String(32), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    caregiver_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("caregivers.id", ondelete="SET NULL"),
        nullable=True,
    )

    start_date: Mapped[_dt.datetime] = mapped_column(DateTime, nullable=False)
    recurrency: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    schedule: Mapped[list[Any]] = mapped_column(JSONB, nullable=False)
    end_series: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text_color: Mapped[str] = mapped_column(String(16), nullable=False, default="#1890FF")
    all_day: Mapped[bool] = mapped_column(nullable=False, default=False)
