"""Home-care Order ORM model."""
from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class Order(Base, TimestampMixin):
    """A customer's recurring home-care booking with a health unit."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = _uuid_pk()
    health_unit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("health_units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    caregiver_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("caregivers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status: Mapped[str] = mapped_column(String(32), nullable=False, default="new")
    # new | accepted | pending_payment | active | completed | declined | cancelled

    customer_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    services: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)

    # {"start_date", "end_date"?, "recurrency", "schedule": [{"week_day", "start", "end"}]}
    schedule_information: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
