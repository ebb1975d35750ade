"""Caregiver ORM: the person assigned to deliver an order's visits."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class Caregiver(Base, TimestampMixin):
    __tablename__ = "caregivers"

    id: Mapped[uuid.UUID] = _uuid_pk()
    health_unit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("health_units.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    profile_picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
