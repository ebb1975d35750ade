"""Collaborator ORM: staff member of a health unit with a personal calendar."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class Collaborator(Base, TimestampMixin):
    __tablename__ = "collaborators"

    id: Mapped[uuid.UUID] = _uuid_pk()
    health_unit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("health_units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
