"""HealthUnit ORM: a home-care agency that owns order-derived series."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from carebook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class HealthUnit(Base, TimestampMixin):
    __tablename__ = "health_units"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
