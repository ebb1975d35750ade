"""EventSeries repository: list by owner / order."""
from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import select

from carebook.infra.database.models.event_series import EventSeries
from carebook.infra.database.repositories.base import BaseRepository


class EventSeriesRepository(BaseRepository[EventSeries]):
    model = EventSeries

    async def list_for_owner(
        self,
        owner_type: str,
        owner_id: UUID,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> List[EventSeries]:
        stmt = (
            select(EventSeries)
            .where(EventSeries.owner_type == owner_type)
            .where(EventSeries.owner_id == owner_id)
            .order_by(EventSeries.start_date)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_order(self, order_id: UUID) -> List[EventSeries]:
        stmt = select(EventSeries).where(EventSeries.order_id == order_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
