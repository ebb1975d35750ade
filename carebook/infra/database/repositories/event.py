"""CalendarEvent repository: range queries and atomic per-series replacement."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete as sa_delete, select

from carebook.infra.database.models.event import CalendarEvent
from carebook.infra.database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CalendarEventRepository(BaseRepository[CalendarEvent]):
    model = CalendarEvent

    async def list_by_series(self, series_id: UUID) -> List[CalendarEvent]:
        stmt = (
            select(CalendarEvent)
            .where(CalendarEvent.series_id == series_id)
            .order_by(CalendarEvent.start)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_owner(
        self,
        owner_type: str,
        owner_id: UUID,
        start: Optional[_dt.datetime] = None,
        end: Optional[_dt.datetime] = None,
    ) -> List[CalendarEvent]:
        """Ad-hoc and derived events of one owner overlapping [start, end]."""
        stmt = (
            select(CalendarEvent)
            .where(CalendarEvent.owner_type == owner_type)
            .where(CalendarEvent.owner_id == owner_id)
            .order_by(CalendarEvent.start)
        )
        if start is not None:
            stmt = stmt.where(CalendarEvent.end >= start)
        if end is not None:
            stmt = stmt.where(CalendarEvent.start <= end)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_series(self, series_id: UUID) -> int:
        """Delete the events derived from a series; ad-hoc events are never touched.

        ``synchronize_session=False``: bulk DML bypasses the identity map in async sessions.
        """
        stmt = (
            sa_delete(CalendarEvent)
            .where(CalendarEvent.series_id == series_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def replace_series_events(
        self,
        series_id: UUID,
        rows: Sequence[Dict[str, Any]],
    ) -> int:
        """Delete then insert inside one SAVEPOINT; readers never see an empty series."""
        async with self.session.begin_nested():
            deleted = await self.delete_by_series(series_id)
            await self.bulk_create(rows)
        logger.info(
            "CalendarEventRepository: series %s replaced %d events with %d",
            series_id, deleted, len(rows),
        )
        return len(rows)
