"""Repository-backed implementation of the schedule engine's persistence boundary."""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from carebook.infra.database.repositories import (
    CalendarEventRepository,
    CaregiverRepository,
    CollaboratorRepository,
    HealthUnitRepository,
    OrderRepository,
)
from carebook.scheduling.gateway import OwnerRegistry
from carebook.scheduling.types import CaregiverSummary, Event, OrderSummary, OwnerType


class RepositoryScheduleGateway:
    """Order/caregiver lookups and event storage.

    Writes always go through ``session`` (the caller's transaction). An AsyncSession
    does not allow concurrent statements, so lookups either get their own
    short-lived session from ``lookup_session_factory`` (truly concurrent) or are
    serialized on ``session``.
    """

    def __init__(
        self,
        session: AsyncSession,
        lookup_session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> None:
        self._session = session
        self._lookup_session_factory = lookup_session_factory
        self._lock = asyncio.Lock()
        self._events = CalendarEventRepository(session)

    @asynccontextmanager
    async def _lookup_session(self) -> AsyncIterator[AsyncSession]:
        if self._lookup_session_factory is not None:
            async with self._lookup_session_factory() as session:
                yield session
        else:
            async with self._lock:
                yield self._session

    async def retrieve_order(self, order_id: UUID) -> Optional[OrderSummary]:
        async with self._lookup_session() as session:
            order = await OrderRepository(session).get_by_id(order_id)
        if order is None:
            return None
        return OrderSummary(
            id=order.id,
            caregiver=order.caregiver_id,
            services=tuple(order.services or ()),
        )

    async def retrieve_caregiver(self, caregiver_id: UUID) -> Optional[CaregiverSummary]:
        async with self._lookup_session() as session:
            caregiver = await CaregiverRepository(session).get_by_id(caregiver_id)
        if caregiver is None:
            return None
        return CaregiverSummary(
            id=caregiver.id,
            name=caregiver.name,
            profile_picture=caregiver.profile_picture,
        )

    async def replace_series_events(self, series_id: UUID, events: Sequence[Event]) -> int:
        return await self._events.replace_series_events(
            series_id, [e.to_record() for e in events]
        )

    async def delete_series_events(self, series_id: UUID) -> int:
        return await self._events.delete_by_series(series_id)

    def owner_registry(self) -> OwnerRegistry:
        return OwnerRegistry(
            {
                OwnerType.HEALTH_UNIT: HealthUnitRepository(self._session).get_by_id,
                OwnerType.COLLABORATOR: CollaboratorRepository(self._session).get_by_id,
            }
        )
