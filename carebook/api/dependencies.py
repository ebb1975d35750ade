"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from carebook.config.scheduling import SchedulingConfig
from carebook.services.schedule_service import ScheduleService


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_scheduling_config(request: Request) -> SchedulingConfig:
    return getattr(request.app.state, "scheduling_config", None) or SchedulingConfig()


async def get_schedule_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
    config: SchedulingConfig = Depends(get_scheduling_config),
) -> ScheduleService:
    """ScheduleService bound to the request session; lookups get their own sessions."""
    return ScheduleService(
        session,
        config=config,
        lookup_session_factory=request.app.state.session_factory,
    )
