"""Stateless schedule helpers: expansion preview and schedule text rendering."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from carebook.api.dependencies import get_schedule_service, get_scheduling_config
from carebook.api.routers.series import event_to_schema
from carebook.api.schemas.scheduling import (
    EventResponse,
    RenderRequest,
    ScheduleTextResponse,
    SeriesPreview,
)
from carebook.config.scheduling import SchedulingConfig
from carebook.services.schedule_service import ScheduleService

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/preview", response_model=List[EventResponse])
async def preview_schedule(
    body: SeriesPreview,
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Expand a series definition without saving anything."""
    events = await svc.preview(body.model_dump())
    return [event_to_schema(e) for e in events]


@router.post("/render", response_model=ScheduleTextResponse)
async def render_schedule_text(
    body: RenderRequest,
    svc: ScheduleService = Depends(get_schedule_service),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    locale = body.locale or config.locale
    text = svc.render([s.model_dump() for s in body.schedule], locale)
    return ScheduleTextResponse(locale=locale, text=text)
