"""Event series API: create (directly or from an order), update, regenerate, delete."""
from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional, Sequence

from fastapi import APIRouter, Depends, Query

from carebook.api.dependencies import get_schedule_service, get_scheduling_config
from carebook.api.schemas.scheduling import (
    DeleteSeriesResponse,
    EventResponse,
    RegenerateResponse,
    ScheduleTextResponse,
    SeriesCreate,
    SeriesFromOrder,
    SeriesResponse,
    SeriesUpdate,
    SeriesWithEvents,
)
from carebook.config.scheduling import SchedulingConfig
from carebook.scheduling.types import Event, OwnerType
from carebook.services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/series", tags=["series"])


# ── Helpers ───────────────────────────────────────────────────────────────────

def event_to_schema(event: Any) -> EventResponse:
    """Accepts an engine Event or a stored CalendarEvent row."""
    if isinstance(event, Event):
        return EventResponse.model_validate(event.to_record())
    return EventResponse.model_validate(event)


def _with_events(row: Any, events: Sequence[Any]) -> SeriesWithEvents:
    return SeriesWithEvents(
        series=SeriesResponse.model_validate(row),
        events=[event_to_schema(e) for e in events],
        event_count=len(events),
    )


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.post("", response_model=SeriesWithEvents, status_code=201)
async def create_series(
    body: SeriesCreate,
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Create a series and materialize its events in one transaction."""
    row, events = await svc.create_series(body.model_dump())
    return _with_events(row, events)


@router.get("", response_model=List[SeriesResponse])
async def list_series(
    owner_type: OwnerType = Query(...),
    owner_id: uuid.UUID = Query(...),
    skip: int = 0,
    limit: int = Query(100, ge=1, le=500),
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Series of one owner, ordered by start date."""
    rows = await svc.list_series(owner_type, owner_id, skip=skip, limit=limit)
    return [SeriesResponse.model_validate(r) for r in rows]


@router.post("/from-order/{order_id}", response_model=SeriesWithEvents, status_code=201)
async def create_series_from_order(
    order_id: uuid.UUID,
    body: SeriesFromOrder,
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Create the health-unit series of an order from its schedule information."""
    row, events = await svc.create_series_for_order(order_id, **body.model_dump())
    return _with_events(row, events)


@router.get("/{series_id}", response_model=SeriesResponse)
async def get_series(
    series_id: uuid.UUID,
    svc: ScheduleService = Depends(get_schedule_service),
):
    return SeriesResponse.model_validate(await svc.get_series(series_id))


@router.patch("/{series_id}", response_model=SeriesWithEvents)
async def update_series(
    series_id: uuid.UUID,
    body: SeriesUpdate,
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Partial update. Events are regenerated when an expansion input changes."""
    changes = body.model_dump(exclude_unset=True)
    row, events = await svc.update_series(series_id, changes)
    if events is None:
        events = await svc.list_series_events(series_id)
    return _with_events(row, events)


@router.delete("/{series_id}", response_model=DeleteSeriesResponse)
async def delete_series(
    series_id: uuid.UUID,
    svc: ScheduleService = Depends(get_schedule_service),
):
    """Delete a series with its derived events. Ad-hoc events of the owner stay."""
    removed = await svc.delete_series(series_id)
    return DeleteSeriesResponse(series_id=series_id, deleted_events=removed)


@router.post("/{series_id}/regenerate", response_model=RegenerateResponse)
async def regenerate_series(
    series_id: uuid.UUID,
    svc: ScheduleService = Depends(get_schedule_service),
):
    events = await svc.regenerate(series_id)
    return RegenerateResponse(series_id=series_id, event_count=len(events))


@router.get("/{series_id}/events", response_model=List[EventResponse])
async def list_series_events(
    series_id: uuid.UUID,
    svc: ScheduleService = Depends(get_schedule_service),
):
    return [event_to_schema(e) for e in await svc.list_series_events(series_id)]


@router.get("/{series_id}/schedule-text", response_model=ScheduleTextResponse)
async def schedule_text(
    series_id: uuid.UUID,
    locale: Optional[str] = None,
    svc: ScheduleService = Depends(get_schedule_service),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    """Human-readable weekly schedule, as used in notification e-mails."""
    summary = await svc.schedule_summary(series_id, locale)
    return ScheduleTextResponse(series_id=series_id, locale=locale or config.locale, **summary)
