"""Calendar API: every event of one owner, ad-hoc and derived, in a date range."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from carebook.api.dependencies import get_schedule_service
from carebook.api.routers.series import event_to_schema
from carebook.api.schemas.scheduling import EventResponse
from carebook.scheduling.types import OwnerType, parse_datetime
from carebook.services.schedule_service import ScheduleService

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("", response_model=List[EventResponse])
async def owner_calendar(
    owner_type: OwnerType = Query(...),
    owner_id: uuid.UUID = Query(...),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    svc: ScheduleService = Depends(get_schedule_service),
):
    events = await svc.calendar_for_owner(
        owner_type,
        owner_id,
        parse_datetime(start) if start is not None else None,
        parse_datetime(end) if end is not None else None,
    )
    return [event_to_schema(e) for e in events]
