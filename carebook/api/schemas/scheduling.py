"""Pydantic schemas for the event series, schedule and calendar APIs."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from carebook.scheduling.types import OwnerType


class TimeSlotSchema(BaseModel):
    start: datetime
    end: datetime
    week_day: Optional[int] = Field(None, ge=1, le=7, description="1=Monday .. 7=Sunday")


class EndSeriesSchema(BaseModel):
    ending_type: int = Field(default=0, ge=0, le=2, description="0=never, 1=on date, 2=after N occurrences")
    end_date: Optional[datetime] = None
    end_occurrences: Optional[int] = Field(None, ge=1)


class SeriesBase(BaseModel):
    owner_type: OwnerType
    owner_id: UUID
    order_id: Optional[UUID] = None
    caregiver_id: Optional[UUID] = None
    start_date: datetime
    recurrency: int = Field(..., description="0=one-off, 1=weekly, 2=biweekly, 4=monthly")
    schedule: List[TimeSlotSchema] = Field(..., min_length=1)
    end_series: EndSeriesSchema = Field(default_factory=EndSeriesSchema)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=512)
    text_color: str = Field(default="#1890FF", max_length=32)
    all_day: bool = False


class SeriesCreate(SeriesBase):
    pass


class SeriesPreview(SeriesBase):
    """Expand without persisting; owner and order are not required to exist unless order_id is set."""
    pass


class SeriesFromOrder(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=512)
    text_color: str = Field(default="#1890FF", max_length=32)
    all_day: bool = False


class SeriesUpdate(BaseModel):
    owner_type: Optional[OwnerType] = None
    owner_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    caregiver_id: Optional[UUID] = None
    start_date: Optional[datetime] = None
    recurrency: Optional[int] = None
    schedule: Optional[List[TimeSlotSchema]] = Field(None, min_length=1)
    end_series: Optional[EndSeriesSchema] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=512)
    text_color: Optional[str] = Field(None, max_length=32)
    all_day: Optional[bool] = None


class SeriesResponse(BaseModel):
    id: UUID
    owner_type: str
    owner_id: UUID
    order_id: Optional[UUID]
    caregiver_id: Optional[UUID]
    start_date: datetime
    recurrency: int
    schedule: List[Dict[str, Any]]
    end_series: Dict[str, Any]
    title: str
    description: Optional[str]
    location: Optional[str]
    text_color: str
    all_day: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventResponse(BaseModel):
    id: UUID
    series_id: Optional[UUID]
    owner_type: str
    owner_id: UUID
    order_id: Optional[UUID]
    title: str
    description: Optional[str]
    start: datetime
    end: datetime
    location: Optional[str]
    text_color: str
    all_day: bool
    order_summary: Optional[Dict[str, Any]] = None
    caregiver_summary: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class SeriesWithEvents(BaseModel):
    series: SeriesResponse
    events: List[EventResponse]
    event_count: int


class ScheduleTextResponse(BaseModel):
    series_id: Optional[UUID] = None
    locale: str
    text: str
    recurrency: Optional[str] = None
    start: Optional[str] = None


class RenderRequest(BaseModel):
    schedule: List[TimeSlotSchema]
    locale: Optional[str] = None


class RegenerateResponse(BaseModel):
    series_id: UUID
    event_count: int


class DeleteSeriesResponse(BaseModel):
    series_id: UUID
    deleted_events: int
