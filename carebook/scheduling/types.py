"""Core data structures for the recurring schedule engine.

All datetimes are naive and interpreted as UTC.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional, Tuple
from uuid import UUID


class Recurrency(IntEnum):
    """Repetition cadence code stored on orders and series."""
    ONE_OFF = 0
    WEEKLY = 1
    BIWEEKLY = 2
    MONTHLY = 4


class OwnerType(str, Enum):
    """Who a series or event belongs to."""
    HEALTH_UNIT = "health_unit"
    COLLABORATOR = "collaborator"


class EndingType(IntEnum):
    NEVER = 0
    ON_DATE = 1
    AFTER_OCCURRENCES = 2


def parse_datetime(value: Any) -> _dt.datetime:
    """Accept a datetime, a date or an ISO-8601 string; return a naive UTC datetime."""
    if isinstance(value, _dt.datetime):
        dt = value
    elif isinstance(value, _dt.date):
        return _dt.datetime.combine(value, _dt.time())
    elif isinstance(value, str):
        dt = _dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise TypeError(f"Cannot interpret {value!r} as a datetime")
    if dt.tzinfo is not None:
        dt = dt.astimezone(_dt.timezone.utc).replace(tzinfo=None)
    return dt


@dataclass(frozen=True)
class EndCondition:
    """When a series stops: never, on a date, or (declared only) after N occurrences.

    An on-date condition without a date behaves like "never".
    """

    kind: EndingType = EndingType.NEVER
    end_date: Optional[_dt.datetime] = None
    occurrences: Optional[int] = None

    @classmethod
    def never(cls) -> "EndCondition":
        return cls(EndingType.NEVER)

    @classmethod
    def on_date(cls, end_date: Any) -> "EndCondition":
        return cls(EndingType.ON_DATE, end_date=parse_datetime(end_date))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "EndCondition":
        """Build from the stored shape {"ending_type", "end_date", "end_occurrences"}."""
        if not data:
            return cls.never()
        kind = EndingType(int(data.get("ending_type", EndingType.NEVER)))
        end_date = data.get("end_date")
        return cls(
            kind=kind,
            end_date=parse_datetime(end_date) if end_date is not None else None,
            occurrences=data.get("end_occurrences"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ending_type": int(self.kind)}
        if self.end_date is not None:
            out["end_date"] = self.end_date.isoformat()
        if self.occurrences is not None:
            out["end_occurrences"] = self.occurrences
        return out


@dataclass(frozen=True)
class TimeSlot:
    """One weekly template slot; weekday and time-of-day of start/end repeat every cycle."""

    start: _dt.datetime
    end: _dt.datetime
    week_day: Optional[int] = None
    """1=Monday .. 7=Sunday. Derived from start when omitted."""

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("slot end must not be before its start")
        if self.week_day is not None and not 1 <= self.week_day <= 7:
            raise ValueError(f"week_day must be between 1 and 7, got {self.week_day!r}")

    @property
    def weekday(self) -> int:
        return self.week_day if self.week_day is not None else self.start.isoweekday()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeSlot":
        week_day = data.get("week_day")
        return cls(
            start=parse_datetime(data["start"]),
            end=parse_datetime(data["end"]),
            week_day=int(week_day) if week_day is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"start": self.start.isoformat(), "end": self.end.isoformat()}
        if self.week_day is not None:
            out["week_day"] = self.week_day
        return out


@dataclass(frozen=True)
class Series:
    """A recurring booking template."""

    id: UUID
    owner_type: OwnerType
    owner: UUID
    start_date: _dt.datetime
    recurrency: int
    schedule: Tuple[TimeSlot, ...]
    title: str
    end_condition: EndCondition = field(default_factory=EndCondition.never)
    order: Optional[UUID] = None
    caregiver: Optional[UUID] = None
    """Caregiver of the order, when already known; lets both lookups run concurrently."""
    description: Optional[str] = None
    location: Optional[str] = None
    text_color: str = "#1890FF"
    all_day: bool = False

    def __post_init__(self) -> None:
        if not self.schedule:
            raise ValueError("a series needs at least one schedule slot")


@dataclass(frozen=True)
class EventDraft:
    """One generated occurrence before validation."""

    series_id: Optional[UUID]
    owner_type: OwnerType
    owner: UUID
    order: Optional[UUID]
    title: str
    description: Optional[str]
    start: _dt.datetime
    end: _dt.datetime
    all_day: bool
    location: Optional[str]
    text_color: str


@dataclass(frozen=True)
class OrderSummary:
    id: UUID
    caregiver: Optional[UUID] = None
    services: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class CaregiverSummary:
    id: UUID
    name: Optional[str] = None
    profile_picture: Optional[str] = None


@dataclass(frozen=True)
class ExpansionContext:
    """Order and caregiver resolved before expansion; both absent for order-less series."""
    order: Optional[OrderSummary] = None
    caregiver: Optional[CaregiverSummary] = None


@dataclass(frozen=True)
class Event:
    """A validated occurrence with denormalized order/caregiver summaries."""

    id: UUID
    series_id: Optional[UUID]
    owner_type: OwnerType
    owner: UUID
    order: Optional[UUID]
    title: str
    description: Optional[str]
    start: _dt.datetime
    end: _dt.datetime
    location: Optional[str]
    text_color: str
    all_day: bool
    order_summary: Optional[Dict[str, Any]] = None
    caregiver_summary: Optional[Dict[str, Any]] = None

    def to_record(self) -> Dict[str, Any]:
        """Column mapping used by the events repository."""
        return {
            "id": self.id,
            "series_id": self.series_id,
            "owner_type": self.owner_type.value,
            "owner_id": self.owner,
            "order_id": self.order,
            "title": self.title,
            "description": self.description,
            "start": self.start,
            "end": self.end,
            "location": self.location,
            "text_color": self.text_color,
            "all_day": self.all_day,
            "order_summary": self.order_summary,
            "caregiver_summary": self.caregiver_summary,
        }
