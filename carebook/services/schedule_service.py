"""ScheduleService: create, regenerate and delete event series and their events."""
from __future__ import annotations

import datetime as _dt
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from carebook.config.scheduling import SchedulingConfig
from carebook.core.exceptions import (
    ConflictError,
    OrderNotFoundError,
    SeriesNotFoundError,
    ValidationError,
)
from carebook.infra.database.gateway import RepositoryScheduleGateway
from carebook.infra.database.models.event import CalendarEvent
from carebook.infra.database.models.event_series import EventSeries
from carebook.infra.database.repositories import (
    CalendarEventRepository,
    EventSeriesRepository,
    OrderRepository,
)
from carebook.scheduling.expander import SeriesExpander, expand_series, series_from_order
from carebook.scheduling.recurrence import coerce_recurrency
from carebook.scheduling.renderer import render_date, render_recurrency, render_schedule
from carebook.scheduling.types import (
    EndCondition,
    Event,
    OwnerType,
    Series,
    TimeSlot,
    parse_datetime,
)

logger = logging.getLogger(__name__)

# Derived events copy these, so any change means a full regeneration.
_EXPANSION_FIELDS = (
    "schedule",
    "recurrency",
    "start_date",
    "end_series",
    "owner_type",
    "owner_id",
    "order_id",
    "caregiver_id",
    "title",
    "description",
    "location",
    "text_color",
    "all_day",
)


def _owner_type(value: Any) -> OwnerType:
    try:
        return OwnerType(value)
    except ValueError:
        raise ValidationError(
            f"Unknown owner type: {value!r}", details={"owner_type": str(value)}
        ) from None


def _series_from_fields(series_id: UUID, fields: Mapping[str, Any]) -> Series:
    """Build an engine Series from row-shaped fields (schedule/end_series as stored JSON)."""
    try:
        schedule = tuple(
            s if isinstance(s, TimeSlot) else TimeSlot.from_dict(s)
            for s in fields.get("schedule") or ()
        )
        end_series = fields.get("end_series")
        end_condition = (
            end_series if isinstance(end_series, EndCondition) else EndCondition.from_dict(end_series)
        )
        return Series(
            id=series_id,
            owner_type=_owner_type(fields["owner_type"]),
            owner=fields["owner_id"],
            order=fields.get("order_id"),
            caregiver=fields.get("caregiver_id"),
            start_date=parse_datetime(fields["start_date"]),
            recurrency=fields["recurrency"],
            schedule=schedule,
            end_condition=end_condition,
            title=fields["title"],
            description=fields.get("description"),
            location=fields.get("location"),
            text_color=fields.get("text_color") or "#1890FF",
            all_day=bool(fields.get("all_day", False)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid series definition: {exc}", cause=exc) from exc


def series_to_row(series: Series) -> Dict[str, Any]:
    """Column mapping for the event_series table."""
    return {
        "id": series.id,
        "owner_type": series.owner_type.value,
        "owner_id": series.owner,
        "order_id": series.order,
        "caregiver_id": series.caregiver,
        "start_date": series.start_date,
        "recurrency": int(coerce_recurrency(series.recurrency)),
        "schedule": [slot.to_dict() for slot in series.schedule],
        "end_series": series.end_condition.to_dict(),
        "title": series.title,
        "description": series.description,
        "location": series.location,
        "text_color": series.text_color,
        "all_day": series.all_day,
    }


def row_to_series(row: EventSeries) -> Series:
    return _series_from_fields(
        row.id, {name: getattr(row, name) for name in _EXPANSION_FIELDS}
    )


class ScheduleService:
    def __init__(
        self,
        session: AsyncSession,
        *,
        config: Optional[SchedulingConfig] = None,
        lookup_session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> None:
        self._config = config or SchedulingConfig()
        self._series_repo = EventSeriesRepository(session)
        self._event_repo = CalendarEventRepository(session)
        self._order_repo = OrderRepository(session)
        self._gateway = RepositoryScheduleGateway(session, lookup_session_factory)
        self._owners = self._gateway.owner_registry()

    # ── Series lifecycle ────────────────────────────────────────────────────

    async def create_series(self, data: Mapping[str, Any]) -> Tuple[EventSeries, List[Event]]:
        """Persist a series and its events. Nothing is written if expansion fails."""
        series = _series_from_fields(uuid.uuid4(), data)
        return await self._persist_new(series)

    async def create_series_for_order(
        self,
        order_id: UUID,
        *,
        title: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        text_color: str = "#1890FF",
        all_day: bool = False,
    ) -> Tuple[EventSeries, List[Event]]:
        """Derive the health-unit series of an order from its schedule_information."""
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(
                "Could not resolve the order of this schedule",
                details={"order_id": str(order_id)},
            )
        existing = await self._series_repo.list_for_order(order_id)
        if existing:
            raise ConflictError(
                "Order already has a schedule; update or regenerate it instead",
                details={"order_id": str(order_id), "series_id": str(existing[0].id)},
            )
        try:
            series = series_from_order(
                order,
                title=title,
                description=description,
                location=location,
                text_color=text_color,
                all_day=all_day,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(
                f"Order {order_id} has an invalid schedule: {exc}",
                details={"order_id": str(order_id)},
                cause=exc,
            ) from exc
        return await self._persist_new(series)

    async def _persist_new(self, series: Series) -> Tuple[EventSeries, List[Event]]:
        SeriesExpander(self._config).validate(series)
        await self._owners.resolve(series.owner_type, series.owner)
        events = await expand_series(series, self._gateway, config=self._config)
        row = await self._series_repo.create(series_to_row(series))
        await self._gateway.replace_series_events(row.id, events)
        logger.info(
            "ScheduleService: created series %s with %d events",
            row.id, len(events),
            extra={"series_id": str(row.id), "event_count": len(events)},
        )
        return row, events

    async def update_series(
        self,
        series_id: UUID,
        changes: Mapping[str, Any],
    ) -> Tuple[EventSeries, Optional[List[Event]]]:
        """Apply changes; regenerate events when an expansion input changed.

        Returns the updated row and the new events (None when nothing was regenerated).
        """
        row = await self.get_series(series_id)
        current = series_to_row(row_to_series(row))
        candidate = _series_from_fields(series_id, {**current, **changes})
        new_row_data = series_to_row(candidate)
        changed = {
            name: new_row_data[name]
            for name in _EXPANSION_FIELDS
            if new_row_data[name] != current[name]
        }
        if not changed:
            return row, None

        if "owner_type" in changed or "owner_id" in changed:
            await self._owners.resolve(candidate.owner_type, candidate.owner)
        events = await expand_series(candidate, self._gateway, config=self._config)
        updated = await self._series_repo.update(series_id, changed)
        await self._gateway.replace_series_events(series_id, events)
        logger.info(
            "ScheduleService: series %s updated (%s), %d events regenerated",
            series_id, ", ".join(sorted(changed)), len(events),
            extra={"series_id": str(series_id), "event_count": len(events)},
        )
        return updated, events

    async def regenerate(self, series_id: UUID) -> List[Event]:
        row = await self.get_series(series_id)
        events = await expand_series(row_to_series(row), self._gateway, config=self._config)
        await self._gateway.replace_series_events(series_id, events)
        logger.info("ScheduleService: series %s regenerated (%d events)", series_id, len(events))
        return events

    async def delete_series(self, series_id: UUID) -> int:
        """Delete a series and its derived events; returns how many events were removed."""
        await self.get_series(series_id)
        removed = await self._gateway.delete_series_events(series_id)
        await self._series_repo.delete(series_id)
        logger.info("ScheduleService: series %s deleted with %d events", series_id, removed)
        return removed

    # ── Queries ─────────────────────────────────────────────────────────────

    async def get_series(self, series_id: UUID) -> EventSeries:
        row = await self._series_repo.get_by_id(series_id)
        if row is None:
            raise SeriesNotFoundError(
                "Event series not found", details={"series_id": str(series_id)}
            )
        return row

    async def list_series(
        self,
        owner_type: Any,
        owner_id: UUID,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> List[EventSeries]:
        kind = _owner_type(owner_type)
        return await self._series_repo.list_for_owner(kind.value, owner_id, skip=skip, limit=limit)

    async def list_series_events(self, series_id: UUID) -> List[CalendarEvent]:
        await self.get_series(series_id)
        return await self._event_repo.list_by_series(series_id)

    async def calendar_for_owner(
        self,
        owner_type: Any,
        owner_id: UUID,
        start: Optional[_dt.datetime] = None,
        end: Optional[_dt.datetime] = None,
    ) -> List[CalendarEvent]:
        """Ad-hoc and derived events of one owner, ordered by start."""
        kind = _owner_type(owner_type)
        if start is not None and end is not None and end < start:
            raise ValidationError("end must not be before start")
        return await self._event_repo.list_for_owner(kind.value, owner_id, start, end)

    async def preview(self, data: Mapping[str, Any]) -> List[Event]:
        """Expand without persisting anything."""
        series = _series_from_fields(data.get("id") or uuid.uuid4(), data)
        return await expand_series(series, self._gateway, config=self._config)

    async def schedule_text(self, series_id: UUID, locale: Optional[str] = None) -> str:
        return (await self.schedule_summary(series_id, locale))["text"]

    async def schedule_summary(
        self, series_id: UUID, locale: Optional[str] = None
    ) -> Dict[str, str]:
        """Schedule text with the cadence label and start date shown beside it in e-mails."""
        series = row_to_series(await self.get_series(series_id))
        locale = locale or self._config.locale
        text = self.render(series.schedule, locale)
        return {
            "text": text,
            "recurrency": render_recurrency(series.recurrency, locale),
            "start": render_date(series.start_date),
        }

    def render(self, slots: Sequence[Any], locale: Optional[str] = None) -> str:
        try:
            return render_schedule(slots, locale or self._config.locale)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"Cannot render schedule: {exc}", cause=exc) from exc
