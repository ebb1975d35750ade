"""SeriesExpander: turn a recurring series into a bounded list of concrete events.

Expansion walks at most ``horizon_cycles`` cycles (52 by default) whatever the
recurrency, and never emits an occurrence starting after the resolved series end
date (start + 1 year, or an earlier explicit end date). Within a cycle, slots are
visited in declared order and the first slot past the end date stops that cycle.
"""
from __future__ import annotations

import asyncio
import datetime as _dt
import logging
import uuid
from typing import Any, List, Mapping, Optional
from uuid import UUID

from carebook.config.scheduling import SchedulingConfig
from carebook.core.exceptions import CaregiverNotFoundError, OrderNotFoundError
from carebook.core.validators import hex_color_or_default
from carebook.scheduling.gateway import ScheduleLookups
from carebook.scheduling.materializer import EventMaterializer
from carebook.scheduling.recurrence import (
    coerce_recurrency,
    cycle_count,
    increment,
    next_weekday_on_or_after,
    resolve_series_end_date,
    weekday_number,
)
from carebook.scheduling.types import (
    CaregiverSummary,
    EndCondition,
    Event,
    EventDraft,
    ExpansionContext,
    OrderSummary,
    OwnerType,
    Series,
    TimeSlot,
    parse_datetime,
)

logger = logging.getLogger(__name__)


class SeriesExpander:
    """Pure expansion of a Series into EventDrafts."""

    def __init__(self, config: Optional[SchedulingConfig] = None) -> None:
        self.config = config or SchedulingConfig()

    def series_end_date(self, series: Series) -> _dt.datetime:
        return resolve_series_end_date(
            series.start_date,
            series.end_condition,
            max_span_years=self.config.max_span_years,
        )

    def validate(self, series: Series) -> _dt.datetime:
        """Check recurrency and end condition; return the series end date."""
        coerce_recurrency(series.recurrency)
        return self.series_end_date(series)

    def expand(
        self,
        series: Series,
        context: Optional[ExpansionContext] = None,
    ) -> List[EventDraft]:
        """Drafts in generation order: cycle-major, then declared slot order."""
        recurrency = coerce_recurrency(series.recurrency)
        end_date = self.series_end_date(series)
        text_color = hex_color_or_default(series.text_color, self.config.default_text_color)
        cycles = cycle_count(recurrency, self.config.horizon_cycles)

        drafts: List[EventDraft] = []
        for cycle_index in range(cycles):
            shift = increment(recurrency, cycle_index)
            for slot in series.schedule:
                start = slot.start + shift
                if start > end_date:
                    break
                drafts.append(
                    EventDraft(
                        series_id=series.id,
                        owner_type=series.owner_type,
                        owner=series.owner,
                        order=series.order,
                        title=series.title,
                        description=series.description,
                        start=start,
                        end=slot.end + shift,
                        all_day=series.all_day,
                        location=series.location,
                        text_color=text_color,
                    )
                )

        logger.debug(
            "SeriesExpander: series %s expanded to %d drafts (end %s, %d cycles)",
            series.id, len(drafts), end_date.isoformat(), cycles,
            extra={"series_id": str(series.id), "event_count": len(drafts)},
        )
        return drafts


async def resolve_context(series: Series, lookups: ScheduleLookups) -> ExpansionContext:
    """Look up the order and its caregiver.

    With a caregiver hint on the series both lookups run concurrently; otherwise
    the caregiver id comes from the resolved order.
    """
    if series.order is None:
        return ExpansionContext()

    if series.caregiver is not None:
        # Both lookups finish before a failure surfaces; none is left running.
        results = await asyncio.gather(
            lookups.retrieve_order(series.order),
            lookups.retrieve_caregiver(series.caregiver),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        order, caregiver = results
        _require_order(series, order)
        if order.caregiver is not None and order.caregiver != series.caregiver:
            logger.warning(
                "Series %s caregiver hint %s differs from order caregiver %s, using the order's",
                series.id, series.caregiver, order.caregiver,
            )
            caregiver = await lookups.retrieve_caregiver(order.caregiver)
            _require_caregiver(series, order.caregiver, caregiver)
        else:
            _require_caregiver(series, series.caregiver, caregiver)
        return ExpansionContext(order=order, caregiver=caregiver)

    order = await lookups.retrieve_order(series.order)
    _require_order(series, order)
    caregiver = None
    if order.caregiver is not None:
        caregiver = await lookups.retrieve_caregiver(order.caregiver)
        _require_caregiver(series, order.caregiver, caregiver)
    return ExpansionContext(order=order, caregiver=caregiver)


def _require_order(series: Series, order: Optional[OrderSummary]) -> None:
    if order is None:
        logger.warning("Series %s references missing order %s", series.id, series.order)
        raise OrderNotFoundError(
            "Could not resolve the order of this schedule",
            details={"series_id": str(series.id), "order_id": str(series.order)},
        )


def _require_caregiver(
    series: Series,
    caregiver_id: UUID,
    caregiver: Optional[CaregiverSummary],
) -> None:
    if caregiver is None:
        logger.warning("Series %s references missing caregiver %s", series.id, caregiver_id)
        raise CaregiverNotFoundError(
            "Could not resolve the caregiver of this schedule",
            details={"series_id": str(series.id), "caregiver_id": str(caregiver_id)},
        )


async def expand_series(
    series: Series,
    lookups: ScheduleLookups,
    *,
    config: Optional[SchedulingConfig] = None,
) -> List[Event]:
    """Resolve context, expand and materialize a series.

    Input errors surface before any lookup is issued; any failure aborts the
    whole expansion.
    """
    expander = SeriesExpander(config)
    expander.validate(series)
    context = await resolve_context(series, lookups)
    drafts = expander.expand(series, context)
    return EventMaterializer(expander.config.default_text_color).materialize(drafts, context)


def series_from_order(
    order: Any,
    *,
    title: str,
    series_id: Optional[UUID] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    text_color: str = "#1890FF",
    all_day: bool = False,
) -> Series:
    """Build the health-unit series of an order from its schedule_information.

    An order end_date becomes an on-date end condition, otherwise the series never ends.
    Slots carrying a week_day are moved onto the first such weekday.
    """
    info: Mapping[str, Any] = getattr(order, "schedule_information", None) or {}
    if not info.get("schedule"):
        raise ValueError(f"Order {order.id} has no schedule")
    end_date = info.get("end_date")
    return Series(
        id=series_id or uuid.uuid4(),
        owner_type=OwnerType.HEALTH_UNIT,
        owner=order.health_unit_id,
        order=order.id,
        caregiver=getattr(order, "caregiver_id", None),
        start_date=parse_datetime(info["start_date"]),
        recurrency=int(info.get("recurrency", 0)),
        schedule=tuple(_order_slot(s) for s in info["schedule"]),
        end_condition=EndCondition.on_date(end_date) if end_date else EndCondition.never(),
        title=title,
        description=description,
        location=location,
        text_color=text_color,
        all_day=all_day,
    )


def _order_slot(data: Mapping[str, Any]) -> TimeSlot:
    """Order slot moved forward onto its week_day (a number or an English day name).

    Orders store the time of day on an arbitrary date; the series needs the first
    matching weekday on or after it. The slot's duration is kept.
    """
    start = parse_datetime(data["start"])
    end = parse_datetime(data["end"])
    week_day = data.get("week_day")
    if week_day is None:
        return TimeSlot(start, end)
    if isinstance(week_day, str) and not week_day.strip().isdigit():
        week_day = weekday_number(week_day)
    week_day = int(week_day)
    shift = next_weekday_on_or_after(start, week_day) - start
    return TimeSlot(start + shift, end + shift, week_day=week_day)
