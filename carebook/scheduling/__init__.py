"""
carebook.scheduling – recurring schedule expansion engine.

Public API
──────────
  expand_series, SeriesExpander, series_from_order     (expansion)
  EventMaterializer                                     (validation + summaries)
  render_schedule, render_recurrency                    (e-mail text)
  day_offset, increment_millis, resolve_series_end_date (recurrence math)
  OwnerRegistry, OrderLookup, CaregiverLookup, EventStore
"""
from carebook.scheduling.expander import (
    SeriesExpander,
    expand_series,
    resolve_context,
    series_from_order,
)
from carebook.scheduling.gateway import (
    CaregiverLookup,
    EventStore,
    OrderLookup,
    OwnerRegistry,
    ScheduleLookups,
)
from carebook.scheduling.materializer import EventMaterializer
from carebook.scheduling.recurrence import (
    day_offset,
    increment_millis,
    next_recurrent_date,
    resolve_series_end_date,
)
from carebook.scheduling.renderer import render_recurrency, render_schedule
from carebook.scheduling.types import (
    CaregiverSummary,
    EndCondition,
    EndingType,
    Event,
    EventDraft,
    ExpansionContext,
    OrderSummary,
    OwnerType,
    Recurrency,
    Series,
    TimeSlot,
)

__all__ = [
    "SeriesExpander",
    "expand_series",
    "resolve_context",
    "series_from_order",
    "EventMaterializer",
    "render_schedule",
    "render_recurrency",
    "day_offset",
    "increment_millis",
    "next_recurrent_date",
    "resolve_series_end_date",
    "OwnerRegistry",
    "OrderLookup",
    "CaregiverLookup",
    "ScheduleLookups",
    "EventStore",
    "CaregiverSummary",
    "EndCondition",
    "EndingType",
    "Event",
    "EventDraft",
    "ExpansionContext",
    "OrderSummary",
    "OwnerType",
    "Recurrency",
    "Series",
    "TimeSlot",
]
