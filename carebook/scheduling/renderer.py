"""ScheduleRenderer: human-readable weekly schedule text for order e-mails.

    render_schedule([TimeSlot(mon_8h, mon_12h), TimeSlot(wed_8h, wed_12h)])
    -> "Segundas-feiras: 08:00 - 12:00; Quartas-feiras: 08:00 - 12:00"
"""
from __future__ import annotations

import datetime as _dt
from typing import Any, Iterable, List, Mapping, Tuple, Union

from carebook.scheduling.types import TimeSlot, parse_datetime

_WEEKDAY_NAMES = {
    "pt": (
        "Segundas-feiras",
        "Terças-feiras",
        "Quartas-feiras",
        "Quintas-feiras",
        "Sextas-feiras",
        "Sábados",
        "Domingos",
    ),
    "en": (
        "Mondays",
        "Tuesdays",
        "Wednesdays",
        "Thursdays",
        "Fridays",
        "Saturdays",
        "Sundays",
    ),
}

_RECURRENCY_LABELS = {
    "pt": {0: "Pedido Único", 1: "Semanal", 2: "Quinzenal", 4: "Mensal"},
    "en": {0: "One-off", 1: "Weekly", 2: "Biweekly", 4: "Monthly"},
}

SlotLike = Union[TimeSlot, Mapping[str, Any]]


def _names(locale: str) -> Tuple[str, ...]:
    try:
        return _WEEKDAY_NAMES[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale: {locale!r}") from None


def _as_slot(slot: SlotLike) -> TimeSlot:
    if isinstance(slot, TimeSlot):
        return slot
    return TimeSlot.from_dict(slot)


def _clock(value: _dt.datetime) -> str:
    # Only the time-of-day matters; the date part is whatever reference day the slot used.
    return value.strftime("%H:%M")


def render_schedule(slots: Iterable[SlotLike], locale: str = "pt") -> str:
    """Render slots sorted by weekday (Monday first), joined with "; "."""
    names = _names(locale)
    ordered: List[TimeSlot] = sorted((_as_slot(s) for s in slots), key=lambda s: s.weekday)
    return "; ".join(
        f"{names[slot.weekday - 1]}: {_clock(slot.start)} - {_clock(slot.end)}"
        for slot in ordered
    )


def render_recurrency(recurrency: Any, locale: str = "pt") -> str:
    """Localized cadence label ("Semanal", "Weekly", ...); "N/A" for unknown codes."""
    _names(locale)
    try:
        return _RECURRENCY_LABELS[locale].get(int(recurrency), "N/A")
    except (TypeError, ValueError):
        return "N/A"


def render_date(value: Any) -> str:
    """Short date used next to the schedule in e-mails, e.g. "21/01/2023"."""
    return parse_datetime(value).strftime("%d/%m/%Y")
