"""Recurrence arithmetic: cycle offsets, series end date and next-occurrence helpers."""
from __future__ import annotations

import datetime as _dt
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from carebook.core.exceptions import InvalidRecurrencyError, UnsupportedEndConditionError
from carebook.scheduling.types import EndCondition, EndingType, Recurrency

MILLIS_PER_DAY = 86_400_000

_CYCLE_DAYS = {
    Recurrency.WEEKLY: 7,
    Recurrency.BIWEEKLY: 14,
    Recurrency.MONTHLY: 28,
}

_WEEKDAY_NUMBERS = {
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sunday": 7,
}


def coerce_recurrency(value: Any) -> Recurrency:
    """Map a stored recurrency code to Recurrency, raising InvalidRecurrencyError otherwise."""
    if isinstance(value, bool):
        raise InvalidRecurrencyError(
            f"Invalid recurrency type: {value!r}", details={"recurrency": value}
        )
    try:
        return Recurrency(int(value))
    except (TypeError, ValueError) as exc:
        raise InvalidRecurrencyError(
            f"Invalid recurrency type: {value!r}",
            details={"recurrency": value},
            cause=exc,
        ) from exc


def day_offset(recurrency: Any, cycle_index: int) -> int:
    """Days between cycle 0 and cycle_index (0-based).

    A one-off series only has cycle 0.
    """
    rec = coerce_recurrency(recurrency)
    if cycle_index < 0:
        raise ValueError(f"cycle_index must be >= 0, got {cycle_index}")
    if rec == Recurrency.ONE_OFF:
        if cycle_index == 0:
            return 0
        raise InvalidRecurrencyError(
            "One-off series do not repeat",
            details={"recurrency": int(rec), "cycle_index": cycle_index},
        )
    return _CYCLE_DAYS[rec] * cycle_index


def increment_millis(recurrency: Any, cycle_index: int) -> int:
    return day_offset(recurrency, cycle_index) * MILLIS_PER_DAY


def increment(recurrency: Any, cycle_index: int) -> _dt.timedelta:
    return _dt.timedelta(milliseconds=increment_millis(recurrency, cycle_index))


def cycle_count(recurrency: Any, horizon_cycles: int = 52) -> int:
    """Number of cycles the expander walks: 1 for one-off, the horizon otherwise."""
    if coerce_recurrency(recurrency) == Recurrency.ONE_OFF:
        return 1
    return horizon_cycles


def resolve_series_end_date(
    start_date: _dt.datetime,
    end_condition: EndCondition,
    *,
    max_span_years: int = 1,
) -> _dt.datetime:
    """Last instant an occurrence may start at.

    Never later than start_date + max_span_years calendar years; an explicit end
    date may shorten that bound but never extend it.
    """
    cap = start_date + relativedelta(years=max_span_years)
    if end_condition.kind == EndingType.NEVER:
        return cap
    if end_condition.kind == EndingType.ON_DATE:
        if end_condition.end_date is None or end_condition.end_date > cap:
            return cap
        return end_condition.end_date
    raise UnsupportedEndConditionError(
        "Series ending after a number of occurrences is not supported",
        details={"ending_type": int(end_condition.kind)},
    )


def next_recurrent_date(date: _dt.datetime, recurrency: Any) -> Optional[_dt.datetime]:
    """Next occurrence after date for billing and reminders.

    Monthly moves one calendar month (not the 28-day expansion cadence).
    Returns None for one-off orders.
    """
    rec = coerce_recurrency(recurrency)
    if rec == Recurrency.WEEKLY:
        return date + _dt.timedelta(days=7)
    if rec == Recurrency.BIWEEKLY:
        return date + _dt.timedelta(days=14)
    if rec == Recurrency.MONTHLY:
        return date + relativedelta(months=1)
    return None


def weekday_number(name: str) -> int:
    """"Monday" -> 1 .. "Sunday" -> 7."""
    try:
        return _WEEKDAY_NUMBERS[name.strip().lower()]
    except (AttributeError, KeyError):
        raise ValueError(f"Invalid week day: {name}") from None


def next_weekday_on_or_after(date: _dt.datetime, weekday: int) -> _dt.datetime:
    """date itself when it falls on weekday (1..7), else the next such day; time kept."""
    if not 1 <= weekday <= 7:
        raise ValueError(f"weekday must be between 1 and 7, got {weekday!r}")
    return date + _dt.timedelta(days=(weekday - date.isoweekday()) % 7)
