"""Unit tests for ScheduleService with mocked repositories and gateway."""
from __future__ import annotations

import asyncio
import datetime as dt
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from carebook.config.scheduling import SchedulingConfig
from carebook.core.exceptions import (
    ConflictError,
    InvalidRecurrencyError,
    OrderNotFoundError,
    OwnerNotFoundError,
    SeriesNotFoundError,
    ValidationError,
)
from carebook.scheduling.types import CaregiverSummary, OrderSummary
from carebook.services.schedule_service import ScheduleService, row_to_series, series_to_row


def _run(coro):
    return asyncio.run(coro)


def _series_data(**kwargs):
    defaults = {
        "owner_type": "health_unit",
        "owner_id": uuid4(),
        "order_id": None,
        "caregiver_id": None,
        "start_date": dt.datetime(2024, 1, 1),
        "recurrency": 1,
        "schedule": [{"start": dt.datetime(2024, 1, 1, 8), "end": dt.datetime(2024, 1, 1, 9)}],
        "end_series": {"ending_type": 0},
        "title": "Home care",
        "description": None,
        "location": None,
        "text_color": "#1890FF",
        "all_day": False,
    }
    defaults.update(kwargs)
    return defaults


def _fake_row(**kwargs):
    """A stored event_series row (JSON columns in their stored shape)."""
    data = _series_data(**kwargs)
    data["schedule"] = [
        {"start": s["start"].isoformat(), "end": s["end"].isoformat()} for s in data["schedule"]
    ]
    data.setdefault("id", uuid4())
    data.update(created_at=None, updated_at=None)
    return SimpleNamespace(**data)


def _make_service():
    svc = ScheduleService(MagicMock(), config=SchedulingConfig())
    svc._series_repo = MagicMock()
    svc._series_repo.create = AsyncMock(side_effect=lambda data: SimpleNamespace(**data))
    svc._series_repo.update = AsyncMock(side_effect=lambda sid, data: SimpleNamespace(id=sid, **data))
    svc._series_repo.delete = AsyncMock(return_value=True)
    svc._series_repo.list_for_order = AsyncMock(return_value=[])
    svc._event_repo = MagicMock()
    svc._order_repo = MagicMock()
    svc._gateway = MagicMock()
    svc._gateway.replace_series_events = AsyncMock(side_effect=lambda sid, events: len(events))
    svc._gateway.delete_series_events = AsyncMock(return_value=52)
    svc._gateway.retrieve_order = AsyncMock(return_value=None)
    svc._gateway.retrieve_caregiver = AsyncMock(return_value=None)
    svc._owners = MagicMock()
    svc._owners.resolve = AsyncMock(return_value=SimpleNamespace())
    return svc


# ─── create ───────────────────────────────────────────────────────────────────

class TestCreateSeries(unittest.TestCase):
    def test_persists_series_and_events(self):
        svc = _make_service()
        row, events = _run(svc.create_series(_series_data()))

        self.assertEqual(len(events), 52)
        self.assertEqual(row.recurrency, 1)
        self.assertEqual(row.schedule[0]["start"], "2024-01-01T08:00:00")
        svc._owners.resolve.assert_awaited_once()
        svc._gateway.replace_series_events.assert_awaited_once_with(row.id, events)
        self.assertTrue(all(e.series_id == row.id for e in events))

    def test_invalid_recurrency_writes_nothing(self):
        svc = _make_service()
        with self.assertRaises(InvalidRecurrencyError):
            _run(svc.create_series(_series_data(recurrency=3)))
        svc._owners.resolve.assert_not_awaited()
        svc._series_repo.create.assert_not_awaited()
        svc._gateway.replace_series_events.assert_not_awaited()

    def test_unknown_owner_writes_nothing(self):
        svc = _make_service()
        svc._owners.resolve = AsyncMock(side_effect=OwnerNotFoundError("missing"))
        with self.assertRaises(OwnerNotFoundError):
            _run(svc.create_series(_series_data()))
        svc._series_repo.create.assert_not_awaited()

    def test_missing_order_writes_nothing(self):
        svc = _make_service()
        with self.assertRaises(OrderNotFoundError):
            _run(svc.create_series(_series_data(order_id=uuid4())))
        svc._series_repo.create.assert_not_awaited()

    def test_empty_schedule_is_a_validation_error(self):
        svc = _make_service()
        with self.assertRaises(ValidationError):
            _run(svc.create_series(_series_data(schedule=[])))

    def test_unknown_owner_type(self):
        svc = _make_service()
        with self.assertRaises(ValidationError):
            _run(svc.create_series(_series_data(owner_type="patient")))


class TestCreateSeriesForOrder(unittest.TestCase):
    def test_order_schedule_becomes_a_series(self):
        svc = _make_service()
        caregiver = CaregiverSummary(id=uuid4(), name="Ana")
        order = SimpleNamespace(
            id=uuid4(),
            health_unit_id=uuid4(),
            caregiver_id=caregiver.id,
            schedule_information={
                "start_date": "2024-01-01T00:00:00Z",
                "end_date": "2024-02-01T00:00:00Z",
                "recurrency": 1,
                "schedule": [{"start": "2024-01-01T08:00:00Z", "end": "2024-01-01T10:00:00Z"}],
            },
        )
        svc._order_repo.get_by_id = AsyncMock(return_value=order)
        svc._gateway.retrieve_order = AsyncMock(
            return_value=OrderSummary(id=order.id, caregiver=caregiver.id)
        )
        svc._gateway.retrieve_caregiver = AsyncMock(return_value=caregiver)

        row, events = _run(svc.create_series_for_order(order.id, title="Order 1"))

        self.assertEqual(row.owner_type, "health_unit")
        self.assertEqual(row.owner_id, order.health_unit_id)
        self.assertEqual(row.order_id, order.id)
        self.assertEqual(len(events), 5)
        self.assertEqual(events[0].caregiver_summary["name"], "Ana")

    def test_missing_order(self):
        svc = _make_service()
        svc._order_repo.get_by_id = AsyncMock(return_value=None)
        with self.assertRaises(OrderNotFoundError):
            _run(svc.create_series_for_order(uuid4(), title="x"))

    def test_order_with_a_series_already_conflicts(self):
        svc = _make_service()
        svc._order_repo.get_by_id = AsyncMock(return_value=SimpleNamespace(id=uuid4()))
        svc._series_repo.list_for_order = AsyncMock(return_value=[_fake_row()])
        with self.assertRaises(ConflictError):
            _run(svc.create_series_for_order(uuid4(), title="x"))
        svc._series_repo.create.assert_not_awaited()

    def test_order_without_schedule(self):
        svc = _make_service()
        order = SimpleNamespace(id=uuid4(), health_unit_id=uuid4(), caregiver_id=None, schedule_information=None)
        svc._order_repo.get_by_id = AsyncMock(return_value=order)
        with self.assertRaises(ValidationError):
            _run(svc.create_series_for_order(order.id, title="x"))


# ─── update / regenerate / delete ─────────────────────────────────────────────

class TestUpdateSeries(unittest.TestCase):
    def setUp(self):
        self.svc = _make_service()
        self.row = _fake_row()
        self.svc._series_repo.get_by_id = AsyncMock(return_value=self.row)

    def test_no_change_keeps_events(self):
        row, events = _run(self.svc.update_series(self.row.id, {"title": "Home care"}))

        self.assertIs(row, self.row)
        self.assertIsNone(events)
        self.svc._series_repo.update.assert_not_awaited()
        self.svc._gateway.replace_series_events.assert_not_awaited()

    def test_recurrency_change_regenerates(self):
        row, events = _run(self.svc.update_series(self.row.id, {"recurrency": 2}))

        self.assertEqual(len(events), 27)
        self.svc._series_repo.update.assert_awaited_once_with(self.row.id, {"recurrency": 2})
        self.svc._gateway.replace_series_events.assert_awaited_once_with(self.row.id, events)

    def test_title_change_regenerates_denormalized_events(self):
        _, events = _run(self.svc.update_series(self.row.id, {"title": "Physio"}))
        self.assertEqual({e.title for e in events}, {"Physio"})

    def test_end_date_change(self):
        changes = {"end_series": {"ending_type": 1, "end_date": dt.datetime(2024, 2, 1)}}
        _, events = _run(self.svc.update_series(self.row.id, changes))
        self.assertEqual(len(events), 5)

    def test_owner_change_is_resolved(self):
        _run(self.svc.update_series(self.row.id, {"owner_id": uuid4()}))
        self.svc._owners.resolve.assert_awaited_once()

    def test_invalid_change_writes_nothing(self):
        with self.assertRaises(InvalidRecurrencyError):
            _run(self.svc.update_series(self.row.id, {"recurrency": 99}))
        self.svc._series_repo.update.assert_not_awaited()

    def test_null_recurrency_is_invalid(self):
        with self.assertRaises(InvalidRecurrencyError) as ctx:
            _run(self.svc.update_series(self.row.id, {"recurrency": None}))
        self.assertEqual(ctx.exception.http_status, 422)
        self.svc._series_repo.update.assert_not_awaited()
        self.svc._gateway.replace_series_events.assert_not_awaited()

    def test_missing_series(self):
        self.svc._series_repo.get_by_id = AsyncMock(return_value=None)
        with self.assertRaises(SeriesNotFoundError):
            _run(self.svc.update_series(uuid4(), {"recurrency": 2}))


class TestRegenerateAndDelete(unittest.TestCase):
    def test_regenerate(self):
        svc = _make_service()
        row = _fake_row(recurrency=4)
        svc._series_repo.get_by_id = AsyncMock(return_value=row)

        events = _run(svc.regenerate(row.id))

        self.assertEqual(len(events), 14)
        svc._gateway.replace_series_events.assert_awaited_once_with(row.id, events)

    def test_delete_removes_derived_events_then_series(self):
        svc = _make_service()
        row = _fake_row()
        svc._series_repo.get_by_id = AsyncMock(return_value=row)

        self.assertEqual(_run(svc.delete_series(row.id)), 52)
        svc._gateway.delete_series_events.assert_awaited_once_with(row.id)
        svc._series_repo.delete.assert_awaited_once_with(row.id)

    def test_delete_missing_series(self):
        svc = _make_service()
        svc._series_repo.get_by_id = AsyncMock(return_value=None)
        with self.assertRaises(SeriesNotFoundError):
            _run(svc.delete_series(uuid4()))
        svc._gateway.delete_series_events.assert_not_awaited()


# ─── queries ──────────────────────────────────────────────────────────────────

class TestQueries(unittest.TestCase):
    def test_schedule_text(self):
        svc = _make_service()
        row = _fake_row()
        svc._series_repo.get_by_id = AsyncMock(return_value=row)

        self.assertEqual(_run(svc.schedule_text(row.id)), "Segundas-feiras: 08:00 - 09:00")
        self.assertEqual(_run(svc.schedule_text(row.id, "en")), "Mondays: 08:00 - 09:00")

    def test_schedule_summary_has_cadence_and_start(self):
        svc = _make_service()
        row = _fake_row()
        svc._series_repo.get_by_id = AsyncMock(return_value=row)

        summary = _run(svc.schedule_summary(row.id, "en"))

        self.assertEqual(
            summary,
            {"text": "Mondays: 08:00 - 09:00", "recurrency": "Weekly", "start": "01/01/2024"},
        )

    def test_render_unknown_locale(self):
        with self.assertRaises(ValidationError):
            _make_service().render([], "fr")

    def test_list_series_for_owner(self):
        svc = _make_service()
        owner_id = uuid4()
        svc._series_repo.list_for_owner = AsyncMock(return_value=[])

        _run(svc.list_series("health_unit", owner_id, limit=10))

        svc._series_repo.list_for_owner.assert_awaited_once_with("health_unit", owner_id, skip=0, limit=10)

    def test_calendar_for_owner(self):
        svc = _make_service()
        owner_id = uuid4()
        svc._event_repo.list_for_owner = AsyncMock(return_value=[])
        start, end = dt.datetime(2024, 1, 1), dt.datetime(2024, 2, 1)

        _run(svc.calendar_for_owner("collaborator", owner_id, start, end))

        svc._event_repo.list_for_owner.assert_awaited_once_with("collaborator", owner_id, start, end)

    def test_calendar_rejects_inverted_range(self):
        svc = _make_service()
        with self.assertRaises(ValidationError):
            _run(svc.calendar_for_owner("collaborator", uuid4(), dt.datetime(2024, 2, 1), dt.datetime(2024, 1, 1)))

    def test_calendar_unknown_owner_type(self):
        with self.assertRaises(ValidationError):
            _run(_make_service().calendar_for_owner("patient", uuid4()))

    def test_preview_does_not_persist(self):
        svc = _make_service()
        events = _run(svc.preview(_series_data(recurrency=0)))
        self.assertEqual(len(events), 1)
        svc._series_repo.create.assert_not_awaited()
        svc._gateway.replace_series_events.assert_not_awaited()

    def test_row_round_trip(self):
        row = _fake_row(recurrency=2)
        series = row_to_series(row)
        stored = series_to_row(series)
        self.assertEqual(stored["schedule"], row.schedule)
        self.assertEqual(stored["recurrency"], 2)
        self.assertEqual(stored["end_series"], {"ending_type": 0})
