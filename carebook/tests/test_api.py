"""HTTP tests for the series, schedule and calendar routers.

The service is replaced through FastAPI dependency overrides; the lifespan
(database startup) is not run.
"""
from __future__ import annotations

import datetime as dt
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from fastapi.testclient import TestClient

from carebook.api.dependencies import get_schedule_service, get_scheduling_config
from carebook.api.main import app
from carebook.config.scheduling import SchedulingConfig
from carebook.core.exceptions import ConflictError, InvalidRecurrencyError, SeriesNotFoundError
from carebook.scheduling.types import Event, OwnerType
from carebook.services.schedule_service import ScheduleService


def _series_row(**kwargs):
    defaults = {
        "id": uuid4(),
        "owner_type": "health_unit",
        "owner_id": uuid4(),
        "order_id": None,
        "caregiver_id": None,
        "start_date": dt.datetime(2024, 1, 1),
        "recurrency": 1,
        "schedule": [{"start": "2024-01-01T08:00:00", "end": "2024-01-01T09:00:00"}],
        "end_series": {"ending_type": 0},
        "title": "Home care",
        "description": None,
        "location": None,
        "text_color": "#1890FF",
        "all_day": False,
        "created_at": None,
        "updated_at": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _event(series_id, **kwargs):
    defaults = {
        "id": uuid4(),
        "series_id": series_id,
        "owner_type": OwnerType.HEALTH_UNIT,
        "owner": uuid4(),
        "order": None,
        "title": "Home care",
        "description": "",
        "start": dt.datetime(2024, 1, 1, 8),
        "end": dt.datetime(2024, 1, 1, 9),
        "location": None,
        "text_color": "#1890FF",
        "all_day": False,
    }
    defaults.update(kwargs)
    return Event(**defaults)


_CREATE_BODY = {
    "owner_type": "health_unit",
    "owner_id": str(uuid4()),
    "start_date": "2024-01-01T00:00:00Z",
    "recurrency": 1,
    "schedule": [{"start": "2024-01-01T08:00:00Z", "end": "2024-01-01T09:00:00Z"}],
    "title": "Home care",
}


class _ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.svc = MagicMock()
        app.dependency_overrides[get_schedule_service] = lambda: self.svc
        app.dependency_overrides[get_scheduling_config] = lambda: SchedulingConfig()
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class TestSeriesEndpoints(_ApiTestCase):
    def test_create_series(self):
        row = _series_row()
        self.svc.create_series = AsyncMock(return_value=(row, [_event(row.id), _event(row.id)]))

        resp = self.client.post("/api/v1/series", json=_CREATE_BODY)

        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["event_count"], 2)
        self.assertEqual(data["series"]["id"], str(row.id))
        self.assertEqual(data["events"][0]["owner_type"], "health_unit")
        sent = self.svc.create_series.await_args.args[0]
        self.assertEqual(sent["recurrency"], 1)
        self.assertEqual(sent["end_series"], {"ending_type": 0, "end_date": None, "end_occurrences": None})

    def test_create_requires_a_slot(self):
        resp = self.client.post("/api/v1/series", json={**_CREATE_BODY, "schedule": []})
        self.assertEqual(resp.status_code, 422)

    def test_invalid_recurrency_maps_to_error_body(self):
        self.svc.create_series = AsyncMock(
            side_effect=InvalidRecurrencyError("Invalid recurrency type: 99", details={"recurrency": 99})
        )

        resp = self.client.post("/api/v1/series", json={**_CREATE_BODY, "recurrency": 99})

        self.assertEqual(resp.status_code, 422)
        self.assertEqual(
            resp.json(),
            {
                "detail": "Invalid recurrency type: 99",
                "code": "INVALID_RECURRENCY",
                "details": {"recurrency": 99},
            },
        )

    def test_list_owner_series(self):
        row = _series_row()
        self.svc.list_series = AsyncMock(return_value=[row])

        resp = self.client.get(
            "/api/v1/series", params={"owner_type": "health_unit", "owner_id": str(row.owner_id)}
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()[0]["id"], str(row.id))
        self.svc.list_series.assert_awaited_once_with(
            OwnerType.HEALTH_UNIT, row.owner_id, skip=0, limit=100
        )

    def test_second_series_for_an_order_conflicts(self):
        self.svc.create_series_for_order = AsyncMock(side_effect=ConflictError("Order already has a schedule"))
        resp = self.client.post(f"/api/v1/series/from-order/{uuid4()}", json={"title": "Order 1"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "CONFLICT")

    def test_get_missing_series(self):
        self.svc.get_series = AsyncMock(side_effect=SeriesNotFoundError("Event series not found"))
        resp = self.client.get(f"/api/v1/series/{uuid4()}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "SERIES_NOT_FOUND")

    def test_patch_without_regeneration_lists_stored_events(self):
        row = _series_row()
        self.svc.update_series = AsyncMock(return_value=(row, None))
        self.svc.list_series_events = AsyncMock(return_value=[])

        resp = self.client.patch(f"/api/v1/series/{row.id}", json={"title": "Home care"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.svc.update_series.await_args.args[1], {"title": "Home care"})
        self.svc.list_series_events.assert_awaited_once()

    def test_delete_series(self):
        series_id = uuid4()
        self.svc.delete_series = AsyncMock(return_value=52)
        resp = self.client.delete(f"/api/v1/series/{series_id}")
        self.assertEqual(resp.json(), {"series_id": str(series_id), "deleted_events": 52})

    def test_regenerate(self):
        series_id = uuid4()
        self.svc.regenerate = AsyncMock(return_value=[_event(series_id)])
        resp = self.client.post(f"/api/v1/series/{series_id}/regenerate")
        self.assertEqual(resp.json()["event_count"], 1)

    def test_schedule_text_defaults_to_configured_locale(self):
        series_id = uuid4()
        self.svc.schedule_summary = AsyncMock(
            return_value={
                "text": "Segundas-feiras: 08:00 - 09:00",
                "recurrency": "Semanal",
                "start": "01/01/2024",
            }
        )
        resp = self.client.get(f"/api/v1/series/{series_id}/schedule-text")
        data = resp.json()
        self.assertEqual(data["locale"], "pt")
        self.assertEqual(data["text"], "Segundas-feiras: 08:00 - 09:00")
        self.assertEqual(data["recurrency"], "Semanal")
        self.assertEqual(data["start"], "01/01/2024")
        self.svc.schedule_summary.assert_awaited_once_with(series_id, None)


class TestScheduleEndpoints(_ApiTestCase):
    def test_render_uses_the_real_renderer(self):
        self.svc = ScheduleService(MagicMock())
        app.dependency_overrides[get_schedule_service] = lambda: self.svc

        resp = self.client.post(
            "/api/v1/schedule/render",
            json={
                "schedule": [
                    {"start": "2024-01-03T14:00:00", "end": "2024-01-03T18:00:00"},
                    {"start": "2024-01-01T08:00:00", "end": "2024-01-01T12:00:00"},
                ],
                "locale": "en",
            },
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["text"], "Mondays: 08:00 - 12:00; Wednesdays: 14:00 - 18:00")

    def test_preview(self):
        self.svc.preview = AsyncMock(return_value=[_event(None)])
        resp = self.client.post("/api/v1/schedule/preview", json=_CREATE_BODY)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()[0]["series_id"])


class TestCalendarEndpoint(_ApiTestCase):
    def test_requires_owner(self):
        resp = self.client.get("/api/v1/calendar")
        self.assertEqual(resp.status_code, 422)

    def test_lists_owner_events(self):
        owner_id = uuid4()
        stored = SimpleNamespace(**_event(uuid4()).to_record())
        self.svc.calendar_for_owner = AsyncMock(return_value=[stored])

        resp = self.client.get(
            "/api/v1/calendar",
            params={
                "owner_type": "collaborator",
                "owner_id": str(owner_id),
                "start": "2024-01-01T00:00:00Z",
            },
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()), 1)
        args = self.svc.calendar_for_owner.await_args.args
        self.assertEqual(args[0], OwnerType.COLLABORATOR)
        self.assertEqual(args[2], dt.datetime(2024, 1, 1))
        self.assertIsNone(args[3])


class TestHealth(unittest.TestCase):
    def test_health(self):
        resp = TestClient(app).get("/health")
        self.assertEqual(resp.json(), {"status": "ok"})
