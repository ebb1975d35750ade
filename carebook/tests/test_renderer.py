"""Tests for the schedule text renderer used in order e-mails."""
from __future__ import annotations

import datetime as dt
import unittest

from carebook.scheduling.renderer import render_date, render_recurrency, render_schedule
from carebook.scheduling.types import TimeSlot


def _slot(day: int, start_h: int, end_h: int, end_m: int = 0) -> TimeSlot:
    # 2024-01-01 is a Monday, so day 1..7 maps to Monday..Sunday
    base = dt.datetime(2024, 1, day)
    return TimeSlot(base.replace(hour=start_h), base.replace(hour=end_h, minute=end_m))


class TestRenderSchedule(unittest.TestCase):
    def test_sorted_monday_first(self):
        slots = [_slot(3, 8, 12), _slot(1, 8, 12, 30)]
        self.assertEqual(
            render_schedule(slots),
            "Segundas-feiras: 08:00 - 12:30; Quartas-feiras: 08:00 - 12:00",
        )

    def test_english_locale(self):
        self.assertEqual(
            render_schedule([_slot(6, 9, 10), _slot(7, 14, 18)], "en"),
            "Saturdays: 09:00 - 10:00; Sundays: 14:00 - 18:00",
        )

    def test_input_is_not_mutated(self):
        slots = [_slot(5, 8, 9), _slot(2, 8, 9)]
        before = list(slots)
        render_schedule(slots)
        self.assertEqual(slots, before)

    def test_empty_schedule(self):
        self.assertEqual(render_schedule([]), "")

    def test_explicit_week_day_wins(self):
        slot = TimeSlot(dt.datetime(2024, 1, 1, 8), dt.datetime(2024, 1, 1, 9), week_day=5)
        self.assertEqual(render_schedule([slot], "en"), "Fridays: 08:00 - 09:00")

    def test_accepts_stored_dicts(self):
        stored = [{"start": "2024-01-02T07:15:00", "end": "2024-01-02T08:00:00"}]
        self.assertEqual(render_schedule(stored), "Terças-feiras: 07:15 - 08:00")

    def test_unknown_locale(self):
        with self.assertRaises(ValueError):
            render_schedule([_slot(1, 8, 9)], "fr")


class TestRenderRecurrency(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(render_recurrency(0), "Pedido Único")
        self.assertEqual(render_recurrency(1), "Semanal")
        self.assertEqual(render_recurrency(2), "Quinzenal")
        self.assertEqual(render_recurrency(4), "Mensal")
        self.assertEqual(render_recurrency(2, "en"), "Biweekly")

    def test_unknown_code(self):
        self.assertEqual(render_recurrency(3), "N/A")
        self.assertEqual(render_recurrency(None), "N/A")


class TestRenderDate(unittest.TestCase):
    def test_day_month_year(self):
        self.assertEqual(render_date("2023-01-21T10:00:00Z"), "21/01/2023")
        self.assertEqual(render_date(dt.date(2024, 12, 5)), "05/12/2024")
