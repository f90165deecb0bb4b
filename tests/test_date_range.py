import os
import sys
from datetime import date, datetime, timedelta

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pandas as pd

from fxsessions.calendar.date_range import (
    DateRange,
    RangeAnchor,
    RangeKind,
    local_today,
    parse_anchor,
    resolve,
)

import unittest


WEDNESDAY = date(2025, 11, 19)


class TestDailyRanges(unittest.TestCase):
    def test_single_days(self) -> None:
        self.assertEqual(resolve("daily", "today", WEDNESDAY), DateRange(WEDNESDAY, WEDNESDAY))
        self.assertEqual(resolve("daily", "yesterday", WEDNESDAY), DateRange(date(2025, 11, 18), date(2025, 11, 18)))
        self.assertEqual(resolve("daily", "tomorrow", WEDNESDAY), DateRange(date(2025, 11, 20), date(2025, 11, 20)))

    def test_month_boundary(self) -> None:
        self.assertEqual(resolve("daily", "yesterday", date(2025, 3, 1)).start, date(2025, 2, 28))
        self.assertEqual(resolve("daily", "tomorrow", date(2025, 12, 31)).end, date(2026, 1, 1))


class TestWeeklyRanges(unittest.TestCase):
    def test_this_week_runs_sunday_to_saturday(self) -> None:
        rng = resolve("weekly", "thisWeek", WEDNESDAY)
        self.assertEqual(rng.start, date(2025, 11, 16))
        self.assertEqual(rng.end, date(2025, 11, 22))
        self.assertEqual(rng.start.weekday(), 6)
        self.assertEqual(rng.days, 7)
        self.assertIn(WEDNESDAY, rng)

    def test_last_and_next_week(self) -> None:
        self.assertEqual(resolve("weekly", "lastWeek", WEDNESDAY), DateRange(date(2025, 11, 9), date(2025, 11, 15)))
        self.assertEqual(resolve("weekly", "nextWeek", WEDNESDAY), DateRange(date(2025, 11, 23), date(2025, 11, 29)))

    def test_week_edges(self) -> None:
        sunday = date(2025, 11, 16)
        saturday = date(2025, 11, 22)
        expected = DateRange(sunday, saturday)
        self.assertEqual(resolve("weekly", "thisWeek", sunday), expected)
        self.assertEqual(resolve("weekly", "thisWeek", saturday), expected)
        self.assertEqual(resolve("weekly", "nextWeek", saturday).start, date(2025, 11, 23))


class TestMonthlyRanges(unittest.TestCase):
    def test_december_rolls_into_january(self) -> None:
        today = date(2025, 12, 10)
        self.assertEqual(resolve("monthly", "lastMonth", today), DateRange(date(2025, 11, 1), date(2025, 11, 30)))
        self.assertEqual(resolve("monthly", "thisMonth", today), DateRange(date(2025, 12, 1), date(2025, 12, 31)))
        self.assertEqual(resolve("monthly", "nextMonth", today), DateRange(date(2026, 1, 1), date(2026, 1, 31)))

    def test_january_looks_back_to_december(self) -> None:
        self.assertEqual(
            resolve("monthly", "lastMonth", date(2025, 1, 31)),
            DateRange(date(2024, 12, 1), date(2024, 12, 31)),
        )

    def test_leap_february(self) -> None:
        self.assertEqual(resolve("monthly", "lastMonth", date(2024, 3, 15)).end, date(2024, 2, 29))

    def test_months_are_contiguous(self) -> None:
        for month in range(1, 13):
            for year in (2024, 2025):
                today = date(year, month, 15)
                last = resolve("monthly", "lastMonth", today)
                this = resolve("monthly", "thisMonth", today)
                nxt = resolve("monthly", "nextMonth", today)
                self.assertEqual(last.end + timedelta(days=1), this.start)
                self.assertEqual(this.end + timedelta(days=1), nxt.start)
                for rng in (last, this, nxt):
                    self.assertEqual(rng.start.day, 1)
                    self.assertNotEqual(rng.end.month, (rng.end + timedelta(days=1)).month)


class TestArguments(unittest.TestCase):
    def test_kind_is_inferred(self) -> None:
        self.assertEqual(resolve(None, "thisWeek", WEDNESDAY), resolve(RangeKind.WEEKLY, RangeAnchor.THIS_WEEK, WEDNESDAY))

    def test_snake_case_alias(self) -> None:
        self.assertEqual(resolve(None, "next_month", WEDNESDAY).start, date(2025, 12, 1))

    def test_datetime_today(self) -> None:
        self.assertEqual(resolve(None, "today", datetime(2025, 11, 19, 23, 59)).start, WEDNESDAY)
        self.assertEqual(resolve(None, "today", pd.Timestamp("2025-11-19 08:00")).start, WEDNESDAY)

    def test_mismatch_and_unknown(self) -> None:
        with self.assertRaises(ValueError):
            resolve("daily", "thisWeek", WEDNESDAY)
        with self.assertRaises(ValueError):
            resolve(None, "fortnight", WEDNESDAY)
        with self.assertRaises(ValueError):
            resolve("hourly", "today", WEDNESDAY)

    def test_non_string_anchor(self) -> None:
        with self.assertRaises(ValueError):
            parse_anchor(None)
        with self.assertRaises(ValueError):
            parse_anchor(7)
        self.assertIs(parse_anchor("THIS_WEEK"), RangeAnchor.THIS_WEEK)

    def test_as_params(self) -> None:
        self.assertEqual(
            resolve(None, "thisWeek", WEDNESDAY).as_params(),
            {"start": "2025-11-16", "end": "2025-11-22"},
        )


class TestLocalToday(unittest.TestCase):
    def test_offsets_change_the_date(self) -> None:
        self.assertEqual(local_today(5.5, "2025-11-18T20:00:00Z"), date(2025, 11, 19))
        self.assertEqual(local_today(-5, "2025-11-19T03:00:00Z"), date(2025, 11, 18))
        self.assertEqual(local_today(0, "2025-11-19T03:00:00Z"), date(2025, 11, 19))


if __name__ == '__main__':
    unittest.main()
