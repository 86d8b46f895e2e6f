"""
Date window resolution tests.
"""
from datetime import date, datetime, time, timedelta

import pytest

from backend.services.date_windows import (
    DateRange,
    InvalidRangeError,
    Period,
    day_window,
    resolve_window,
)

# A Wednesday
TODAY = date(2026, 10, 14)

START = time(0, 0, 0, 0)
END = time(23, 59, 59, 999999)


class TestRollingPeriods:

    def test_today(self):
        w = resolve_window(Period.TODAY, today=TODAY)
        assert w.start == datetime.combine(TODAY, START)
        assert w.end == datetime.combine(TODAY, END)

    def test_week_on_wednesday(self):
        assert TODAY.weekday() == 2
        w = resolve_window("week", today=TODAY)
        assert w.start == datetime(2026, 10, 8, 0, 0, 0)
        assert w.end == datetime(2026, 10, 14, 23, 59, 59, 999999)

    def test_month_is_thirty_days(self):
        w = resolve_window(Period.MONTH, today=TODAY)
        assert w.start.date() == TODAY - timedelta(days=29)
        assert w.end.date() == TODAY
        assert (w.end.date() - w.start.date()).days + 1 == 30

    def test_month_crosses_year_boundary(self):
        w = resolve_window(Period.MONTH, today=date(2026, 1, 10))
        assert w.start == datetime(2025, 12, 12)

    def test_custom_range_ignored_for_rolling_period(self):
        w = resolve_window(Period.TODAY, DateRange(start=date(2020, 1, 1), end=date(2020, 1, 2)), today=TODAY)
        assert w.start.date() == TODAY

    def test_defaults_to_local_today(self):
        w = resolve_window(Period.TODAY)
        assert w.start.date() == date.today()

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            resolve_window("year", today=TODAY)


class TestCustomPeriod:

    def test_clamps_to_day_boundaries(self):
        custom = DateRange(start=datetime(2026, 10, 1, 15, 30), end=datetime(2026, 10, 3, 8, 0))
        w = resolve_window(Period.CUSTOM, custom, today=TODAY)
        assert w.start == datetime(2026, 10, 1, 0, 0)
        assert w.end == datetime(2026, 10, 3, 23, 59, 59, 999999)

    def test_single_day(self):
        w = resolve_window(Period.CUSTOM, DateRange(start=TODAY, end=TODAY), today=TODAY)
        assert w == day_window(TODAY)

    def test_missing_range(self):
        with pytest.raises(InvalidRangeError, match="required"):
            resolve_window(Period.CUSTOM, today=TODAY)

    def test_inverted_range_rejected(self):
        with pytest.raises(InvalidRangeError, match="after"):
            resolve_window(Period.CUSTOM, DateRange(start=date(2026, 10, 5), end=date(2026, 10, 4)))


class TestWindowContains:

    def test_edges_are_inclusive(self):
        w = day_window(TODAY)
        assert w.contains(datetime.combine(TODAY, START))
        assert w.contains(datetime.combine(TODAY, END))
        assert not w.contains(datetime.combine(TODAY + timedelta(days=1), START))
        assert not w.contains(datetime.combine(TODAY, START) - timedelta(microseconds=1))

    def test_missing_timestamp(self):
        assert not day_window(TODAY).contains(None)

    def test_day_window_accepts_datetime(self):
        assert day_window(datetime(2026, 10, 14, 18, 45)) == day_window(TODAY)
