"""Tests for period resolution."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cadence.core.periods import (
    DayWindow,
    PeriodKind,
    PeriodRange,
    POSTPONE_OPTIONS,
    days_in_window,
    postponed_date,
    resolve_period,
)


@pytest.fixture
def now():
    # A Wednesday
    return datetime(2024, 1, 3, 15, 30)


class TestWeek:
    def test_monday_to_sunday(self, now):
        result = resolve_period(PeriodKind.WEEK, now)
        assert result == PeriodRange(date(2024, 1, 1), date(2024, 1, 7))

    def test_sunday_belongs_to_previous_monday(self):
        result = resolve_period(PeriodKind.WEEK, date(2024, 1, 7))
        assert result.start_date == date(2024, 1, 1)

    def test_always_monday_start_sunday_end(self):
        start = date(2023, 12, 20)
        for offset in range(60):
            result = resolve_period(PeriodKind.WEEK, start + timedelta(days=offset))
            assert result.start_date.weekday() == 0
            assert result.end_date.weekday() == 6
            assert result.end_date - result.start_date == timedelta(days=6)

    def test_crosses_year_boundary(self):
        result = resolve_period(PeriodKind.WEEK, date(2025, 1, 1))
        assert result == PeriodRange(date(2024, 12, 30), date(2025, 1, 5))


class TestCalendarPeriods:
    def test_month_in_leap_february(self):
        result = resolve_period(PeriodKind.MONTH, date(2024, 2, 15))
        assert result == PeriodRange(date(2024, 2, 1), date(2024, 2, 29))

    def test_month_december(self):
        result = resolve_period(PeriodKind.MONTH, date(2024, 12, 10))
        assert result == PeriodRange(date(2024, 12, 1), date(2024, 12, 31))

    @pytest.mark.parametrize(
        "day, start, end",
        [
            (date(2024, 1, 1), date(2024, 1, 1), date(2024, 3, 31)),
            (date(2024, 5, 20), date(2024, 4, 1), date(2024, 6, 30)),
            (date(2024, 9, 30), date(2024, 7, 1), date(2024, 9, 30)),
            (date(2024, 11, 2), date(2024, 10, 1), date(2024, 12, 31)),
        ],
    )
    def test_quarter(self, day, start, end):
        assert resolve_period(PeriodKind.QUARTER, day) == PeriodRange(start, end)

    def test_year(self, now):
        result = resolve_period(PeriodKind.YEAR, now)
        assert result == PeriodRange(date(2024, 1, 1), date(2024, 12, 31))

    def test_uses_local_calendar(self):
        # 23:30 UTC on Jan 31 is already Feb 1 in Tokyo
        now = datetime(2024, 1, 31, 23, 30, tzinfo=timezone.utc)
        result = resolve_period(PeriodKind.MONTH, now, tz=ZoneInfo("Asia/Tokyo"))
        assert result.start_date == date(2024, 2, 1)

    def test_naive_datetime_taken_as_local(self):
        now = datetime(2024, 1, 31, 23, 30)
        result = resolve_period(PeriodKind.MONTH, now, tz=ZoneInfo("Asia/Tokyo"))
        assert result.start_date == date(2024, 1, 1)


class TestCustom:
    def test_bounds_returned_verbatim(self, now):
        result = resolve_period(PeriodKind.CUSTOM, now, date(2023, 6, 1), date(2023, 6, 15))
        assert result == PeriodRange(date(2023, 6, 1), date(2023, 6, 15))

    def test_defaults_to_next_thirty_days(self, now):
        result = resolve_period(PeriodKind.CUSTOM, now)
        assert result == PeriodRange(date(2024, 1, 3), date(2024, 2, 2))

    def test_missing_end_defaults_independently(self, now):
        result = resolve_period(PeriodKind.CUSTOM, now, custom_start=date(2023, 12, 1))
        assert result.start_date == date(2023, 12, 1)
        assert result.end_date == date(2024, 2, 2)

    def test_configurable_default_length(self, now):
        result = resolve_period(PeriodKind.CUSTOM, now, custom_days=7)
        assert result.end_date == date(2024, 1, 10)


class TestPeriodRange:
    def test_contains_is_inclusive(self):
        r = PeriodRange(date(2024, 1, 1), date(2024, 1, 7))
        assert r.contains(date(2024, 1, 1))
        assert r.contains(date(2024, 1, 7))
        assert not r.contains(date(2024, 1, 8))

    def test_days(self):
        assert PeriodRange(date(2024, 1, 1), date(2024, 1, 7)).days() == 7

    def test_as_dict(self):
        r = PeriodRange(date(2024, 1, 1), date(2024, 1, 7))
        assert r.as_dict() == {"startDate": "2024-01-01", "endDate": "2024-01-07"}

    def test_format(self):
        r = PeriodRange(date(2024, 1, 1), date(2024, 1, 7))
        assert r.format() == "1 Jan - 7 Jan 2024"


class TestDaysInWindow:
    def test_starts_on_monday(self, now):
        days = list(days_in_window(10, now))
        assert days[0] == date(2024, 1, 1)
        assert len(days) == 10
        assert days[-1] == date(2024, 1, 10)

    def test_consecutive(self, now):
        days = list(days_in_window(14, now))
        for a, b in zip(days, days[1:]):
            assert b - a == timedelta(days=1)

    def test_restartable(self, now):
        window = days_in_window(7, now)
        assert list(window) == list(window)
        assert len(window) == 7

    def test_lazy(self):
        window = DayWindow(start=date(2024, 1, 1), count=1000)
        it = iter(window)
        assert next(it) == date(2024, 1, 1)
        assert next(it) == date(2024, 1, 2)


class TestPostpone:
    def test_postponed_date(self):
        assert postponed_date(3, date(2024, 1, 30)) == date(2024, 2, 2)

    def test_presets(self):
        assert POSTPONE_OPTIONS == (1, 3, 7)
