"""Pure period resolution logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterator

from .dates import local_date, start_of_week

DEFAULT_CUSTOM_DAYS = 30
POSTPONE_OPTIONS = (1, 3, 7)


class PeriodKind(Enum):
    """Reporting period used to bound progress queries."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PeriodRange:
    """An inclusive date range."""

    start_date: date
    end_date: date

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date

    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end_date - self.start_date).days + 1

    def as_dict(self) -> dict[str, str]:
        return {"startDate": self.start_date.isoformat(), "endDate": self.end_date.isoformat()}

    def format(self) -> str:
        return f"{self.start_date.day} {self.start_date:%b} - {self.end_date.day} {self.end_date:%b %Y}"


@dataclass(frozen=True)
class DayWindow:
    """
    A run of consecutive days starting on a Monday.

    Lazy and re-iterable: each iteration walks the range again from the start.
    """

    start: date
    count: int

    def __iter__(self) -> Iterator[date]:
        for i in range(self.count):
            yield self.start + timedelta(days=i)

    def __len__(self) -> int:
        return max(0, self.count)


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def resolve_period(
    kind: PeriodKind,
    now: datetime | date,
    custom_start: date | None = None,
    custom_end: date | None = None,
    tz: tzinfo | None = None,
    custom_days: int = DEFAULT_CUSTOM_DAYS,
) -> PeriodRange:
    """
    Map a period kind and reference instant to a concrete date range.

    Pure function - no I/O. Boundaries follow the local calendar; pass `tz`
    to convert an aware `now` before taking its date.
    """
    today = local_date(now, tz)

    match kind:
        case PeriodKind.WEEK:
            monday = start_of_week(today)
            return PeriodRange(monday, monday + timedelta(days=6))
        case PeriodKind.MONTH:
            return PeriodRange(today.replace(day=1), _month_end(today.year, today.month))
        case PeriodKind.QUARTER:
            first_month = 3 * ((today.month - 1) // 3) + 1
            return PeriodRange(
                date(today.year, first_month, 1),
                _month_end(today.year, first_month + 2),
            )
        case PeriodKind.YEAR:
            return PeriodRange(date(today.year, 1, 1), date(today.year, 12, 31))
        case PeriodKind.CUSTOM:
            return PeriodRange(
                custom_start or today,
                custom_end or today + timedelta(days=custom_days),
            )


def days_in_window(count: int, now: datetime | date, tz: tzinfo | None = None) -> DayWindow:
    """Days for a calendar grid: `count` days forward from this week's Monday."""
    return DayWindow(start=start_of_week(local_date(now, tz)), count=count)


def postponed_date(days: int, today: date) -> date:
    """Target date when pushing an item back by `days`."""
    return today + timedelta(days=days)
