"""Pure habit domain logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import IntEnum

from .dates import date_key, parse_iso_date, weekday_index
from .errors import Diagnostic, MalformedDateError

MAX_STREAK_SCAN_DAYS = 365


class Weekday(IntEnum):
    """Weekday numbering used by stored records (Sunday first)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


@dataclass(frozen=True)
class RecurringItem:
    """A habit repeated on a fixed set of weekdays."""

    id: str
    target_days: frozenset[int]
    completed_dates: frozenset[str] = field(default_factory=frozenset)
    created_at: datetime | None = None
    name: str = ""

    def is_due_on(self, d: date) -> bool:
        """Whether d is a qualifying day for this item."""
        return weekday_index(d) in self.target_days

    def is_completed_on(self, d: date) -> bool:
        return date_key(d) in self.completed_dates

    def validate(self) -> list[Diagnostic]:
        """Diagnostics for every malformed completed date."""
        problems = []
        for value in sorted(self.completed_dates, key=str):
            try:
                parse_iso_date(value)
            except MalformedDateError as e:
                problems.append(Diagnostic.from_error(self.id, "completedDates", e))
        return problems


@dataclass
class StreakReport:
    """Streaks for a collection of items, plus anything that was skipped."""

    streaks: dict[str, int]
    diagnostics: list[Diagnostic] = field(default_factory=list)


def streak(item: RecurringItem, today: date) -> int:
    """
    Count consecutive completed qualifying days, walking back from today.

    Non-qualifying days neither extend nor break the streak. A miss on
    today itself is tolerated (it may simply not be done yet); any other
    missed qualifying day ends the scan. The scan covers at most
    MAX_STREAK_SCAN_DAYS calendar days.

    Pure function - no I/O. Items with malformed dates score 0.
    """
    if not item.completed_dates or not item.target_days:
        return 0
    if item.validate():
        return 0

    count = 0
    current = today
    for i in range(MAX_STREAK_SCAN_DAYS):
        if item.is_due_on(current):
            if item.is_completed_on(current):
                count += 1
            elif i > 0:
                break
        current -= timedelta(days=1)

    return count


def compute_streaks(items: list[RecurringItem], today: date) -> StreakReport:
    """
    Streak for every item, skipping malformed ones.

    Pure function - no I/O.
    """
    report = StreakReport(streaks={})
    for item in items:
        problems = item.validate()
        if problems:
            report.diagnostics.extend(problems)
            continue
        report.streaks[item.id] = streak(item, today)
    return report


def toggle_completion(item: RecurringItem, d: date) -> RecurringItem:
    """Return a copy of the item with d flipped in or out of its completed dates."""
    key = date_key(d)
    if key in item.completed_dates:
        return replace(item, completed_dates=item.completed_dates - {key})
    return replace(item, completed_dates=item.completed_dates | {key})


def qualifying_days(item: RecurringItem, start: date, end: date) -> list[date]:
    """Qualifying days in [start, end], oldest first."""
    days = []
    current = start
    while current <= end:
        if item.is_due_on(current):
            days.append(current)
        current += timedelta(days=1)
    return days
