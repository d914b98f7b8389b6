"""Date helpers shared by the core modules - no I/O dependencies."""

import re
from datetime import date, datetime, timedelta, timezone, tzinfo

from .errors import MalformedDateError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


def parse_iso_date(value: object) -> date:
    """
    Parse a strict YYYY-MM-DD string.

    Raises MalformedDateError for anything else, including full ISO
    timestamps and impossible dates like 2024-02-30.
    """
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise MalformedDateError(value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise MalformedDateError(value) from None


def is_iso_date(value: object) -> bool:
    """Check whether a value is a well-formed YYYY-MM-DD string."""
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def date_key(d: date) -> str:
    return d.isoformat()


def weekday_index(d: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6, the numbering stored records use."""
    return d.isoweekday() % 7


def start_of_week(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def local_date(now: datetime | date, tz: tzinfo | None = None) -> date:
    """
    Calendar date of `now` as the user sees it.

    Naive datetimes are taken to be local already. Aware datetimes are
    converted into `tz` first when one is given.
    """
    if not isinstance(now, datetime):
        return now
    if tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.date()


def to_epoch_ms(dt: datetime) -> int:
    """Epoch milliseconds for a datetime (naive values are treated as local time)."""
    return int(dt.timestamp() * 1000)


def from_epoch_ms(ms: int, tz: tzinfo | None = timezone.utc) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=tz)
