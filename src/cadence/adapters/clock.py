"""Clock adapters."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


class SystemClock:
    """
    Wall-clock time in the configured timezone.

    Implements Clock protocol.
    """

    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """
    A clock that only moves when told to.

    Implements Clock protocol. Useful for replaying a day deterministically.
    """

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        """Move forward by a timedelta built from kwargs (hours=1, minutes=5, ...)."""
        self.current = self.current + timedelta(**kwargs)
        return self.current
