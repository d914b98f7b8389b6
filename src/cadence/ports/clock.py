"""Clock interface."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Interface for reading the current time."""

    def now(self) -> datetime:
        """Current local time as an aware datetime."""
        ...
