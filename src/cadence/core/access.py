"""Pure access-window logic - no I/O dependencies."""

from dataclasses import dataclass
from enum import Enum

from .dates import MS_PER_HOUR, MS_PER_MINUTE

GUEST_WINDOW_MS = 24 * MS_PER_HOUR


class WindowState(Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(frozen=True)
class WindowStatus:
    """Point-in-time view of an access window."""

    state: WindowState
    remaining_ms: int
    hours_left: int
    minutes_left: int

    @property
    def is_active(self) -> bool:
        return self.state is WindowState.ACTIVE

    @property
    def has_expired(self) -> bool:
        return self.state is WindowState.EXPIRED

    def format_remaining(self) -> str:
        if self.hours_left > 0:
            return f"{self.hours_left}h {self.minutes_left}m"
        return f"{self.minutes_left}m"


def split_duration(ms: int) -> tuple[int, int]:
    """Whole hours and leftover whole minutes in a duration."""
    return ms // MS_PER_HOUR, (ms % MS_PER_HOUR) // MS_PER_MINUTE


class AccessWindow:
    """
    A single-use, non-renewable grant of elevated access.

    NotStarted -> Active -> Expired. `start` only acts on a window that has
    not started; `clear` is the only way back to NotStarted. All times are
    epoch milliseconds supplied by the caller.
    """

    def __init__(self, duration_ms: int = GUEST_WINDOW_MS, started_at: int | None = None):
        if duration_ms <= 0:
            raise ValueError(f"duration_ms must be positive, got {duration_ms}")
        self.duration_ms = duration_ms
        self.started_at = started_at

    def __repr__(self) -> str:
        return f"AccessWindow(duration_ms={self.duration_ms}, started_at={self.started_at})"

    def remaining_ms(self, now_ms: int) -> int:
        if self.started_at is None:
            return 0
        # A clock behind startedAt counts as no time elapsed
        elapsed = max(0, now_ms - self.started_at)
        return max(0, self.duration_ms - elapsed)

    def state(self, now_ms: int) -> WindowState:
        if self.started_at is None:
            return WindowState.NOT_STARTED
        if self.remaining_ms(now_ms) > 0:
            return WindowState.ACTIVE
        return WindowState.EXPIRED

    def status(self, now_ms: int) -> WindowStatus:
        """Project the window at `now_ms`. Never mutates."""
        state = self.state(now_ms)
        if state is WindowState.NOT_STARTED:
            # Nothing consumed yet: show the full grant
            hours, minutes = split_duration(self.duration_ms)
            return WindowStatus(state, 0, hours, minutes)
        remaining = self.remaining_ms(now_ms)
        hours, minutes = split_duration(remaining)
        return WindowStatus(state, remaining, hours, minutes)

    def start(self, now_ms: int) -> WindowState:
        """Start the window if it has never started. Otherwise a no-op."""
        if self.started_at is None:
            self.started_at = now_ms
        return self.state(now_ms)

    def clear(self) -> None:
        self.started_at = None


def window_status(window: AccessWindow, now_ms: int) -> WindowStatus:
    """Pure projection of a window's status."""
    return window.status(now_ms)
