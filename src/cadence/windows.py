"""Store-backed access windows."""

import logging

from cadence.core.access import GUEST_WINDOW_MS, AccessWindow, WindowState, WindowStatus
from cadence.ports import KeyValueStore
from cadence.records import GUEST_MODE_KEY

logger = logging.getLogger(__name__)


class AccessWindowManager:
    """
    An AccessWindow whose start time lives in a KeyValueStore.

    The start time is read once at construction and written back whenever
    `start` or `clear` changes it. Status is always derived from the
    in-memory window and the `now_ms` the caller passes in.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = GUEST_MODE_KEY,
        duration_ms: int = GUEST_WINDOW_MS,
    ):
        self.store = store
        self.key = key
        self.window = AccessWindow(duration_ms=duration_ms, started_at=self._load())

    def _load(self) -> int | None:
        stored = self.store.get(self.key)
        if not stored:
            return None
        try:
            return int(stored)
        except ValueError:
            # Unreadable start time: treat the grant as used up rather than restarting it
            logger.warning(f"Unreadable {self.key} value {stored!r}, treating window as expired")
            return 0

    @property
    def started_at(self) -> int | None:
        return self.window.started_at

    def status(self, now_ms: int) -> WindowStatus:
        return self.window.status(now_ms)

    def start(self, now_ms: int) -> WindowState:
        """Start the window on first qualifying visit. No-op once started."""
        if self.window.started_at is not None:
            return self.window.state(now_ms)
        state = self.window.start(now_ms)
        self.store.set(self.key, str(self.window.started_at))
        logger.info(f"Started access window {self.key} at {now_ms}")
        return state

    def clear(self) -> None:
        """Discard the window, e.g. after sign-in takes ownership of the data."""
        self.window.clear()
        self.store.remove(self.key)
        logger.info(f"Cleared access window {self.key}")
