"""Store-backed notification guards."""

import json
import logging
from datetime import date, datetime, tzinfo

from cadence.core.entitlements import SubscriptionStatus, trial_reminder_due
from cadence.core.habits import RecurringItem
from cadence.core.overdue import DeadlineItem, GuardedResult, NotificationGuard, run_guarded
from cadence.ports import KeyValueStore
from cadence.records import OVERDUE_NOTIFIED_KEY, TRIAL_NOTIFIED_KEY

logger = logging.getLogger(__name__)


class OverdueNotifier:
    """
    Runs overdue detection at most once per day per device.

    The guard's date key is persisted under OVERDUE_NOTIFIED_KEY.
    """

    def __init__(self, store: KeyValueStore, key: str = OVERDUE_NOTIFIED_KEY):
        self.store = store
        self.key = key

    @property
    def guard(self) -> NotificationGuard:
        return NotificationGuard(self.store.get(self.key))

    def run(
        self,
        now: datetime | date,
        tasks: list[DeadlineItem],
        recurring: list[RecurringItem],
        transactions: list[DeadlineItem],
        tz: tzinfo | None = None,
    ) -> GuardedResult:
        guard = self.guard
        result = run_guarded(now, guard, tasks, recurring, transactions, tz=tz)

        if result.fired:
            self.store.set(self.key, result.guard.last_fired_date_key)
            logger.info(f"Overdue summary fired: {result.report.counts()}")
        else:
            logger.debug(f"Overdue summary not fired (last fired {guard.last_fired_date_key})")
        return result

    def reset(self) -> None:
        self.store.remove(self.key)


class TrialReminder:
    """
    Decides when to remind about an ending trial.

    Fires once for each days-left value in the reminder range (two days
    left, then one day left), remembered across runs in the store.
    """

    def __init__(self, store: KeyValueStore, key: str = TRIAL_NOTIFIED_KEY):
        self.store = store
        self.key = key

    def _notified(self) -> set[int]:
        blob = self.store.get(self.key)
        if not blob:
            return set()
        try:
            return {int(d) for d in json.loads(blob)}
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning(f"Unreadable {self.key} value {blob!r}, resetting")
            return set()

    def check(self, subscription: SubscriptionStatus) -> bool:
        """
        True if a reminder should be shown now. Records that it was.

        Outside a trial the record is dropped, so a later trial reminds again.
        """
        if not subscription.trial_active:
            if self.store.get(self.key) is not None:
                self.store.remove(self.key)
            return False
        if not trial_reminder_due(subscription):
            return False
        notified = self._notified()
        if subscription.trial_days_left in notified:
            return False
        notified.add(subscription.trial_days_left)
        self.store.set(self.key, json.dumps(sorted(notified)))
        return True
