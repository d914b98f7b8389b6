"""Shared workflow layer between the CLI and the scheduler.

Each function wires configuration, storage and the clock into the pure core
and returns plain results for the caller to present.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from .adapters.clock import SystemClock
from .adapters.json_file_store import JsonFileStore
from .adapters.subscription import (
    HttpSubscriptionProvider,
    StaticSubscriptionProvider,
    SubscriptionError,
)
from .config import DATA_DIR, Config
from .core.dates import MS_PER_HOUR, to_epoch_ms
from .core.entitlements import (
    EntitlementContext,
    EntitlementState,
    Resource,
    SubscriptionStatus,
    resolve_entitlement,
)
from .core.habits import RecurringItem, StreakReport, compute_streaks, streak, toggle_completion
from .core.overdue import GuardedResult
from .notifications import OverdueNotifier, TrialReminder
from .ports import KeyValueStore, SubscriptionProvider
from .records import (
    FINANCE_KEY,
    HABITS_KEY,
    TASKS_KEY,
    count_records,
    load_recurring,
    load_tasks,
    load_transactions,
    save_habit_completion,
)
from .windows import AccessWindowManager

logger = logging.getLogger(__name__)

RESOURCE_KEYS = {
    Resource.HABITS: HABITS_KEY,
    Resource.TASKS: TASKS_KEY,
    Resource.TRANSACTIONS: FINANCE_KEY,
}


def get_store(config: Config) -> JsonFileStore:
    """Resolve the store file from config."""
    if config.store_file:
        return JsonFileStore(Path(config.store_file).expanduser())
    return JsonFileStore(DATA_DIR / "store.json")


def get_clock(config: Config) -> SystemClock:
    return SystemClock(config.timezone or "UTC")


def get_timezone(config: Config) -> ZoneInfo:
    return ZoneInfo(config.timezone or "UTC")


def get_subscription_provider(config: Config) -> SubscriptionProvider:
    if config.subscription_url:
        return HttpSubscriptionProvider(config.subscription_url, config.subscription_token)
    return StaticSubscriptionProvider(config)


def get_guest_window(config: Config, store: KeyValueStore) -> AccessWindowManager:
    hours = config.guest_window_hours
    if hours <= 0:
        logger.warning(f"Invalid guest window of {hours}h, using {Config.guest_window_hours}h")
        hours = Config.guest_window_hours
    return AccessWindowManager(store, duration_ms=hours * MS_PER_HOUR)


def base_limits(config: Config) -> dict[Resource, int]:
    return {
        Resource.HABITS: config.habit_limit,
        Resource.TASKS: config.task_limit,
        Resource.TRANSACTIONS: config.transaction_limit,
    }


def fetch_subscription(provider: SubscriptionProvider) -> SubscriptionStatus:
    """Fetch subscription status, falling back to no subscription on failure."""
    try:
        return provider.fetch_status()
    except SubscriptionError as e:
        logger.warning(f"Subscription status unavailable, using base tier: {e}")
        return SubscriptionStatus()


def visit(config: Config, store: KeyValueStore, now: datetime) -> AccessWindowManager:
    """
    Handle an app visit: signed-out users get their guest window started.

    Returns the window manager so the caller can read its status.
    """
    window = get_guest_window(config, store)
    if not config.signed_in:
        window.start(to_epoch_ms(now))
    return window


def sign_in(config: Config, store: KeyValueStore) -> None:
    """Sign-in takes ownership of the data, so the guest window goes away."""
    get_guest_window(config, store).clear()


@dataclass
class AccessSummary:
    entitlement: EntitlementState
    subscription: SubscriptionStatus
    counts: dict[Resource, int]
    trial_reminder: bool = False


def resolve_access(
    config: Config,
    store: KeyValueStore,
    now: datetime,
    provider: SubscriptionProvider | None = None,
) -> AccessSummary:
    """Resolve the current entitlement and quota usage."""
    if config.signed_in:
        subscription = fetch_subscription(provider or get_subscription_provider(config))
        guest_status = None
    else:
        subscription = SubscriptionStatus()
        guest_status = get_guest_window(config, store).status(to_epoch_ms(now))

    ctx = EntitlementContext.build(config.signed_in, subscription, guest_status)
    entitlement = resolve_entitlement(ctx, base_limits(config))
    counts = {r: count_records(store, key) for r, key in RESOURCE_KEYS.items()}
    reminder = config.signed_in and TrialReminder(store).check(subscription)
    return AccessSummary(entitlement, subscription, counts, reminder)


def evaluate_streaks(store: KeyValueStore, today: date) -> tuple[list[RecurringItem], StreakReport]:
    """Current streak for every stored habit."""
    loaded = load_recurring(store)
    report = compute_streaks(loaded.items, today)
    report.diagnostics = loaded.diagnostics + report.diagnostics
    for d in report.diagnostics:
        logger.warning(f"Skipped {d.entity_id}: {d.message}")
    return loaded.items, report


def toggle_habit(store: KeyValueStore, habit_id: str, day: date, today: date) -> int | None:
    """
    Flip a habit's completion for `day` and persist it with its new streak.

    Returns the new streak, or None if the habit does not exist.
    """
    loaded = load_recurring(store)
    item = next((h for h in loaded.items if h.id == habit_id), None)
    if item is None:
        return None
    updated = toggle_completion(item, day)
    new_streak = streak(updated, today)
    save_habit_completion(store, updated, new_streak)
    return new_streak


def check_overdue(config: Config, store: KeyValueStore, now: datetime) -> GuardedResult:
    """Run the once-a-day overdue detection against stored collections."""
    tasks = load_tasks(store)
    recurring = load_recurring(store)
    transactions = load_transactions(store)

    result = OverdueNotifier(store).run(
        now,
        tasks.items,
        recurring.items,
        transactions.items,
        tz=get_timezone(config),
    )
    for d in tasks.diagnostics + recurring.diagnostics + transactions.diagnostics + result.diagnostics:
        logger.warning(f"Skipped {d.entity_id}: {d.message}")
    return result
