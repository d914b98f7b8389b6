"""Functional core - pure business logic with no I/O."""

from .errors import Diagnostic, MalformedDateError
from .periods import PeriodKind, PeriodRange, resolve_period, days_in_window
from .habits import RecurringItem, Weekday, streak, compute_streaks, toggle_completion
from .access import AccessWindow, WindowState, WindowStatus, window_status
from .entitlements import (
    EntitlementContext,
    EntitlementState,
    Resource,
    SubscriptionStatus,
    Tier,
    resolve_entitlement,
)
from .overdue import (
    DeadlineItem,
    NotificationGuard,
    OverdueReport,
    TaskStatus,
    detect_overdue,
    run_guarded,
)

__all__ = [
    # Errors
    "Diagnostic",
    "MalformedDateError",
    # Periods
    "PeriodKind",
    "PeriodRange",
    "resolve_period",
    "days_in_window",
    # Habits
    "RecurringItem",
    "Weekday",
    "streak",
    "compute_streaks",
    "toggle_completion",
    # Access windows
    "AccessWindow",
    "WindowState",
    "WindowStatus",
    "window_status",
    # Entitlements
    "EntitlementContext",
    "EntitlementState",
    "Resource",
    "SubscriptionStatus",
    "Tier",
    "resolve_entitlement",
    # Overdue
    "DeadlineItem",
    "NotificationGuard",
    "OverdueReport",
    "TaskStatus",
    "detect_overdue",
    "run_guarded",
]
