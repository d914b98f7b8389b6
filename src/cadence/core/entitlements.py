"""Pure entitlement logic - no I/O dependencies."""

from dataclasses import dataclass, field
from enum import Enum

from .access import WindowStatus

TRIAL_REMINDER_DAYS = (1, 2)


class Resource(Enum):
    """Quota-limited collections."""

    HABITS = "habits"
    TASKS = "tasks"
    TRANSACTIONS = "transactions"


class Tier(Enum):
    BASE = "base"
    ELEVATED = "elevated"


BASE_LIMITS: dict[Resource, int] = {
    Resource.HABITS: 3,
    Resource.TASKS: 3,
    Resource.TRANSACTIONS: 15,
}


@dataclass(frozen=True)
class SubscriptionStatus:
    """Subscription facts supplied by the remote provider."""

    paid_active: bool = False
    trial_active: bool = False
    trial_days_left: int = 0
    trial_bonus_months: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "SubscriptionStatus":
        """Create from a provider JSON payload."""
        return cls(
            paid_active=bool(data.get("paidActive", False)),
            trial_active=bool(data.get("trialActive", False)),
            trial_days_left=int(data.get("trialDaysLeft", 0) or 0),
            trial_bonus_months=int(data.get("trialBonusMonths", 0) or 0),
        )


@dataclass(frozen=True)
class EntitlementContext:
    signed_in: bool
    paid_active: bool = False
    trial_active: bool = False
    guest_window: WindowStatus | None = None

    @classmethod
    def build(
        cls,
        signed_in: bool,
        subscription: SubscriptionStatus,
        guest_window: WindowStatus | None = None,
    ) -> "EntitlementContext":
        return cls(
            signed_in=signed_in,
            paid_active=subscription.paid_active,
            trial_active=subscription.trial_active,
            guest_window=guest_window,
        )


@dataclass(frozen=True)
class LimitCheck:
    """Result of a quota check. `max` is None when unbounded."""

    current: int
    max: int | None
    can_add: bool

    def as_dict(self) -> dict:
        return {"current": self.current, "max": self.max, "canAdd": self.can_add}


@dataclass(frozen=True)
class EntitlementState:
    """Resolved access tier and its quotas."""

    tier: Tier
    limits: dict[Resource, int | None] = field(default_factory=dict)

    @property
    def has_elevated_access(self) -> bool:
        return self.tier is Tier.ELEVATED

    def check_limit(self, resource: Resource, current_count: int) -> LimitCheck:
        """
        Whether one more item of `resource` may be added.

        Read-only: rejecting the add is up to the caller.
        """
        maximum = self.limits.get(resource)
        can_add = maximum is None or current_count < maximum
        return LimitCheck(current=current_count, max=maximum, can_add=can_add)

    def usage(self, counts: dict[Resource, int]) -> dict[Resource, LimitCheck]:
        """Limit checks for every tracked resource (missing counts are 0)."""
        return {r: self.check_limit(r, counts.get(r, 0)) for r in Resource}


def resolve_entitlement(
    ctx: EntitlementContext,
    base_limits: dict[Resource, int] | None = None,
) -> EntitlementState:
    """
    Resolve the access tier. First matching rule wins:

    1. Signed in with a paid subscription or an active trial -> elevated
    2. Not signed in with an active guest window -> elevated
    3. Otherwise -> base

    Pure function - no I/O.
    """
    if ctx.signed_in:
        elevated = ctx.paid_active or ctx.trial_active
    else:
        elevated = ctx.guest_window is not None and ctx.guest_window.is_active

    if elevated:
        return EntitlementState(Tier.ELEVATED, {r: None for r in Resource})

    limits = dict(BASE_LIMITS)
    if base_limits:
        limits.update(base_limits)
    return EntitlementState(Tier.BASE, limits)


def trial_reminder_due(subscription: SubscriptionStatus) -> bool:
    """A trial with one or two days left deserves a reminder."""
    return subscription.trial_active and subscription.trial_days_left in TRIAL_REMINDER_DAYS
