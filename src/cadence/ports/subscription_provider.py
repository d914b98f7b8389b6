"""Subscription status interface."""

from typing import Protocol

from cadence.core.entitlements import SubscriptionStatus


class SubscriptionProvider(Protocol):
    """Interface for fetching subscription state from any backend."""

    def fetch_status(self) -> SubscriptionStatus:
        """Fetch paid/trial status for the current user."""
        ...
