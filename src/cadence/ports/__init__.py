"""Ports - interfaces/protocols for external dependencies."""

from .key_value_store import KeyValueStore
from .clock import Clock
from .subscription_provider import SubscriptionProvider

__all__ = [
    "KeyValueStore",
    "Clock",
    "SubscriptionProvider",
]
