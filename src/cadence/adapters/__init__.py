"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryStore
from .json_file_store import JsonFileStore
from .clock import SystemClock, FixedClock
from .subscription import (
    HttpSubscriptionProvider,
    StaticSubscriptionProvider,
    SubscriptionError,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "SystemClock",
    "FixedClock",
    "HttpSubscriptionProvider",
    "StaticSubscriptionProvider",
    "SubscriptionError",
]
