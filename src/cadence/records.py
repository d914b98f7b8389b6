"""Decoding of stored collections into core types."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime

from cadence.core.errors import Diagnostic
from cadence.core.habits import RecurringItem
from cadence.core.overdue import DeadlineItem
from cadence.ports import KeyValueStore

logger = logging.getLogger(__name__)

# Storage keys
GUEST_MODE_KEY = "guest_mode_started"
OVERDUE_NOTIFIED_KEY = "overdueNotifiedToday"
TRIAL_NOTIFIED_KEY = "trialNotifiedDays"
HABITS_KEY = "habitflow_habits"
TASKS_KEY = "habitflow_tasks"
FINANCE_KEY = "habitflow_finance"


@dataclass
class Loaded:
    """Decoded records plus the ones that had to be skipped."""

    items: list
    diagnostics: list[Diagnostic] = field(default_factory=list)


def _load_raw(store: KeyValueStore, key: str) -> list[dict]:
    """Read a JSON array of objects. Corrupt or missing blobs read as empty."""
    blob = store.get(key)
    if not blob:
        return []
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {key}: {e}")
        return []
    if not isinstance(data, list):
        logger.error(f"Failed to parse {key}: expected a list, got {type(data).__name__}")
        return []
    return [d for d in data if isinstance(d, dict)]


def _parse_created_at(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def recurring_from_dict(data: dict) -> RecurringItem:
    """
    Create a RecurringItem from a stored habit record.

    Raises KeyError/TypeError/ValueError for records that cannot be read at all.
    Completed dates are kept verbatim; the core validates them.
    """
    target_days = frozenset(int(d) for d in data["targetDays"])
    if any(d < 0 or d > 6 for d in target_days):
        raise ValueError(f"targetDays out of range: {sorted(target_days)}")
    return RecurringItem(
        id=str(data["id"]),
        target_days=target_days,
        completed_dates=frozenset(data.get("completedDates") or []),
        created_at=_parse_created_at(data.get("createdAt")),
        name=data.get("name", ""),
    )


def load_recurring(store: KeyValueStore) -> Loaded:
    """Load habits from the store, skipping unreadable records."""
    loaded = Loaded(items=[])
    for raw in _load_raw(store, HABITS_KEY):
        try:
            loaded.items.append(recurring_from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            entity_id = str(raw.get("id", "?"))
            logger.warning(f"Skipping habit {entity_id}: {e}")
            loaded.diagnostics.append(Diagnostic(entity_id, "record", raw, str(e)))
    return loaded


def _load_deadlines(store: KeyValueStore, key: str, date_field: str) -> Loaded:
    loaded = Loaded(items=[])
    for raw in _load_raw(store, key):
        try:
            loaded.items.append(DeadlineItem.from_dict(raw, date_field=date_field))
        except KeyError as e:
            logger.warning(f"Skipping record in {key} without {e}")
            loaded.diagnostics.append(Diagnostic("?", "record", raw, f"missing field {e}"))
    return loaded


def load_tasks(store: KeyValueStore) -> Loaded:
    return _load_deadlines(store, TASKS_KEY, "dueDate")


def load_transactions(store: KeyValueStore) -> Loaded:
    """Planned finance transactions use `date` as their due date."""
    return _load_deadlines(store, FINANCE_KEY, "date")


def save_habit_completion(store: KeyValueStore, item: RecurringItem, streak: int) -> bool:
    """
    Write an item's completed dates and cached streak back to its record.

    Other fields of the record are left alone. Returns False if the item
    is not in the store.
    """
    if not _load_raw(store, HABITS_KEY):
        return False
    # Rewrite the full stored list so entries we cannot decode survive
    records = json.loads(store.get(HABITS_KEY))
    for record in records:
        if isinstance(record, dict) and str(record.get("id")) == item.id:
            record["completedDates"] = sorted(item.completed_dates, key=str)
            record["streak"] = streak
            store.set(HABITS_KEY, json.dumps(records))
            return True
    return False


def count_records(store: KeyValueStore, key: str) -> int:
    return len(_load_raw(store, key))
