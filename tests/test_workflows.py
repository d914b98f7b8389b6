"""Tests for the shared workflow layer."""

import json
from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from cadence.adapters.memory_store import InMemoryStore
from cadence.adapters.subscription import (
    HttpSubscriptionProvider,
    StaticSubscriptionProvider,
    SubscriptionError,
)
from cadence.config import Config
from cadence.core.dates import to_epoch_ms
from cadence.core.entitlements import Resource, SubscriptionStatus, Tier
from cadence.records import FINANCE_KEY, GUEST_MODE_KEY, HABITS_KEY, OVERDUE_NOTIFIED_KEY, TASKS_KEY
from cadence.workflows import (
    check_overdue,
    evaluate_streaks,
    get_store,
    get_subscription_provider,
    resolve_access,
    sign_in,
    toggle_habit,
    visit,
)

NOW = datetime(2024, 1, 3, 10, 0, tzinfo=timezone.utc)  # Wednesday


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def config():
    return Config()


def paid_provider():
    provider = MagicMock()
    provider.fetch_status.return_value = SubscriptionStatus(paid_active=True)
    return provider


class TestGetStore:
    def test_uses_configured_file(self, tmp_path):
        store = get_store(Config(store_file=str(tmp_path / "s.json")))
        assert store.path == tmp_path / "s.json"

    def test_expands_user_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        store = get_store(Config(store_file="~/some/store.json"))
        assert store.path == tmp_path / "some" / "store.json"

    def test_falls_back_to_default(self, tmp_path):
        with patch("cadence.workflows.DATA_DIR", tmp_path):
            assert get_store(Config()).path == tmp_path / "store.json"


class TestGetSubscriptionProvider:
    def test_static_without_url(self, config):
        assert isinstance(get_subscription_provider(config), StaticSubscriptionProvider)

    def test_http_with_url(self):
        config = Config(subscription_url="https://example.test/status")
        assert isinstance(get_subscription_provider(config), HttpSubscriptionProvider)


class TestVisit:
    def test_signed_out_starts_window(self, config, store):
        window = visit(config, store, NOW)
        assert window.started_at == to_epoch_ms(NOW)
        assert store.get(GUEST_MODE_KEY) == str(to_epoch_ms(NOW))

    def test_second_visit_keeps_first_start(self, config, store):
        visit(config, store, NOW)
        window = visit(config, store, datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc))
        assert window.started_at == to_epoch_ms(NOW)

    def test_signed_in_does_not_start_window(self, store):
        window = visit(Config(signed_in=True), store, NOW)
        assert window.started_at is None
        assert store.get(GUEST_MODE_KEY) is None

    def test_sign_in_clears_window(self, config, store):
        visit(config, store, NOW)
        sign_in(config, store)
        assert store.get(GUEST_MODE_KEY) is None


class TestResolveAccess:
    def test_guest_in_window_is_elevated(self, config, store):
        visit(config, store, NOW)
        summary = resolve_access(config, store, NOW)
        assert summary.entitlement.tier is Tier.ELEVATED
        assert summary.entitlement.limits[Resource.HABITS] is None

    def test_guest_never_started_is_base(self, config, store):
        summary = resolve_access(config, store, NOW)
        assert summary.entitlement.tier is Tier.BASE

    def test_guest_after_window_is_base(self, config, store):
        visit(config, store, NOW)
        summary = resolve_access(config, store, datetime(2024, 1, 4, 10, 0, tzinfo=timezone.utc))
        assert summary.entitlement.tier is Tier.BASE
        assert summary.entitlement.limits[Resource.TRANSACTIONS] == 15

    def test_signed_in_paid(self, store):
        provider = paid_provider()
        summary = resolve_access(Config(signed_in=True), store, NOW, provider=provider)
        provider.fetch_status.assert_called_once()
        assert summary.entitlement.has_elevated_access is True

    def test_signed_in_ignores_guest_window(self, store):
        visit(Config(), store, NOW)
        summary = resolve_access(Config(signed_in=True), store, NOW)
        assert summary.entitlement.tier is Tier.BASE

    def test_provider_failure_falls_back_to_base(self, store):
        provider = MagicMock()
        provider.fetch_status.side_effect = SubscriptionError("offline")
        summary = resolve_access(Config(signed_in=True), store, NOW, provider=provider)
        assert summary.entitlement.tier is Tier.BASE
        assert summary.subscription == SubscriptionStatus()

    def test_counts_stored_records(self, config, store):
        store.set(TASKS_KEY, json.dumps([{"id": "1"}, {"id": "2"}, {"id": "3"}]))
        summary = resolve_access(config, store, NOW)
        assert summary.counts[Resource.TASKS] == 3
        assert summary.counts[Resource.HABITS] == 0
        usage = summary.entitlement.usage(summary.counts)
        assert usage[Resource.TASKS].can_add is False
        assert usage[Resource.HABITS].can_add is True

    def test_custom_limits(self, store):
        summary = resolve_access(Config(habit_limit=10), store, NOW)
        assert summary.entitlement.limits[Resource.HABITS] == 10

    def test_trial_reminder_once(self, store):
        config = Config(signed_in=True, trial_active=True, trial_days_left=2)
        assert resolve_access(config, store, NOW).trial_reminder is True
        assert resolve_access(config, store, NOW).trial_reminder is False

    def test_no_trial_reminder_for_guests(self, config, store):
        assert resolve_access(config, store, NOW).trial_reminder is False


class TestStreakWorkflows:
    @pytest.fixture
    def habits_store(self, store):
        store.set(
            HABITS_KEY,
            json.dumps(
                [
                    {
                        "id": "h1",
                        "name": "Read",
                        "targetDays": [1, 2, 3],
                        "completedDates": ["2024-01-01", "2024-01-02"],
                        "color": "#fff",
                    },
                    {"id": "h2", "targetDays": [1], "completedDates": ["2024-13-01"]},
                ]
            ),
        )
        return store

    def test_evaluate_streaks(self, habits_store):
        items, report = evaluate_streaks(habits_store, date(2024, 1, 3))
        assert [h.id for h in items] == ["h1", "h2"]
        # Today not done yet, so the streak counts from yesterday
        assert report.streaks["h1"] == 2
        assert "h2" not in report.streaks
        assert [d.entity_id for d in report.diagnostics] == ["h2"]

    def test_toggle_habit_updates_streak(self, habits_store):
        assert toggle_habit(habits_store, "h1", date(2024, 1, 3), date(2024, 1, 3)) == 3

        record = json.loads(habits_store.get(HABITS_KEY))[0]
        assert record["completedDates"] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert record["streak"] == 3
        assert record["color"] == "#fff"

    def test_toggle_habit_twice_restores(self, habits_store):
        toggle_habit(habits_store, "h1", date(2024, 1, 2), date(2024, 1, 3))
        assert toggle_habit(habits_store, "h1", date(2024, 1, 2), date(2024, 1, 3)) == 2

    def test_toggle_unknown_habit(self, habits_store):
        assert toggle_habit(habits_store, "nope", date(2024, 1, 3), date(2024, 1, 3)) is None


class TestCheckOverdue:
    @pytest.fixture
    def overdue_store(self, store):
        store.set(
            TASKS_KEY,
            json.dumps(
                [
                    {"id": "t1", "dueDate": "2024-01-01", "completed": False, "status": "in_progress"},
                    {"id": "t2", "dueDate": "2024-01-01", "completed": True},
                    {"id": "t3", "dueDate": "2024-01-03"},
                ]
            ),
        )
        store.set(HABITS_KEY, json.dumps([{"id": "h1", "targetDays": [3], "completedDates": []}]))
        store.set(FINANCE_KEY, json.dumps([{"id": "f1", "date": "2024-01-02", "completed": False}]))
        return store

    def test_fires_once_per_day(self, config, overdue_store):
        first = check_overdue(config, overdue_store, NOW)
        assert first.fired is True
        assert first.report.counts() == {"tasks": 1, "recurring": 1, "transactions": 1}
        assert overdue_store.get(OVERDUE_NOTIFIED_KEY) == "2024-01-03"

        second = check_overdue(config, overdue_store, NOW)
        assert second.fired is False

    def test_fires_again_next_day(self, config, overdue_store):
        check_overdue(config, overdue_store, NOW)
        result = check_overdue(config, overdue_store, datetime(2024, 1, 4, 9, 0, tzinfo=timezone.utc))
        assert result.fired is True

    def test_nothing_overdue_leaves_guard(self, config, store):
        result = check_overdue(config, store, NOW)
        assert result.fired is False
        assert store.get(OVERDUE_NOTIFIED_KEY) is None

    def test_uses_configured_timezone(self, overdue_store):
        # 23:30 UTC on the 2nd is already the 3rd in Moscow
        config = Config(timezone="Europe/Moscow")
        check_overdue(config, overdue_store, datetime(2024, 1, 2, 23, 30, tzinfo=timezone.utc))
        assert overdue_store.get(OVERDUE_NOTIFIED_KEY) == "2024-01-03"
