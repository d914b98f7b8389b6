"""Tests for configuration loading."""

from cadence.config import Config, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.conf") == Config()

    def test_parses_values(self, tmp_path):
        path = tmp_path / "cadence.conf"
        path.write_text(
            "\n".join(
                [
                    "# Cadence settings",
                    'TIMEZONE = "Europe/Moscow"  # local calendar',
                    "STORE_FILE = ~/cadence/store.json",
                    "GUEST_WINDOW_HOURS = 12",
                    "HABIT_LIMIT = 5 # more habits",
                    "SIGNED_IN = yes",
                    "TRIAL_ACTIVE = true",
                    "TRIAL_DAYS_LEFT = 2",
                    "SUBSCRIPTION_URL = 'https://example.test/status'",
                    "OVERDUE_CHECK_TIME = 08:30",
                    "not a setting",
                ]
            )
        )

        config = load_config(path)

        assert config.timezone == "Europe/Moscow"
        assert config.store_file == "~/cadence/store.json"
        assert config.guest_window_hours == 12
        assert config.habit_limit == 5
        assert config.signed_in is True
        assert config.trial_active is True
        assert config.paid_active is False
        assert config.trial_days_left == 2
        assert config.subscription_url == "https://example.test/status"
        assert config.overdue_check_time == "08:30"

    def test_invalid_integer_keeps_default(self, tmp_path):
        path = tmp_path / "cadence.conf"
        path.write_text("TASK_LIMIT = lots\nTRANSACTION_LIMIT = 20\n")
        config = load_config(path)
        assert config.task_limit == 3
        assert config.transaction_limit == 20

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "cadence.conf"
        path.write_text("FAVOURITE_COLOR = teal\n")
        assert load_config(path) == Config()

    def test_non_positive_durations_keep_default(self, tmp_path):
        path = tmp_path / "cadence.conf"
        path.write_text("GUEST_WINDOW_HOURS = 0\nCUSTOM_PERIOD_DAYS = -5\nHABIT_LIMIT = -1\nTASK_LIMIT = 0\n")
        config = load_config(path)
        assert config.guest_window_hours == 24
        assert config.custom_period_days == 30
        assert config.habit_limit == 3
        assert config.task_limit == 0
