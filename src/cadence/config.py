"""Configuration management for Cadence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CADENCE_HOME = Path(os.environ.get("CADENCE_HOME", Path.home() / "cadence"))
CONFIG_FILE = CADENCE_HOME / "config" / "cadence.conf"
DATA_DIR = CADENCE_HOME / "data"


@dataclass
class Config:
    """Cadence configuration."""

    timezone: str = "UTC"
    store_file: str = ""
    guest_window_hours: int = 24
    habit_limit: int = 3
    task_limit: int = 3
    transaction_limit: int = 15
    custom_period_days: int = 30
    # Subscription facts used when no remote provider is configured
    signed_in: bool = False
    paid_active: bool = False
    trial_active: bool = False
    trial_days_left: int = 0
    subscription_url: str = ""
    subscription_token: str = ""
    overdue_check_time: str = "09:00"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(key: str, value: str, default: int, minimum: int = 0) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default
    if parsed < minimum:
        logger.warning(f"{key.upper()} must be at least {minimum}, got {parsed}, using {default}")
        return default
    return parsed


def load_config(path: Path | None = None) -> Config:
    """Load configuration from cadence.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "timezone":
                config.timezone = value
            case "store_file":
                config.store_file = value
            case "guest_window_hours":
                config.guest_window_hours = _parse_int(key, value, config.guest_window_hours, minimum=1)
            case "habit_limit":
                config.habit_limit = _parse_int(key, value, config.habit_limit)
            case "task_limit":
                config.task_limit = _parse_int(key, value, config.task_limit)
            case "transaction_limit":
                config.transaction_limit = _parse_int(key, value, config.transaction_limit)
            case "custom_period_days":
                config.custom_period_days = _parse_int(key, value, config.custom_period_days, minimum=1)
            case "signed_in":
                config.signed_in = _parse_bool(value)
            case "paid_active":
                config.paid_active = _parse_bool(value)
            case "trial_active":
                config.trial_active = _parse_bool(value)
            case "trial_days_left":
                config.trial_days_left = _parse_int(key, value, config.trial_days_left)
            case "subscription_url":
                config.subscription_url = value
            case "subscription_token":
                config.subscription_token = value
            case "overdue_check_time":
                config.overdue_check_time = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
