"""Subscription status adapters."""

import logging

import requests

from cadence.config import Config, load_config
from cadence.core.entitlements import SubscriptionStatus

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class SubscriptionError(Exception):
    """Raised when subscription status cannot be fetched."""

    pass


class StaticSubscriptionProvider:
    """
    Subscription facts taken straight from configuration.

    Implements SubscriptionProvider protocol.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or load_config()

    def fetch_status(self) -> SubscriptionStatus:
        return SubscriptionStatus(
            paid_active=self.config.paid_active,
            trial_active=self.config.trial_active,
            trial_days_left=self.config.trial_days_left,
        )


class HttpSubscriptionProvider:
    """
    Subscription backend over HTTP.

    Implements SubscriptionProvider protocol. Expects a JSON object with
    paidActive, trialActive, trialDaysLeft and optionally trialBonusMonths.
    No business logic - just I/O.
    """

    def __init__(self, url: str, token: str = "", session: requests.Session | None = None):
        if not url:
            raise ValueError("Subscription URL is required")
        self.url = url
        self.token = token
        self._session = session or requests.Session()

    def fetch_status(self) -> SubscriptionStatus:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            resp = self._session.get(self.url, headers=headers, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise SubscriptionError(f"Subscription request failed: {e}") from e

        if resp.status_code == 401:
            raise SubscriptionError("Subscription backend rejected the token")
        if resp.status_code != 200:
            raise SubscriptionError(f"Subscription backend returned {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SubscriptionError(f"Subscription backend sent invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SubscriptionError("Subscription backend sent an unexpected payload")

        logger.debug(f"Fetched subscription status: {data}")
        try:
            return SubscriptionStatus.from_api(data)
        except (TypeError, ValueError) as e:
            raise SubscriptionError(f"Subscription payload has bad field types: {e}") from e
