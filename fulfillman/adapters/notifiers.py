"""
Notifier backends.

- LoggingNotifier: writes messages to the log (default)
- LineNotifier: LINE Notify (``LINE_NOTIFY_TOKEN``)
- SlackNotifier: Slack incoming webhook (``SLACK_WEBHOOK_URL``)

Unconfigured notifiers log a warning and skip. HTTP failures are raised
as-is; the signal handlers that call notifiers log and absorb them.
"""

from __future__ import annotations

import logging

import requests

from fulfillman.conf import get_setting

logger = logging.getLogger(__name__)

LINE_NOTIFY_URL = "https://notify-api.line.me/api/notify"


class LoggingNotifier:
    """Notifier that only logs."""

    def notify(self, message: str) -> None:
        logger.info(f"Notification: {message}")


class LineNotifier:
    def __init__(self, token: str | None = None, session: requests.Session | None = None):
        self.token = token or get_setting("LINE_NOTIFY_TOKEN")
        self.session = session or requests.Session()
        self.timeout = get_setting("NOTIFIER_TIMEOUT")

    def notify(self, message: str) -> None:
        if not self.token:
            logger.warning("LINE_NOTIFY_TOKEN not configured, skipping notification")
            return

        response = self.session.post(
            LINE_NOTIFY_URL,
            headers={"Authorization": f"Bearer {self.token}"},
            data={"message": message},
            timeout=self.timeout,
        )
        response.raise_for_status()


class SlackNotifier:
    def __init__(self, webhook_url: str | None = None, session: requests.Session | None = None):
        self.webhook_url = webhook_url or get_setting("SLACK_WEBHOOK_URL")
        self.session = session or requests.Session()
        self.timeout = get_setting("NOTIFIER_TIMEOUT")

    def notify(self, message: str) -> None:
        if not self.webhook_url:
            logger.warning("SLACK_WEBHOOK_URL not configured, skipping notification")
            return

        response = self.session.post(
            self.webhook_url,
            json={"text": message},
            timeout=self.timeout,
        )
        response.raise_for_status()
