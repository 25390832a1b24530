"""
Slack notifier using an incoming webhook.

Uses only urllib; the webhook URL is a secret and is never logged.
"""

from __future__ import annotations

import json
import logging
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from docpush.errors import truncate_error
from docpush.reporting.interface import ChatNotifier

logger = logging.getLogger(__name__)

# Slack truncates very long messages; keep well below its limit
MAX_MESSAGE_BYTES = 38_000


class SlackWebhookNotifier(ChatNotifier):
    """Posts ``{"text": message}`` to a Slack incoming webhook.

    Args:
        webhook_url: The incoming webhook URL
        timeout: Request timeout in seconds
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0) -> None:
        if not webhook_url.startswith("https://"):
            raise ValueError("Slack webhook URL must use https")
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, message: str) -> None:
        body = json.dumps({"text": truncate_error(message, MAX_MESSAGE_BYTES)}).encode("utf-8")
        request = Request(
            self.webhook_url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urlopen(request, timeout=self.timeout) as response:  # noqa: S310 - https enforced above
                response.read()
        except HTTPError as e:
            raise RuntimeError(f"Slack webhook returned HTTP {e.code}") from e


class NullNotifier(ChatNotifier):
    """Drops messages; used when no webhook is configured."""

    def send(self, message: str) -> None:
        logger.debug("Chat disabled, dropping %d byte message", len(message))
