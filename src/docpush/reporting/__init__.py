"""
Job-log sinks and chat notifiers.

``default_sink`` and ``default_notifier`` pick the implementation from the
worker configuration.
"""

from __future__ import annotations

from docpush.config import WorkerConfig, get_config
from docpush.reporting.interface import ChatNotifier, JobLogSink, Reporter, tag
from docpush.reporting.memory import MemoryJobLogSink, MemoryNotifier
from docpush.reporting.slack import NullNotifier, SlackWebhookNotifier
from docpush.reporting.sqlite import SqliteJobLogSink
from docpush.reporting.structured import StructlogJobLogSink


def default_sink(config: WorkerConfig | None = None) -> JobLogSink:
    """SQLite sink when ``job_log_db`` is configured, structlog otherwise."""
    config = config or get_config()
    if config.job_log_db:
        return SqliteJobLogSink(config.job_log_db)
    return StructlogJobLogSink()


def default_notifier(config: WorkerConfig | None = None) -> ChatNotifier:
    """Slack notifier when a webhook is configured, a no-op otherwise."""
    config = config or get_config()
    if config.slack_webhook_url:
        return SlackWebhookNotifier(config.slack_webhook_url)
    return NullNotifier()


__all__ = [
    "ChatNotifier",
    "JobLogSink",
    "MemoryJobLogSink",
    "MemoryNotifier",
    "NullNotifier",
    "Reporter",
    "SlackWebhookNotifier",
    "SqliteJobLogSink",
    "StructlogJobLogSink",
    "default_notifier",
    "default_sink",
    "tag",
]
