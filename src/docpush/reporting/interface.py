"""
Reporting interfaces.

A job-log sink persists one line per lifecycle event of a job; a chat
notifier posts build warnings and publish output to a channel. The
Reporter binds both to a single job.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docpush.models.job import Job

logger = logging.getLogger(__name__)

TAG_WIDTH = 15


def tag(label: str, indent: int = 0) -> str:
    """Left-pad a log tag such as ``(BUILD)`` to a fixed column width.

    Downstream log viewers filter on the padded tag, so the width is fixed.

    Example:
        tag("(BUILD)")            -> "(BUILD)        "
        tag("(sanitize)", 4)      -> "    (sanitize) "
    """
    return (" " * indent + label).ljust(TAG_WIDTH)


class JobLogSink(ABC):
    """
    Durable, per-job log.

    Implementations must never raise from ``log_entry``: logging a failure
    must not turn into a second failure.
    """

    @abstractmethod
    def log_entry(self, job: Job | None, message: str) -> None:
        """Append a line to the job's log. Best effort."""

    def close(self) -> None:  # noqa: B027 - optional hook
        """Release any resources held by the sink."""


class ChatNotifier(ABC):
    """Posts messages to a chat channel."""

    @abstractmethod
    def send(self, message: str) -> None:
        """Post a message. May raise on delivery failure."""


class Reporter:
    """
    Chat notification plus durable job-log append, scoped to one job.

    Both capabilities are best effort: a notifier failure is logged to the
    job log and the process log but never propagated into the pipeline.
    """

    def __init__(self, job: Job, sink: JobLogSink, notifier: ChatNotifier) -> None:
        self.job = job
        self.sink = sink
        self.notifier = notifier

    def log(self, message: str) -> None:
        self.sink.log_entry(self.job, message)

    def send_slack_msg(self, message: str) -> None:
        """Post a message to chat on behalf of this job."""
        try:
            self.notifier.send(message)
        except Exception as e:
            logger.warning("Chat notification failed for job %s: %s", self.job.job_id, e)
            self.log(f"{tag('(CHAT)')} failed to post message: {e}")
