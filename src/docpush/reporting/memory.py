"""In-memory sink and notifier, for tests and dry runs."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from docpush.reporting.interface import ChatNotifier, JobLogSink

if TYPE_CHECKING:
    from docpush.models.job import Job


class MemoryJobLogSink(JobLogSink):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.records: list[tuple[str | None, str]] = []

    def log_entry(self, job: Job | None, message: str) -> None:
        with self._lock:
            self.records.append((job.job_id if job is not None else None, message))

    def messages(self, job_id: str | None = None) -> list[str]:
        """Messages logged so far, optionally for a single job."""
        with self._lock:
            return [m for j, m in self.records if job_id is None or j == job_id]


class MemoryNotifier(ChatNotifier):
    def __init__(self) -> None:
        self.messages: list[str] = []

    def send(self, message: str) -> None:
        self.messages.append(message)
