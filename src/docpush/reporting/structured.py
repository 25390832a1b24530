"""Job-log sink that writes to the structured process log only."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docpush.logging import get_logger
from docpush.reporting.interface import JobLogSink

if TYPE_CHECKING:
    from docpush.models.job import Job


class StructlogJobLogSink(JobLogSink):
    """Emits each job-log line as a ``job_log`` event.

    Used when no job-log database is configured.
    """

    def __init__(self) -> None:
        self._logger = get_logger("docpush.joblog")

    def log_entry(self, job: Job | None, message: str) -> None:
        job_id = job.job_id if job is not None else None
        self._logger.info("job_log", job_id=job_id, message=message.rstrip())
