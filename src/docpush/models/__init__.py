"""Data models for push jobs and stage outcomes."""

from docpush.models.job import Job, JobPayload
from docpush.models.outcome import StageOutcome, StageStatus

__all__ = [
    "Job",
    "JobPayload",
    "StageOutcome",
    "StageStatus",
]
