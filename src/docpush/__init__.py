"""
docpush - GitHub push handler for the documentation build worker.

Validates push events against injection and branch policy rules, then
builds, publishes to staging and enumerates the produced artifacts under
a per-stage deadline, reporting to chat and a durable job log.
"""

__version__ = "0.1.0"

from docpush.errors import (
    InvalidJobDefinition,
    MasterBranchNotSupported,
    StageFailure,
    StageTimeoutError,
)
from docpush.models import Job, JobPayload, StageOutcome, StageStatus
from docpush.pipeline import BuildPipeline, run_github_push
from docpush.resilience import CancellationToken, run_with_deadline
from docpush.sanitize import BranchPolicy, safe_branch, safe_string, validate_job
from docpush.worker import handle_github_push, safe_github_push

__all__ = [
    "BranchPolicy",
    "BuildPipeline",
    "CancellationToken",
    "InvalidJobDefinition",
    "Job",
    "JobPayload",
    "MasterBranchNotSupported",
    "StageFailure",
    "StageOutcome",
    "StageStatus",
    "StageTimeoutError",
    "handle_github_push",
    "run_github_push",
    "run_with_deadline",
    "safe_branch",
    "safe_github_push",
    "safe_string",
    "validate_job",
]
