"""
Entry point the documentation-build worker calls for a dequeued push job.

    files = handle_github_push(record)

validates the record and runs the pipeline. Errors propagate to the caller
(the job queue), after being written to the job log.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from docpush.config import WorkerConfig, get_config
from docpush.logging import bind_context, clear_context
from docpush.models.job import Job
from docpush.pipeline import BuildPipeline
from docpush.reporting import default_sink
from docpush.reporting.interface import JobLogSink
from docpush.sanitize import DEFAULT_BRANCH_POLICY, BranchPolicy, validate_job

logger = logging.getLogger(__name__)


def safe_github_push(job: Job, sink: JobLogSink | None = None, policy: BranchPolicy = DEFAULT_BRANCH_POLICY) -> bool:
    """Validate a push job; see ``docpush.sanitize.validate_job``."""
    return validate_job(job, sink, policy)


def handle_github_push(
    record: Mapping[str, Any],
    config: WorkerConfig | None = None,
    sink: JobLogSink | None = None,
    pipeline: BuildPipeline | None = None,
    policy: BranchPolicy = DEFAULT_BRANCH_POLICY,
) -> list[str]:
    """
    Validate and run one GitHub push job record.

    Args:
        record: The job record as dequeued
        config: Worker configuration (process default if None)
        sink: Job-log sink shared by validation and the pipeline
        pipeline: Pipeline to run (built from config and sink if None)
        policy: Master-branch policy

    Returns:
        Artifact file paths produced by the build
    """
    config = config or get_config()
    sink = sink or (pipeline.sink if pipeline is not None else default_sink(config))
    job = Job.from_record(record)

    bind_context(job_id=job.job_id)
    try:
        validate_job(job, sink, policy)
        pipeline = pipeline or BuildPipeline(config, sink=sink)
        files = pipeline.run_github_push(job)
        logger.info("Job %s produced %d files", job.job_id, len(files))
        return files
    finally:
        clear_context()
