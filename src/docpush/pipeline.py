"""
GitHub push pipeline: build, publish to staging, enumerate artifacts.

The three steps run strictly in order and any failure ends the run; a
failed build is never published. Build and publish each run under the
configured deadline (7.5 hours by default).

Usage:
    pipeline = BuildPipeline(config)
    files = pipeline.run_github_push(job)
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from docpush.config import WorkerConfig, get_config
from docpush.errors import InvalidJobDefinition, StageFailure, StageTimeoutError, truncate_error
from docpush.files import get_files_in_dir
from docpush.logging import job_logger
from docpush.paths import output_dir
from docpush.reporting import default_notifier, default_sink
from docpush.reporting.interface import ChatNotifier, JobLogSink, Reporter, tag
from docpush.resilience.timeouts import CancellationToken, run_with_deadline
from docpush.sanitize import missing_field
from docpush.stages.github import GitHubBuilder
from docpush.stages.interface import Builder, Publisher
from docpush.stages.publish import StagePublisher

if TYPE_CHECKING:
    from docpush.models.job import Job
    from docpush.models.outcome import StageOutcome

BuilderFactory = Callable[["Job", WorkerConfig], Builder]
PublisherFactory = Callable[["Job", WorkerConfig], Publisher]
FileLister = Callable[[str], list[str]]

WARNING_MARKER = "WARNING:"


class BuildPipeline:
    """
    Runs one GitHub push job through build, publish and enumeration.

    Collaborators are created per job through the factories, so one
    BuildPipeline may serve concurrent jobs as long as the sink is
    thread-safe (all bundled sinks are).

    Args:
        config: Worker configuration (process default if None)
        sink: Job-log sink (configured default if None)
        notifier: Chat notifier (configured default if None)
        builder_factory: Creates the job's Builder
        publisher_factory: Creates the job's Publisher
        file_lister: Lists artifact files under a directory
    """

    def __init__(
        self,
        config: WorkerConfig | None = None,
        sink: JobLogSink | None = None,
        notifier: ChatNotifier | None = None,
        builder_factory: BuilderFactory = GitHubBuilder,
        publisher_factory: PublisherFactory = StagePublisher,
        file_lister: FileLister = get_files_in_dir,
    ) -> None:
        self.config = config or get_config()
        self.sink = sink or default_sink(self.config)
        self.notifier = notifier or default_notifier(self.config)
        self.builder_factory = builder_factory
        self.publisher_factory = publisher_factory
        self.file_lister = file_lister

    def run_github_push(self, job: Job) -> list[str]:
        """
        Build, publish and list the output of a validated push job.

        Args:
            job: A job that passed ``validate_job``

        Returns:
            Paths of the files in the branch's public output directory

        Raises:
            InvalidJobDefinition: repo_name or branch_name missing, or the
                repository would live outside the workspace
            StageFailure: build or publish reported failure
            StageTimeoutError: build or publish exceeded the deadline
            FileNotFoundError: the output directory does not exist
        """
        self.sink.log_entry(job, " ** Running github push function")

        missing = missing_field(job, ("repo_name", "branch_name"))
        if missing is not None:
            self.sink.log_entry(job, f"{tag('(BUILD)')}failed due to insufficient definition")
            raise InvalidJobDefinition(
                f"job not valid: missing {missing}",
                field=missing,
                job_id=job.job_id if job is not None else None,
            )
        assert job.payload is not None
        log = job_logger(job)
        target = self._output_dir(job)

        builder = self.builder_factory(job, self.config)
        reporter = Reporter(job, self.sink, self.notifier)
        publisher = self.publisher_factory(job, self.config)

        self._start_build(job, builder, reporter)
        log.info("build_completed")

        log.info("pushing_to_stage")
        self._push_to_stage(job, publisher, reporter)

        files = self.file_lister(str(target))
        log.info("artifacts_listed", directory=str(target), count=len(files))
        return files

    def _output_dir(self, job: Job) -> Path:
        assert job.payload is not None
        try:
            return output_dir(self.config.workspace, job.payload.repo_name or "", job.payload.branch_name or "")
        except InvalidJobDefinition as e:
            self.sink.log_entry(job, f"{tag('(BUILD)')}failed, repository outside the workspace")
            raise InvalidJobDefinition(e.args[0], field=e.field, job_id=job.job_id) from e

    def _start_build(self, job: Job, builder: Builder, reporter: Reporter) -> None:
        outcome = self._run_stage(
            job,
            "build",
            lambda token: builder.build_repo(reporter, token),
            "Timed out on build",
        )
        # Only post the full build output to chat when it has warnings
        output = outcome.combined_output()
        if WARNING_MARKER in output:
            reporter.send_slack_msg(output)

    def _push_to_stage(self, job: Job, publisher: Publisher, reporter: Reporter) -> None:
        outcome = self._run_stage(
            job,
            "publish",
            lambda token: publisher.push_to_stage(reporter, token),
            "Timed out on push to stage",
        )
        if outcome.stdout.strip():
            reporter.send_slack_msg(outcome.stdout)

    def _run_stage(
        self,
        job: Job,
        stage: str,
        operation: Callable[[CancellationToken], StageOutcome],
        timeout_message: str,
    ) -> StageOutcome:
        """Run one stage under the deadline; raise unless it succeeded."""
        log = job_logger(job).bind(stage=stage)
        deadline = self.config.stage_timeout_seconds
        start = time.monotonic()
        try:
            outcome = run_with_deadline(
                deadline,
                operation,
                timeout_message,
                stage=stage,
                job_id=job.job_id,
            )
        except StageTimeoutError as e:
            self.sink.log_entry(
                job,
                f"{tag('(' + stage + ')')} {e} (deadline {deadline:g}s, "
                f"elapsed {time.monotonic() - start:.1f}s)",
            )
            log.error("stage_timed_out", deadline_seconds=deadline)
            raise
        except Exception as e:
            self.sink.log_entry(job, f"{tag('(' + stage + ')')} failed with {type(e).__name__}: {e}")
            log.exception("stage_raised")
            raise

        if outcome is None or not outcome.succeeded:
            stderr = outcome.stderr if outcome is not None else ""
            self.sink.log_entry(
                job,
                f"{tag('(' + stage + ')')} failed after {time.monotonic() - start:.1f}s",
            )
            log.error("stage_failed")
            raise StageFailure(
                f"{stage} stage failed",
                stage=stage,
                job_id=job.job_id,
                details={"stderr": truncate_error(stderr)},
            )
        return outcome


def run_github_push(job: Job, **kwargs: object) -> list[str]:
    """Run a push job with a BuildPipeline built from ``kwargs``."""
    return BuildPipeline(**kwargs).run_github_push(job)  # type: ignore[arg-type]
