"""
Default publisher: run the repository's staging make target.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docpush.paths import repo_dir
from docpush.reporting.interface import tag
from docpush.stages.command import run_command
from docpush.stages.github import build_env, merge_outcome
from docpush.stages.interface import Publisher

if TYPE_CHECKING:
    from docpush.config import WorkerConfig
    from docpush.models.job import Job
    from docpush.models.outcome import StageOutcome
    from docpush.reporting.interface import Reporter
    from docpush.resilience.timeouts import CancellationToken


class StagePublisher(Publisher):
    """Runs ``make <stage_target>`` in the checkout built by GitHubBuilder."""

    def __init__(self, job: Job, config: WorkerConfig) -> None:
        assert job.payload is not None
        self.job = job
        self.config = config
        self.checkout = repo_dir(config.workspace, job.payload.repo_name or "")

    def push_to_stage(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        reporter.log(f"{tag('(stage)')} running make {self.config.stage_target}")
        result = run_command(
            ["make", self.config.stage_target],
            token,
            cwd=self.checkout,
            env=build_env(self.job),
        )
        if not result.ok:
            reporter.log(f"{tag('(stage)')} failed with exit code {result.returncode}")
        return merge_outcome([result])
