"""
Default builder: shallow-clone the pushed branch and run make.
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

from docpush.models.outcome import StageOutcome
from docpush.paths import branch_suffix, repo_dir
from docpush.reporting.interface import tag
from docpush.stages.command import CommandResult, run_command
from docpush.stages.interface import Builder

if TYPE_CHECKING:
    from docpush.config import WorkerConfig
    from docpush.models.job import Job
    from docpush.reporting.interface import Reporter
    from docpush.resilience.timeouts import CancellationToken

logger = logging.getLogger(__name__)


def build_env(job: Job) -> dict[str, str]:
    """Environment passed to make for both the build and the stage target."""
    assert job.payload is not None
    branch = job.payload.branch_name or ""
    return {
        "GIT_BRANCH": branch,
        "BRANCH_SUFFIX": branch_suffix(branch),
        "REPO_NAME": job.payload.repo_name or "",
        "REPO_OWNER": job.payload.repo_owner or "",
    }


def merge_outcome(results: list[CommandResult]) -> StageOutcome:
    """Fold a sequence of command results into one StageOutcome."""
    stdout = "".join(r.stdout for r in results)
    stderr = "".join(r.stderr for r in results)
    if results and all(r.ok for r in results):
        return StageOutcome.success(stdout=stdout, stderr=stderr)
    return StageOutcome.failure(stdout=stdout, stderr=stderr)


class GitHubBuilder(Builder):
    """
    Clones ``<github_url>/<owner>/<repo>.git`` at the pushed branch into the
    workspace and runs ``make <build_target>`` in it.

    Any previous checkout of the repository is removed first.
    """

    def __init__(self, job: Job, config: WorkerConfig) -> None:
        assert job.payload is not None
        self.job = job
        self.config = config
        self.checkout = repo_dir(config.workspace, job.payload.repo_name or "")

    @property
    def clone_url(self) -> str:
        assert self.job.payload is not None
        base = self.config.github_url.rstrip("/")
        return f"{base}/{self.job.payload.repo_owner}/{self.job.payload.repo_name}.git"

    def build_repo(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        assert self.job.payload is not None
        branch = self.job.payload.branch_name

        if self.checkout.exists():
            shutil.rmtree(self.checkout)
        self.checkout.parent.mkdir(parents=True, exist_ok=True)

        reporter.log(f"{tag('(BUILD)')} cloning {self.clone_url} at {branch}")
        # --branch=<value> keeps a hostile branch name from reading as an option
        clone = run_command(
            ["git", "clone", "--depth", "1", f"--branch={branch}", "--", self.clone_url, str(self.checkout)],
            token,
        )
        if not clone.ok:
            reporter.log(f"{tag('(BUILD)')} clone failed with exit code {clone.returncode}")
            return merge_outcome([clone])

        reporter.log(f"{tag('(BUILD)')} running make {self.config.build_target}")
        make = run_command(
            ["make", self.config.build_target],
            token,
            cwd=self.checkout,
            env=build_env(self.job),
        )
        if not make.ok:
            reporter.log(f"{tag('(BUILD)')} make failed with exit code {make.returncode}")
        return merge_outcome([clone, make])
