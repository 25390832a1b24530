"""Shared fixtures and fake stage collaborators."""

from __future__ import annotations

import time
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from docpush.config import WorkerConfig, reset_config
from docpush.models.job import Job, JobPayload
from docpush.models.outcome import StageOutcome
from docpush.reporting.interface import Reporter
from docpush.reporting.memory import MemoryJobLogSink, MemoryNotifier
from docpush.resilience.timeouts import CancellationToken
from docpush.stages.interface import Builder, Publisher


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep DOCPUSH_* settings from the host out of the tests."""
    for name in (
        "DOCPUSH_STAGE_TIMEOUT_S",
        "DOCPUSH_WORKSPACE",
        "DOCPUSH_GITHUB_URL",
        "DOCPUSH_BUILD_TARGET",
        "DOCPUSH_STAGE_TARGET",
        "DOCPUSH_SLACK_WEBHOOK_URL",
        "DOCPUSH_JOB_LOG_DB",
        "DOCPUSH_LOG_JSON",
        "DOCPUSH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sink() -> MemoryJobLogSink:
    return MemoryJobLogSink()


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def config(tmp_path: Path) -> WorkerConfig:
    return WorkerConfig(workspace=str(tmp_path), stage_timeout_seconds=5)


def make_job(
    repo_name: str | None = "docs",
    repo_owner: str | None = "org",
    branch_name: str | None = "release-1",
    upstream: Any = None,
    title: str = "Github Push: org/docs",
    allow_master_branch: bool = False,
) -> Job:
    """Build a Job with sensible defaults."""
    return Job(
        payload=JobPayload(
            repo_name=repo_name,
            repo_owner=repo_owner,
            branch_name=branch_name,
            upstream=upstream,
        ),
        title=title,
        job_id="job-1",
        allow_master_branch=allow_master_branch,
    )


# =============================================================================
# Fake stage collaborators
# =============================================================================


class FakeBuilder(Builder):
    """Returns a fixed outcome, optionally after a delay."""

    def __init__(
        self,
        outcome: StageOutcome | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.outcome = outcome if outcome is not None else StageOutcome.success()
        self.delay = delay
        self.error = error
        self.calls = 0
        self.cancelled = False

    def build_repo(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        self.calls += 1
        if self.delay and token.wait(self.delay):
            self.cancelled = True
            return StageOutcome.failure(stderr="cancelled")
        if self.error is not None:
            raise self.error
        return self.outcome


class FakePublisher(Publisher):
    """Returns a fixed outcome."""

    def __init__(self, outcome: StageOutcome | None = None, delay: float = 0.0) -> None:
        self.outcome = outcome if outcome is not None else StageOutcome.success(stdout="ok")
        self.delay = delay
        self.calls = 0

    def push_to_stage(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.outcome


class RecordingLister:
    """File lister that records the directories it was asked for."""

    def __init__(self, files: list[str] | None = None) -> None:
        self.files = files if files is not None else []
        self.paths: list[str] = []

    def __call__(self, path: str) -> list[str]:
        self.paths.append(path)
        return list(self.files)
