"""Tests for the build, publish and enumerate pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from docpush.config import WorkerConfig
from docpush.errors import InvalidJobDefinition, StageFailure, StageTimeoutError
from docpush.models.job import Job
from docpush.models.outcome import StageOutcome
from docpush.pipeline import BuildPipeline, run_github_push
from docpush.reporting.interface import ChatNotifier
from docpush.reporting.memory import MemoryJobLogSink, MemoryNotifier
from tests.conftest import FakeBuilder, FakePublisher, RecordingLister, make_job


def make_pipeline(
    config: WorkerConfig,
    sink: MemoryJobLogSink,
    notifier: ChatNotifier,
    builder: FakeBuilder,
    publisher: FakePublisher,
    lister: RecordingLister | None = None,
) -> BuildPipeline:
    kwargs = {}
    if lister is not None:
        kwargs["file_lister"] = lister
    return BuildPipeline(
        config,
        sink=sink,
        notifier=notifier,
        builder_factory=lambda job, cfg: builder,
        publisher_factory=lambda job, cfg: publisher,
        **kwargs,
    )


class TestSuccessfulRun:
    """Happy-path behaviour."""

    def test_end_to_end_returns_branch_artifacts(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        public = Path(config.workspace) / "docs" / "build" / "public-release-1"
        (public / "css").mkdir(parents=True)
        (public / "index.html").write_text("<html/>")
        (public / "css" / "site.css").write_text("body {}")

        builder = FakeBuilder(StageOutcome.success(stdout="", stderr=""))
        publisher = FakePublisher(StageOutcome.success(stdout="ok"))
        pipeline = make_pipeline(config, sink, notifier, builder, publisher)

        files = pipeline.run_github_push(make_job())

        assert files == [str(public / "index.html"), str(public / "css" / "site.css")]
        assert notifier.messages == ["ok"]
        assert builder.calls == 1
        assert publisher.calls == 1

    def test_lifecycle_is_logged(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        pipeline = make_pipeline(
            config, sink, notifier, FakeBuilder(), FakePublisher(), RecordingLister()
        )
        pipeline.run_github_push(make_job())
        assert sink.messages("job-1")[0] == " ** Running github push function"

    def test_build_warnings_are_posted(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        builder = FakeBuilder(StageOutcome.success(stdout="built", stderr="WARNING: dangling ref"))
        pipeline = make_pipeline(
            config, sink, notifier, builder, FakePublisher(), RecordingLister()
        )

        pipeline.run_github_push(make_job())

        assert notifier.messages == ["built\n\nWARNING: dangling ref", "ok"]

    def test_lowercase_warning_is_not_posted(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        builder = FakeBuilder(StageOutcome.success(stdout="warning: minor"))
        pipeline = make_pipeline(
            config, sink, notifier, builder, FakePublisher(), RecordingLister()
        )

        pipeline.run_github_push(make_job())

        assert notifier.messages == ["ok"]

    def test_branch_suffix_selects_output_directory(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        lister = RecordingLister(["a.html"])
        pipeline = make_pipeline(config, sink, notifier, FakeBuilder(), FakePublisher(), lister)

        assert pipeline.run_github_push(make_job(branch_name="v4.4")) == ["a.html"]
        pipeline.run_github_push(make_job(branch_name="master"))

        workspace = Path(config.workspace)
        assert lister.paths == [
            str(workspace / "docs" / "build" / "public-v4.4"),
            str(workspace / "docs" / "build" / "public"),
        ]

    def test_failing_notifier_does_not_fail_the_run(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
    ) -> None:
        class BrokenNotifier(ChatNotifier):
            def send(self, message: str) -> None:
                raise RuntimeError("slack is down")

        pipeline = make_pipeline(
            config, sink, BrokenNotifier(), FakeBuilder(), FakePublisher(), RecordingLister(["x"])
        )

        assert pipeline.run_github_push(make_job()) == ["x"]
        assert any("slack is down" in m for m in sink.messages())

    def test_module_level_helper(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        files = run_github_push(
            make_job(),
            config=config,
            sink=sink,
            notifier=notifier,
            builder_factory=lambda job, cfg: FakeBuilder(),
            publisher_factory=lambda job, cfg: FakePublisher(),
            file_lister=RecordingLister(["index.html"]),
        )
        assert files == ["index.html"]


class TestStageFailures:
    """Any stage failure ends the run."""

    def test_build_failure_stops_before_publish(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        publisher = FakePublisher()
        lister = RecordingLister()
        builder = FakeBuilder(StageOutcome.failure(stderr="make: *** [html] Error 2"))
        pipeline = make_pipeline(config, sink, notifier, builder, publisher, lister)

        with pytest.raises(StageFailure) as exc_info:
            pipeline.run_github_push(make_job())

        assert exc_info.value.stage == "build"
        assert exc_info.value.job_id == "job-1"
        assert "Error 2" in exc_info.value.details["stderr"]
        assert publisher.calls == 0
        assert lister.paths == []
        assert notifier.messages == []

    def test_publish_failure_stops_before_enumeration(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        lister = RecordingLister()
        publisher = FakePublisher(StageOutcome.failure(stdout="upload failed"))
        pipeline = make_pipeline(config, sink, notifier, FakeBuilder(), publisher, lister)

        with pytest.raises(StageFailure) as exc_info:
            pipeline.run_github_push(make_job())

        assert exc_info.value.stage == "publish"
        assert lister.paths == []
        assert notifier.messages == []

    def test_build_timeout(
        self,
        tmp_path: Path,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        config = WorkerConfig(workspace=str(tmp_path), stage_timeout_seconds=0.05)
        builder = FakeBuilder(delay=5.0)
        publisher = FakePublisher()
        pipeline = make_pipeline(config, sink, notifier, builder, publisher, RecordingLister())

        with pytest.raises(StageTimeoutError) as exc_info:
            pipeline.run_github_push(make_job())

        assert "Timed out on build" in str(exc_info.value)
        assert exc_info.value.stage == "build"
        assert publisher.calls == 0
        assert any("deadline 0.05s" in m for m in sink.messages("job-1"))

    def test_publish_timeout(
        self,
        tmp_path: Path,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        config = WorkerConfig(workspace=str(tmp_path), stage_timeout_seconds=0.05)
        lister = RecordingLister()
        pipeline = make_pipeline(
            config, sink, notifier, FakeBuilder(), FakePublisher(delay=0.3), lister
        )

        with pytest.raises(StageTimeoutError) as exc_info:
            pipeline.run_github_push(make_job())

        assert "Timed out on push to stage" in str(exc_info.value)
        assert exc_info.value.stage == "publish"
        assert lister.paths == []

    def test_builder_exception_propagates(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        publisher = FakePublisher()
        builder = FakeBuilder(error=OSError("disk full"))
        pipeline = make_pipeline(config, sink, notifier, builder, publisher, RecordingLister())

        with pytest.raises(OSError, match="disk full"):
            pipeline.run_github_push(make_job())

        assert publisher.calls == 0
        assert any("OSError: disk full" in m for m in sink.messages())

    def test_missing_output_directory_fails(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        pipeline = make_pipeline(config, sink, notifier, FakeBuilder(), FakePublisher())

        with pytest.raises(FileNotFoundError):
            pipeline.run_github_push(make_job())


class TestDefinitionRecheck:
    """The pipeline re-checks the fields it uses."""

    @pytest.mark.parametrize("field", ["repo_name", "branch_name"])
    def test_missing_field(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
        field: str,
    ) -> None:
        created: list[Job] = []

        def builder_factory(job: Job, cfg: WorkerConfig) -> FakeBuilder:
            created.append(job)
            return FakeBuilder()

        pipeline = BuildPipeline(
            config,
            sink=sink,
            notifier=notifier,
            builder_factory=builder_factory,
            publisher_factory=lambda job, cfg: FakePublisher(),
        )

        with pytest.raises(InvalidJobDefinition) as exc_info:
            pipeline.run_github_push(make_job(**{field: None}))

        assert exc_info.value.field == field
        assert created == []
        assert "(BUILD)        failed due to insufficient definition" in sink.messages()

    def test_owner_is_not_rechecked(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        pipeline = make_pipeline(
            config, sink, notifier, FakeBuilder(), FakePublisher(), RecordingLister(["f"])
        )
        assert pipeline.run_github_push(make_job(repo_owner=None)) == ["f"]

    @pytest.mark.parametrize("repo_name", [".", ".."])
    def test_repository_outside_workspace(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
        repo_name: str,
    ) -> None:
        builder = FakeBuilder()
        pipeline = make_pipeline(config, sink, notifier, builder, FakePublisher(), RecordingLister())

        with pytest.raises(InvalidJobDefinition) as exc_info:
            pipeline.run_github_push(make_job(repo_name=repo_name))

        assert exc_info.value.field == "repo_name"
        assert exc_info.value.job_id == "job-1"
        assert builder.calls == 0
        assert "(BUILD)        failed, repository outside the workspace" in sink.messages()


class TestPublishOutput:
    def test_empty_stdout_is_not_posted(
        self,
        config: WorkerConfig,
        sink: MemoryJobLogSink,
        notifier: MemoryNotifier,
    ) -> None:
        publisher = FakePublisher(StageOutcome.success(stdout=" \n"))
        pipeline = make_pipeline(config, sink, notifier, FakeBuilder(), publisher, RecordingLister())

        pipeline.run_github_push(make_job())

        assert publisher.calls == 1
        assert notifier.messages == []
