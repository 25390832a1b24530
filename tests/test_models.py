"""Tests for Job and StageOutcome."""

from __future__ import annotations

import dataclasses

import pytest

from docpush.models.job import Job, JobPayload
from docpush.models.outcome import StageOutcome, StageStatus


class TestJobFromRecord:
    def test_maps_camel_case_record(self) -> None:
        job = Job.from_record(
            {
                "_id": "5f1c2b",
                "title": "Github Push: org/docs",
                "user": "octocat",
                "payload": {
                    "repoName": "docs",
                    "repoOwner": "org",
                    "branchName": "release-1",
                    "upstream": ["release-1", "dev"],
                },
            }
        )

        assert job.job_id == "5f1c2b"
        assert job.title == "Github Push: org/docs"
        assert job.user == "octocat"
        assert job.allow_master_branch is False
        assert job.payload == JobPayload(
            repo_name="docs",
            repo_owner="org",
            branch_name="release-1",
            upstream=("release-1", "dev"),
        )

    def test_missing_payload(self) -> None:
        job = Job.from_record({"title": "broken"})
        assert job.payload is None

    def test_non_mapping_payload(self) -> None:
        job = Job.from_record({"payload": "docs"})
        assert job.payload is None

    def test_missing_fields_stay_none(self) -> None:
        job = Job.from_record({"payload": {"repoName": "docs"}})

        assert job.payload is not None
        assert job.payload.repo_owner is None
        assert job.payload.branch_name is None
        assert job.payload.upstream is None

    def test_generates_job_id(self) -> None:
        first = Job.from_record({"payload": {}})
        second = Job.from_record({"payload": {}})

        assert first.job_id
        assert first.job_id != second.job_id

    def test_allow_master_flag(self) -> None:
        job = Job.from_record({"allowMasterBranch": True, "payload": {}})
        assert job.allow_master_branch is True

    def test_job_is_frozen(self) -> None:
        job = Job.from_record({"payload": {}})
        with pytest.raises(dataclasses.FrozenInstanceError):
            job.title = "changed"  # type: ignore[misc]


class TestStageOutcome:
    def test_success(self) -> None:
        outcome = StageOutcome.success(stdout="a", stderr="b")

        assert outcome.status is StageStatus.SUCCESS
        assert outcome.succeeded
        assert outcome.combined_output() == "a\n\nb"

    def test_failure(self) -> None:
        outcome = StageOutcome.failure(stderr="boom")

        assert outcome.status is StageStatus.FAILURE
        assert not outcome.succeeded

    def test_status_values(self) -> None:
        assert StageStatus("success") is StageStatus.SUCCESS
        assert StageStatus("failure") is StageStatus.FAILURE
