"""
Job and JobPayload models.

A Job is one dequeued GitHub push event. It is created per invocation,
never mutated, and discarded once the pipeline returns or raises.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


def _generate_job_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class JobPayload:
    """
    The push event fields the handler acts on.

    All values are untrusted until ``validate_job`` has accepted them.

    Attributes:
        repo_name: Repository name (``docs`` in ``org/docs``)
        repo_owner: Repository owner or organisation
        branch_name: Branch that was pushed
        upstream: Branch allow-list; when set, bypasses the master check
    """

    repo_name: str | None = None
    repo_owner: str | None = None
    branch_name: str | None = None
    upstream: Sequence[str] | str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> JobPayload | None:
        """Build a payload from the camelCase wire record."""
        if record is None:
            return None
        upstream = record.get("upstream")
        if isinstance(upstream, list):
            upstream = tuple(upstream)
        return cls(
            repo_name=record.get("repoName"),
            repo_owner=record.get("repoOwner"),
            branch_name=record.get("branchName"),
            upstream=upstream,
        )


@dataclass(frozen=True)
class Job:
    """
    A GitHub push job.

    Attributes:
        payload: The push event payload (None when the record carried none)
        title: Human readable job title
        job_id: Correlation id used in every log entry for this job
        user: GitHub user who pushed, if known
        allow_master_branch: Permit a staging build of ``master``
    """

    payload: JobPayload | None
    title: str = ""
    job_id: str = field(default_factory=_generate_job_id)
    user: str | None = None
    allow_master_branch: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Job:
        """
        Build a Job from a dequeued job record.

        Expected shape::

            {
                "_id": "5f1c...",
                "title": "Github Push: org/docs",
                "user": "someone",
                "payload": {
                    "repoName": "docs",
                    "repoOwner": "org",
                    "branchName": "release-1",
                    "upstream": ["release-1"],
                },
            }

        Missing fields are kept as None so that validation can report them.
        """
        job_id = record.get("_id") or record.get("id")
        payload = record.get("payload")
        return cls(
            payload=JobPayload.from_record(payload if isinstance(payload, Mapping) else None),
            title=record.get("title") or "",
            job_id=str(job_id) if job_id else _generate_job_id(),
            user=record.get("user"),
            allow_master_branch=bool(record.get("allowMasterBranch", False)),
        )
