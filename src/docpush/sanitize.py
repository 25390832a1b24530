"""
Validation of untrusted push-event fields.

Repository names, owners and branches end up in git and make invocations,
so anything that reaches a build step must pass ``validate_job`` first.
"Sanitize" is used loosely here: values are validated, never rewritten.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docpush.errors import InvalidJobDefinition, MasterBranchNotSupported
from docpush.reporting import default_sink
from docpush.reporting.interface import JobLogSink, tag

if TYPE_CHECKING:
    from docpush.models.job import Job

MASTER_BRANCH = "master"
REGRESSION_TEST_TITLE = "Regression Test Child Process"

# Word characters separated by "-" or "."; same language as
# ^((\w)*[-.]?(\w)*)*$ without the nested quantifiers.
_SAFE_STRING = re.compile(r"[\w.-]*", re.ASCII)

_REQUIRED_FIELDS = ("repo_name", "repo_owner", "branch_name")


@dataclass(frozen=True)
class BranchPolicy:
    """
    Decides which jobs may build ``master`` on staging.

    Attributes:
        master_allowed_titles: Job titles that bypass the master check
            (the regression-test harness submits its child jobs this way)
    """

    master_allowed_titles: frozenset[str] = field(
        default_factory=lambda: frozenset({REGRESSION_TEST_TITLE})
    )

    def allows_master(self, job: Job) -> bool:
        return job.allow_master_branch or job.title in self.master_allowed_titles


DEFAULT_BRANCH_POLICY = BranchPolicy()


def _log(sink: JobLogSink | None, job: Job | None, message: str) -> None:
    if sink is None:
        sink = default_sink()
    sink.log_entry(job, message)


def safe_string(value: str) -> bool:
    """True if ``value`` is ASCII word characters, hyphens and dots only.

    Example:
        safe_string("my-repo_123")     -> True
        safe_string("repo; rm -rf /")  -> False
    """
    return isinstance(value, str) and value.isascii() and _SAFE_STRING.fullmatch(value) is not None


def malformed_field(job: Job) -> str | None:
    """Name of the first payload field whose JSON type is wrong.

    ``branch_name`` must be a string; ``upstream`` absent, a string, or a
    list of strings.
    """
    payload = job.payload
    if payload is None:
        return None
    if payload.branch_name is not None and not isinstance(payload.branch_name, str):
        return "branch_name"
    upstream = payload.upstream
    if upstream is None or isinstance(upstream, str):
        return None
    if not isinstance(upstream, (list, tuple)) or not all(isinstance(entry, str) for entry in upstream):
        return "upstream"
    return None


def _upstream_contains(upstream: str | Sequence[str], branch: str) -> bool:
    # Containment, not equality: "feature/x" is allowed by "feature/xyz"
    if isinstance(upstream, str):
        return branch in upstream
    return any(branch in entry for entry in upstream)


def safe_branch(
    job: Job,
    sink: JobLogSink | None = None,
    policy: BranchPolicy = DEFAULT_BRANCH_POLICY,
) -> bool:
    """
    Apply the staging branch policy.

    With an upstream allow-list the branch must be contained in one of its
    entries. Without one, ``master`` is refused unless the policy allows it
    for this job; every other branch passes.

    Returns:
        Whether the branch is allowed

    Raises:
        InvalidJobDefinition: branch_name missing, or branch_name or upstream
            of the wrong type
        MasterBranchNotSupported: master pushed without upstream or bypass
    """
    missing = missing_field(job, ("branch_name",))
    if missing is not None:
        raise InvalidJobDefinition(f"job not valid: missing {missing}", field=missing, job_id=job.job_id)
    malformed = malformed_field(job)
    if malformed is not None:
        _log(sink, job, f"{tag('(sanitize)', indent=4)}failed, malformed {malformed}")
        raise InvalidJobDefinition(f"job not valid: malformed {malformed}", field=malformed, job_id=job.job_id)
    payload = job.payload
    assert payload is not None

    if payload.upstream:
        return _upstream_contains(payload.upstream, payload.branch_name)

    if payload.branch_name == MASTER_BRANCH and not policy.allows_master(job):
        _log(sink, job, f"{tag('(BUILD)')} failed, master branch not supported on staging builds")
        raise MasterBranchNotSupported(
            "master branches not supported",
            branch=payload.branch_name,
            job_id=job.job_id,
        )
    return True


def missing_field(job: Job | None, required: tuple[str, ...] = _REQUIRED_FIELDS) -> str | None:
    """Name of the first required payload field that is absent or empty."""
    if job is None:
        return "job"
    if job.payload is None:
        return "payload"
    for name in required:
        if not getattr(job.payload, name):
            return name
    return None


def validate_job(
    job: Job | None,
    sink: JobLogSink | None = None,
    policy: BranchPolicy = DEFAULT_BRANCH_POLICY,
) -> bool:
    """
    Validate a push job before any stage runs.

    Checks, first failure wins:
    1. job, payload, repo_name, repo_owner and branch_name are present,
       and branch_name and upstream have the right JSON types
    2. repo_name and repo_owner pass ``safe_string``
    3. the branch passes ``safe_branch``

    Args:
        job: The job to validate
        sink: Job log for the audit trail (configured default if None)
        policy: Master-branch policy

    Returns:
        True

    Raises:
        InvalidJobDefinition: missing fields, unsafe names, or branch not upstream
        MasterBranchNotSupported: master refused by policy
    """
    missing = missing_field(job)
    if missing is not None:
        _log(sink, job, f"{tag('(sanitize)', indent=4)}failed due to insufficient job definition")
        raise InvalidJobDefinition(
            f"job not valid: missing {missing}",
            field=missing,
            job_id=job.job_id if job is not None else None,
        )
    assert job is not None and job.payload is not None

    malformed = malformed_field(job)
    if malformed is not None:
        _log(sink, job, f"{tag('(sanitize)', indent=4)}failed, malformed {malformed}")
        raise InvalidJobDefinition(
            f"job not valid: malformed {malformed}",
            field=malformed,
            job_id=job.job_id,
        )

    for name in ("repo_name", "repo_owner"):
        if not safe_string(getattr(job.payload, name)):
            _log(sink, job, f"{tag('(sanitize)', indent=4)}failed, unsafe characters in {name}")
            raise InvalidJobDefinition(
                f"job not valid: unsafe characters in {name}",
                field=name,
                job_id=job.job_id,
            )

    if not safe_branch(job, sink, policy):
        _log(sink, job, f"{tag('(sanitize)', indent=4)}failed, branch not in upstream")
        raise InvalidJobDefinition(
            "job not valid: branch not in upstream",
            field="branch_name",
            job_id=job.job_id,
        )
    return True
