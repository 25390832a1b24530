"""Job validation errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docpush.errors.base import DocpushError

if TYPE_CHECKING:
    from docpush.error_codes import ErrorCode


class InvalidJobDefinition(DocpushError):  # noqa: N818 - matches the job queue's vocabulary
    """The job record is malformed or carries unsafe values.

    Raised when a required payload field is missing or empty, or when a
    repository name or owner contains characters that may not reach a
    process-invoking build step.

    Attributes:
        field: Name of the offending payload field, if known
        job_id: Correlation id of the job
    """

    code: int = 110

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        job_id: str | None = None,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause, error_code=error_code)
        self.field = field
        self.job_id = job_id

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.VALIDATION_FAILED


class MasterBranchNotSupported(DocpushError):  # noqa: N818
    """A push to master was rejected by the staging branch policy."""

    code: int = 111

    def __init__(
        self,
        message: str,
        *,
        branch: str = "master",
        job_id: str | None = None,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause, error_code=error_code)
        self.branch = branch
        self.job_id = job_id

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.BRANCH_NOT_SUPPORTED
