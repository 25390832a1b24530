"""Stage-level errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docpush.errors.base import DocpushError

if TYPE_CHECKING:
    from docpush.error_codes import ErrorCode


class StageError(DocpushError):
    """A pipeline stage did not complete.

    Contains details about which stage of which job failed and why.
    """

    code: int = 200

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        job_id: str | None = None,
        details: dict[str, Any] | None = None,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause, error_code=error_code)
        self.stage = stage
        self.job_id = job_id
        self.details = details or {}


class StageFailure(StageError):  # noqa: N818
    """The build or publish collaborator reported a non-success status."""

    code: int = 201

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.STAGE_FAILED


class StageTimeoutError(StageError):
    """A stage exceeded its deadline.

    The stage's operation was asked to cancel; its eventual result, if any,
    is discarded.
    """

    code: int = 202

    def __init__(
        self,
        message: str,
        *,
        deadline_seconds: float | None = None,
        stage: str | None = None,
        job_id: str | None = None,
        details: dict[str, Any] | None = None,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(
            message,
            stage=stage,
            job_id=job_id,
            details=details,
            code=code,
            cause=cause,
            error_code=error_code,
        )
        self.deadline_seconds = deadline_seconds

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.STAGE_TIMEOUT
