"""Base exception for docpush.

Every error the handler raises derives from DocpushError, so the job queue
can catch one type and read ``code`` and ``error_code`` from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docpush.error_codes import ErrorCode


class DocpushError(Exception):
    """Standard docpush error.

    None of these is retried inside the package; the enclosing job queue
    decides.

    Attributes:
        code: Numeric error code for programmatic handling
        error_code: Semantic ErrorCode for categorization and routing
        cause: Optional exception that led to this error
    """

    code: int = 100
    _error_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        cause: Exception | None = None,
        error_code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.cause = cause
        if error_code is not None:
            self._error_code = error_code

    @property
    def error_code(self) -> ErrorCode:
        """Get the semantic error code for this exception."""
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.SYSTEM_ERROR

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.code:
            parts.append(f"(code={self.code})")
        if self.cause:
            parts.append(f"caused by: {self.cause}")
        return " ".join(parts)


class ConfigurationError(DocpushError):
    """Invalid worker configuration.

    Raised while loading settings from the environment or a config file.
    """

    code: int = 104

    @property
    def error_code(self) -> ErrorCode:
        if self._error_code is not None:
            return self._error_code
        from docpush.error_codes import ErrorCode

        return ErrorCode.CONFIGURATION_INVALID
