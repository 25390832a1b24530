"""
Structured error codes for docpush.

Provides semantic error classification and exception chain traversal.

Usage:
    from docpush.error_codes import ErrorCode, classify_error

    try:
        handle_github_push(record)
    except Exception as e:
        if classify_error(e) == ErrorCode.STAGE_TIMEOUT:
            ...
"""

from __future__ import annotations

import urllib.error
from enum import Enum


class ErrorCode(Enum):
    """Semantic error codes for categorizing exceptions.

    Used for log fields, CLI exit statuses and for the job queue to decide
    whether a failed job is worth resubmitting.
    """

    # General errors
    UNKNOWN = "UNKNOWN"
    SYSTEM_ERROR = "SYSTEM_ERROR"

    # Job validation
    VALIDATION_FAILED = "VALIDATION_FAILED"
    BRANCH_NOT_SUPPORTED = "BRANCH_NOT_SUPPORTED"

    # Stage errors
    STAGE_FAILED = "STAGE_FAILED"
    STAGE_TIMEOUT = "STAGE_TIMEOUT"

    # Configuration errors
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"

    # Environment errors
    ARTIFACTS_MISSING = "ARTIFACTS_MISSING"
    NETWORK_ERROR = "NETWORK_ERROR"


def error_chain(error: BaseException) -> list[BaseException]:
    """Traverse __cause__ chain, return list from root to leaf.

    Args:
        error: The exception to traverse

    Returns:
        List of exceptions from root cause to the provided exception.
        If no cause chain exists, returns a list with just the error.
    """
    chain: list[BaseException] = []
    current: BaseException | None = error

    while current is not None:
        chain.append(current)
        cause = current.__cause__
        if cause is current or cause in chain:
            break
        current = cause

    chain.reverse()
    return chain


def find_in_chain(error: BaseException, error_type: type) -> BaseException | None:
    """Find first error of given type in cause chain, root first."""
    for exc in error_chain(error):
        if isinstance(exc, error_type):
            return exc
    return None


def classify_error(error: BaseException) -> ErrorCode:
    """Map any exception to an ErrorCode.

    Explicit ``error_code`` attributes on docpush exceptions win, then the
    cause chain is searched, then stdlib exception types are mapped.

    Args:
        error: The exception to classify

    Returns:
        The most appropriate ErrorCode for the exception.
    """
    if hasattr(error, "error_code"):
        return error.error_code  # type: ignore[no-any-return]

    for exc in reversed(error_chain(error)):
        if hasattr(exc, "error_code"):
            return exc.error_code  # type: ignore[no-any-return]

    if isinstance(error, (FileNotFoundError, NotADirectoryError)):
        return ErrorCode.ARTIFACTS_MISSING

    if isinstance(error, TimeoutError):
        return ErrorCode.STAGE_TIMEOUT

    if isinstance(error, (ConnectionError, urllib.error.URLError)):
        return ErrorCode.NETWORK_ERROR

    return ErrorCode.UNKNOWN
