"""docpush error hierarchy.

Import from ``docpush.errors``.
"""

from docpush.errors.base import ConfigurationError, DocpushError
from docpush.errors.job import InvalidJobDefinition, MasterBranchNotSupported
from docpush.errors.stage import StageError, StageFailure, StageTimeoutError
from docpush.errors.utils import truncate_error

__all__ = [
    "ConfigurationError",
    "DocpushError",
    "InvalidJobDefinition",
    "MasterBranchNotSupported",
    "StageError",
    "StageFailure",
    "StageTimeoutError",
    "truncate_error",
]
