"""Deadline and cancellation support for pipeline stages."""

from docpush.resilience.timeouts import CancellationToken, run_with_deadline

__all__ = ["CancellationToken", "run_with_deadline"]
