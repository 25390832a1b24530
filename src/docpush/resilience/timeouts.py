"""
Deadline enforcement for long-running stages.

``run_with_deadline`` races an operation against a timer. The operation
receives a CancellationToken; when the deadline fires the token is
cancelled and the caller gets a StageTimeoutError straight away, without
waiting for the operation to notice.

Usage:
    outcome = run_with_deadline(
        27000,
        lambda token: builder.build_repo(reporter, token),
        "Timed out on build",
        stage="build",
    )
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TypeVar

from docpush.errors import StageTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation flag shared with a running operation."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; True if cancelled."""
        return self._event.wait(timeout)


def run_with_deadline(
    deadline_seconds: float,
    operation: Callable[[CancellationToken], T],
    timeout_message: str,
    *,
    stage: str | None = None,
    job_id: str | None = None,
) -> T:
    """
    Run ``operation`` with a wall-clock deadline.

    Args:
        deadline_seconds: Seconds to wait before giving up
        operation: Callable taking a CancellationToken
        timeout_message: Message of the StageTimeoutError raised on expiry
        stage: Stage name attached to the error
        job_id: Job id attached to the error

    Returns:
        Whatever ``operation`` returned

    Raises:
        StageTimeoutError: The deadline elapsed first
        Exception: Anything ``operation`` raised, unchanged
    """
    token = CancellationToken()
    start = time.monotonic()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"docpush-{stage or 'op'}")
    future = executor.submit(operation, token)
    try:
        done, _ = wait([future], timeout=deadline_seconds)
        if done:
            return future.result()

        elapsed = time.monotonic() - start
        token.cancel(timeout_message)
        logger.warning(
            "Stage '%s' exceeded deadline of %ss after %.1fs; cancellation requested",
            stage,
            deadline_seconds,
            elapsed,
        )
        raise StageTimeoutError(
            timeout_message,
            deadline_seconds=deadline_seconds,
            stage=stage,
            job_id=job_id,
            details={"elapsed_seconds": round(elapsed, 3)},
        )
    finally:
        # Never block on an abandoned operation; the token tells it to stop
        executor.shutdown(wait=False, cancel_futures=True)
