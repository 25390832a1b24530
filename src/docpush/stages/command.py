"""
Cancellable command execution.

Commands are always given as argument lists and never run through a
shell. Each child leads its own process group, polled so that a
cancelled token terminates the whole group (make and whatever it spawned),
then kills it if it does not exit within the grace period. Output is
decoded as UTF-8 with undecodable bytes replaced.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from docpush.resilience.timeouts import CancellationToken

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.5
TERMINATE_GRACE_SECONDS = 5.0


@dataclass
class CommandResult:
    """Result of one child process."""

    command: list[str]
    returncode: int | None
    stdout: str
    stderr: str
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.cancelled and self.returncode == 0


def run_command(
    command: Sequence[str],
    token: CancellationToken,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    poll_interval: float = POLL_INTERVAL_SECONDS,
) -> CommandResult:
    """
    Run ``command`` until it exits or ``token`` is cancelled.

    Args:
        command: Program and arguments
        token: Cancellation token checked every ``poll_interval`` seconds
        cwd: Working directory
        env: Extra environment variables, merged over the parent's
        poll_interval: Seconds between cancellation checks

    Returns:
        CommandResult; ``cancelled`` is True when the child was stopped
    """
    argv = [str(part) for part in command]
    if token.cancelled:
        return CommandResult(argv, None, "", "cancelled before start", cancelled=True)

    full_env = None
    if env:
        full_env = {**os.environ, **env}

    try:
        process = subprocess.Popen(
            argv,
            cwd=cwd,
            env=full_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as e:
        return CommandResult(argv, None, "", str(e))

    while True:
        try:
            stdout, stderr = process.communicate(timeout=poll_interval)
            return CommandResult(argv, process.returncode, stdout, stderr)
        except subprocess.TimeoutExpired:
            if not token.cancelled:
                continue

        logger.warning("Cancelling %s (pid %s): %s", argv[0], process.pid, token.reason)
        _signal_group(process, signal.SIGTERM)
        try:
            stdout, stderr = process.communicate(timeout=TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            _signal_group(process, signal.SIGKILL)
            stdout, stderr = process.communicate()
        return CommandResult(argv, process.returncode, stdout, stderr, cancelled=True)


def _signal_group(process: subprocess.Popen[str], sig: signal.Signals) -> None:
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        # Group already gone
        pass
