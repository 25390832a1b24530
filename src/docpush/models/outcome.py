"""
StageOutcome - what a build or publish collaborator reports back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class StageOutcome:
    """
    Result of one build or publish stage.

    Attributes:
        status: Whether the stage succeeded
        stdout: Captured standard output
        stderr: Captured standard error
    """

    status: StageStatus
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is StageStatus.SUCCESS

    def combined_output(self) -> str:
        """stdout and stderr joined by a blank line, as posted to chat."""
        return f"{self.stdout}\n\n{self.stderr}"

    # ========== Factory Methods ==========

    @classmethod
    def success(cls, stdout: str = "", stderr: str = "") -> StageOutcome:
        return cls(status=StageStatus.SUCCESS, stdout=stdout, stderr=stderr)

    @classmethod
    def failure(cls, stdout: str = "", stderr: str = "") -> StageOutcome:
        return cls(status=StageStatus.FAILURE, stdout=stdout, stderr=stderr)
