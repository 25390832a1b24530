"""
Stage collaborator interfaces.

The pipeline only relies on these two methods. Both receive the job's
Reporter and a CancellationToken, and should stop work promptly once the
token is cancelled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docpush.models.outcome import StageOutcome
    from docpush.reporting.interface import Reporter
    from docpush.resilience.timeouts import CancellationToken


class Builder(ABC):
    """Fetches a repository and runs the site generator."""

    @abstractmethod
    def build_repo(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        """
        Build the repository.

        Args:
            reporter: Job-scoped reporter for progress lines
            token: Cancelled when the stage deadline expires

        Returns:
            StageOutcome with captured output
        """


class Publisher(ABC):
    """Uploads built output to the staging location."""

    @abstractmethod
    def push_to_stage(self, reporter: Reporter, token: CancellationToken) -> StageOutcome:
        """Publish the build output to staging."""
