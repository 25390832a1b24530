"""Build and publish stage collaborators."""

from docpush.stages.command import CommandResult, run_command
from docpush.stages.github import GitHubBuilder
from docpush.stages.interface import Builder, Publisher
from docpush.stages.publish import StagePublisher

__all__ = [
    "Builder",
    "CommandResult",
    "GitHubBuilder",
    "Publisher",
    "StagePublisher",
    "run_command",
]
