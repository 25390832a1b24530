"""
Worker configuration for docpush.

Settings come from ``DOCPUSH_*`` environment variables or from a YAML file
with the same keys in lowercase (without the prefix).

Environment Variables:
    DOCPUSH_STAGE_TIMEOUT_S: Deadline for build and publish stages (default: 27000 = 7.5 hours)
    DOCPUSH_WORKSPACE: Directory repositories are cloned into (default: ".")
    DOCPUSH_GITHUB_URL: Base URL repositories are cloned from (default: https://github.com)
    DOCPUSH_BUILD_TARGET: make target that builds the site (default: "html")
    DOCPUSH_STAGE_TARGET: make target that pushes to staging (default: "stage")
    DOCPUSH_SLACK_WEBHOOK_URL: Slack incoming webhook; chat is disabled when unset
    DOCPUSH_JOB_LOG_DB: SQLite file for job logs; logs go to structlog only when unset
    DOCPUSH_LOG_JSON: Emit JSON logs when "1"/"true" (default: false)
    DOCPUSH_LOG_LEVEL: Log level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from docpush.errors import ConfigurationError

# 450 minutes per stage
BUILD_TIMEOUT_SECONDS = 60 * 450

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class WorkerConfig:
    """Settings for one worker process.

    Attributes:
        stage_timeout_seconds: Deadline applied to the build and to the publish stage
        workspace: Directory repositories are cloned into and artifacts listed from
        github_url: Base URL for cloning (owner/repo.git is appended)
        build_target: make target invoked by the builder
        stage_target: make target invoked by the publisher
        slack_webhook_url: Slack incoming webhook, or None to disable chat
        job_log_db: SQLite path for durable job logs, or None
        log_json: Emit JSON logs
        log_level: Log level name
    """

    stage_timeout_seconds: float = float(BUILD_TIMEOUT_SECONDS)
    workspace: str = "."
    github_url: str = "https://github.com"
    build_target: str = "html"
    stage_target: str = "stage"
    slack_webhook_url: str | None = None
    job_log_db: str | None = None
    log_json: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.stage_timeout_seconds <= 0:
            raise ConfigurationError(
                f"stage_timeout_seconds must be positive, got {self.stage_timeout_seconds}"
            )
        self.log_level = str(self.log_level).upper()
        if logging.getLevelName(self.log_level) not in (
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
            logging.CRITICAL,
        ):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace)

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level)  # type: ignore[no-any-return]

    @classmethod
    def from_env(cls) -> WorkerConfig:
        """Load configuration from environment variables with defaults."""
        try:
            return cls(
                stage_timeout_seconds=float(
                    os.getenv("DOCPUSH_STAGE_TIMEOUT_S", str(BUILD_TIMEOUT_SECONDS))
                ),
                workspace=os.getenv("DOCPUSH_WORKSPACE", "."),
                github_url=os.getenv("DOCPUSH_GITHUB_URL", "https://github.com"),
                build_target=os.getenv("DOCPUSH_BUILD_TARGET", "html"),
                stage_target=os.getenv("DOCPUSH_STAGE_TARGET", "stage"),
                slack_webhook_url=os.getenv("DOCPUSH_SLACK_WEBHOOK_URL") or None,
                job_log_db=os.getenv("DOCPUSH_JOB_LOG_DB") or None,
                log_json=os.getenv("DOCPUSH_LOG_JSON", "false").lower() in _TRUE_VALUES,
                log_level=os.getenv("DOCPUSH_LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}", cause=e) from e

    @classmethod
    def from_file(cls, path: str | Path) -> WorkerConfig:
        """Load configuration from a YAML file.

        Unknown keys are rejected so that typos do not silently fall back
        to defaults.
        """
        with open(path) as f:
            try:
                data: Any = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Cannot parse {path}: {e}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")

        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}", cause=e) from e


# Singleton for the process-wide config (loaded lazily)
_default_config: WorkerConfig | None = None


def get_config() -> WorkerConfig:
    """Get the default WorkerConfig, loading from environment on first call."""
    global _default_config
    if _default_config is None:
        _default_config = WorkerConfig.from_env()
    return _default_config


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _default_config
    _default_config = None
