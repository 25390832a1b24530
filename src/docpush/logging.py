"""Structured logging for docpush.

This module provides structured logging using structlog, enabling:
- JSON-formatted logs for production (machine-readable)
- Pretty console logs for development (human-readable)
- Automatic context binding (job_id, repo, branch)
- Integration with standard library logging

Usage:
    from docpush.logging import configure_logging, get_logger

    # Configure once at worker startup
    configure_logging(json_format=True)

    logger = get_logger("docpush.worker")
    logger.info("job_dequeued", job_id="5f1c...")

Job binding:
    log = job_logger(job)
    log.info("build_started")  # job_id, repo and branch included
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from docpush.models.job import Job

_configured = False


def configure_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    logger_factory: Any = None,
) -> None:
    """Configure structured logging for docpush.

    Call this once at worker startup before any logging occurs.

    Args:
        json_format: If True, output JSON logs (for production).
                    If False, output pretty console logs (for development).
        level: Minimum log level (default: INFO)
        logger_factory: Custom logger factory (for testing)
    """
    global _configured

    # Configure stdlib logging (structlog wraps it)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory or structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Get a structured logger for the given name.

    Auto-configures with console defaults if ``configure_logging`` has not
    been called yet.
    """
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables that will be included in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables.

    Call this when a job finishes to prevent context leaking into the next.
    """
    structlog.contextvars.clear_contextvars()


def job_logger(job: Job) -> Any:
    """Get a logger pre-bound with job context.

    Args:
        job: The job being handled

    Returns:
        Logger with job_id, repo and branch bound
    """
    payload = job.payload
    return get_logger("docpush.job").bind(
        job_id=job.job_id,
        repo=f"{payload.repo_owner}/{payload.repo_name}",
        branch=payload.branch_name,
    )
