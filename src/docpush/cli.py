"""Command line entry point for docpush."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from docpush.config import WorkerConfig, get_config
from docpush.error_codes import classify_error
from docpush.errors import ConfigurationError, DocpushError, InvalidJobDefinition, MasterBranchNotSupported
from docpush.logging import configure_logging
from docpush.models.job import Job
from docpush.reporting import default_sink
from docpush.sanitize import validate_job
from docpush.worker import handle_github_push

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def _load_record(path: str) -> dict[str, Any]:
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path) as f:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("job record must be a JSON object")
    return data


def _load_config(path: str | None) -> WorkerConfig:
    if path:
        return WorkerConfig.from_file(path)
    return get_config()


def _fail(prefix: str, error: BaseException) -> None:
    print(f"{prefix}: {error} [{classify_error(error).value}]", file=sys.stderr)


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args.config)
        job = Job.from_record(_load_record(args.record))
    except (ConfigurationError, OSError) as e:
        _fail("failed", e)
        return EXIT_FAILED
    except ValueError as e:
        _fail("invalid", e)
        return EXIT_INVALID

    try:
        validate_job(job, default_sink(config))
    except DocpushError as e:
        _fail("invalid", e)
        return EXIT_INVALID
    print(f"valid: {job.job_id}")
    return EXIT_OK


def cmd_run(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args.config)
        record = _load_record(args.record)
    except (ConfigurationError, OSError) as e:
        _fail("failed", e)
        return EXIT_FAILED
    except ValueError as e:
        _fail("invalid", e)
        return EXIT_INVALID

    configure_logging(json_format=config.log_json, level=config.level)
    try:
        files = handle_github_push(record, config)
    except (InvalidJobDefinition, MasterBranchNotSupported) as e:
        _fail("failed", e)
        return EXIT_INVALID
    except (DocpushError, OSError) as e:
        _fail("failed", e)
        return EXIT_FAILED
    for path in files:
        print(path)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="docpush",
        description="Validate and run GitHub push documentation builds",
    )
    parser.add_argument("--config", help="YAML config file (defaults to DOCPUSH_* environment)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser("validate", help="Validate a job record without building")
    validate_parser.add_argument("record", help="Path to a JSON job record, or - for stdin")

    run_parser = subparsers.add_parser("run", help="Validate, build, publish and list artifacts")
    run_parser.add_argument("record", help="Path to a JSON job record, or - for stdin")

    args = parser.parse_args(argv)

    if args.command == "validate":
        return cmd_validate(args)
    if args.command == "run":
        return cmd_run(args)
    parser.print_help()
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
