"""
Command Line Interface

Entry point for one-off synchronizations and for running configured mirror
jobs, either once or as a service.

Author: dirmirror Project
License: MIT
"""

import argparse
import sys
from typing import List, Optional

from .utils.logger import setup_logging, get_logger
from .config.config_loader import ConfigLoader
from .core.errors import ConflictError, ConfigError
from .core.sync_engine import SyncEngine
from .core.orchestrator import Orchestrator, JobStatus

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFLICT = 2
EXIT_CONFIG_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirmirror",
        description="Mirror one or more source directories into a target directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mirror a single directory
  dirmirror sync ./build/out ./dist

  # Merge several directories into one target (file paths must not clash)
  dirmirror sync ./assets ./generated ./site

  # Run every job in config.yaml once
  dirmirror run --config config.yaml --once

  # Keep mirroring on source changes and schedules until interrupted
  dirmirror run --config config.yaml
        """,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR); overrides the config file",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file (rotated)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Synchronize sources into a target once")
    sync_parser.add_argument("paths", nargs="+", metavar="PATH",
                             help="One or more source directories followed by the target directory")

    run_parser = subparsers.add_parser("run", help="Run the mirror jobs from a config file")
    run_parser.add_argument("--config", default=None, help="Path to config.yaml")
    run_parser.add_argument("--once", action="store_true",
                            help="Run every enabled job once and exit")

    check_parser = subparsers.add_parser("check-config", help="Validate a config file")
    check_parser.add_argument("--config", default=None, help="Path to config.yaml")

    return parser


def _setup_logging(args, app=None):
    setup_logging(
        log_level=args.log_level or (app.log_level if app else "INFO"),
        log_to_file=bool(args.log_file) or (app.log_to_file if app else False),
        log_file_path=args.log_file or (app.log_file_path if app else "logs/dirmirror.log"),
        log_rotation_size=app.log_rotation_size if app else 10485760,
        log_retention_count=app.log_retention_count if app else 5,
        json_format=args.json_logs or (app.json_logs if app else False),
    )


def _cmd_sync(args) -> int:
    _setup_logging(args)

    if len(args.paths) < 2:
        print("error: sync needs at least one source and a target", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    *sources, target = args.paths
    try:
        report = SyncEngine().synchronize(sources, target)
    except ConflictError as e:
        print(f"conflict: {e}", file=sys.stderr)
        return EXIT_CONFLICT
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    print(report.summary())
    return EXIT_OK


def _load(args):
    config = ConfigLoader(args.config).load()
    _setup_logging(args, config.app)
    return config


def _cmd_run(args) -> int:
    config = _load(args)
    orchestrator = Orchestrator(config)

    if args.once:
        results = orchestrator.run_all()
        for result in results:
            detail = result.report.summary() if result.ok else result.error
            print(f"{result.name}: {result.status.value} ({detail})")
        if any(r.status == JobStatus.CONFLICT for r in results):
            return EXIT_CONFLICT
        if any(r.status == JobStatus.FAILED for r in results):
            return EXIT_IO_ERROR
        return EXIT_OK

    orchestrator.run_all()
    orchestrator.start()
    try:
        orchestrator.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        orchestrator.stop()
    return EXIT_OK


def _cmd_check_config(args) -> int:
    config = _load(args)
    for job in config.mirrors:
        state = "enabled" if job.enabled else "disabled"
        print(f"{job.name} [{state}]: {', '.join(job.sources)} -> {job.target}")
    print(f"{len(config.mirrors)} mirror job(s) OK")
    return EXIT_OK


COMMANDS = {
    "sync": _cmd_sync,
    "run": _cmd_run,
    "check-config": _cmd_check_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and return its exit code."""
    args = build_parser().parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
