"""
Entry point for the archive_sync component.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .application.exceptions import ArchiveSyncError, InvalidDateError
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_DATE = 2
EXIT_DOWNLOAD_FAILURES = 3


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mirror an hourly .json.gz archive into a local tree"
    )

    parser.add_argument(
        "--start",
        help="First day to download (YYYY-MM-DD). Defaults to settings.",
    )

    parser.add_argument(
        "--end",
        help="Last day to download (YYYY-MM-DD). Defaults to today.",
    )

    parser.add_argument(
        "--download-dir",
        help="Root of the local year/month tree.",
    )

    parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of simultaneous downloads.",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report missing and corrupt files; download nothing.",
    )

    parser.add_argument(
        "--fail-on-errors",
        action="store_true",
        help="Exit with a non-zero status if any day failed to download.",
    )

    return parser


def run_application(args: argparse.Namespace) -> int:
    """Wires and runs the application using the DI container."""

    container = Container()
    container.cli_args.from_dict(vars(args))
    setup_logging(level=container.config().logging.level)

    try:
        date_range = container.date_range()
    except InvalidDateError as e:
        logger.error(f"Error: {e}")
        return EXIT_INVALID_DATE

    try:
        sync_service = container.sync_service()
        if args.check:
            sync_service.check(date_range)
            return EXIT_OK
        summary = sync_service.run(date_range)
    except ArchiveSyncError as e:
        logger.error(f"An application error occurred: {e}")
        return EXIT_ERROR
    finally:
        container.shutdown_resources()

    fail_on_errors = (
        args.fail_on_errors or container.config().sync.fail_on_download_errors
    )
    if fail_on_errors and summary.days_with_failures:
        return EXIT_DOWNLOAD_FAILURES
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    cli_args = build_parser().parse_args(argv)
    return run_application(cli_args)


if __name__ == "__main__":
    sys.exit(main())
