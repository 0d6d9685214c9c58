"""
The core application service, containing the day loop.

This module defines the orchestrator (ArchiveSyncService) that walks a date
range one day at a time, reconciling each day against the local tree and
dispatching whatever is missing. Days are processed strictly in sequence;
a failed day never stops the loop, because running the program again is
the retry mechanism.
"""

import datetime
import logging

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from .dates import iterate_range
from .dispatcher import FetchDispatcher
from .domain import (
    AuditSummary,
    DateRange,
    DayOutcome,
    RunSummary,
    VerificationResult,
)
from .planner import ReconciliationPlanner

logger = logging.getLogger(__name__)


class ArchiveSyncService:
    """Orchestrates planning and dispatching over a date range."""

    def __init__(
        self,
        planner: ReconciliationPlanner,
        dispatcher: FetchDispatcher,
        show_progress: bool = True,
    ):
        """Initializes the service with its per-day collaborators."""
        self.planner = planner
        self.dispatcher = dispatcher
        self.show_progress = show_progress

    def _progress(self, date_range: DateRange, desc: str):
        return tqdm(
            iterate_range(date_range),
            total=date_range.days,
            desc=desc,
            unit="day",
            disable=not self.show_progress,
        )

    def process_day(self, day: datetime.date) -> DayOutcome:
        """Runs Planning -> Dispatching for one day and reports the outcome."""

        logger.info(f"Processing data for {day}...")
        plan = self.planner.plan(day)

        if plan.is_complete:
            logger.info(
                f"All files for {day} already exist and are valid, "
                f"skipping download"
            )
            return DayOutcome.COMPLETE

        result = self.dispatcher.dispatch(plan)
        if result.succeeded:
            logger.info(f"Data for {day} downloaded successfully")
            return DayOutcome.DOWNLOADED

        logger.error(f"{result.error}, check errors and retry")
        return DayOutcome.FAILED

    def run(self, date_range: DateRange) -> RunSummary:
        """Processes every day of the range and returns the run summary."""

        logger.info(
            f"Downloading data from {date_range.start} to {date_range.end}"
        )

        summary = RunSummary()
        with logging_redirect_tqdm():
            for day in self._progress(date_range, "Days"):
                summary.record(day, self.process_day(day))

        logger.info(
            f"Processing complete! Data from {date_range.start} to "
            f"{date_range.end} has been processed."
        )
        logger.info(
            f"{summary.days_processed} days processed: "
            f"{summary.days_fully_valid} already complete, "
            f"{summary.days_downloaded} downloaded, "
            f"{summary.days_with_failures} failed."
        )
        if summary.failed_days:
            logger.warning(
                "Days with failures (rerun to retry): "
                + ", ".join(str(day) for day in summary.failed_days)
            )

        return summary

    def check(self, date_range: DateRange) -> AuditSummary:
        """Reports missing and corrupt files without changing anything."""

        logger.info(f"Checking data from {date_range.start} to {date_range.end}")

        summary = AuditSummary()
        with logging_redirect_tqdm():
            for day in self._progress(date_range, "Checking"):
                results = self.planner.audit(day)
                for resource, result in results.items():
                    if result is not VerificationResult.VALID:
                        logger.warning(f"{resource.local_path} is {result.value}")
                summary.record(day, results.values())

        logger.info(
            f"Check complete: {summary.days_complete}/{summary.days_checked} "
            f"days complete, {summary.missing} missing and "
            f"{summary.corrupt} corrupt files."
        )
        return summary
