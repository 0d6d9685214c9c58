"""Hands a day's work list to the download transport."""

import logging

from .domain import DayPlan, DispatchResult, Downloader
from .exceptions import DispatchError, InfrastructureError


class FetchDispatcher:
    """
    Submits a DayPlan to the transport as a single batch.

    The batch succeeds or fails as a unit. Which files are still missing
    after a failure is not tracked here: the next run's verification pass
    finds them again.
    """

    def __init__(self, downloader: Downloader):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.downloader = downloader

    def dispatch(self, plan: DayPlan) -> DispatchResult:
        if plan.is_complete:
            return DispatchResult(succeeded=True, attempted=0)

        attempted = len(plan.work_items)
        self.logger.info(
            f"Starting download of {attempted} files for {plan.day}..."
        )

        try:
            succeeded = self.downloader.download_batch(plan.work_items)
            cause = None
        except InfrastructureError as e:
            succeeded = False
            cause = e

        if succeeded:
            return DispatchResult(succeeded=True, attempted=attempted)

        error = DispatchError(
            f"Download failed for {plan.day}"
            + (f": {cause}" if cause else "")
        )
        if cause is not None:
            error.__cause__ = cause
        return DispatchResult(succeeded=False, attempted=attempted, error=error)
