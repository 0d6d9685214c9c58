"""Reconciliation of one day's hourly files against the local tree."""

import datetime
import logging
from pathlib import Path
from typing import Dict, List

from .domain import DayPlan, Resource, VerificationResult, Verifier, WorkItem
from .exceptions import DeletionError
from .naming import ResourceNamer


class ReconciliationPlanner:
    """Decides which of a day's resources still need downloading."""

    def __init__(self, namer: ResourceNamer, verifier: Verifier):
        """Initializes the planner with its naming and verification ports."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.namer = namer
        self.verifier = verifier

    def _verify_day(
        self, day: datetime.date
    ) -> Dict[Resource, VerificationResult]:
        resources = self.namer.name_all(day)
        results = self.verifier.verify_all(
            [resource.local_path for resource in resources]
        )
        return {
            resource: results[resource.local_path] for resource in resources
        }

    def _discard(self, path: Path):
        """Removes a corrupt file so the download starts from scratch."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise DeletionError(f"Could not delete {path}: {e}") from e

    def plan(self, day: datetime.date) -> DayPlan:
        """
        Builds the work list for a day.

        Every hourly file is verified; corrupt files are deleted before being
        queued again. A failed deletion is logged and the file is queued
        anyway, leaving the transport to overwrite it or report the failure.

        Args:
            day: The calendar day to reconcile.

        Returns:
            A DayPlan whose work items are in hour order.
        """

        work_items: List[WorkItem] = []
        deletion_failures = 0

        for resource, result in self._verify_day(day).items():
            path = resource.local_path

            if result is VerificationResult.VALID:
                self.logger.info(
                    f"{path} exists and is valid, skipping download"
                )
                continue

            if result is VerificationResult.CORRUPT:
                self.logger.warning(
                    f"{path} exists but is corrupted, will re-download"
                )
                try:
                    self._discard(path)
                except DeletionError as e:
                    self.logger.error(str(e))
                    deletion_failures += 1
            else:
                self.logger.info(f"{path} not found, queued for download")

            work_items.append(WorkItem(resource=resource, reason=result))

        return DayPlan(
            day=day,
            work_items=tuple(work_items),
            deletion_failures=deletion_failures,
        )

    def audit(self, day: datetime.date) -> Dict[Resource, VerificationResult]:
        """Verifies a day's files without touching the filesystem."""
        return self._verify_day(day)
