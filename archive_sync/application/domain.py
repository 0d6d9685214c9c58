"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that the reconciliation logic operates on. None of them is
persisted: every run rebuilds them from the date range and the current
state of the download directory.
"""

import dataclasses
import datetime
import enum
from pathlib import Path

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .exceptions import DispatchError


# --- Domain Models ---

@dataclasses.dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar days, already clamped to today."""

    start: datetime.date
    end: datetime.date
    clamped: bool = False

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclasses.dataclass(frozen=True)
class Resource:
    """One hourly archive file: where it lives remotely and locally."""

    day: datetime.date
    hour: int
    url: str
    local_path: Path


class VerificationResult(enum.Enum):
    """Integrity state of a local file."""

    MISSING = "missing"
    VALID = "valid"
    CORRUPT = "corrupt"


@dataclasses.dataclass(frozen=True)
class WorkItem:
    """A resource that must be (re-)downloaded, and why."""

    resource: Resource
    reason: VerificationResult

    @property
    def url(self) -> str:
        return self.resource.url

    @property
    def local_path(self) -> Path:
        return self.resource.local_path


@dataclasses.dataclass(frozen=True)
class DayPlan:
    """The work list for a single day, in hour order."""

    day: datetime.date
    work_items: Tuple[WorkItem, ...] = ()
    deletion_failures: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.work_items


@dataclasses.dataclass(frozen=True)
class DispatchResult:
    """Outcome of handing one day's batch to the transport."""

    succeeded: bool
    attempted: int = 0
    error: Optional[DispatchError] = None


class DayOutcome(enum.Enum):
    """Terminal state of one iteration of the day loop."""

    DOWNLOADED = "downloaded"
    COMPLETE = "already complete"
    FAILED = "failed"


@dataclasses.dataclass
class RunSummary:
    """Aggregate of day outcomes over a whole run."""

    days_processed: int = 0
    days_fully_valid: int = 0
    days_downloaded: int = 0
    days_with_failures: int = 0
    failed_days: List[datetime.date] = dataclasses.field(default_factory=list)

    def record(self, day: datetime.date, outcome: DayOutcome):
        self.days_processed += 1
        if outcome is DayOutcome.COMPLETE:
            self.days_fully_valid += 1
        elif outcome is DayOutcome.DOWNLOADED:
            self.days_downloaded += 1
        else:
            self.days_with_failures += 1
            self.failed_days.append(day)


@dataclasses.dataclass
class AuditSummary:
    """Result of a read-only pass over a date range."""

    days_checked: int = 0
    days_complete: int = 0
    missing: int = 0
    corrupt: int = 0
    incomplete_days: List[datetime.date] = dataclasses.field(
        default_factory=list
    )

    def record(
        self,
        day: datetime.date,
        results: Iterable[VerificationResult],
    ):
        results = list(results)
        missing = results.count(VerificationResult.MISSING)
        corrupt = results.count(VerificationResult.CORRUPT)

        self.days_checked += 1
        self.missing += missing
        self.corrupt += corrupt
        if missing or corrupt:
            self.incomplete_days.append(day)
        else:
            self.days_complete += 1


# --- Ports (Interfaces) ---

class Verifier(ABC):
    """A port for testing the integrity of local archive files."""

    @abstractmethod
    def verify(self, path: Path) -> VerificationResult:
        """Classifies a single file. Must not modify it."""
        pass

    @abstractmethod
    def verify_all(
        self, paths: Sequence[Path]
    ) -> Dict[Path, VerificationResult]:
        """Classifies many files, possibly concurrently."""
        pass


class Downloader(ABC):
    """A port for any batch file downloader."""

    @abstractmethod
    def download_batch(self, items: Sequence[WorkItem]) -> bool:
        """
        Downloads every item to its local path.
        Returns True only if the whole batch succeeded.
        """
        pass
