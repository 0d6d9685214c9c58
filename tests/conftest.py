"""Shared fixtures for archive_sync tests."""

import datetime
import gzip
import json
from pathlib import Path
from typing import List, Sequence

import pytest

from archive_sync.application.domain import Downloader, WorkItem
from archive_sync.application.naming import ResourceNamer
from archive_sync.infrastructure.verification import GzipVerifier

BASE_URL = "https://data.gharchive.org"


def gzip_payload(hour: int = 0) -> bytes:
    """A small, valid gzip member containing a JSON event line."""
    event = {"id": str(hour), "type": "PushEvent", "hour": hour}
    return gzip.compress((json.dumps(event) + "\n").encode() * 50)


def write_valid(path: Path, hour: int = 0) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(gzip_payload(hour))
    return path


def write_truncated(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = gzip_payload()
    path.write_bytes(data[: len(data) // 2])
    return path


class RecordingDownloader(Downloader):
    """Fake transport that records batches and writes valid files."""

    def __init__(self, succeed: bool = True, write_files: bool = True):
        self.succeed = succeed
        self.write_files = write_files
        self.batches: List[Sequence[WorkItem]] = []

    def download_batch(self, items: Sequence[WorkItem]) -> bool:
        self.batches.append(list(items))
        if self.succeed and self.write_files:
            for item in items:
                write_valid(item.local_path, item.resource.hour)
        return self.succeed


@pytest.fixture
def day() -> datetime.date:
    return datetime.date(2024, 6, 15)


@pytest.fixture
def namer(tmp_path: Path) -> ResourceNamer:
    return ResourceNamer(BASE_URL, tmp_path / "data")


@pytest.fixture
def verifier() -> GzipVerifier:
    return GzipVerifier(workers=4)
