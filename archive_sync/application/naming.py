"""Mapping of (day, hour) to remote URLs and local paths."""

import datetime
from pathlib import Path
from typing import List, Union

from .domain import Resource

HOURS_PER_DAY = 24


class ResourceNamer:
    """
    Builds the resources of the hourly archive.

    The file name `<YYYY>-<MM>-<DD>-<H>.json.gz` (hour not zero-padded) is
    what the archive serves and is reused for the local copy, which is
    partitioned as `<download_dir>/<YYYY>/<MM>/`.
    """

    def __init__(self, base_url: str, download_dir: Union[str, Path]):
        self.base_url = base_url.rstrip("/")
        self.download_dir = Path(download_dir)

    @staticmethod
    def file_name(day: datetime.date, hour: int) -> str:
        return f"{day.year:04d}-{day.month:02d}-{day.day:02d}-{hour}.json.gz"

    def directory_for(self, day: datetime.date) -> Path:
        return self.download_dir / f"{day.year:04d}" / f"{day.month:02d}"

    def name(self, day: datetime.date, hour: int) -> Resource:
        file_name = self.file_name(day, hour)
        return Resource(
            day=day,
            hour=hour,
            url=f"{self.base_url}/{file_name}",
            local_path=self.directory_for(day) / file_name,
        )

    def name_all(self, day: datetime.date) -> List[Resource]:
        return [self.name(day, hour) for hour in range(HOURS_PER_DAY)]
