"""HTTP implementation of the Downloader port."""

import concurrent.futures
import contextlib
import logging
import os
from pathlib import Path
from typing import Generator, List, Optional, Sequence, Tuple

import httpx
from tqdm import tqdm

from ..application.domain import Downloader, WorkItem
from ..application.exceptions import DownloadError

from .decorators import retry_on_network_error
from .transport_models import TransportOptions


def build_http_client(options: TransportOptions) -> httpx.Client:
    """Creates a client whose pool fits the configured concurrency."""
    return httpx.Client(
        headers={"User-Agent": options.user_agent},
        limits=httpx.Limits(
            max_connections=(
                options.max_concurrent_downloads
                * options.max_connections_per_server
            ),
        ),
        timeout=options.timeout,
        follow_redirects=True,
    )


def open_http_client(
    options: TransportOptions,
) -> Generator[httpx.Client, None, None]:
    """Resource initializer that closes the client on shutdown."""
    client = build_http_client(options)
    try:
        yield client
    finally:
        client.close()


class HttpBatchDownloader(Downloader):
    """
    A downloader that fetches a batch of files via HTTP on a thread pool.

    Each file is written to a `.part` sibling and renamed into place only
    once complete, so the final path never holds a partial download.
    """

    def __init__(
        self,
        client: httpx.Client,
        options: TransportOptions,
        show_progress: bool = True,
    ):
        """Initializes the downloader adapter."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.client = client
        self.options = options
        self.show_progress = show_progress

    @contextlib.contextmanager
    def _atomic_target(self, destination: Path) -> Generator[Path, None, None]:
        """Provides a temporary '.part' path, kept only for resuming."""
        part_path = destination.with_suffix(destination.suffix + ".part")
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            yield part_path
        finally:
            if not self.options.continue_partial:
                part_path.unlink(missing_ok=True)

    def _remote_info(self, url: str) -> Tuple[Optional[int], bool]:
        """Returns the remote size and whether byte ranges are supported."""
        response = self.client.head(url)
        if response.is_error:
            # Let the GET request report the actual failure.
            return None, False
        ranged = response.headers.get("Accept-Ranges", "").lower() == "bytes"
        try:
            length = int(response.headers.get("Content-Length", ""))
        except ValueError:
            return None, ranged
        return (length if length > 0 else None), ranged

    def _segments(self, total: int) -> List[Tuple[int, int]]:
        """Splits `total` bytes into inclusive ranges, or none if too small."""
        count = min(self.options.split, total // self.options.min_split_size)
        if count < 2:
            return []
        size = -(-total // count)
        return [
            (start, min(start + size, total) - 1)
            for start in range(0, total, size)
        ]

    def _stream_to(self, url: str, part_path: Path, offset: int = 0):
        """
        Streams the body into the part file, appending from `offset`.

        A part file the server cannot resume (416) is discarded and the
        download starts again from the first byte.
        """
        if offset:
            with self.client.stream(
                "GET", url, headers={"Range": f"bytes={offset}-"}
            ) as response:
                if response.status_code != 416:
                    self._write_response(response, part_path, offset)
                    return
            self.logger.info(f"Discarding stale {part_path.name}")
            part_path.unlink()

        with self.client.stream("GET", url) as response:
            self._write_response(response, part_path)

    def _write_response(
        self, response: httpx.Response, part_path: Path, offset: int = 0
    ):
        """Writes a streamed body, appending only to a honored resume."""
        response.raise_for_status()
        resumed = bool(offset) and response.status_code == 206
        if offset and not resumed:
            self.logger.info(
                f"Server ignored resume for {part_path.name}, restarting"
            )

        written = 0
        with open(part_path, "ab" if resumed else "wb") as f:
            for chunk in response.iter_raw(self.options.chunk_size):
                f.write(chunk)
                written += len(chunk)

        length = response.headers.get("Content-Length", "")
        if length.isdigit() and written != int(length):
            raise DownloadError(
                f"Size mismatch for {part_path.name}: {written} != {length}"
            )

    def _fetch_range(self, url: str, part_path: Path, start: int, end: int):
        """Downloads one byte range into its place in the part file."""
        headers = {"Range": f"bytes={start}-{end}"}

        with self.client.stream("GET", url, headers=headers) as response:
            response.raise_for_status()
            if response.status_code != 206:
                raise DownloadError(f"Server ignored range request for {url}")

            written = 0
            with open(part_path, "r+b") as f:
                f.seek(start)
                for chunk in response.iter_raw(self.options.chunk_size):
                    f.write(chunk)
                    written += len(chunk)

        if written != end - start + 1:
            raise DownloadError(
                f"Size mismatch for {part_path.name} bytes {start}-{end}: "
                f"got {written}"
            )

    def _fetch_segments(
        self,
        url: str,
        part_path: Path,
        total: int,
        segments: List[Tuple[int, int]],
    ):
        """Downloads all ranges of a file concurrently."""
        with open(part_path, "wb") as f:
            f.truncate(total)

        workers = min(len(segments), self.options.max_connections_per_server)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=workers
        ) as executor:
            futures = [
                executor.submit(self._fetch_range, url, part_path, start, end)
                for start, end in segments
            ]
            for future in futures:
                future.result()

    @retry_on_network_error
    def _execute_atomic_download(self, url: str, destination: Path):
        """Orchestrate the entire atomic download operation."""
        with self._atomic_target(destination) as part_path:
            if self.options.continue_partial and part_path.exists():
                offset = part_path.stat().st_size
                self.logger.info(
                    f"Resuming {destination.name} from byte {offset}"
                )
                self._stream_to(url, part_path, offset)
            else:
                total, ranged = self._remote_info(url)
                segments = self._segments(total) if ranged and total else []
                if segments:
                    self._fetch_segments(url, part_path, total, segments)
                else:
                    self._stream_to(url, part_path)
            os.replace(part_path, destination)

    def download(self, item: WorkItem) -> bool:
        """
        Downloads a single work item, reporting failure instead of raising.

        Args:
            item: The URL and local path to fetch.

        Returns:
            True if the file is now in place.
        """

        destination = item.local_path
        self.logger.debug(f"Downloading {item.url} -> {destination}")

        try:
            self._execute_atomic_download(item.url, destination)
        except (DownloadError, httpx.HTTPError, OSError) as e:
            self.logger.error(f"Failed to download {item.url}: {e}")
            return False
        except Exception:
            # One bad response must not take down the rest of the batch.
            self.logger.exception(f"Unexpected error downloading {item.url}")
            return False

        self.logger.debug(f"Finished downloading {destination.name}")
        return True

    def download_batch(self, items: Sequence[WorkItem]) -> bool:
        """
        Downloads all items with at most `max_concurrent_downloads` at once.

        Returns:
            True only if every item was downloaded.
        """

        if not items:
            return True

        workers = min(len(items), self.options.max_concurrent_downloads)
        failures = 0

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=workers
        ) as executor:
            futures = [executor.submit(self.download, item) for item in items]
            with tqdm(
                total=len(futures),
                unit="file",
                desc="Downloading",
                leave=False,
                disable=not self.show_progress,
            ) as progress_bar:
                for future in concurrent.futures.as_completed(futures):
                    if not future.result():
                        failures += 1
                    progress_bar.update(1)

        if failures:
            self.logger.error(f"{failures} of {len(items)} downloads failed")
        return failures == 0
