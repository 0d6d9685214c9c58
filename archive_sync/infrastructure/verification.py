"""
Infrastructure adapter for testing the integrity of gzip archives.
"""

import concurrent.futures
import gzip
import logging
import zlib
from pathlib import Path
from typing import Dict, Sequence

from ..application.domain import VerificationResult, Verifier
from ..application.exceptions import VerificationError


class GzipVerifier(Verifier):
    """
    An adapter that implements the Verifier port by test-decompressing the
    whole gzip stream, as `gzip -t` does.

    Decompressing to the end checks the deflate data together with the CRC32
    and length trailer, which catches truncated downloads and flipped bits.
    The JSON payload itself is not parsed.
    """

    def __init__(self, workers: int = 8, chunk_size: int = 1024 * 1024):
        """Initializes the verifier."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.workers = workers
        self.chunk_size = chunk_size

    def _test_stream(self, path: Path):
        """Decompresses the file and discards the output."""
        with gzip.open(path, "rb") as f:
            while f.read(self.chunk_size):
                pass

    def _classify(self, path: Path) -> VerificationResult:
        try:
            if not path.is_file():
                return VerificationResult.MISSING
            if path.stat().st_size == 0:
                return VerificationResult.CORRUPT
            self._test_stream(path)
        except (gzip.BadGzipFile, EOFError, zlib.error) as e:
            self.logger.debug(f"{path.name} failed gzip test: {e}")
            return VerificationResult.CORRUPT
        except OSError as e:
            raise VerificationError(f"Could not read {path}: {e}") from e

        return VerificationResult.VALID

    def verify(self, path: Path) -> VerificationResult:
        """
        Classifies a local archive as missing, corrupt or valid.

        A file that cannot be read at all is treated as corrupt, so that it
        is downloaded again rather than silently kept.

        Args:
            path: Location of the archive.

        Returns:
            The VerificationResult for the file.
        """

        try:
            return self._classify(Path(path))
        except VerificationError as e:
            self.logger.warning(f"{e}. Treating it as corrupted")
            return VerificationResult.CORRUPT

    def verify_all(
        self, paths: Sequence[Path]
    ) -> Dict[Path, VerificationResult]:
        """Verifies many files on a bounded thread pool."""

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.workers
        ) as executor:
            results = executor.map(self.verify, paths)
            return dict(zip(paths, results))
