"""Tests for the gzip integrity verifier."""

import errno
import gzip
from pathlib import Path

from conftest import gzip_payload, write_truncated, write_valid

from archive_sync.application.domain import VerificationResult
from archive_sync.infrastructure.verification import GzipVerifier


def test_missing_file(verifier, tmp_path):
    assert verifier.verify(tmp_path / "nope.json.gz") is VerificationResult.MISSING


def test_directory_counts_as_missing(verifier, tmp_path):
    assert verifier.verify(tmp_path) is VerificationResult.MISSING


def test_valid_file(verifier, tmp_path):
    path = write_valid(tmp_path / "ok.json.gz")
    assert verifier.verify(path) is VerificationResult.VALID


def test_multi_member_file_is_valid(verifier, tmp_path):
    path = tmp_path / "multi.json.gz"
    path.write_bytes(gzip_payload(1) + gzip_payload(2))
    assert verifier.verify(path) is VerificationResult.VALID


def test_truncated_file_is_corrupt(verifier, tmp_path):
    path = write_truncated(tmp_path / "partial.json.gz")
    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_empty_file_is_corrupt(verifier, tmp_path):
    path = tmp_path / "empty.json.gz"
    path.write_bytes(b"")
    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_not_gzip_is_corrupt(verifier, tmp_path):
    path = tmp_path / "error.json.gz"
    path.write_text("<html>502 Bad Gateway</html>")
    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_crc_mismatch_is_corrupt(verifier, tmp_path):
    data = bytearray(gzip_payload())
    # The trailer is CRC32 followed by ISIZE; flip a bit of the CRC.
    data[-8] ^= 0x01
    path = tmp_path / "crc.json.gz"
    path.write_bytes(bytes(data))

    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_verify_has_no_side_effects(verifier, tmp_path):
    path = write_truncated(tmp_path / "partial.json.gz")
    before = path.read_bytes()

    verifier.verify(path)

    assert path.exists()
    assert path.read_bytes() == before


def test_unreadable_file_is_treated_as_corrupt(verifier, tmp_path, monkeypatch):
    path = write_valid(tmp_path / "locked.json.gz")

    def deny(*args, **kwargs):
        raise PermissionError("permission denied")

    monkeypatch.setattr(gzip, "open", deny)

    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_verify_all_maps_every_path(tmp_path):
    verifier = GzipVerifier(workers=2)
    valid = write_valid(tmp_path / "a.json.gz")
    corrupt = write_truncated(tmp_path / "b.json.gz")
    missing = tmp_path / "c.json.gz"

    results = verifier.verify_all([valid, corrupt, missing])

    assert results == {
        valid: VerificationResult.VALID,
        corrupt: VerificationResult.CORRUPT,
        missing: VerificationResult.MISSING,
    }


def test_error_while_checking_existence_is_treated_as_corrupt(
    verifier, tmp_path, monkeypatch
):
    path = tmp_path / "2024" / "06" / "2024-06-15-0.json.gz"

    def io_error(self):
        raise OSError(errno.EIO, "Input/output error")

    monkeypatch.setattr(Path, "is_file", io_error)

    assert verifier.verify(path) is VerificationResult.CORRUPT


def test_overlong_path_does_not_raise(verifier, tmp_path):
    path = tmp_path / ("x" * 300) / "2024-06-15-0.json.gz"

    results = verifier.verify_all([path])

    assert results[path] in (
        VerificationResult.MISSING,
        VerificationResult.CORRUPT,
    )
