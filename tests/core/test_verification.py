"""
Tests for checksum verification.
"""

import hashlib

import pytest

from binarius.core.exceptions import (
    ChecksumMismatchError,
    ChecksumNotFoundError,
    FilesystemError,
)
from binarius.core.verification import (
    compute_file_hash,
    find_checksum,
    parse_checksum_list,
    verify_file_hash,
)


class TestComputeFileHash:
    """Test compute_file_hash."""

    def test_sha256(self, tmp_path):
        """Test digest matches hashlib for a multi-chunk file."""
        data = b"x" * 20000
        path = tmp_path / "file.bin"
        path.write_bytes(data)

        assert compute_file_hash(path) == hashlib.sha256(data).hexdigest()

    def test_unsupported_algorithm(self, tmp_path):
        """Test unknown algorithms raise ValueError."""
        path = tmp_path / "file.bin"
        path.write_bytes(b"x")

        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            compute_file_hash(path, "not-a-hash")

    def test_missing_file(self, tmp_path):
        """Test a missing file is a filesystem error."""
        with pytest.raises(FilesystemError):
            compute_file_hash(tmp_path / "missing")


class TestVerifyFileHash:
    """Test verify_file_hash."""

    def test_matching_digest(self, tmp_path):
        """Test the computed digest is returned on success."""
        path = tmp_path / "archive.zip"
        path.write_bytes(b"test content")
        expected = hashlib.sha256(b"test content").hexdigest()

        assert verify_file_hash(path, expected) == expected

    def test_case_and_whitespace_insensitive(self, tmp_path):
        """Test uppercase digests with surrounding whitespace are accepted."""
        path = tmp_path / "archive.zip"
        path.write_bytes(b"test content")
        expected = hashlib.sha256(b"test content").hexdigest()

        assert verify_file_hash(path, f"  {expected.upper()}\n") == expected

    def test_wrong_digest(self, tmp_path):
        """Test a wrong 64-char digest carries expected and actual."""
        path = tmp_path / "archive.zip"
        path.write_bytes(b"test content")
        wrong = "a" * 64

        with pytest.raises(ChecksumMismatchError) as exc_info:
            verify_file_hash(path, wrong)

        assert exc_info.value.expected == wrong
        assert exc_info.value.actual == hashlib.sha256(b"test content").hexdigest()
        assert "Checksum mismatch" in str(exc_info.value)

    def test_non_ascii_digest(self, tmp_path):
        """Test a non-ASCII expected value is a mismatch, not a crash."""
        path = tmp_path / "archive.zip"
        path.write_bytes(b"x")

        with pytest.raises(ChecksumMismatchError):
            verify_file_hash(path, "é" * 64)

    def test_missing_file(self, tmp_path):
        """Test a missing file is a filesystem error."""
        with pytest.raises(FilesystemError):
            verify_file_hash(tmp_path / "missing.zip", "a" * 64)


class TestChecksumList:
    """Test SHA256SUMS parsing."""

    CONTENT = (
        "# release checksums\n"
        "\n"
        f"{'A' * 64}  terraform_1.6.0_linux_amd64.zip\n"
        f"{'b' * 64} *terraform_1.6.0_darwin_arm64.zip\n"
        "malformed-line\n"
        f"{'c' * 64}\tterraform_1.6.0_windows_386.zip\n"
    )

    def test_parse(self):
        """Test every well-formed line is parsed and digests are lowercased."""
        checksums = parse_checksum_list(self.CONTENT)

        assert checksums == {
            "terraform_1.6.0_linux_amd64.zip": "a" * 64,
            "terraform_1.6.0_darwin_arm64.zip": "b" * 64,
            "terraform_1.6.0_windows_386.zip": "c" * 64,
        }

    def test_find(self):
        """Test looking up one file."""
        assert find_checksum(self.CONTENT, "terraform_1.6.0_darwin_arm64.zip") == "b" * 64

    def test_find_missing(self):
        """Test a missing entry raises ChecksumNotFoundError."""
        with pytest.raises(ChecksumNotFoundError, match="tofu_1.6.0_linux_amd64.zip"):
            find_checksum(self.CONTENT, "tofu_1.6.0_linux_amd64.zip")
