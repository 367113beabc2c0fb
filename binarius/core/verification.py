"""
Integrity verification for downloaded tool archives.

This module provides:
- Streaming SHA256 computation (files are never loaded whole)
- Constant-time comparison against an expected digest
- Parsing of checksum lists in the SHA256SUMS format
"""

import hashlib
import logging
import secrets
from pathlib import Path
from typing import Dict, Union

from binarius.core.exceptions import (
    ChecksumMismatchError,
    ChecksumNotFoundError,
    FilesystemError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def compute_file_hash(file_path: Union[str, Path], algorithm: str = "sha256") -> str:
    """
    Compute the hex digest of a file.

    Args:
        file_path: Path to file
        algorithm: Any algorithm known to hashlib (default 'sha256')

    Returns:
        Lowercase hex string of the digest

    Raises:
        FilesystemError: If the file cannot be opened or read
        ValueError: If the algorithm is unknown
    """
    file_path = Path(file_path)

    try:
        hasher = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    try:
        with open(file_path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                hasher.update(chunk)
    except OSError as e:
        raise FilesystemError(
            f"Failed to read file for checksum verification: {file_path}",
            str(e),
            f"Ensure the file exists and is readable: {file_path}",
        ) from e

    return hasher.hexdigest()


def normalize_digest(digest: str) -> str:
    """Lowercase a digest and strip surrounding whitespace."""
    return digest.strip().lower()


def verify_file_hash(file_path: Union[str, Path], expected_hash: str) -> str:
    """
    Verify that a file's SHA256 digest matches the expected value.

    The expected value may be in any case and may carry surrounding
    whitespace (as read from a checksum list).

    Args:
        file_path: Path to file
        expected_hash: Expected SHA256 as a hex string

    Returns:
        The computed digest

    Raises:
        ChecksumMismatchError: Digest differs; carries expected and actual
        FilesystemError: File cannot be read

    Example:
        >>> verify_file_hash(Path("terraform_1.6.0_linux_amd64.zip"), "B1F7...")
        'b1f7...'
    """
    expected = normalize_digest(expected_hash)
    actual = compute_file_hash(file_path, "sha256")

    # compare_digest rejects non-ASCII str arguments
    if not expected.isascii() or not secrets.compare_digest(actual, expected):
        logger.error(f"Checksum mismatch for {file_path}")
        raise ChecksumMismatchError(file_path, expected, actual)

    logger.debug(f"Checksum verified for {file_path}: {actual}")
    return actual


def parse_checksum_list(content: str) -> Dict[str, str]:
    """
    Parse a checksum list (SHA256SUMS format).

    Supports formats:
    - hash  filename
    - hash *filename
    - hash filename (with multiple spaces/tabs)

    Blank lines and '#' comments are ignored, as are malformed lines.

    Args:
        content: Text of the checksum list

    Returns:
        Dict of filename -> lowercase digest
    """
    checksums = {}

    for line_num, line in enumerate(content.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(maxsplit=1)
        if len(parts) != 2:
            logger.debug(f"Skipping malformed checksum line {line_num}: {line!r}")
            continue

        digest, filename = parts
        filename = filename.strip().lstrip("*")
        checksums[filename] = normalize_digest(digest)

    return checksums


def find_checksum(content: str, filename: str) -> str:
    """
    Look up the digest for one file in a checksum list.

    Raises:
        ChecksumNotFoundError: If the list has no entry for filename
    """
    checksums = parse_checksum_list(content)
    if filename not in checksums:
        raise ChecksumNotFoundError(
            "Failed to parse checksum file",
            f"checksum not found for {filename} in checksums file",
        )
    return checksums[filename]
