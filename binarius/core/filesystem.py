"""
File system utilities for Binarius.

This module provides:
- Archive extraction (zip, tar.gz, raw binary) with path-containment checks
- Safe file operations (atomic writes, guarded recursive deletion)
- Path utilities

Archive format is always supplied by the caller, never sniffed from content.
"""

import gzip
import logging
import os
import shutil
import stat
import tarfile
import tempfile
import zipfile
import zlib
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from binarius.core.exceptions import (
    ArchiveError,
    FilesystemError,
    PathTraversalError,
    UnsupportedArchiveFormat,
)

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
CHUNK_SIZE = 64 * 1024

# Errors raised by the archive readers when the data itself is bad
_CORRUPT_ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    tarfile.TarError,
    gzip.BadGzipFile,
    zlib.error,
    EOFError,
)


# ============================================================================
# Archive Formats
# ============================================================================


class ArchiveFormat(Enum):
    """Packaging of a downloaded tool."""

    ZIP = "zip"
    TAR_GZ = "tar.gz"
    BINARY = "binary"

    @classmethod
    def from_string(cls, value: Union[str, "ArchiveFormat"]) -> "ArchiveFormat":
        """
        Parse a format name.

        Accepts 'zip', 'tar.gz', 'tgz', 'gzip-tar', 'binary' and 'raw-binary'.

        Raises:
            UnsupportedArchiveFormat: For any other name
        """
        if isinstance(value, cls):
            return value

        aliases = {
            "zip": cls.ZIP,
            "tar.gz": cls.TAR_GZ,
            "tgz": cls.TAR_GZ,
            "gzip-tar": cls.TAR_GZ,
            "binary": cls.BINARY,
            "raw-binary": cls.BINARY,
        }
        fmt = aliases.get(str(value).lower())
        if fmt is None:
            raise UnsupportedArchiveFormat(
                "Unsupported archive format",
                f"Archive format '{value}' is not supported "
                "(supported: zip, tar.gz, binary)",
            )
        return fmt


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is equal to or under parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def validate_archive_path(entry_name: str, destination: Path) -> Path:
    """
    Resolve where an archive entry would land and make sure it stays inside.

    The resolved target must be the destination itself or strictly nested
    under it. Absolute entry names and '..' segments that climb out are
    rejected.

    Args:
        entry_name: Name stored in the archive
        destination: Extraction destination

    Returns:
        Resolved absolute target path

    Raises:
        PathTraversalError: If the entry escapes the destination
    """
    root = destination.resolve()
    target = (root / entry_name).resolve()

    if not is_relative_to(target, root):
        logger.error(f"Blocked archive entry outside {root}: {entry_name!r}")
        raise PathTraversalError(entry_name, destination)

    return target


def make_executable(path: Union[str, Path]) -> None:
    """Set rwxr-xr-x on a file."""
    os.chmod(path, EXECUTABLE_MODE)


# ============================================================================
# Archive Extraction
# ============================================================================


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    archive_format: Union[str, ArchiveFormat],
    binary_name: Optional[str] = None,
) -> List[Path]:
    """
    Extract an archive (or install a raw binary) into a directory.

    Entries are processed in archive order. Every entry is checked with
    validate_archive_path before anything is written for it. Directory
    entries create directories, regular files are written and made
    executable, and every other entry type (symlinks, hard links, devices)
    is skipped.

    A traversal violation aborts the call; files written for earlier entries
    are left in place. The caller owns cleanup before retrying.

    Args:
        archive_path: Path to the downloaded file
        destination: Directory to extract into (created if missing)
        archive_format: ArchiveFormat or one of its names
        binary_name: Target file name, required for ArchiveFormat.BINARY

    Returns:
        Paths of the regular files written

    Raises:
        UnsupportedArchiveFormat: Unknown format
        ArchiveError: Archive missing, unreadable or corrupt
        PathTraversalError: An entry resolves outside destination
        FilesystemError: Writing to destination failed

    Example:
        >>> extract_archive("terraform_1.6.0_linux_amd64.zip", "tools/terraform/v1.6.0", "zip")
        [PosixPath('.../tools/terraform/v1.6.0/terraform')]
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    archive_format = ArchiveFormat.from_string(archive_format)

    if not archive_path.is_file():
        raise ArchiveError(
            f"Failed to open archive: {archive_path}",
            "File does not exist",
            "Ensure the download completed and the file was not removed",
        )

    logger.debug(f"Extracting {archive_path} ({archive_format.value}) to {destination}")

    if archive_format is ArchiveFormat.ZIP:
        written = _extract_zip(archive_path, destination)
    elif archive_format is ArchiveFormat.TAR_GZ:
        written = _extract_tar_gz(archive_path, destination)
    else:
        written = _install_binary(archive_path, destination, binary_name)

    logger.info(f"Extracted {len(written)} file(s) to {destination}")
    return written


def _ensure_destination(destination: Path) -> None:
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            f"Failed to create destination directory: {destination}",
            str(e),
            "Ensure you have write permissions for the directory",
        ) from e


def _write_entry(source: BinaryIO, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "wb") as out:
        shutil.copyfileobj(source, out, CHUNK_SIZE)
    make_executable(target)


def _extract_zip(archive_path: Path, destination: Path) -> List[Path]:
    """Extract a ZIP archive."""
    try:
        zf = zipfile.ZipFile(archive_path, "r")
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError(
            f"Failed to open ZIP archive: {archive_path}",
            str(e),
            "Ensure the file is a valid ZIP archive and is not corrupted",
        ) from e

    written = []
    with zf:
        _ensure_destination(destination)

        for info in zf.infolist():
            target = validate_archive_path(info.filename, destination)
            file_type = stat.S_IFMT(info.external_attr >> 16)

            try:
                if info.is_dir() or file_type == stat.S_IFDIR:
                    target.mkdir(parents=True, exist_ok=True)
                elif file_type and file_type != stat.S_IFREG:
                    logger.debug(f"Skipping non-regular zip entry: {info.filename}")
                else:
                    with zf.open(info) as source:
                        _write_entry(source, target)
                    written.append(target)
            except _CORRUPT_ARCHIVE_ERRORS as e:
                raise ArchiveError(
                    f"Failed to read {info.filename} from {archive_path}",
                    str(e),
                    "The archive is corrupted. Delete it and download again.",
                ) from e
            except OSError as e:
                raise FilesystemError(
                    f"Failed to extract {info.filename} to {target}",
                    str(e),
                ) from e

    return written


def _extract_tar_gz(archive_path: Path, destination: Path) -> List[Path]:
    """Extract a gzip-compressed tar archive."""
    try:
        tar = tarfile.open(archive_path, "r:gz")
    except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
        raise ArchiveError(
            f"Failed to open tar.gz archive: {archive_path}",
            str(e),
            "Ensure the file is a valid gzip-compressed tar archive",
        ) from e

    written = []
    with tar:
        # Read every header up front so a corrupt archive fails before any write
        try:
            members = tar.getmembers()
        except _CORRUPT_ARCHIVE_ERRORS as e:
            raise ArchiveError(
                f"Failed to read tar archive: {archive_path}",
                str(e),
                "Ensure the file is a valid gzip-compressed tar archive",
            ) from e

        _ensure_destination(destination)

        for member in members:
            target = validate_archive_path(member.name, destination)

            try:
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isreg():
                    source = tar.extractfile(member)
                    with source:
                        _write_entry(source, target)
                    written.append(target)
                else:
                    logger.debug(f"Skipping non-regular tar entry: {member.name}")
            except _CORRUPT_ARCHIVE_ERRORS as e:
                raise ArchiveError(
                    f"Failed to read {member.name} from {archive_path}",
                    str(e),
                    "The archive is corrupted. Delete it and download again.",
                ) from e
            except OSError as e:
                raise FilesystemError(
                    f"Failed to extract {member.name} to {target}",
                    str(e),
                ) from e

    return written


def _install_binary(
    binary_path: Path, destination: Path, binary_name: Optional[str]
) -> List[Path]:
    """Copy a raw executable into destination under its tool binary name."""
    if not binary_name:
        raise ValueError("binary_name is required for raw binary installs")

    target = validate_archive_path(binary_name, destination)
    _ensure_destination(destination)

    try:
        shutil.copyfile(binary_path, target)
        make_executable(target)
    except OSError as e:
        raise FilesystemError(
            "Failed to copy binary",
            f"{binary_path} -> {target}: {e}",
            "Ensure you have write permissions for the tools directory",
        ) from e

    return [target]


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The temp file lives in the destination's directory so the final rename
    never crosses filesystems. Readers see either the old or the new file.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Example:
        >>> atomic_write('installation.json', '{"tools": {}}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

        os.chmod(temp_path, 0o644)
        temp_path.replace(file_path)

    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, refusing to touch anything outside require_prefix.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be strictly under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('~/.binarius/tools/terraform/v1.5.0', require_prefix='~/.binarius/tools')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if path == prefix or not is_relative_to(path, prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}", "Expected a directory")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory: {path}", str(e)) from e


def directory_is_empty(path: Union[str, Path]) -> bool:
    """True if path is an existing directory with no entries."""
    path = Path(path)
    return path.is_dir() and not any(path.iterdir())


__all__ = [
    "ArchiveFormat",
    "is_relative_to",
    "validate_archive_path",
    "make_executable",
    "extract_archive",
    "atomic_write",
    "safe_rmtree",
    "directory_is_empty",
]
