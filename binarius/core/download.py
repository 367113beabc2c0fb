"""
Network fetcher for tool archives, checksum lists and version indexes.

This module provides:
- Streaming HTTPS downloads straight to disk (no full-payload buffering)
- A deadline bounding the whole transfer, not just each socket read
- Cleanup of partially written files when a transfer fails
- Progress reporting (bytes, percentage, speed, ETA)
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Union

import requests
from requests.exceptions import RequestException

from binarius.core.exceptions import FilesystemError, HTTPStatusError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300  # seconds, whole transfer
METADATA_TIMEOUT = 30
CONNECT_TIMEOUT = 10  # per connection attempt
READ_TIMEOUT = 30  # per socket read during a transfer
CHUNK_SIZE = 8192
USER_AGENT = "binarius-version-manager"


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def _get(
    url: str, timeout: Union[float, Tuple[float, float]], stream: bool
) -> requests.Response:
    try:
        response = requests.get(
            url,
            stream=stream,
            timeout=timeout,
            allow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
    except RequestException as e:
        raise NetworkError(f"Failed to download file from {url}", str(e)) from e

    if not 200 <= response.status_code < 300:
        response.close()
        raise HTTPStatusError(url, response.status_code, response.reason or "")

    return response


def fetch(
    url: str,
    destination: Union[str, Path],
    timeout: float = DEFAULT_TIMEOUT,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """
    Stream a remote resource to a local file.

    The destination file is only created once the server has answered with a
    2xx status. If anything fails after that, the partial file is removed
    before the error propagates.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Upper bound in seconds for the whole operation
        progress_callback: Optional callback for progress updates

    Returns:
        Path to downloaded file

    Raises:
        HTTPStatusError: Server answered with a non-2xx status
        NetworkError: Connection failed, dropped or exceeded the deadline
        FilesystemError: Destination could not be written

    Example:
        >>> fetch(
        ...     "https://releases.hashicorp.com/terraform/1.6.0/terraform_1.6.0_linux_amd64.zip",
        ...     Path("~/.binarius/cache/terraform_1.6.0_linux_amd64.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    deadline = time.monotonic() + timeout

    logger.info(f"Downloading from {url}")
    # A stalled socket fails after READ_TIMEOUT; the deadline bounds the rest
    response = _get(
        url,
        timeout=(min(CONNECT_TIMEOUT, timeout), min(READ_TIMEOUT, timeout)),
        stream=True,
    )

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        response.close()
        raise FilesystemError(
            f"Failed to create destination directory: {destination.parent}",
            str(e),
            "Ensure you have write permissions for the cache directory",
        ) from e

    content_length = response.headers.get("content-length")
    try:
        total_size = int(content_length) if content_length else 0
    except ValueError:
        logger.debug(f"Ignoring invalid content-length: {content_length!r}")
        total_size = 0

    downloaded = 0
    start_time = time.monotonic()
    last_progress_time = start_time

    try:
        with response, open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise NetworkError(
                        "Download interrupted",
                        f"Transfer of {url} exceeded {timeout}s",
                        "Network connection may be slow. Please try again.",
                    )
                if not chunk:
                    continue

                f.write(chunk)
                downloaded += len(chunk)

                # Report progress (max once per 0.5 seconds to avoid spam)
                current_time = time.monotonic()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5 or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    speed = downloaded / elapsed if elapsed > 0 else 0
                    remaining = total_size - downloaded if total_size > 0 else 0
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size if total_size > 0 else downloaded,
                            percentage=(downloaded / total_size * 100)
                            if total_size > 0
                            else 0,
                            speed_bps=speed,
                            eta_seconds=remaining / speed if speed > 0 else 0,
                        )
                    )
                    last_progress_time = current_time

    except RequestException as e:
        _discard_partial(destination)
        raise NetworkError(
            "Download interrupted",
            str(e),
            "Network connection may have been lost. Please try again.",
        ) from e
    except OSError as e:
        _discard_partial(destination)
        raise FilesystemError(
            f"Failed to write downloaded file: {destination}",
            str(e),
            "Disk may be full or write permissions may have changed",
        ) from e
    except BaseException:
        _discard_partial(destination)
        raise

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _discard_partial(destination: Path) -> None:
    try:
        destination.unlink(missing_ok=True)
        logger.debug(f"Removed partial download: {destination}")
    except OSError as e:
        logger.warning(f"Could not remove partial download {destination}: {e}")


def fetch_text(url: str, timeout: float = METADATA_TIMEOUT) -> str:
    """
    Fetch a small text document (e.g. a SHA256SUMS file).

    Raises:
        HTTPStatusError: Server answered with a non-2xx status
        NetworkError: Connection failed
    """
    response = _get(url, timeout=timeout, stream=False)
    return response.text


def fetch_json(url: str, timeout: float = METADATA_TIMEOUT) -> Any:
    """
    Fetch and decode a JSON document (release indexes).

    Raises:
        HTTPStatusError: Server answered with a non-2xx status
        NetworkError: Connection failed or body is not JSON
    """
    response = _get(url, timeout=timeout, stream=False)
    try:
        return response.json()
    except ValueError as e:
        raise NetworkError(f"Failed to parse JSON from {url}", str(e)) from e


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
