"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Optional

from binarius.core.directory import get_lock_dir
from binarius.core.download import DownloadProgress
from binarius.core.exceptions import BinariusError
from binarius.core.locking import LockManager
from binarius.core.validation import normalize_version, parse_tool_spec
from binarius.tools.registry import default_tool_registry
from binarius.toolchain.installer import ToolInstaller

logger = logging.getLogger(__name__)

COMMAND_LOCK_TIMEOUT = 30


# ============================================================================
# Output Formatting
# ============================================================================


def print_binarius_error(error: BinariusError):
    """Print an error in the Error/Reason/Action form to stderr."""
    print(str(error), file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = message.replace("✓", "[OK]").replace("⚠️", "WARNING:")
        print(safe_message, file=file)


def format_bytes(size: int) -> str:
    """
    Format a byte count with a binary unit.

    Example:
        >>> format_bytes(1536)
        '1.5 KB'
    """
    unit = 1024
    if size < unit:
        return f"{size} B"

    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit

    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def print_progress(progress: DownloadProgress):
    """Progress callback writing a single updating line to stderr."""
    sys.stderr.write(f"\r  {progress}")
    if progress.total_bytes and progress.bytes_downloaded >= progress.total_bytes:
        sys.stderr.write("\n")
    sys.stderr.flush()


# ============================================================================
# Argument Helpers
# ============================================================================


def parse_spec(spec: str, allow_latest: bool = False):
    """
    Parse a '<tool>@<version>' argument.

    Returns:
        Tuple of (tool_name, version); version is normalized unless it is
        'latest' and allow_latest is set
    """
    tool_name, version = parse_tool_spec(spec)
    if allow_latest and version == "latest":
        return tool_name, version
    return tool_name, normalize_version(version)


def confirm(prompt: str, stream=None) -> bool:
    """Ask a yes/no question; only 'y' or 'yes' confirms."""
    stream = stream or sys.stdin
    print(f"{prompt} [y/N]: ", end="", flush=True)
    response = stream.readline()
    return response.strip().lower() in ("y", "yes")


# ============================================================================
# Installer Construction
# ============================================================================


def make_installer(args=None) -> ToolInstaller:
    """
    Build a ToolInstaller with the built-in tools and environment paths.

    Download progress is shown unless --quiet was given.
    """
    quiet = bool(getattr(args, "quiet", False))
    return ToolInstaller(
        default_tool_registry(),
        progress_callback=None if quiet else print_progress,
    )


@contextmanager
def command_lock(installer: ToolInstaller, timeout: Optional[float] = None):
    """Hold the advisory lock of the installer's home for a mutating command."""
    manager = LockManager(get_lock_dir(installer.home))
    with manager.command_lock(timeout=timeout or COMMAND_LOCK_TIMEOUT):
        yield
