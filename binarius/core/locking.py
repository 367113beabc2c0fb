"""
Advisory locking for mutating Binarius commands.

The installation pipeline itself takes no locks. Commands that modify the
registry or activation links (install, use, uninstall) wrap their work in
LockManager.command_lock() so that two binarius processes sharing one home
directory do not interleave their read-modify-write cycles.

Usage:
    from binarius.core.locking import LockManager

    with LockManager(home / "lock").command_lock(timeout=30):
        registry = load_registry(path)
        ...
        save_registry(registry, path)
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from binarius.core.directory import get_lock_dir
from binarius.core.exceptions import FilesystemError, LockTimeoutError

logger = logging.getLogger(__name__)

LOCK_FILENAME = "binarius.lock"
DEFAULT_LOCK_TIMEOUT = 30


class LockManager:
    """
    Manages the advisory lock file for one Binarius home.

    Attributes:
        lock_dir: Directory where the lock file is stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: <home>/lock)
        """
        self.lock_dir = Path(lock_dir) if lock_dir is not None else get_lock_dir()

    @property
    def lock_path(self) -> Path:
        return self.lock_dir / LOCK_FILENAME

    @contextmanager
    def command_lock(self, timeout: float = DEFAULT_LOCK_TIMEOUT):
        """
        Hold the exclusive command lock for the duration of the block.

        Args:
            timeout: Maximum wait time in seconds

        Raises:
            LockTimeoutError: If the lock can't be acquired within timeout
        """
        try:
            self.lock_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Failed to create lock directory {self.lock_dir}",
                str(e),
                "Ensure the Binarius home directory is writable",
            ) from e

        lock = FileLock(self.lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired command lock: {self.lock_path}")
                yield
            logger.debug(f"Released command lock: {self.lock_path}")
        except Timeout as e:
            raise LockTimeoutError(
                "Could not acquire the binarius lock",
                f"{self.lock_path} is held by another process (waited {timeout}s)",
            ) from e
