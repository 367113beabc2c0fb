"""
binarius/toolchain/linking.py

Activation link management.

Each tool has at most one activation link, <bin_dir>/<tool>, which is a
symlink to the binary of exactly one installed version. Switching versions
replaces the link atomically: a new symlink is created under a temporary
name in the same directory and renamed over the old one, so a process that
executes the tool at any moment sees either the previous or the new target,
never a missing link.
"""

import os
import secrets
from pathlib import Path
from typing import Optional, Union
import logging

from ..core.exceptions import ActivationError, LinkExistsError, LinkVerificationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ActivationLinkManager:
    """Creates, switches, removes and checks activation symlinks."""

    def create_link(self, source: PathLike, link_path: PathLike) -> Path:
        """
        Create a new activation link.

        Args:
            source: Binary the link should point to
            link_path: Path of the link to create

        Returns:
            Path to created link

        Raises:
            ActivationError: If source doesn't exist or the link can't be created
            LinkExistsError: If anything (including a dangling link) is at link_path
        """
        source = self._check_source(source)
        link_path = Path(link_path).absolute()

        if os.path.lexists(link_path):
            raise LinkExistsError(
                f"Failed to create link {link_path}",
                f"{link_path} already exists",
            )

        self._ensure_link_dir(link_path)

        try:
            os.symlink(source, link_path)
        except OSError as e:
            logger.error(f"Failed to create link {link_path} -> {source}: {e}")
            raise ActivationError(
                f"Failed to create link {link_path}",
                f"symlink to {source} failed: {e}",
            ) from e

        logger.debug(f"Created symlink: {link_path} -> {source}")
        return link_path

    def update_link(self, source: PathLike, link_path: PathLike) -> Path:
        """
        Point an activation link at a new source, creating it if needed.

        The replacement is a rename of a fully formed symlink, so the link
        is never observed missing once it has been created.

        Args:
            source: Binary the link should point to
            link_path: Path of the link to create or replace

        Returns:
            Path to updated link

        Raises:
            ActivationError: If source doesn't exist or the switch fails
        """
        source = self._check_source(source)
        link_path = Path(link_path).absolute()
        self._ensure_link_dir(link_path)

        temp_link = link_path.parent / f".{link_path.name}.{secrets.token_hex(8)}.tmp"

        try:
            os.symlink(source, temp_link)
        except OSError as e:
            raise ActivationError(
                f"Failed to update link {link_path}",
                f"could not create temporary link {temp_link}: {e}",
            ) from e

        try:
            os.replace(temp_link, link_path)
        except OSError as e:
            try:
                temp_link.unlink()
            except OSError:
                logger.warning(f"Could not remove temporary link {temp_link}")
            logger.error(f"Failed to update link {link_path} -> {source}: {e}")
            raise ActivationError(
                f"Failed to update link {link_path}",
                f"rename of {temp_link} failed: {e}",
            ) from e

        logger.debug(f"Updated symlink: {link_path} -> {source}")
        return link_path

    def remove_link(self, link_path: PathLike) -> bool:
        """
        Remove an activation link.

        Args:
            link_path: Path to link to remove

        Returns:
            True if a link was removed, False if nothing was there

        Raises:
            ActivationError: If the path is not a symlink or can't be removed
        """
        link_path = Path(link_path)

        if not os.path.lexists(link_path):
            return False

        if not link_path.is_symlink():
            raise ActivationError(
                f"Failed to remove link {link_path}",
                f"{link_path} is not a symlink",
                "Remove the file manually if it is not needed",
            )

        try:
            link_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ActivationError(
                f"Failed to remove link {link_path}",
                str(e),
            ) from e

        logger.debug(f"Removed link: {link_path}")
        return True

    def verify_link(self, link_path: PathLike, expected_source: PathLike) -> None:
        """
        Check that an activation link points at the expected binary.

        Drift is reported, never repaired.

        Raises:
            LinkVerificationError: If the link is missing or points elsewhere
        """
        link_path = Path(link_path)
        expected = Path(expected_source).absolute()

        actual = self.resolve_link(link_path)
        if actual != expected:
            raise LinkVerificationError(link_path, expected, actual)

    def resolve_link(self, link_path: PathLike) -> Optional[Path]:
        """
        Read the target of a link.

        Args:
            link_path: Path to link

        Returns:
            Absolute target path, or None if link_path is not a symlink
        """
        link_path = Path(link_path)
        if not link_path.is_symlink():
            return None

        try:
            target = Path(os.readlink(link_path))
        except OSError as e:
            logger.debug(f"Failed to resolve link {link_path}: {e}")
            return None

        if not target.is_absolute():
            target = link_path.absolute().parent / target
        return target

    def is_broken_link(self, link_path: PathLike) -> bool:
        """
        Check if link is broken (target doesn't exist).

        Args:
            link_path: Path to check

        Returns:
            True if link_path is a symlink whose target is missing
        """
        target = self.resolve_link(link_path)
        return target is not None and not target.exists()

    @staticmethod
    def _check_source(source: PathLike) -> Path:
        source = Path(source).absolute()
        if not source.exists():
            raise ActivationError(
                f"Cannot link to {source}",
                f"target does not exist: {source}",
                "Reinstall the tool version",
            )
        return source

    @staticmethod
    def _ensure_link_dir(link_path: Path) -> None:
        try:
            link_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ActivationError(
                f"Failed to create link directory {link_path.parent}",
                str(e),
                f"Ensure {link_path.parent} is a writable directory (check BINARIUS_BIN_DIR)",
            ) from e
