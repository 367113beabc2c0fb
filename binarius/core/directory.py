"""
Directory structure management for Binarius.

This module resolves the installation root and the directories derived from
it, honouring environment overrides.

Directory Structure:
    Binarius Home (~/.binarius/ or $BINARIUS_HOME):
        - tools/<tool>/<version>/ : Extracted tool installations
        - cache/                  : Downloaded archives and checksum lists
        - lock/                   : Advisory lock file for mutating commands
        - installation.json       : Installation registry
        - config.yaml             : User defaults and path overrides

    Bin Directory (~/.local/bin/ or $BINARIUS_BIN_DIR):
        - <tool>                  : Activation link to the active version
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

from binarius.core.exceptions import PathConfigurationError

logger = logging.getLogger(__name__)

HOME_ENV = "BINARIUS_HOME"
BIN_DIR_ENV = "BINARIUS_BIN_DIR"
CACHE_DIR_ENV = "BINARIUS_CACHE_DIR"

REGISTRY_FILENAME = "installation.json"
CONFIG_FILENAME = "config.yaml"


def _user_home() -> Path:
    try:
        return Path.home()
    except RuntimeError as e:
        raise PathConfigurationError(
            "Failed to determine the user home directory",
            str(e),
        ) from e


def expand_path(path: Union[str, Path]) -> Path:
    """
    Expand a leading '~' in a path.

    Args:
        path: Path that may start with '~' or '~/'

    Returns:
        Path with the home directory substituted

    Example:
        >>> expand_path("~/tools")
        PosixPath('/home/user/tools')
    """
    path_str = str(path)
    if path_str == "~":
        return _user_home()
    if path_str.startswith("~/"):
        return _user_home() / path_str[2:]
    return Path(path_str)


def get_binarius_home() -> Path:
    """
    Get the Binarius home directory.

    Returns:
        $BINARIUS_HOME if set, otherwise ~/.binarius
    """
    override = os.environ.get(HOME_ENV)
    if override:
        return expand_path(override)
    return _user_home() / ".binarius"


def get_bin_dir() -> Path:
    """
    Get the directory holding activation links.

    Returns:
        $BINARIUS_BIN_DIR if set, otherwise ~/.local/bin
    """
    override = os.environ.get(BIN_DIR_ENV)
    if override:
        return expand_path(override)
    return _user_home() / ".local" / "bin"


def get_cache_dir(home: Optional[Path] = None) -> Path:
    """
    Get the download cache directory.

    Returns:
        $BINARIUS_CACHE_DIR if set, otherwise <home>/cache
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return expand_path(override)
    return (home or get_binarius_home()) / "cache"


def get_tools_dir(home: Optional[Path] = None) -> Path:
    """Get the directory holding extracted tool versions."""
    return (home or get_binarius_home()) / "tools"


def get_version_dir(tool_name: str, version: str, home: Optional[Path] = None) -> Path:
    """Get the installation directory of one tool version."""
    return get_tools_dir(home) / tool_name / version


def get_registry_path(home: Optional[Path] = None) -> Path:
    """Get the path of the installation registry file."""
    return (home or get_binarius_home()) / REGISTRY_FILENAME


def get_config_path(home: Optional[Path] = None) -> Path:
    """Get the path of the user configuration file."""
    return (home or get_binarius_home()) / CONFIG_FILENAME


def get_lock_dir(home: Optional[Path] = None) -> Path:
    """Get the directory holding lock files."""
    return (home or get_binarius_home()) / "lock"


def ensure_directory_structure(
    home: Optional[Path] = None,
    bin_dir: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
) -> Dict[str, Path]:
    """
    Create the Binarius directory layout (idempotent).

    Args:
        home: Binarius home (default: resolved from environment)
        bin_dir: Activation link directory (default: resolved from environment)
        cache_dir: Download cache (default: resolved from environment)

    Returns:
        Mapping of directory role to created path

    Raises:
        PathConfigurationError: If a directory cannot be created
    """
    home = home or get_binarius_home()
    dirs = {
        "home": home,
        "tools": get_tools_dir(home),
        "cache": cache_dir or get_cache_dir(home),
        "lock": get_lock_dir(home),
        "bin": bin_dir or get_bin_dir(),
    }

    for role, path in dirs.items():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PathConfigurationError(
                f"Failed to create {role} directory: {path}",
                str(e),
                f"Ensure you have write permissions for {path.parent}",
            ) from e
        logger.debug(f"Ensured {role} directory: {path}")

    return dirs
