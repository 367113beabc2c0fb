"""
binarius/toolchain/installer.py

Installation, activation and removal of tool versions.

This module composes the pipeline stages into the three user-level
operations. Each operation loads the installation registry fresh, performs
its stages in order and saves the registry once at the end; a failing stage
aborts the remaining ones.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import urlparse

from ..config.parser import load_config, save_config
from ..core.directory import (
    get_bin_dir,
    get_binarius_home,
    get_cache_dir,
    get_config_path,
    get_registry_path,
    get_tools_dir,
)
from ..core.download import DownloadProgress, fetch, fetch_text
from ..core.exceptions import (
    ActivationError,
    ArchiveError,
    BinariusError,
    ChecksumMismatchError,
    FilesystemError,
    UnsupportedArchitectureError,
    VersionListError,
    VersionNotInstalledError,
)
from ..core.filesystem import (
    atomic_write,
    directory_is_empty,
    extract_archive,
    safe_rmtree,
)
from ..core.platform import PlatformInfo, detect_platform
from ..core.registry import (
    InstallationRegistry,
    InstallStatus,
    ToolVersion,
    load_registry,
    save_registry,
)
from ..core.validation import LATEST, normalize_version, validate_tool_name
from ..core.verification import find_checksum, verify_file_hash
from ..tools.base import Tool
from ..tools.registry import ToolRegistry
from .linking import ActivationLinkManager

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install operation."""

    tool_version: ToolVersion
    """Registry record of the installed version"""

    already_installed: bool = False
    """Whether the version was already present (nothing downloaded)"""


@dataclass
class UninstallResult:
    """Result of an uninstall operation."""

    tool_version: ToolVersion
    """Registry record that was removed"""

    was_active: bool = False
    """Whether the removed version was the active one"""

    link_removed: bool = False
    """Whether the activation link was removed"""

    remaining_versions: List[str] = field(default_factory=list)
    """Versions of the tool still installed"""


class ToolInstaller:
    """
    Installs, activates and uninstalls tool versions.

    Install workflow:
    1. Validate the tool name and resolve 'latest'
    2. Download the release artifact into the cache
    3. Download the checksum list and verify the artifact
    4. Extract into <home>/tools/<tool>/<version>
    5. Record the version in the installation registry

    Example:
        >>> installer = ToolInstaller(default_tool_registry())
        >>> result = installer.install("terraform", "1.6.0")
        >>> installer.activate("terraform", result.tool_version.version)
    """

    def __init__(
        self,
        tool_registry: ToolRegistry,
        home: Optional[Path] = None,
        bin_dir: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        platform: Optional[PlatformInfo] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize installer.

        Args:
            tool_registry: Registry used to look up tool adapters
            home: Binarius home (default: resolved from environment)
            bin_dir: Activation link directory (default: resolved from environment)
            cache_dir: Download cache (default: resolved from environment)
            platform: Target platform (auto-detected if None)
            progress_callback: Optional callback for download progress
        """
        self.tool_registry = tool_registry
        self.home = Path(home) if home is not None else get_binarius_home()
        self.bin_dir = Path(bin_dir) if bin_dir is not None else get_bin_dir()
        self.cache_dir = Path(cache_dir) if cache_dir is not None else get_cache_dir(self.home)
        self._platform = platform
        self.progress_callback = progress_callback
        self.links = ActivationLinkManager()

    @property
    def platform(self) -> PlatformInfo:
        """Target platform, detected on first use."""
        if self._platform is None:
            try:
                self._platform = detect_platform()
            except RuntimeError as e:
                raise UnsupportedArchitectureError("Unsupported platform", str(e)) from e
        return self._platform

    @property
    def tools_dir(self) -> Path:
        return get_tools_dir(self.home)

    @property
    def registry_path(self) -> Path:
        return get_registry_path(self.home)

    @property
    def config_path(self) -> Path:
        return get_config_path(self.home)

    def link_path(self, tool_name: str) -> Path:
        """Activation link of a tool."""
        return self.bin_dir / tool_name

    def load_registry(self) -> InstallationRegistry:
        return load_registry(self.registry_path)

    # ========================================================================
    # Install
    # ========================================================================

    def resolve_version(self, tool: Tool, version: str) -> str:
        """
        Resolve 'latest' and normalize a version to its 'v' form.

        Raises:
            VersionListError: If 'latest' can't be resolved
            InvalidVersionError: If the version is malformed
        """
        if version == LATEST:
            logger.info(f"Resolving latest version for {tool.name}...")
            versions = tool.list_versions()
            if not versions:
                raise VersionListError(
                    "No versions found",
                    f"No versions available for {tool.name}",
                    "Contact the tool maintainer or check the official website",
                )
            version = versions[0]
            logger.info(f"Latest version: {version}")

        return normalize_version(version)

    def install(self, tool_name: str, version: str) -> InstallResult:
        """
        Download, verify, extract and register a tool version.

        Args:
            tool_name: Registered tool name (e.g. 'terraform')
            version: Version with or without leading 'v', or 'latest'

        Returns:
            InstallResult with the registry record

        Raises:
            BinariusError: If any stage fails
        """
        validate_tool_name(tool_name)
        tool = self.tool_registry.get(tool_name)
        version = self.resolve_version(tool, version)

        registry = self.load_registry()
        existing = registry.get_version(tool_name, version)
        if existing is not None:
            logger.info(f"{tool_name}@{version} is already installed")
            return InstallResult(tool_version=existing, already_installed=True)

        os_name, arch = self.platform.os, self.platform.arch
        if not tool.supports_arch(arch):
            raise UnsupportedArchitectureError(
                f"{tool_name} is not available for {self.platform.tag()}",
                f"supported architectures: {', '.join(tool.supported_archs)}",
            )

        download_url = tool.get_download_url(version, os_name, arch)
        archive_name = Path(urlparse(download_url).path).name
        archive_path = self.cache_dir / archive_name

        logger.info(f"Installing {tool_name}@{version} for {self.platform.tag()}...")
        fetch(download_url, archive_path, progress_callback=self.progress_callback)

        checksum = self._verify_download(tool, version, archive_path)

        version_dir = self.tools_dir / tool_name / version
        logger.info(f"Extracting {tool.archive_format.value} archive...")
        extract_archive(
            archive_path, version_dir, tool.archive_format, binary_name=tool.binary_name
        )

        binary_path = version_dir / tool.binary_name
        if not binary_path.is_file():
            raise ArchiveError(
                "Binary not found after extraction",
                f"Expected binary at {binary_path}, but it doesn't exist",
                "The downloaded archive may not contain the expected binary",
            )

        tool_version = ToolVersion(
            tool_name=tool_name,
            version=version,
            binary_path=str(binary_path),
            installed_at=datetime.now(timezone.utc),
            size_bytes=binary_path.stat().st_size,
            source_url=download_url,
            checksum=checksum,
            architecture=self.platform.tag(),
            status=InstallStatus.COMPLETE,
        )
        registry.add_version(tool_name, version, tool_version)
        save_registry(registry, self.registry_path)

        logger.info(f"Installed {tool_name}@{version} to {version_dir}")
        return InstallResult(tool_version=tool_version)

    def _verify_download(self, tool: Tool, version: str, archive_path: Path) -> str:
        """Fetch the checksum list, verify the artifact and return its digest."""
        checksum_url = tool.get_checksum_url(version, self.platform.os, self.platform.arch)
        checksum_path = self.cache_dir / f"{tool.name}-{version}.sha256sums"

        logger.info("Downloading checksums...")
        content = fetch_text(checksum_url)

        try:
            atomic_write(checksum_path, content)
        except OSError as e:
            raise FilesystemError(
                f"Failed to write checksum file: {checksum_path}", str(e)
            ) from e

        expected = find_checksum(content, archive_path.name)

        logger.info("Verifying download integrity...")
        try:
            verify_file_hash(archive_path, expected)
        except ChecksumMismatchError:
            archive_path.unlink(missing_ok=True)
            raise

        logger.info("Checksum verified")
        return expected

    # ========================================================================
    # Activation
    # ========================================================================

    def activate(self, tool_name: str, version: str) -> ToolVersion:
        """
        Make an installed version the active one.

        Args:
            tool_name: Tool name
            version: Version with or without leading 'v'

        Returns:
            Registry record of the activated version

        Raises:
            VersionNotInstalledError: If the version is not installed
            ActivationError: If the link can't be switched
        """
        validate_tool_name(tool_name)
        version = normalize_version(version)

        registry = self.load_registry()
        tool_version = registry.get_version(tool_name, version)
        if tool_version is None:
            raise VersionNotInstalledError(tool_name, version)

        link_path = self.link_path(tool_name)
        self.links.update_link(tool_version.binary_path, link_path)
        logger.info(f"Activated {tool_name}@{version}: {link_path} -> {tool_version.binary_path}")

        self._record_default(tool_name, version)
        return tool_version

    def _record_default(self, tool_name: str, version: str) -> None:
        try:
            config = load_config(self.config_path)
            config.set_default(tool_name, version)
            save_config(config, self.config_path)
        except BinariusError as e:
            logger.warning(f"Failed to update config.yaml with default version: {e.reason}")

    def active_version(self, tool_name: str) -> Optional[str]:
        """
        Version the activation link currently points at.

        Returns:
            The version whose registered binary is the link target, or None
            if the tool is not linked or the target is not a registered binary
        """
        target = self.links.resolve_link(self.link_path(tool_name))
        if target is None:
            return None

        registry = self.load_registry()
        for version in registry.list_versions(tool_name):
            record = registry.get_version(tool_name, version)
            if record is not None and Path(record.binary_path).absolute() == target:
                return version
        return None

    def verify_activation(self, tool_name: str, version: Optional[str] = None) -> None:
        """
        Check that the activation link points at a version's registered binary.

        Args:
            tool_name: Tool name
            version: Expected active version (default: the tool's default
                version recorded in config.yaml)

        Raises:
            ActivationError: If no version is given and none is recorded
            VersionNotInstalledError: If the version is not installed
            LinkVerificationError: If the link is missing or points elsewhere
        """
        if version is None:
            version = load_config(self.config_path).get_default(tool_name)
            if version is None:
                raise ActivationError(
                    f"No active version recorded for {tool_name}",
                    "config.yaml has no default for this tool",
                    f"Run 'binarius use {tool_name}@<version>' to activate a version",
                )
        version = normalize_version(version)
        record = self.load_registry().get_version(tool_name, version)
        if record is None:
            raise VersionNotInstalledError(tool_name, version)

        self.links.verify_link(self.link_path(tool_name), record.binary_path)

    # ========================================================================
    # Uninstall
    # ========================================================================

    def uninstall(self, tool_name: str, version: str) -> UninstallResult:
        """
        Remove an installed version.

        Deletes the version directory, drops the registry record and, if the
        version was active, removes the activation link.

        Raises:
            VersionNotInstalledError: If the version is not installed
            FilesystemError: If files can't be removed
        """
        validate_tool_name(tool_name)
        version = normalize_version(version)

        registry = self.load_registry()
        tool_version = registry.get_version(tool_name, version)
        if tool_version is None:
            raise VersionNotInstalledError(
                tool_name,
                version,
                action=f"Run 'binarius list {tool_name}' to see installed versions",
            )

        was_active = self.active_version(tool_name) == version

        version_dir = self.tools_dir / tool_name / version
        try:
            safe_rmtree(version_dir, require_prefix=self.tools_dir)
        except ValueError as e:
            raise FilesystemError(
                f"Failed to remove version directory: {version_dir}", str(e)
            ) from e
        logger.info(f"Removed files from {version_dir}")

        registry.remove_version(tool_name, version)
        save_registry(registry, self.registry_path)

        tool_dir = self.tools_dir / tool_name
        if directory_is_empty(tool_dir):
            try:
                tool_dir.rmdir()
                logger.debug(f"Removed empty tool directory: {tool_dir}")
            except OSError as e:
                logger.warning(f"Could not remove empty tool directory {tool_dir}: {e}")

        link_removed = False
        if was_active:
            link_removed = self.links.remove_link(self.link_path(tool_name))
            self._clear_default(tool_name, version)

        return UninstallResult(
            tool_version=tool_version,
            was_active=was_active,
            link_removed=link_removed,
            remaining_versions=registry.list_versions(tool_name),
        )

    def _clear_default(self, tool_name: str, version: str) -> None:
        try:
            config = load_config(self.config_path)
            if config.get_default(tool_name) == version:
                config.set_default(tool_name, "")
                save_config(config, self.config_path)
        except BinariusError as e:
            logger.warning(f"Failed to update config.yaml: {e.reason}")
