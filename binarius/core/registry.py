"""
Installation registry tracking every installed (tool, version) pair.

The registry is a plain in-memory mapping of tool name -> version -> ToolVersion.
It is loaded fresh for each invocation, mutated in memory and persisted
explicitly with save_registry(), which replaces the file atomically.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from packaging.version import InvalidVersion, Version

from binarius.core.exceptions import RegistryError
from binarius.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


class InstallStatus(str, Enum):
    """State of an installed tool version."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    BROKEN = "broken"


@dataclass
class ToolVersion:
    """
    One installed instance of a tool.

    Attributes:
        tool_name: Tool name (e.g. 'terraform')
        version: Normalized version with leading 'v' (e.g. 'v1.6.0')
        binary_path: Absolute path of the installed executable
        installed_at: Installation time
        size_bytes: Size of the binary in bytes
        source_url: URL the archive was downloaded from
        checksum: SHA256 of the downloaded archive
        architecture: Platform tag in 'os/arch' form (e.g. 'linux/amd64')
        status: Installation state
    """

    tool_name: str = ""
    version: str = ""
    binary_path: str = ""
    installed_at: Optional[datetime] = None
    size_bytes: int = 0
    source_url: str = ""
    checksum: str = ""
    architecture: str = ""
    status: InstallStatus = InstallStatus.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON, omitting empty optional fields."""
        data: Dict[str, Any] = {}
        if self.tool_name:
            data["tool_name"] = self.tool_name
        if self.version:
            data["version"] = self.version
        data["binary_path"] = self.binary_path
        if self.installed_at is not None:
            data["installed_at"] = self.installed_at.isoformat()
        if self.size_bytes:
            data["size_bytes"] = self.size_bytes
        if self.source_url:
            data["source_url"] = self.source_url
        if self.checksum:
            data["checksum"] = self.checksum
        if self.architecture:
            data["architecture"] = self.architecture
        data["status"] = InstallStatus(self.status).value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolVersion":
        """
        Build a ToolVersion from its JSON form.

        Raises:
            ValueError: If a field has an unusable value
        """
        installed_at = data.get("installed_at")
        return cls(
            tool_name=data.get("tool_name", ""),
            version=data.get("version", ""),
            binary_path=data.get("binary_path", ""),
            installed_at=datetime.fromisoformat(installed_at) if installed_at else None,
            size_bytes=int(data.get("size_bytes", 0)),
            source_url=data.get("source_url", ""),
            checksum=data.get("checksum", ""),
            architecture=data.get("architecture", ""),
            status=InstallStatus(data.get("status", InstallStatus.COMPLETE.value)),
        )


def _version_sort_key(version: str):
    try:
        return (1, Version(version))
    except InvalidVersion:
        return (0, version)


@dataclass
class InstallationRegistry:
    """
    In-memory installation registry.

    Invariant: a tool key never maps to an empty version mapping.

    Example:
        >>> registry = load_registry(path)
        >>> registry.add_version("terraform", "v1.6.0", tool_version)
        >>> save_registry(registry, path)
    """

    tools: Dict[str, Dict[str, ToolVersion]] = field(default_factory=dict)

    def add_version(self, tool_name: str, version: str, tool_version: ToolVersion) -> None:
        """Insert or overwrite a version record."""
        self.tools.setdefault(tool_name, {})[version] = tool_version

    def remove_version(self, tool_name: str, version: str) -> None:
        """Delete a version record; drop the tool once it has no versions left."""
        versions = self.tools.get(tool_name)
        if versions is None:
            return

        versions.pop(version, None)
        if not versions:
            del self.tools[tool_name]

    def get_version(self, tool_name: str, version: str) -> Optional[ToolVersion]:
        """Return the record for a version, or None."""
        return self.tools.get(tool_name, {}).get(version)

    def set_status(self, tool_name: str, version: str, status: InstallStatus) -> None:
        """
        Update the status of an installed version.

        Raises:
            KeyError: If the version is not registered
        """
        record = self.get_version(tool_name, version)
        if record is None:
            raise KeyError(f"{tool_name}@{version} is not registered")
        record.status = InstallStatus(status)

    def list_versions(self, tool_name: str) -> List[str]:
        """Installed versions of a tool, newest first."""
        return sorted(
            self.tools.get(tool_name, {}), key=_version_sort_key, reverse=True
        )

    def list_tools(self) -> List[str]:
        """Names of all tools with at least one installed version."""
        return sorted(self.tools)

    def is_installed(self, tool_name: str, version: str) -> bool:
        """True if the version is recorded for the tool."""
        return version in self.tools.get(tool_name, {})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if not self.tools:
            return {}
        return {
            "tools": {
                tool_name: {
                    version: record.to_dict() for version, record in versions.items()
                }
                for tool_name, versions in self.tools.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstallationRegistry":
        """
        Build a registry from its JSON form.

        Raises:
            ValueError: If the document does not have the registry shape
        """
        if not isinstance(data, dict):
            raise ValueError("registry document must be a JSON object")

        tools_data = data.get("tools") or {}
        if not isinstance(tools_data, dict):
            raise ValueError("'tools' must be a JSON object")

        registry = cls()
        for tool_name, versions in tools_data.items():
            if not isinstance(versions, dict):
                raise ValueError(f"versions of '{tool_name}' must be a JSON object")
            for version, record in versions.items():
                if not isinstance(record, dict):
                    raise ValueError(f"record {tool_name}@{version} must be a JSON object")
                registry.add_version(tool_name, version, ToolVersion.from_dict(record))

        return registry


def load_registry(path: Union[str, Path]) -> InstallationRegistry:
    """
    Load the registry from disk.

    Args:
        path: Path to installation.json

    Returns:
        The loaded registry, or an empty one if the file does not exist

    Raises:
        RegistryError: If the file exists but cannot be read or parsed
    """
    path = Path(path)

    if not path.exists():
        logger.debug(f"Registry file not found, starting empty: {path}")
        return InstallationRegistry()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        registry = InstallationRegistry.from_dict(data)
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.error(f"Failed to parse registry {path}: {e}")
        raise RegistryError(
            "Failed to load installation registry",
            f"failed to parse registry file {path}: {e}",
            f"Fix or remove {path}, then reinstall your tools",
        ) from e
    except OSError as e:
        raise RegistryError(
            "Failed to load installation registry",
            f"failed to read registry file {path}: {e}",
        ) from e

    logger.debug(f"Loaded registry with {len(registry.tools)} tool(s) from {path}")
    return registry


def save_registry(registry: InstallationRegistry, path: Union[str, Path]) -> None:
    """
    Save the registry to disk atomically.

    Raises:
        RegistryError: If the file cannot be written
    """
    path = Path(path)

    try:
        content = json.dumps(registry.to_dict(), indent=2, ensure_ascii=False)
        atomic_write(path, content + "\n")
    except OSError as e:
        logger.error(f"Failed to save registry: {e}")
        raise RegistryError(
            "Failed to update installation registry",
            f"failed to save registry file {path}: {e}",
            "Ensure the Binarius home directory is writable",
        ) from e

    logger.debug(f"Saved registry with {len(registry.tools)} tool(s) to {path}")
