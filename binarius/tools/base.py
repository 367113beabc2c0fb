"""
Tool adapter interface.

A Tool knows where a given tool publishes its release artifacts and how they
are packaged. The installer relies only on this interface, so supporting a new
tool means adding one subclass and registering it.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple
import logging

from packaging.version import InvalidVersion, Version

from ..core.download import fetch_json
from ..core.exceptions import NetworkError, VersionListError
from ..core.filesystem import ArchiveFormat

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
GITHUB_PER_PAGE = 100


def sort_versions(versions: Iterable[str]) -> List[str]:
    """
    Sort version strings newest first.

    Unparseable strings sort after every valid version.

    Example:
        >>> sort_versions(["v1.5.7", "v1.6.0", "v1.6.0-beta1"])
        ['v1.6.0', 'v1.6.0-beta1', 'v1.5.7']
    """

    def key(version: str) -> Tuple[int, object]:
        try:
            return (1, Version(version))
        except InvalidVersion:
            return (0, version)

    return sorted(set(versions), key=key, reverse=True)


def strip_v(version: str) -> str:
    """Drop a leading 'v' ('v1.6.0' -> '1.6.0')."""
    return version[1:] if version.startswith("v") else version


def ensure_v(version: str) -> str:
    """Add a leading 'v' if missing ('1.6.0' -> 'v1.6.0')."""
    return version if version.startswith("v") else f"v{version}"


class Tool(ABC):
    """
    Base class for tool adapters.

    Subclasses must define:
    - name: Tool name used on the command line and as the link name
    - binary_name: Executable name inside the release artifact
    - archive_format: How the release artifact is packaged
    - supported_archs: Architectures with published builds
    """

    name: str = ""
    binary_name: str = ""
    archive_format: ArchiveFormat = ArchiveFormat.ZIP
    supported_archs: Tuple[str, ...] = ()

    @abstractmethod
    def get_download_url(self, version: str, os_name: str, arch: str) -> str:
        """
        URL of the release artifact.

        Args:
            version: Version with leading 'v' (e.g. 'v1.6.0')
            os_name: Operating system ('linux', 'darwin', 'windows')
            arch: Architecture ('amd64', 'arm64', ...)
        """

    @abstractmethod
    def get_checksum_url(self, version: str, os_name: str, arch: str) -> str:
        """URL of the SHA256SUMS list covering the release artifact."""

    @abstractmethod
    def list_versions(self) -> List[str]:
        """
        Available versions, newest first, with leading 'v'.

        Raises:
            VersionListError: If the version index can't be fetched or parsed
        """

    def supports_arch(self, arch: str) -> bool:
        return arch in self.supported_archs

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class GitHubReleasesTool(Tool):
    """Tool published as GitHub releases of a single repository."""

    repository: str = ""

    def list_versions(self) -> List[str]:
        url = f"{GITHUB_API}/repos/{self.repository}/releases?per_page={GITHUB_PER_PAGE}"

        try:
            releases = fetch_json(url)
        except NetworkError as e:
            raise VersionListError(
                f"Failed to fetch {self.name} versions",
                f"could not query {url}: {e.reason}",
            ) from e

        if not isinstance(releases, list):
            raise VersionListError(
                f"Failed to fetch {self.name} versions",
                f"unexpected response from {url}",
            )

        versions = []
        for release in releases:
            if not isinstance(release, dict):
                continue
            if release.get("draft") or release.get("prerelease"):
                continue
            tag = release.get("tag_name")
            if tag:
                versions.append(ensure_v(tag))

        logger.debug(f"Found {len(versions)} {self.name} releases")
        return sort_versions(versions)
