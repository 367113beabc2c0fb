"""OpenTofu adapter."""

from ..core.filesystem import ArchiveFormat
from .base import GitHubReleasesTool, strip_v

RELEASES_URL = "https://github.com/opentofu/opentofu/releases/download"


class OpenTofu(GitHubReleasesTool):
    """OpenTofu releases from GitHub (zip archives)."""

    name = "tofu"
    binary_name = "tofu"
    archive_format = ArchiveFormat.ZIP
    supported_archs = ("amd64", "arm64")
    repository = "opentofu/opentofu"

    def get_download_url(self, version: str, os_name: str, arch: str) -> str:
        v = strip_v(version)
        return f"{RELEASES_URL}/v{v}/tofu_{v}_{os_name}_{arch}.zip"

    def get_checksum_url(self, version: str, os_name: str, arch: str) -> str:
        v = strip_v(version)
        return f"{RELEASES_URL}/v{v}/tofu_{v}_SHA256SUMS"
