"""Gruntwork Terragrunt adapter."""

from ..core.filesystem import ArchiveFormat
from .base import GitHubReleasesTool, strip_v

RELEASES_URL = "https://github.com/gruntwork-io/terragrunt/releases/download"


class Terragrunt(GitHubReleasesTool):
    """Terragrunt releases from GitHub (raw executables, no archive)."""

    name = "terragrunt"
    binary_name = "terragrunt"
    archive_format = ArchiveFormat.BINARY
    supported_archs = ("amd64", "arm64")
    repository = "gruntwork-io/terragrunt"

    def get_download_url(self, version: str, os_name: str, arch: str) -> str:
        return f"{RELEASES_URL}/v{strip_v(version)}/terragrunt_{os_name}_{arch}"

    def get_checksum_url(self, version: str, os_name: str, arch: str) -> str:
        return f"{RELEASES_URL}/v{strip_v(version)}/SHA256SUMS"
