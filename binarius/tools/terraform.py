"""HashiCorp Terraform adapter."""

from typing import List
import logging

from ..core.download import fetch_json
from ..core.exceptions import NetworkError, VersionListError
from ..core.filesystem import ArchiveFormat
from .base import Tool, ensure_v, sort_versions, strip_v

logger = logging.getLogger(__name__)

RELEASES_URL = "https://releases.hashicorp.com/terraform"


class Terraform(Tool):
    """Terraform releases from releases.hashicorp.com (zip archives)."""

    name = "terraform"
    binary_name = "terraform"
    archive_format = ArchiveFormat.ZIP
    supported_archs = ("amd64", "arm64", "386", "arm")

    def get_download_url(self, version: str, os_name: str, arch: str) -> str:
        v = strip_v(version)
        return f"{RELEASES_URL}/{v}/terraform_{v}_{os_name}_{arch}.zip"

    def get_checksum_url(self, version: str, os_name: str, arch: str) -> str:
        v = strip_v(version)
        return f"{RELEASES_URL}/{v}/terraform_{v}_SHA256SUMS"

    def list_versions(self) -> List[str]:
        url = f"{RELEASES_URL}/index.json"

        try:
            index = fetch_json(url)
        except NetworkError as e:
            raise VersionListError(
                "Failed to fetch terraform versions",
                f"could not query {url}: {e.reason}",
            ) from e

        versions = index.get("versions") if isinstance(index, dict) else None
        if not isinstance(versions, dict):
            raise VersionListError(
                "Failed to fetch terraform versions",
                f"unexpected response from {url}",
            )

        return sort_versions(ensure_v(v) for v in versions)
