"""
Platform detection for Binarius.

Release artifacts of the managed tools are named with Go-style platform
identifiers (GOOS/GOARCH), so detection maps Python's view of the machine
onto those names: 'linux', 'darwin', 'windows' and 'amd64', 'arm64', '386',
'arm'.

Usage:
    from binarius.core.platform import detect_platform

    info = detect_platform()
    print(info.tag())  # 'linux/amd64'
"""

import functools
import platform
from dataclasses import dataclass

_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
}

_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform identifiers used in release artifact names.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows', ...)
        arch: CPU architecture ('amd64', 'arm64', '386', 'arm')
    """

    os: str
    arch: str

    def tag(self) -> str:
        """
        Architecture tag stored in the registry.

        Example:
            >>> PlatformInfo("linux", "amd64").tag()
            'linux/amd64'
        """
        return f"{self.os}/{self.arch}"

    def __str__(self) -> str:
        return self.tag()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Raises:
        RuntimeError: If the OS or architecture is not recognized
    """
    system = platform.system().lower()
    machine = platform.machine().lower()

    os_name = _OS_MAP.get(system)
    if os_name is None:
        raise RuntimeError(f"Unsupported operating system: {platform.system()}")

    arch = _ARCH_MAP.get(machine)
    if arch is None:
        raise RuntimeError(f"Unsupported architecture: {platform.machine()}")

    return PlatformInfo(os=os_name, arch=arch)


def clear_platform_cache() -> None:
    """Clear the cached detection result (used by tests)."""
    detect_platform.cache_clear()
