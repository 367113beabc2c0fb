"""
Core functionality for Binarius.

This package contains the installation pipeline stages (fetch, verify,
extract, register) and the foundational modules they depend on.
"""

from .directory import (
    ensure_directory_structure,
    get_bin_dir,
    get_binarius_home,
    get_cache_dir,
    get_config_path,
    get_registry_path,
    get_tools_dir,
    get_version_dir,
)

from .download import (
    DownloadProgress,
    fetch,
    fetch_json,
    fetch_text,
)

from .exceptions import (
    BinariusError,
    PathConfigurationError,
    ConfigError,
    NetworkError,
    HTTPStatusError,
    IntegrityError,
    ChecksumMismatchError,
    ChecksumNotFoundError,
    ArchiveError,
    UnsupportedArchiveFormat,
    PathTraversalError,
    FilesystemError,
    RegistryError,
    VersionNotInstalledError,
    ActivationError,
    LinkExistsError,
    LinkVerificationError,
    ToolError,
    ToolNotRegisteredError,
    ToolAlreadyRegisteredError,
    UnsupportedArchitectureError,
    VersionListError,
    ValidationError,
    InvalidToolNameError,
    InvalidVersionError,
    InvalidToolSpecError,
    LockTimeoutError,
)

from .filesystem import (
    ArchiveFormat,
    atomic_write,
    extract_archive,
    safe_rmtree,
    validate_archive_path,
)

from .locking import LockManager

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .registry import (
    InstallationRegistry,
    InstallStatus,
    ToolVersion,
    load_registry,
    save_registry,
)

from .verification import (
    compute_file_hash,
    find_checksum,
    parse_checksum_list,
    verify_file_hash,
)

__all__ = [
    # Directory
    "ensure_directory_structure",
    "get_bin_dir",
    "get_binarius_home",
    "get_cache_dir",
    "get_config_path",
    "get_registry_path",
    "get_tools_dir",
    "get_version_dir",
    # Download
    "DownloadProgress",
    "fetch",
    "fetch_json",
    "fetch_text",
    # Exceptions
    "BinariusError",
    "PathConfigurationError",
    "ConfigError",
    "NetworkError",
    "HTTPStatusError",
    "IntegrityError",
    "ChecksumMismatchError",
    "ChecksumNotFoundError",
    "ArchiveError",
    "UnsupportedArchiveFormat",
    "PathTraversalError",
    "FilesystemError",
    "RegistryError",
    "VersionNotInstalledError",
    "ActivationError",
    "LinkExistsError",
    "LinkVerificationError",
    "ToolError",
    "ToolNotRegisteredError",
    "ToolAlreadyRegisteredError",
    "UnsupportedArchitectureError",
    "VersionListError",
    "ValidationError",
    "InvalidToolNameError",
    "InvalidVersionError",
    "InvalidToolSpecError",
    "LockTimeoutError",
    # Filesystem
    "ArchiveFormat",
    "atomic_write",
    "extract_archive",
    "safe_rmtree",
    "validate_archive_path",
    # Locking
    "LockManager",
    # Platform
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    # Registry
    "InstallationRegistry",
    "InstallStatus",
    "ToolVersion",
    "load_registry",
    "save_registry",
    # Verification
    "compute_file_hash",
    "find_checksum",
    "parse_checksum_list",
    "verify_file_hash",
]
