"""
Centralized exception hierarchy for Binarius.

Every error that crosses a module boundary is a BinariusError. Each one
communicates three things to the user: what failed (context), why it failed
(reason) and what to do about it (action).
"""

from typing import Optional


# ============================================================================
# Base Exception
# ============================================================================


class BinariusError(Exception):
    """Base exception for all Binarius errors."""

    default_action = "Re-run with --verbose for more details"

    def __init__(self, context: str, reason: str = "", action: Optional[str] = None):
        self.context = context
        self.reason = reason
        self.action = action if action is not None else self.default_action
        super().__init__(context)

    def __str__(self) -> str:
        return f"Error: {self.context}\nReason: {self.reason}\nAction: {self.action}"


# ============================================================================
# Path and Configuration Exceptions
# ============================================================================


class PathConfigurationError(BinariusError):
    """Raised when a required directory cannot be resolved."""

    default_action = "Set BINARIUS_HOME to a writable directory"


class ConfigError(BinariusError):
    """Raised when config.yaml cannot be parsed or written."""

    default_action = "Fix or delete config.yaml, then run 'binarius init'"


# ============================================================================
# Network Exceptions
# ============================================================================


class NetworkError(BinariusError):
    """Raised when a remote resource cannot be fetched."""

    default_action = "Check your internet connection and ensure the URL is correct"


class HTTPStatusError(NetworkError):
    """Raised when the server answers with a non-success status code."""

    default_action = "The file may not be available. Verify the tool version exists."

    def __init__(self, url: str, status_code: int, status_text: str = ""):
        self.url = url
        self.status_code = status_code
        super().__init__(
            f"Failed to download file from {url}",
            f"HTTP error: {status_code} {status_text}".rstrip(),
        )


# ============================================================================
# Integrity Exceptions
# ============================================================================


class IntegrityError(BinariusError):
    """Base exception for checksum problems."""

    default_action = (
        "The downloaded file may be corrupted or tampered with. "
        "Please try downloading again."
    )


class ChecksumMismatchError(IntegrityError):
    """Raised when a file's digest differs from the expected digest."""

    def __init__(self, file_path, expected: str, actual: str):
        self.file_path = file_path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum verification failed for {file_path}",
            f"Checksum mismatch. Expected: {expected}, Got: {actual}",
        )


class ChecksumNotFoundError(IntegrityError):
    """Raised when a checksum list has no entry for the requested file."""

    default_action = "The checksum file format may be invalid. Please report this issue."


# ============================================================================
# Archive Exceptions
# ============================================================================


class ArchiveError(BinariusError):
    """Raised when an archive cannot be opened or parsed."""

    default_action = "Ensure the file is a valid archive and is not corrupted"


class UnsupportedArchiveFormat(ArchiveError):
    """Raised when an unknown archive format is requested."""

    default_action = "This is a bug in the tool definition. Please report it."


class PathTraversalError(ArchiveError):
    """Raised when an archive entry would be written outside the destination."""

    default_action = (
        "This archive may be malicious. Do not install tools from untrusted sources."
    )

    def __init__(self, entry_name: str, destination):
        self.entry_name = entry_name
        self.destination = destination
        super().__init__(
            "Path traversal attempt detected",
            f"Archive contains unsafe path '{entry_name}' "
            f"(outside {destination})",
        )


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(BinariusError):
    """Raised on permission problems, full disks and missing parents."""

    default_action = "Ensure you have write permissions and enough free disk space"


# ============================================================================
# Registry Exceptions
# ============================================================================


class RegistryError(BinariusError):
    """Raised when the installation registry cannot be loaded or saved."""

    default_action = "Run 'binarius init' to initialize Binarius"


class VersionNotInstalledError(RegistryError):
    """Raised when an operation needs a version that is not in the registry."""

    def __init__(self, tool_name: str, version: str, action: Optional[str] = None):
        self.tool_name = tool_name
        self.version = version
        super().__init__(
            f"{tool_name}@{version} is not installed",
            "Version not found in registry",
            action or f"Run 'binarius install {tool_name}@{version}' to install it",
        )


# ============================================================================
# Activation Exceptions
# ============================================================================


class ActivationError(BinariusError):
    """Raised when an activation link cannot be created, updated or removed."""

    default_action = "Ensure the bin directory exists and is writable"


class LinkExistsError(ActivationError):
    """Raised when creating a link over an existing path."""

    default_action = "Use 'binarius use' to switch versions instead"


class LinkVerificationError(ActivationError):
    """Raised when an activation link does not point where the registry says."""

    default_action = "Re-activate the version with 'binarius use <tool>@<version>'"

    def __init__(self, link_path, expected, actual):
        self.link_path = link_path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Activation link {link_path} is out of sync",
            f"{link_path} points to {actual}, expected {expected}",
        )


# ============================================================================
# Tool Lookup Exceptions
# ============================================================================


class ToolError(BinariusError):
    """Base exception for tool adapter errors."""

    pass


class ToolNotRegisteredError(ToolError):
    """Raised when a tool name has no registered adapter."""

    def __init__(self, tool_name: str, available=()):
        self.tool_name = tool_name
        super().__init__(
            f"Tool '{tool_name}' is not supported",
            f"tool {tool_name!r} is not registered",
            f"Supported tools: {', '.join(sorted(available)) or 'none'}",
        )


class ToolAlreadyRegisteredError(ToolError):
    """Raised when registering a tool name twice."""

    default_action = "Register each tool exactly once"


class UnsupportedArchitectureError(ToolError):
    """Raised when a tool has no build for the current architecture."""

    default_action = "Install the tool manually or use a supported machine"


class VersionListError(ToolError):
    """Raised when the remote version index cannot be read."""

    default_action = "Check your internet connection and try again"


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(BinariusError):
    """Base exception for malformed user input."""

    pass


class InvalidToolNameError(ValidationError):
    """Tool name is not lowercase alphanumeric with single hyphens."""

    default_action = "Tool name must be lowercase alphanumeric with hyphens only"


class InvalidVersionError(ValidationError):
    """Version does not follow semantic versioning."""

    default_action = "Version must follow semantic versioning (e.g., v1.6.0, 1.6.0-beta1)"


class InvalidToolSpecError(ValidationError):
    """Argument is not of the form <tool>@<version>."""

    default_action = "Use format like 'terraform@v1.6.0' or 'tofu@latest'"


# ============================================================================
# Locking Exceptions
# ============================================================================


class LockTimeoutError(BinariusError):
    """Raised when the advisory command lock cannot be acquired."""

    default_action = (
        "Another binarius process may be running. Wait for it to finish and retry."
    )
