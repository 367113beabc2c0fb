"""
Validation of tool names, versions and '<tool>@<version>' arguments.
"""

import re
from typing import Tuple

from binarius.core.exceptions import (
    InvalidToolNameError,
    InvalidToolSpecError,
    InvalidVersionError,
)

TOOL_NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
VERSION_PATTERN = re.compile(r"^v?\d+\.\d+\.\d+(-[a-zA-Z0-9.-]*[a-zA-Z0-9])?$")

LATEST = "latest"


def validate_tool_name(name: str) -> None:
    """
    Check a tool name: lowercase letters, digits and single inner hyphens.

    Raises:
        InvalidToolNameError: If the name is empty or malformed
    """
    if not name:
        raise InvalidToolNameError("Invalid tool name", "tool name cannot be empty")

    if not TOOL_NAME_PATTERN.match(name):
        raise InvalidToolNameError(
            "Invalid tool name",
            f"invalid tool name {name!r}: must contain only lowercase letters, "
            "numbers, and single hyphens (not at the start or end)",
        )


def validate_version(version: str) -> None:
    """
    Check that a version follows semantic versioning, with optional 'v'.

    Raises:
        InvalidVersionError: If the version is empty or malformed
    """
    if not version:
        raise InvalidVersionError("Invalid version format", "version cannot be empty")

    if not VERSION_PATTERN.match(version):
        raise InvalidVersionError(
            "Invalid version format",
            f"invalid version {version!r}: must follow semantic versioning "
            "(e.g., v1.6.0, 1.6.0-beta1)",
        )


def normalize_version(version: str) -> str:
    """
    Validate a version and give it a leading 'v'.

    Example:
        >>> normalize_version("1.6.0")
        'v1.6.0'
    """
    validate_version(version)
    return version if version.startswith("v") else f"v{version}"


def parse_tool_spec(spec: str) -> Tuple[str, str]:
    """
    Split a '<tool>@<version>' argument.

    The version part is returned as given; callers normalize it (or resolve
    'latest') themselves.

    Raises:
        InvalidToolSpecError: If the argument is not exactly one '@' pair
        InvalidToolNameError: If the tool part is malformed
    """
    parts = spec.split("@")
    if len(parts) != 2 or not parts[1]:
        raise InvalidToolSpecError(
            "Invalid argument format",
            f"Expected format: <tool>@<version>, got: {spec}",
        )

    tool_name, version = parts
    validate_tool_name(tool_name)
    return tool_name, version
