"""
Info command implementation.

Shows details of the active version of a tool.
"""

import logging
from pathlib import Path

from binarius.cli.utils import format_bytes, make_installer, print_warning
from binarius.core.exceptions import (
    ActivationError,
    LinkVerificationError,
    RegistryError,
    VersionNotInstalledError,
)
from binarius.core.validation import validate_tool_name

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    tool_name = args.tool
    validate_tool_name(tool_name)

    installer = make_installer(args)
    registry = installer.load_registry()

    if not registry.list_versions(tool_name):
        raise RegistryError(
            f"No versions of {tool_name} are installed",
            "Tool not found in registry",
            f"Run 'binarius install {tool_name}@<version>' to install it",
        )

    link_path = installer.link_path(tool_name)
    target = installer.links.resolve_link(link_path)
    if target is None:
        raise ActivationError(
            f"No active version of {tool_name}",
            "Symlink not found",
            f"Run 'binarius use {tool_name}@<version>' to activate a version",
        )

    active = installer.active_version(tool_name)
    if active is None:
        raise ActivationError(
            "Failed to determine active version",
            f"Symlink target is not a registered binary: {target}",
            f"Try re-activating: binarius use {tool_name}@<version>",
        )

    record = registry.get_version(tool_name, active)

    print(f"Tool: {tool_name}")
    print(f"Active Version: {active}")
    print(f"Binary Path: {record.binary_path}")
    print(f"Symlink: {link_path} -> {target}")
    if record.installed_at is not None:
        print(f"Installed: {record.installed_at.strftime('%Y-%m-%d %H:%M:%S')}")
    if record.size_bytes:
        print(f"Binary Size: {format_bytes(record.size_bytes)}")
    if record.architecture:
        print(f"Architecture: {record.architecture}")
    if record.source_url:
        print(f"Source URL: {record.source_url}")
    if record.checksum:
        print(f"Checksum: {record.checksum}")
    print(f"Status: {record.status.value}")

    if not Path(record.binary_path).exists():
        print_warning(f"Binary file not found at {record.binary_path}")
        print("The tool may have been manually deleted. Consider reinstalling.")

    try:
        installer.verify_activation(tool_name)
    except LinkVerificationError as e:
        print_warning(e.reason)
    except VersionNotInstalledError as e:
        print_warning(f"Default version in config.yaml is not installed: {e.version}")
    except ActivationError:
        logger.debug(f"No default version recorded for {tool_name}")

    return 0
