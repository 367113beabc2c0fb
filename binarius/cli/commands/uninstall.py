"""
Uninstall command implementation.

Removes an installed tool version, asking for confirmation unless --force
is given.
"""

import logging

from binarius.cli.utils import (
    command_lock,
    confirm,
    make_installer,
    parse_spec,
    safe_print,
)
from binarius.core.exceptions import VersionNotInstalledError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the uninstall command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, including a declined confirmation)
    """
    tool_name, version = parse_spec(args.spec)
    installer = make_installer(args)

    with command_lock(installer):
        record = installer.load_registry().get_version(tool_name, version)
        if record is None:
            raise VersionNotInstalledError(
                tool_name,
                version,
                action=f"Run 'binarius list {tool_name}' to see installed versions",
            )

        if installer.active_version(tool_name) == version:
            safe_print(f"⚠️  WARNING: {tool_name}@{version} is currently the active version")
            print("Uninstalling it will remove the symlink.\n")

        if not args.force:
            print("You are about to uninstall:")
            print(f"  Tool: {tool_name}")
            print(f"  Version: {version}")
            print(f"  Binary: {record.binary_path}\n")
            if not confirm("Are you sure you want to continue?"):
                print("Uninstall cancelled")
                return 0

        result = installer.uninstall(tool_name, version)

    if result.link_removed:
        safe_print(f"✓ Removed symlink at {installer.link_path(tool_name)}")
    safe_print(f"\n✓ Successfully uninstalled {tool_name}@{version}")

    if result.was_active and result.remaining_versions:
        print("\nTo set a new active version, run:")
        print(f"    binarius use {tool_name}@<version>")
        print("\nAvailable versions:")
        for remaining in result.remaining_versions:
            print(f"  - {remaining}")

    return 0
