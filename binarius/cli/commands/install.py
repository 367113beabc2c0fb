"""
Install command implementation.

Downloads, verifies and installs a tool version.
"""

import logging

from binarius.cli.utils import command_lock, make_installer, parse_spec, safe_print

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    tool_name, version = parse_spec(args.spec, allow_latest=True)
    installer = make_installer(args)

    with command_lock(installer):
        result = installer.install(tool_name, version)

    record = result.tool_version
    if result.already_installed:
        safe_print(f"✓ {tool_name}@{record.version} is already installed")
        return 0

    safe_print(f"\n✓ Successfully installed {tool_name}@{record.version}")
    print(f"Binary: {record.binary_path}")
    print("\nTo activate this version, run:")
    print(f"    binarius use {tool_name}@{record.version}")
    return 0
