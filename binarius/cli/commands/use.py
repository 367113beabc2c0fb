"""
Use command implementation.

Switches the active version of a tool.
"""

import logging

from binarius.cli.utils import command_lock, make_installer, parse_spec, safe_print

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    tool_name, version = parse_spec(args.spec)
    installer = make_installer(args)

    with command_lock(installer):
        record = installer.activate(tool_name, version)

    safe_print(f"✓ Activated {tool_name}@{version}")
    print(f"Symlink: {installer.link_path(tool_name)} -> {record.binary_path}")
    print(f"\nYou can now use '{tool_name}' command with version {version}")
    return 0
