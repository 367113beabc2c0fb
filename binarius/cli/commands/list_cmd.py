"""
List command implementation.

Lists installed tool versions and marks the active one.
"""

import logging

from binarius.cli.utils import make_installer
from binarius.core.validation import validate_tool_name

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    installer = make_installer(args)
    registry = installer.load_registry()

    if args.tool:
        validate_tool_name(args.tool)
        tools = [args.tool]
        versions = registry.list_versions(args.tool)
        if not versions:
            print(f"No versions of {args.tool} are installed")
            print(f"\nTo install {args.tool}, run:\n    binarius install {args.tool}@<version>")
            return 0
    else:
        tools = registry.list_tools()
        if not tools:
            print("No tools installed")
            print("\nTo install a tool, run:")
            print("    binarius install <tool>@<version>")
            print("\nExample:")
            print("    binarius install terraform@v1.6.0")
            return 0
        print("Installed tools and versions:\n")

    for tool_name in tools:
        active = installer.active_version(tool_name)
        print(f"{tool_name}:")
        for version in registry.list_versions(tool_name):
            marker = "*" if version == active else " "
            print(f"  {marker} {version}")
        print()

    print("* = Active version")
    return 0
