"""
Init command implementation.

Creates the Binarius directory structure, config.yaml and an empty
installation registry.
"""

import logging
import os

from binarius.cli.utils import safe_print
from binarius.config.parser import default_config, save_config
from binarius.core.directory import (
    ensure_directory_structure,
    get_config_path,
    get_registry_path,
)
from binarius.core.registry import InstallationRegistry, save_registry

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the init command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    logger.debug(f"Arguments: {args}")

    dirs = ensure_directory_structure()
    home, bin_dir = dirs["home"], dirs["bin"]

    config_path = get_config_path(home)
    if config_path.exists() and not args.force:
        print(f"Config already exists at {config_path}")
    else:
        save_config(default_config(home), config_path)
        print(f"Created config.yaml at {config_path}")

    registry_path = get_registry_path(home)
    if registry_path.exists():
        print(f"Registry already exists at {registry_path}")
    else:
        save_registry(InstallationRegistry(), registry_path)
        print(f"Created installation.json at {registry_path}")

    path_entries = os.environ.get("PATH", "").split(os.pathsep)
    if str(bin_dir) not in path_entries:
        safe_print(f"\n⚠️  WARNING: {bin_dir} is not in your PATH")
        print("\nAdd the following to your shell configuration (~/.bashrc or ~/.zshrc):")
        print(f'    export PATH="{bin_dir}:$PATH"')
    else:
        safe_print(f"\n✓ {bin_dir} is in your PATH")

    safe_print(f"\n✓ Binarius initialized successfully at {home}")
    return 0
