"""
Binarius CLI argument parser.

This module implements the command-line interface for Binarius using argparse.
"""

import argparse
import importlib
import logging
import sys
from typing import List, Optional

from binarius import __version__
from binarius.cli.utils import print_binarius_error
from binarius.core.exceptions import BinariusError

logger = logging.getLogger(__name__)

COMMANDS = ("init", "install", "use", "uninstall", "list", "info")


class CLI:
    """Binarius command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="binarius",
            description="Binarius - version manager for single-binary CLI tools",
            epilog='Use "binarius COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"binarius {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_init_command(subparsers)
        self._add_install_command(subparsers)
        self._add_use_command(subparsers)
        self._add_uninstall_command(subparsers)
        self._add_list_command(subparsers)
        self._add_info_command(subparsers)

        return parser

    def _add_init_command(self, subparsers):
        """Add 'init' subcommand."""
        parser = subparsers.add_parser(
            "init",
            help="Initialize Binarius",
            description=(
                "Create the Binarius directory structure, config.yaml and an "
                "empty installation registry"
            ),
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Rewrite config.yaml even if it already exists",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a tool version",
            description="Download, verify and install a specific version of a tool",
            epilog=(
                "Examples:\n"
                "  binarius install terraform@v1.6.0\n"
                "  binarius install tofu@latest\n"
                "  binarius install terragrunt@v0.54.0"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("spec", metavar="TOOL@VERSION", help="Tool and version")

    def _add_use_command(self, subparsers):
        """Add 'use' subcommand."""
        parser = subparsers.add_parser(
            "use",
            help="Switch the active version of a tool",
            description="Point the tool's activation link at an installed version",
        )
        parser.add_argument("spec", metavar="TOOL@VERSION", help="Tool and version")

    def _add_uninstall_command(self, subparsers):
        """Add 'uninstall' subcommand."""
        parser = subparsers.add_parser(
            "uninstall",
            help="Remove an installed tool version",
            description="Remove an installed tool version and its files",
        )
        parser.add_argument("spec", metavar="TOOL@VERSION", help="Tool and version")
        parser.add_argument(
            "--force",
            "-f",
            action="store_true",
            help="Uninstall without confirmation",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        parser = subparsers.add_parser(
            "list",
            help="List installed tool versions",
            description="List installed versions, marking the active one",
        )
        parser.add_argument(
            "tool", nargs="?", metavar="TOOL", help="Only list versions of this tool"
        )

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show details of the active version of a tool",
            description="Show details of the active version of a tool",
        )
        parser.add_argument("tool", metavar="TOOL", help="Tool name")

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except BinariusError as e:
            logger.debug(f"{type(e).__name__} in '{parsed_args.command}'", exc_info=True)
            print_binarius_error(e)
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        if args.command not in COMMANDS:
            logger.error(f"Unknown command: {args.command}")
            return 1

        # 'list' shadows a builtin, so its module is named list_cmd
        module_name = "list_cmd" if args.command == "list" else args.command
        module = importlib.import_module(f"binarius.cli.commands.{module_name}")
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
