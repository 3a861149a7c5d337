"""
tooldepot CLI argument parser.

This module implements the command-line interface for tooldepot using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from tooldepot import __version__
from tooldepot.tools import TOOL_MANAGERS

logger = logging.getLogger(__name__)


class CLI:
    """tooldepot command-line interface."""

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
            prog="tooldepot",
            description="tooldepot - Acquire .NET debugger and language server binaries",
            epilog='Use "tooldepot COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"tooldepot {__version__}"
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
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./tooldepot.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_acquire_command(subparsers)
        self._add_latest_command(subparsers)
        self._add_platform_command(subparsers)
        self._add_prune_command(subparsers)

        return parser

    def _add_tool_argument(self, parser):
        parser.add_argument(
            "tool",
            choices=sorted(TOOL_MANAGERS),
            metavar="TOOL",
            help=f"Tool name ({', '.join(sorted(TOOL_MANAGERS))})",
        )

    def _add_install_root_argument(self, parser):
        parser.add_argument(
            "--install-root",
            type=Path,
            metavar="DIR",
            help="Directory holding version directories (default: current directory)",
        )

    def _add_acquire_command(self, subparsers):
        """Add 'acquire' subcommand."""
        parser = subparsers.add_parser(
            "acquire",
            help="Download a tool if needed and print its path",
            description="Resolve a runnable path for a tool, downloading the "
            "latest release when no local install matches",
        )
        self._add_tool_argument(parser)
        parser.add_argument(
            "--path",
            metavar="PATH",
            help="Use this binary instead of downloading (printed unchanged)",
        )
        self._add_install_root_argument(parser)

    def _add_latest_command(self, subparsers):
        """Add 'latest' subcommand."""
        parser = subparsers.add_parser(
            "latest",
            help="Show the latest published version of a tool",
            description="Query the registry for the latest version without downloading",
        )
        self._add_tool_argument(parser)

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        subparsers.add_parser(
            "platform",
            help="Show detected platform and artifact names",
            description="Show the detected platform and the artifact each tool "
            "would download for it",
        )

    def _add_prune_command(self, subparsers):
        """Add 'prune' subcommand."""
        parser = subparsers.add_parser(
            "prune",
            help="Remove old versions of a tool",
            description="Remove every installed version of a tool except the newest",
        )
        self._add_tool_argument(parser)
        self._add_install_root_argument(parser)
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be removed without removing",
        )

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

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
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
            stream=sys.stderr,
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
        command_map = {
            "acquire": "tooldepot.cli.commands.acquire",
            "latest": "tooldepot.cli.commands.latest",
            "platform": "tooldepot.cli.commands.platform",
            "prune": "tooldepot.cli.commands.prune",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
