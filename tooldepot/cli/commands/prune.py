"""
Prune command implementation.

Removes every installed version of a tool except the newest local one.
"""

import logging

from tooldepot.cli.utils import build_manager, load_cli_config, print_error
from tooldepot.config.parser import ConfigError
from tooldepot.core.exceptions import ToolDepotError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the prune command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        manager = build_manager(args, load_cli_config(args))
        removed = manager.prune(dry_run=args.dry_run)
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1
    except ToolDepotError as e:
        print_error(f"Failed to prune {args.tool}", str(e))
        return 1

    if not removed:
        print(f"Nothing to remove for {args.tool}")
        return 0

    verb = "Would remove" if args.dry_run else "Removed"
    for path in removed:
        print(f"{verb}: {path}")
    return 0
