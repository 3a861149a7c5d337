"""
Latest command implementation.

Prints the latest published version of a tool without downloading it.
"""

import logging

from tooldepot.cli.utils import build_manager, load_cli_config, print_error
from tooldepot.config.parser import ConfigError
from tooldepot.core.exceptions import ToolDepotError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the latest command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        manager = build_manager(args, load_cli_config(args))
        version = manager.latest_version()
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1
    except ToolDepotError as e:
        print_error(f"Failed to resolve latest {args.tool} version", str(e))
        return 1

    print(version)
    return 0
