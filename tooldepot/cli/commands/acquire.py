"""
Acquire command implementation.

Resolves a runnable path for a tool, downloading it when needed, and prints
it to stdout. For roslyn the launch kind is printed on a second line.
"""

import logging

from tooldepot.cli.utils import build_manager, load_cli_config, print_error
from tooldepot.config.parser import ConfigError
from tooldepot.core.exceptions import ToolDepotError
from tooldepot.tools.roslyn import RoslynManager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the acquire command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger.debug(f"Arguments: {args}")

    try:
        config = load_cli_config(args)
        manager = build_manager(args, config)
        user_path = args.path or config.tool(args.tool).path

        if isinstance(manager, RoslynManager):
            server = manager.get_server_path(user_path)
            print(server.path)
            print(server.kind.value)
        else:
            print(manager.get_binary_path(user_path))
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1
    except ToolDepotError as e:
        logger.debug(f"Acquisition failed: {e!r}")
        print_error(f"Failed to acquire {args.tool}", str(e))
        return 1

    return 0
