"""
Shared utilities for CLI commands.

Provides configuration loading, manager construction and error output used
by every command.
"""

import logging
import sys
from typing import Optional

from tooldepot.config.parser import ToolDepotConfig, load_config
from tooldepot.tools.base import ToolManager
from tooldepot.tools.factory import create_tool_manager

logger = logging.getLogger(__name__)


def load_cli_config(args) -> ToolDepotConfig:
    """
    Load configuration named by ``--config``, or ./tooldepot.yaml if present.

    Raises:
        ConfigError: If the configuration file is invalid
    """
    config_path = getattr(args, "config", None)
    config = load_config(config_path)
    logger.debug(f"Loaded configuration: {config}")
    return config


def build_manager(args, config: ToolDepotConfig) -> ToolManager:
    """Create the manager for ``args.tool`` rooted at ``--install-root``."""
    return create_tool_manager(
        args.tool,
        config=config,
        install_root=getattr(args, "install_root", None),
    )


def print_error(message: str, details: Optional[str] = None):
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
