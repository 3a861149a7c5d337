"""
Platform command implementation.

Shows the detected platform and the artifact each tool would download for it.
"""

import logging

from tooldepot.cli.utils import load_cli_config, print_error
from tooldepot.config.parser import ConfigError
from tooldepot.core.exceptions import UnsupportedPlatformError
from tooldepot.core.platform import detect_platform
from tooldepot.tools.factory import available_tools, create_tool_manager
from tooldepot.tools.release import ReleaseToolManager
from tooldepot.tools.roslyn import RoslynManager

logger = logging.getLogger(__name__)


def _artifact(manager) -> str:
    if isinstance(manager, RoslynManager):
        return f"{manager.package_id} (rid {manager.rid})"
    if isinstance(manager, ReleaseToolManager):
        return manager.asset_name()
    return "-"


def run(args) -> int:
    """
    Run the platform command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_cli_config(args)
        key = detect_platform()
    except ConfigError as e:
        print_error("Invalid configuration", str(e))
        return 1
    except UnsupportedPlatformError as e:
        print_error("Unsupported platform", str(e))
        return 1

    print(f"Platform: {key}")

    for name in available_tools():
        manager = create_tool_manager(name, config=config, platform=key)
        try:
            artifact = _artifact(manager)
        except UnsupportedPlatformError as e:
            logger.debug(f"{name}: {e}")
            artifact = "unsupported"
        print(f"  {name}: {artifact}")

    return 0
