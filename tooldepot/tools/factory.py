"""
Tool manager construction from configuration.

Wires a shared ``HttpTransport`` into the registry client each tool needs,
using the endpoints, token and timeout from ``ToolDepotConfig``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from tooldepot.config.parser import ToolDepotConfig
from tooldepot.core.cache import PathCache
from tooldepot.core.http import HttpTransport
from tooldepot.core.platform import PlatformKey
from tooldepot.registry.github import GitHubReleaseClient
from tooldepot.registry.nuget import NuGetClient
from tooldepot.tools import TOOL_MANAGERS
from tooldepot.tools.base import ToolManager
from tooldepot.tools.release import ReleaseToolManager
from tooldepot.tools.roslyn import RoslynManager

logger = logging.getLogger(__name__)


def available_tools() -> List[str]:
    """Names accepted by ``create_tool_manager``."""
    return sorted(TOOL_MANAGERS)


def create_tool_manager(
    name: str,
    config: Optional[ToolDepotConfig] = None,
    install_root: Optional[Union[str, Path]] = None,
    cache: Optional[PathCache] = None,
    platform: Optional[PlatformKey] = None,
) -> ToolManager:
    """
    Create a tool manager by name.

    Args:
        name: Tool name ('netcoredbg', 'roslyn', 'csharp-language-server')
        config: Configuration (defaults if None)
        install_root: Directory holding version directories (cwd if None)
        cache: In-memory path cache (a fresh one if None)
        platform: Target platform (detected if None)

    Returns:
        Configured tool manager

    Raises:
        ValueError: If the tool name is unknown

    Example:
        >>> manager = create_tool_manager("netcoredbg", install_root="tools")
        >>> manager.get_binary_path()
    """
    manager_class = TOOL_MANAGERS.get(name)
    if manager_class is None:
        raise ValueError(
            f"Unknown tool: {name} (expected one of {available_tools()})"
        )

    config = config or ToolDepotConfig()
    transport = HttpTransport(timeout=config.request_timeout)

    if issubclass(manager_class, RoslynManager):
        client = NuGetClient(transport, service_index_url=config.nuget_index_url)
        logger.debug(f"Creating {name} manager for feed {config.nuget_index_url}")
        return manager_class(
            client=client,
            install_root=install_root,
            cache=cache,
            platform=platform,
            rid=config.tool(name).rid,
        )

    if issubclass(manager_class, ReleaseToolManager):
        client = GitHubReleaseClient(
            transport, api_base=config.github_api_url, token=config.github_token
        )
        logger.debug(f"Creating {name} manager for {config.github_api_url}")
        return manager_class(
            client=client, install_root=install_root, cache=cache, platform=platform
        )

    raise ValueError(f"No registry client known for tool: {name}")
