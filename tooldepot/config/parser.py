"""YAML configuration parser for tooldepot.

This module provides parsing and validation for tooldepot.yaml files:

    version: 1
    request_timeout: 30
    github:
      api_url: https://api.github.com
      token: ghp_...            # optional, GITHUB_TOKEN is used otherwise
    nuget:
      index_url: https://api.nuget.org/v3/index.json
    tools:
      netcoredbg:
        path: /opt/netcoredbg/netcoredbg   # skip acquisition entirely
      roslyn:
        rid: any                           # force the framework-dependent payload
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from tooldepot.registry.github import GITHUB_API_BASE
from tooldepot.registry.nuget import NUGET_SERVICE_INDEX

CONFIG_FILE_NAME = "tooldepot.yaml"
KNOWN_TOOLS = ["netcoredbg", "roslyn", "csharp-language-server"]


class ConfigError(Exception):
    """Configuration parsing or validation error."""

    pass


@dataclass
class ToolConfig:
    """Per-tool settings."""

    path: Optional[str] = None  # User-provided binary, returned unvalidated
    rid: Optional[str] = None  # Runtime identifier override (NuGet tools only)


@dataclass
class ToolDepotConfig:
    """Complete tooldepot configuration."""

    version: int = 1
    request_timeout: int = 30
    github_api_url: str = GITHUB_API_BASE
    github_token: Optional[str] = None
    nuget_index_url: str = NUGET_SERVICE_INDEX
    tools: Dict[str, ToolConfig] = field(default_factory=dict)

    def tool(self, name: str) -> ToolConfig:
        """Settings for a tool (defaults if not configured)."""
        return self.tools.get(name, ToolConfig())


def parse_config(config_path: Path) -> ToolDepotConfig:
    """
    Parse tooldepot.yaml configuration file.

    Args:
        config_path: Path to tooldepot.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        return ToolDepotConfig()

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def load_config(
    config_path: Optional[Path] = None, search_dir: Optional[Path] = None
) -> ToolDepotConfig:
    """
    Load configuration from an explicit path or the default location.

    Without ``config_path``, ``tooldepot.yaml`` in ``search_dir`` (default:
    current directory) is used if present; otherwise defaults are returned.
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default = (search_dir or Path.cwd()) / CONFIG_FILE_NAME
    if default.exists():
        return parse_config(default)
    return ToolDepotConfig()


def _parse_and_validate(data: dict) -> ToolDepotConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    timeout = data.get("request_timeout", 30)
    if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout <= 0:
        raise ConfigError(
            f"Invalid request_timeout: {timeout} (expected a positive integer)"
        )

    github = _section(data, "github")
    nuget = _section(data, "nuget")

    tools = {}
    for name, tool_data in _section(data, "tools").items():
        tools[name] = _parse_tool(name, tool_data)

    return ToolDepotConfig(
        version=version,
        request_timeout=timeout,
        github_api_url=github.get("api_url", GITHUB_API_BASE),
        github_token=github.get("token"),
        nuget_index_url=nuget.get("index_url", NUGET_SERVICE_INDEX),
        tools=tools,
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a dictionary")
    return section


def _parse_tool(name: str, data: Optional[dict]) -> ToolConfig:
    """Parse tool configuration."""
    if name not in KNOWN_TOOLS:
        raise ConfigError(f"Unknown tool: {name} (expected one of {KNOWN_TOOLS})")

    if data is None:
        return ToolConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"tools.{name} must be a dictionary")

    rid = data.get("rid")
    if rid is not None and name != "roslyn":
        raise ConfigError(f"tools.{name}.rid is only supported for roslyn")

    path = data.get("path")
    return ToolConfig(
        path=str(path) if path is not None else None,
        rid=str(rid) if rid is not None else None,
    )
