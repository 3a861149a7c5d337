"""Configuration loading for tooldepot."""

from .parser import (
    CONFIG_FILE_NAME,
    ConfigError,
    ToolConfig,
    ToolDepotConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ToolConfig",
    "ToolDepotConfig",
    "load_config",
    "parse_config",
]
