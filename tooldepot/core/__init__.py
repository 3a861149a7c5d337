"""
Core functionality for tooldepot.

This package contains the foundational modules that registry clients and tool
managers depend on.
"""

from .exceptions import (
    ErrorKind,
    ToolDepotError,
    UnsupportedPlatformError,
    RegistryFetchError,
    RegistryMetadataError,
    AssetNotFoundForPlatformError,
    DownloadError,
    FilesystemError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    BinaryNotFoundError,
    VersionParseError,
)

from .platform import (
    Os,
    Arch,
    ArchiveKind,
    PlatformKey,
    NEUTRAL_RID,
    detect_platform,
    clear_platform_cache,
    resolve_asset_suffix,
    resolve_runtime_identifier,
    resolve_target_triple,
)

from .versioning import (
    Ordering,
    ParsedVersion,
    parse_version,
    compare_versions,
    select_max_version,
)

from .cache import (
    PathCache,
    MemoryPathCache,
    NullPathCache,
    prune_siblings,
    stale_siblings,
)

__all__ = [
    "ErrorKind",
    "ToolDepotError",
    "UnsupportedPlatformError",
    "RegistryFetchError",
    "RegistryMetadataError",
    "AssetNotFoundForPlatformError",
    "DownloadError",
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "BinaryNotFoundError",
    "VersionParseError",
    "Os",
    "Arch",
    "ArchiveKind",
    "PlatformKey",
    "NEUTRAL_RID",
    "detect_platform",
    "clear_platform_cache",
    "resolve_asset_suffix",
    "resolve_runtime_identifier",
    "resolve_target_triple",
    "Ordering",
    "ParsedVersion",
    "parse_version",
    "compare_versions",
    "select_max_version",
    "PathCache",
    "MemoryPathCache",
    "NullPathCache",
    "prune_siblings",
    "stale_siblings",
]
