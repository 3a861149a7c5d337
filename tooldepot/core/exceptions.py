"""
Centralized exception hierarchy for tooldepot.

Every failure an acquisition can hit is one of a closed set of kinds
(``ErrorKind``). Each exception carries its kind plus structured context so
callers and tests can inspect failures without parsing messages.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Sequence


class ErrorKind(Enum):
    """Kinds of acquisition failure."""

    UNSUPPORTED_PLATFORM = "unsupported_platform"
    REGISTRY_FETCH_FAILURE = "registry_fetch_failure"
    METADATA_PARSE_FAILURE = "metadata_parse_failure"
    ASSET_NOT_FOUND_FOR_PLATFORM = "asset_not_found_for_platform"
    DOWNLOAD_FAILURE = "download_failure"
    FILESYSTEM_FAILURE = "filesystem_failure"
    BINARY_NOT_FOUND_AFTER_EXTRACTION = "binary_not_found_after_extraction"
    VERSION_PARSE_FAILURE = "version_parse_failure"


# ============================================================================
# Base Exception
# ============================================================================


class ToolDepotError(Exception):
    """Base exception for all tooldepot errors."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


# ============================================================================
# Platform
# ============================================================================


class UnsupportedPlatformError(ToolDepotError):
    """Raised when no artifact exists for the running OS/architecture."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM

    def __init__(self, message: str, os: str = "", arch: str = ""):
        self.os = os
        self.arch = arch
        super().__init__(message, os=os, arch=arch)


# ============================================================================
# Registry Exceptions
# ============================================================================


class RegistryFetchError(ToolDepotError):
    """Network or transport failure while talking to a registry."""

    kind = ErrorKind.REGISTRY_FETCH_FAILURE

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message, url=url, status_code=status_code)


class RegistryMetadataError(ToolDepotError):
    """Registry answered, but the document is malformed or lacks fields."""

    kind = ErrorKind.METADATA_PARSE_FAILURE

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message, url=url)


class AssetNotFoundForPlatformError(ToolDepotError):
    """A release has no asset named for the current platform."""

    kind = ErrorKind.ASSET_NOT_FOUND_FOR_PLATFORM

    def __init__(self, expected_name: str, available_names: Sequence[str]):
        self.expected_name = expected_name
        self.available_names = list(available_names)
        message = (
            f"No compatible asset found for platform. Looking for: "
            f"'{expected_name}'. Available assets: [{', '.join(self.available_names)}]"
        )
        super().__init__(
            message,
            expected_name=expected_name,
            available_names=self.available_names,
        )


# ============================================================================
# Download / Filesystem Exceptions
# ============================================================================


class DownloadError(ToolDepotError):
    """Downloading or unpacking an artifact failed."""

    kind = ErrorKind.DOWNLOAD_FAILURE

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message, url=url)


class FilesystemError(ToolDepotError):
    """Creating, reading or removing a path failed."""

    kind = ErrorKind.FILESYSTEM_FAILURE

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message, path=path)


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""


class BinaryNotFoundError(ToolDepotError):
    """The expected binary is missing from an extracted tree."""

    kind = ErrorKind.BINARY_NOT_FOUND_AFTER_EXTRACTION

    def __init__(
        self,
        message: str,
        expected_name: str = "",
        path: Optional[Path] = None,
        candidates: Sequence[str] = (),
    ):
        self.expected_name = expected_name
        self.path = path
        self.candidates = list(candidates)
        super().__init__(
            message,
            expected_name=expected_name,
            path=path,
            candidates=self.candidates,
        )


# ============================================================================
# Versioning
# ============================================================================


class VersionParseError(ToolDepotError):
    """A version string could not be parsed."""

    kind = ErrorKind.VERSION_PARSE_FAILURE

    def __init__(self, message: str, version: str = ""):
        self.version = version
        super().__init__(message, version=version)
