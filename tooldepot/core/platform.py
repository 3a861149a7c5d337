"""
Platform detection and artifact mapping for tooldepot.

This module maps the running (OS, CPU architecture) pair onto the identifiers
each registry uses to publish platform-specific payloads:

- an asset-name suffix for GitHub release assets (netcoredbg)
- a target triple for GitHub release assets (csharp-language-server)
- a runtime identifier (RID) for NuGet packages (Roslyn)

All lookups are pure table lookups over a fixed enumeration. 32-bit x86 is
unsupported everywhere and fails fast. The release-asset tables fail closed
for unmapped pairs; the RID table falls back to the architecture-neutral
``"any"`` payload instead.

Usage:
    from tooldepot.core.platform import detect_platform, resolve_asset_suffix

    key = detect_platform()
    print(resolve_asset_suffix(key))   # e.g. 'linux-amd64.tar.gz'
"""

import functools
import logging
import platform
from dataclasses import dataclass
from enum import Enum

from tooldepot.core.exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)


class Os(Enum):
    """Operating systems tooldepot can acquire binaries for."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class Arch(Enum):
    """CPU architectures known to the mapping tables."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    X86 = "x86"


class ArchiveKind(Enum):
    """Archive container formats used by the registries."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"


@dataclass(frozen=True)
class PlatformKey:
    """
    Operating system and architecture pair.

    Attributes:
        os: Operating system
        arch: CPU architecture
    """

    os: Os
    arch: Arch

    @property
    def is_windows(self) -> bool:
        return self.os is Os.WINDOWS

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value}"


NEUTRAL_RID = "any"

# netcoredbg release assets:
#   netcoredbg-linux-amd64.tar.gz, netcoredbg-linux-arm64.tar.gz,
#   netcoredbg-osx-amd64.tar.gz, netcoredbg-osx-arm64.tar.gz,
#   netcoredbg-win64.zip
ASSET_SUFFIXES = {
    (Os.LINUX, Arch.X86_64): "linux-amd64.tar.gz",
    (Os.LINUX, Arch.AARCH64): "linux-arm64.tar.gz",
    (Os.MACOS, Arch.X86_64): "osx-amd64.tar.gz",
    (Os.MACOS, Arch.AARCH64): "osx-arm64.tar.gz",
    (Os.WINDOWS, Arch.X86_64): "win64.zip",
    # No ARM64 Windows build is published; the x64 build runs under emulation.
    (Os.WINDOWS, Arch.AARCH64): "win64.zip",
}

RUNTIME_IDENTIFIERS = {
    (Os.LINUX, Arch.X86_64): "linux-x64",
    (Os.LINUX, Arch.AARCH64): "linux-arm64",
    (Os.MACOS, Arch.X86_64): "osx-x64",
    (Os.MACOS, Arch.AARCH64): "osx-arm64",
    (Os.WINDOWS, Arch.X86_64): "win-x64",
    (Os.WINDOWS, Arch.AARCH64): "win-arm64",
}

TRIPLE_OS = {
    Os.LINUX: "unknown-linux-gnu",
    Os.MACOS: "apple-darwin",
    Os.WINDOWS: "pc-windows-msvc",
}

TRIPLE_ARCH = {
    Arch.X86_64: "x86_64",
    Arch.AARCH64: "aarch64",
}


def _reject_x86(key: PlatformKey, tool: str) -> None:
    if key.arch is Arch.X86:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: x86 (32-bit). {tool} only supports "
            "64-bit architectures (amd64/arm64).",
            os=key.os.value,
            arch=key.arch.value,
        )


def resolve_asset_suffix(key: PlatformKey) -> str:
    """
    Get the netcoredbg release-asset suffix for a platform.

    Args:
        key: Platform to resolve

    Returns:
        Suffix including the archive extension (e.g. 'linux-amd64.tar.gz')

    Raises:
        UnsupportedPlatformError: For x86 or any unmapped pair

    Example:
        >>> resolve_asset_suffix(PlatformKey(Os.LINUX, Arch.X86_64))
        'linux-amd64.tar.gz'
    """
    _reject_x86(key, "NetCoreDbg")

    suffix = ASSET_SUFFIXES.get((key.os, key.arch))
    if suffix is None:
        raise UnsupportedPlatformError(
            f"No release asset is published for platform {key}",
            os=key.os.value,
            arch=key.arch.value,
        )
    return suffix


def resolve_runtime_identifier(key: PlatformKey) -> str:
    """
    Get the NuGet runtime identifier (RID) for a platform.

    Unmapped pairs resolve to the architecture-neutral ``"any"`` RID, since
    NuGet feeds also publish platform-independent payloads.

    Raises:
        UnsupportedPlatformError: For x86
    """
    _reject_x86(key, "The Roslyn language server")
    rid = RUNTIME_IDENTIFIERS.get((key.os, key.arch))
    if rid is None:
        logger.debug(f"No RID mapped for {key}, using '{NEUTRAL_RID}'")
        return NEUTRAL_RID
    return rid


def resolve_target_triple(key: PlatformKey) -> str:
    """
    Get the Rust-style target triple used by csharp-language-server assets.

    Example:
        >>> resolve_target_triple(PlatformKey(Os.MACOS, Arch.AARCH64))
        'aarch64-apple-darwin'
    """
    _reject_x86(key, "csharp-language-server")
    return f"{TRIPLE_ARCH[key.arch]}-{TRIPLE_OS[key.os]}"


def archive_kind(key: PlatformKey) -> ArchiveKind:
    """Archive format used for release assets on a platform."""
    return ArchiveKind.ZIP if key.is_windows else ArchiveKind.TAR_GZ


def executable_name(base_name: str, key: PlatformKey) -> str:
    """Append '.exe' on Windows."""
    return f"{base_name}.exe" if key.is_windows else base_name


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformKey:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the OS or architecture is not recognized
    """
    return PlatformKey(os=_detect_os(), arch=_detect_architecture())


def clear_platform_cache() -> None:
    """Clear the cached result of detect_platform()."""
    detect_platform.cache_clear()


def _detect_os() -> Os:
    system = platform.system().lower()

    if system == "windows":
        return Os.WINDOWS
    elif system == "linux":
        return Os.LINUX
    elif system == "darwin":
        return Os.MACOS
    else:
        raise UnsupportedPlatformError(
            f"Unsupported operating system: {system}", os=system
        )


def _detect_architecture() -> Arch:
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return Arch.X86_64
    elif machine in ("aarch64", "arm64"):
        return Arch.AARCH64
    elif machine in ("i386", "i686", "x86"):
        return Arch.X86
    else:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: {machine}", arch=machine
        )
