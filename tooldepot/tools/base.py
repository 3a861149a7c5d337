"""
Base class for tool acquisition.

Every managed tool resolves a runnable path through the same sequence:

1. A caller-supplied path wins outright and is returned unvalidated.
2. The in-memory cache is used if its path still exists as a file.
3. The latest remote version is resolved; if its version directory already
   holds the expected binary, that binary is used without downloading.
4. Otherwise the artifact is downloaded, extracted, located and validated,
   older version directories are pruned, and the result is cached.

Any failure aborts the acquisition with a ``ToolDepotError`` and nothing is
recorded in the memory cache.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from tooldepot.core.cache import (
    MemoryPathCache,
    PathCache,
    prune_siblings,
    stale_siblings,
)
from tooldepot.core.exceptions import BinaryNotFoundError
from tooldepot.core.platform import PlatformKey, detect_platform
from tooldepot.core.versioning import select_max_version
from tooldepot.registry.github import ResolvedVersion

logger = logging.getLogger(__name__)


class ServerPathKind(Enum):
    """How a resolved binary must be launched."""

    EXECUTABLE = "executable"
    """Run the file directly"""

    MANAGED_PAYLOAD = "managed_payload"
    """Run the file through the dotnet host (``dotnet <path>``)"""


@dataclass(frozen=True)
class ServerPath:
    """Resolved binary path tagged with its launch kind."""

    kind: ServerPathKind
    path: Path

    @classmethod
    def executable(cls, path: Union[str, Path]) -> "ServerPath":
        return cls(ServerPathKind.EXECUTABLE, Path(path))

    @classmethod
    def managed_payload(cls, path: Union[str, Path]) -> "ServerPath":
        return cls(ServerPathKind.MANAGED_PAYLOAD, Path(path))

    @property
    def is_managed(self) -> bool:
        return self.kind is ServerPathKind.MANAGED_PAYLOAD


class ToolManager(ABC):
    """
    Acquires one tool and caches the result.

    Subclasses describe where the tool comes from and how it is laid out on
    disk; this class owns the cache and install sequence.
    """

    name: str = ""
    """Tool name used in logs and the CLI"""

    def __init__(
        self,
        install_root: Optional[Union[str, Path]] = None,
        cache: Optional[PathCache] = None,
        platform: Optional[PlatformKey] = None,
    ):
        """
        Initialize tool manager.

        Args:
            install_root: Directory holding version directories. If None, the
                current working directory at call time is used.
            cache: In-memory path cache (a fresh MemoryPathCache if None)
            platform: Target platform (detected if None)
        """
        self._install_root = Path(install_root) if install_root is not None else None
        self.cache = cache if cache is not None else MemoryPathCache()
        self._platform = platform

    @property
    def install_root(self) -> Path:
        root = self._install_root if self._install_root is not None else Path.cwd()
        return root.absolute()

    @property
    def platform(self) -> PlatformKey:
        if self._platform is None:
            self._platform = detect_platform()
        return self._platform

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def resolve_latest(self) -> ResolvedVersion:
        """Resolve the latest remote version and its artifact URL."""
        pass

    @abstractmethod
    def version_dir_name(self, version: str) -> str:
        """Name of the version directory for ``version``."""
        pass

    @property
    @abstractmethod
    def version_dir_prefix(self) -> str:
        """Prefix shared by every version directory of this tool."""
        pass

    @abstractmethod
    def installed_binary(self, version_dir: Path) -> Optional[Path]:
        """Return the binary inside a complete install, or None."""
        pass

    @abstractmethod
    def install(self, resolved: ResolvedVersion, version_dir: Path) -> Path:
        """Download, extract and locate the binary into ``version_dir``."""
        pass

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def version_dir(self, version: str) -> Path:
        return self.install_root / self.version_dir_name(version)

    def latest_version(self) -> str:
        """Latest remote version, without downloading anything."""
        return self.resolve_latest().tag

    def get_binary_path(self, user_provided_path: Optional[str] = None) -> Path:
        """
        Get a runnable path for the tool, downloading it if necessary.

        Args:
            user_provided_path: Explicit path from the user; returned as is

        Returns:
            Absolute path to the binary (or the user path unchanged)

        Raises:
            ToolDepotError: If any acquisition step fails
        """
        if user_provided_path:
            logger.debug(f"Using user-provided {self.name} path: {user_provided_path}")
            return Path(user_provided_path)

        cached = self.cache.get()
        if cached is not None:
            if cached.is_file():
                logger.debug(f"Using cached {self.name} path: {cached}")
                return cached
            logger.debug(f"Cached {self.name} path no longer exists: {cached}")

        resolved = self.resolve_latest()
        version_dir = self.version_dir(resolved.tag)

        existing = self.installed_binary(version_dir)
        if existing is not None:
            logger.info(f"{self.name} {resolved.tag} already installed: {existing}")
            self._remember(existing)
            return existing

        logger.info(f"Installing {self.name} {resolved.tag} into {version_dir}")
        binary = self.install(resolved, version_dir)
        self.validate_binary(binary)

        prune_siblings(
            self.install_root, version_dir.name, prefix=self.version_dir_prefix
        )
        self._remember(binary)
        logger.info(f"Installed {self.name} {resolved.tag}: {binary}")
        return binary

    def validate_binary(self, binary_path: Path) -> None:
        """
        Check that the binary exists and is a file.

        Raises:
            BinaryNotFoundError: If the path is missing or not a file
        """
        if not binary_path.exists():
            raise BinaryNotFoundError(
                f"{self.name} binary not found at: {binary_path}",
                expected_name=binary_path.name,
                path=binary_path,
            )
        if not binary_path.is_file():
            raise BinaryNotFoundError(
                f"{self.name} path is not a file: {binary_path}",
                expected_name=binary_path.name,
                path=binary_path,
            )

    # ------------------------------------------------------------------
    # Local installs
    # ------------------------------------------------------------------

    def installed_versions(self) -> List[str]:
        """Versions with a directory under the install root, by name."""
        root = self.install_root
        if not root.is_dir():
            return []

        prefix = self.version_dir_prefix
        return [
            entry.name[len(prefix):]
            for entry in sorted(root.iterdir())
            if entry.is_dir() and entry.name.startswith(prefix)
        ]

    def prune(self, dry_run: bool = False) -> List[Path]:
        """
        Remove every install of this tool except the newest local version.

        Args:
            dry_run: List what would be removed without removing it

        Returns:
            Paths removed (or that would be removed)

        Raises:
            VersionParseError: If no installed version name parses
        """
        versions = self.installed_versions()
        if not versions:
            logger.info(f"No installed versions of {self.name} in {self.install_root}")
            return []

        newest = select_max_version(versions)
        keep_name = self.version_dir_name(newest)
        logger.debug(f"Keeping {self.name} {newest}")

        if dry_run:
            return stale_siblings(
                self.install_root, keep_name, prefix=self.version_dir_prefix
            )
        return prune_siblings(
            self.install_root, keep_name, prefix=self.version_dir_prefix
        )

    def _remember(self, path: Path) -> None:
        if not self.cache.try_set(path):
            logger.debug(f"{self.name} path cache already populated, keeping it")
