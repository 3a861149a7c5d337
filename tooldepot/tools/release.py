"""
Tools published as GitHub release assets.

The asset for the current platform is downloaded into a staging directory,
the binary is located wherever the archive nested it, and the directory that
contains it is copied (contents only) into the version directory.

Tools with ``extract_in_place`` skip staging: the archive is unpacked
directly into the version directory and the binary is located there.
"""

import logging
from abc import abstractmethod
from pathlib import Path
from typing import Optional, Union

from tooldepot.core.cache import PathCache
from tooldepot.core.filesystem import (
    copy_directory_contents,
    find_named,
    make_executable,
    staging_directory,
)
from tooldepot.core.platform import PlatformKey, archive_kind, executable_name
from tooldepot.core.exceptions import BinaryNotFoundError, FilesystemError
from tooldepot.registry.github import GitHubReleaseClient, ResolvedVersion
from tooldepot.tools.base import ToolManager

logger = logging.getLogger(__name__)


class ReleaseToolManager(ToolManager):
    """Acquire a single-binary tool from GitHub releases."""

    repository: str = ""
    """GitHub 'owner/repo' coordinate"""

    binary_name: str = ""
    """Executable base name, without '.exe'"""

    version_separator: str = "-"

    extract_in_place: bool = False
    """Extract straight into the version directory instead of staging"""

    def __init__(
        self,
        client: Optional[GitHubReleaseClient] = None,
        install_root: Optional[Union[str, Path]] = None,
        cache: Optional[PathCache] = None,
        platform: Optional[PlatformKey] = None,
    ):
        super().__init__(install_root=install_root, cache=cache, platform=platform)
        self.client = client or GitHubReleaseClient()

    @abstractmethod
    def asset_name(self) -> str:
        """Release asset file name for the target platform."""
        pass

    @property
    def executable_name(self) -> str:
        return executable_name(self.binary_name, self.platform)

    @property
    def version_dir_prefix(self) -> str:
        return f"{self.name}{self.version_separator}"

    def version_dir_name(self, version: str) -> str:
        return f"{self.version_dir_prefix}{version}"

    def resolve_latest(self) -> ResolvedVersion:
        return self.client.latest(self.repository, self.asset_name())

    def installed_binary(self, version_dir: Path) -> Optional[Path]:
        if self.extract_in_place:
            if not version_dir.is_dir():
                return None
            try:
                return find_named(version_dir, self.executable_name)
            except BinaryNotFoundError:
                return None

        binary = version_dir / self.executable_name
        return binary if binary.is_file() else None

    def install(self, resolved: ResolvedVersion, version_dir: Path) -> Path:
        kind = archive_kind(self.platform)

        if self.extract_in_place:
            self.client.transport.download_and_extract(
                resolved.download_url, version_dir, kind
            )
            binary = find_named(version_dir, self.executable_name)
            make_executable(binary)
            return binary

        with staging_directory(
            f"{self.version_dir_name(resolved.tag)}_", parent=self.install_root
        ) as staging:
            self.client.transport.download_and_extract(
                resolved.download_url, staging, kind
            )
            source_binary = find_named(staging, self.executable_name)

            try:
                version_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    f"Failed to create version directory: {e}", path=version_dir
                ) from e

            copy_directory_contents(source_binary.parent, version_dir)

        binary = version_dir / self.executable_name
        if not binary.exists():
            raise BinaryNotFoundError(
                f"{self.name} executable not found at: {binary}",
                expected_name=self.executable_name,
                path=binary,
            )

        make_executable(binary)
        return binary
