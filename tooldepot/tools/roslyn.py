"""
Roslyn language server from the NuGet feed.

The server ships as one package per runtime identifier,
``roslyn-language-server.{rid}``, laid out as a .NET tool:

    tools/{tfm}/{rid}/roslyn-language-server        (linux-*, osx-*)
    tools/{tfm}/{rid}/roslyn-language-server.exe    (win-*)
    tools/{tfm}/any/roslyn-language-server.dll      (framework-dependent)

The framework-dependent ``any`` payload is not directly executable; it must
be launched through the dotnet host.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from tooldepot.core.cache import PathCache
from tooldepot.core.exceptions import BinaryNotFoundError
from tooldepot.core.filesystem import find_single_subdirectory, make_executable
from tooldepot.core.platform import (
    NEUTRAL_RID,
    PlatformKey,
    resolve_runtime_identifier,
)
from tooldepot.registry.github import ResolvedVersion
from tooldepot.registry.nuget import NuGetClient
from tooldepot.tools.base import ServerPath, ToolManager

logger = logging.getLogger(__name__)

ROSLYN_PACKAGE_ID = "roslyn-language-server"
ROSLYN_BINARY_NAME = "roslyn-language-server"
TOOLS_DIR = "tools"


class RoslynManager(ToolManager):
    """
    Acquire the Roslyn language server.

    Example:
        >>> manager = RoslynManager()
        >>> server = manager.get_server_path()
        >>> if server.is_managed:
        ...     command = ["dotnet", str(server.path)]
    """

    name = "roslyn"

    def __init__(
        self,
        client: Optional[NuGetClient] = None,
        install_root: Optional[Union[str, Path]] = None,
        cache: Optional[PathCache] = None,
        platform: Optional[PlatformKey] = None,
        rid: Optional[str] = None,
    ):
        """
        Initialize Roslyn manager.

        Args:
            client: NuGet client (nuget.org if None)
            install_root: Directory holding version directories
            cache: In-memory path cache
            platform: Target platform (detected if None)
            rid: Runtime identifier override (e.g. 'any')
        """
        super().__init__(install_root=install_root, cache=cache, platform=platform)
        self.client = client or NuGetClient()
        self._rid = rid

    @property
    def rid(self) -> str:
        if self._rid is None:
            self._rid = resolve_runtime_identifier(self.platform)
        return self._rid

    @property
    def package_id(self) -> str:
        return f"{ROSLYN_PACKAGE_ID}.{self.rid}"

    @property
    def version_dir_prefix(self) -> str:
        return "roslyn-"

    def version_dir_name(self, version: str) -> str:
        return f"{self.version_dir_prefix}{version}"

    def resolve_latest(self) -> ResolvedVersion:
        version = self.client.latest_version(self.package_id)
        return ResolvedVersion(
            tag=version, download_url=self.client.package_url(self.package_id, version)
        )

    def locate_server(self, version_dir: Path) -> ServerPath:
        """
        Find the server binary in an extracted package.

        Raises:
            BinaryNotFoundError: If the tools folder is missing or ambiguous,
                or the binary is absent
        """
        tfm_dir = find_single_subdirectory(version_dir / TOOLS_DIR)
        rid_dir = tfm_dir / self.rid

        if self.rid == NEUTRAL_RID:
            server = ServerPath.managed_payload(rid_dir / f"{ROSLYN_BINARY_NAME}.dll")
        elif self.rid.startswith("win"):
            server = ServerPath.executable(rid_dir / f"{ROSLYN_BINARY_NAME}.exe")
        else:
            server = ServerPath.executable(rid_dir / ROSLYN_BINARY_NAME)

        if not server.path.is_file():
            raise BinaryNotFoundError(
                f"Roslyn language server not found at: {server.path}",
                expected_name=server.path.name,
                path=rid_dir,
            )
        return server

    def installed_binary(self, version_dir: Path) -> Optional[Path]:
        try:
            return self.locate_server(version_dir).path
        except BinaryNotFoundError:
            return None

    def install(self, resolved: ResolvedVersion, version_dir: Path) -> Path:
        self.client.download_and_extract(self.package_id, resolved.tag, version_dir)

        server = self.locate_server(version_dir)
        if not server.is_managed:
            make_executable(server.path)
        return server.path

    def get_server_path(self, user_provided_path: Optional[str] = None) -> ServerPath:
        """
        Get the server binary tagged with how it must be launched.

        A ``.dll`` path (including a user-provided one) is a managed payload;
        anything else is launched directly.
        """
        path = self.get_binary_path(user_provided_path)
        if path.suffix.lower() == ".dll":
            return ServerPath.managed_payload(path)
        return ServerPath.executable(path)
