"""
NuGet v3 feed client.

The feed is discovered in two steps: the service index lists resources by
type, and the ``PackageBaseAddress/3.0.0`` resource is the root for both the
per-package version index and the flat-container package downloads:

    {base}/{lower_id}/index.json
    {base}/{lower_id}/{lower_version}/{lower_id}.{lower_version}.nupkg
"""

import logging
from pathlib import Path
from typing import Optional, Union

from tooldepot.core.exceptions import RegistryMetadataError
from tooldepot.core.http import HttpTransport
from tooldepot.core.platform import ArchiveKind
from tooldepot.core.versioning import select_max_version

logger = logging.getLogger(__name__)

NUGET_SERVICE_INDEX = "https://api.nuget.org/v3/index.json"
PACKAGE_BASE_ADDRESS_TYPE = "PackageBaseAddress/3.0.0"


class NuGetClient:
    """
    Client for a NuGet v3 feed.

    The package base address is looked up once per instance and reused for
    every later call.

    Example:
        >>> client = NuGetClient()
        >>> version = client.latest_version("roslyn-language-server.linux-x64")
        >>> client.download_and_extract("roslyn-language-server.linux-x64", version, "roslyn")
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        service_index_url: str = NUGET_SERVICE_INDEX,
    ):
        self.transport = transport or HttpTransport()
        self.service_index_url = service_index_url
        self._package_base_address: Optional[str] = None

    def package_base_address(self) -> str:
        """
        Get the flat-container base URL of the feed.

        Raises:
            RegistryFetchError: If the service index cannot be fetched
            RegistryMetadataError: If the index lacks the resource
        """
        if self._package_base_address is not None:
            return self._package_base_address

        url = self.service_index_url
        index = self.transport.fetch_json(url)

        resources = index.get("resources") if isinstance(index, dict) else None
        if not isinstance(resources, list):
            raise RegistryMetadataError(
                "invalid NuGet service index: missing 'resources' array", url=url
            )

        for resource in resources:
            if not isinstance(resource, dict):
                continue
            if resource.get("@type") == PACKAGE_BASE_ADDRESS_TYPE and isinstance(
                resource.get("@id"), str
            ):
                self._package_base_address = resource["@id"].rstrip("/")
                logger.debug(f"NuGet package base address: {self._package_base_address}")
                return self._package_base_address

        raise RegistryMetadataError(
            f"{PACKAGE_BASE_ADDRESS_TYPE} not found in NuGet service index", url=url
        )

    def latest_version(self, package_id: str) -> str:
        """
        Get the highest version listed for a package, prereleases included.

        Raises:
            RegistryMetadataError: If the version index has no 'versions' array
            VersionParseError: If none of the listed versions parse
        """
        base = self.package_base_address()
        lower_id = package_id.lower()
        url = f"{base}/{lower_id}/index.json"

        body = self.transport.fetch_json(url)
        versions = body.get("versions") if isinstance(body, dict) else None
        if not isinstance(versions, list):
            raise RegistryMetadataError(
                f"no versions array for NuGet package '{package_id}'", url=url
            )

        latest = select_max_version(v for v in versions if isinstance(v, str))
        logger.debug(f"Latest version of {package_id}: {latest}")
        return latest

    def package_url(self, package_id: str, version: str) -> str:
        """Flat-container URL of a package archive."""
        base = self.package_base_address()
        lower_id = package_id.lower()
        lower_version = version.lower()
        return f"{base}/{lower_id}/{lower_version}/{lower_id}.{lower_version}.nupkg"

    def download_and_extract(
        self, package_id: str, version: str, dest_dir: Union[str, Path]
    ) -> None:
        """
        Download a package and extract it into ``dest_dir``.

        Raises:
            DownloadError: If the download or extraction fails
        """
        url = self.package_url(package_id, version)
        logger.info(f"Downloading NuGet package {package_id} {version}")
        self.transport.download_and_extract(url, dest_dir, ArchiveKind.ZIP)
