"""
GitHub Releases client.

Resolves the latest stable release of a repository and the download URL of
the asset published for the current platform.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tooldepot.core.exceptions import (
    AssetNotFoundForPlatformError,
    RegistryMetadataError,
)
from tooldepot.core.http import HttpTransport

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
RELEASES_PER_PAGE = 30


@dataclass(frozen=True)
class ResolvedVersion:
    """Registry lookup result."""

    tag: str
    """Release tag (used verbatim as the version)"""

    download_url: str
    """Download URL of the platform asset"""


@dataclass(frozen=True)
class ReleaseAsset:
    name: str
    download_url: str


@dataclass(frozen=True)
class GitHubRelease:
    """A published release and its assets."""

    tag: str
    prerelease: bool = False
    draft: bool = False
    assets: List[ReleaseAsset] = field(default_factory=list)

    def asset_names(self) -> List[str]:
        return [asset.name for asset in self.assets]


def _parse_release(data: Any, url: str) -> GitHubRelease:
    if not isinstance(data, dict) or "tag_name" not in data:
        raise RegistryMetadataError(
            f"Invalid release entry from {url}: missing 'tag_name'", url=url
        )

    assets = []
    for asset in data.get("assets") or []:
        try:
            assets.append(
                ReleaseAsset(
                    name=asset["name"], download_url=asset["browser_download_url"]
                )
            )
        except (KeyError, TypeError) as e:
            raise RegistryMetadataError(
                f"Invalid asset entry in release {data['tag_name']}: missing {e}",
                url=url,
            ) from e

    return GitHubRelease(
        tag=str(data["tag_name"]),
        prerelease=bool(data.get("prerelease", False)),
        draft=bool(data.get("draft", False)),
        assets=assets,
    )


class GitHubReleaseClient:
    """
    Client for the GitHub Releases API.

    Example:
        >>> client = GitHubReleaseClient()
        >>> version = client.latest("qwadrox/netcoredbg", "netcoredbg-win64.zip")
        >>> print(version.tag, version.download_url)
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        api_base: str = GITHUB_API_BASE,
        token: Optional[str] = None,
    ):
        """
        Initialize client.

        Args:
            transport: HTTP transport (a default one is created if None)
            api_base: GitHub API root URL
            token: API token; falls back to the GITHUB_TOKEN environment variable
        """
        self.transport = transport or HttpTransport()
        self.api_base = api_base.rstrip("/")
        self.token = token or os.environ.get(ENV_GITHUB_TOKEN)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_releases(self, owner_repo: str) -> List[GitHubRelease]:
        """
        List the most recent releases of a repository, newest first.

        Raises:
            RegistryFetchError: If the API cannot be reached
            RegistryMetadataError: If the response is not a release list
        """
        url = f"{self.api_base}/repos/{owner_repo}/releases?per_page={RELEASES_PER_PAGE}"
        data = self.transport.fetch_json(url, headers=self._headers())

        if not isinstance(data, list):
            raise RegistryMetadataError(
                f"Expected a list of releases from {url}", url=url
            )
        return [_parse_release(entry, url) for entry in data]

    def latest_release(self, owner_repo: str) -> GitHubRelease:
        """
        Get the newest release that is neither a draft nor a prerelease and
        has at least one asset.

        Raises:
            RegistryMetadataError: If no such release exists
        """
        for release in self.list_releases(owner_repo):
            if release.draft or release.prerelease or not release.assets:
                logger.debug(f"Skipping release {release.tag} of {owner_repo}")
                continue
            logger.debug(f"Latest release of {owner_repo}: {release.tag}")
            return release

        raise RegistryMetadataError(
            f"No stable release with assets found for {owner_repo}",
            url=f"{self.api_base}/repos/{owner_repo}/releases",
        )

    def latest(self, owner_repo: str, asset_name: str) -> ResolvedVersion:
        """
        Resolve the latest release and the asset named ``asset_name``.

        Args:
            owner_repo: Repository coordinate, e.g. 'qwadrox/netcoredbg'
            asset_name: Exact asset file name for this platform

        Returns:
            ResolvedVersion with the release tag and asset URL

        Raises:
            AssetNotFoundForPlatformError: If no asset has that exact name
        """
        release = self.latest_release(owner_repo)

        for asset in release.assets:
            if asset.name == asset_name:
                return ResolvedVersion(tag=release.tag, download_url=asset.download_url)

        raise AssetNotFoundForPlatformError(asset_name, release.asset_names())
