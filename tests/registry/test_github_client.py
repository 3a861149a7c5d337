"""
Unit tests for the GitHub Releases client.
"""

import pytest
import responses

from tooldepot.core.exceptions import (
    AssetNotFoundForPlatformError,
    ErrorKind,
    RegistryFetchError,
    RegistryMetadataError,
)
from tooldepot.registry.github import GitHubReleaseClient, ResolvedVersion

REPO = "qwadrox/netcoredbg"
RELEASES_URL = f"https://api.github.com/repos/{REPO}/releases?per_page=30"


def release(tag, assets=(), prerelease=False, draft=False):
    return {
        "tag_name": tag,
        "prerelease": prerelease,
        "draft": draft,
        "assets": [
            {"name": name, "browser_download_url": f"https://dl/{tag}/{name}"}
            for name in assets
        ],
    }


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return GitHubReleaseClient()


class TestLatestRelease:
    """Tests for release selection."""

    @responses.activate
    def test_first_stable_release(self, client):
        """Test drafts, prereleases and asset-less releases are skipped."""
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[
                release("4.0.0-rc1", ["a.zip"], prerelease=True),
                release("3.9.0", ["a.zip"], draft=True),
                release("3.8.0", []),
                release("3.7.0", ["a.zip"]),
                release("3.6.0", ["a.zip"]),
            ],
        )

        assert client.latest_release(REPO).tag == "3.7.0"

    @responses.activate
    def test_no_stable_release(self, client):
        """Test a list with nothing eligible raises."""
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release("1.0.0-beta", ["a.zip"], prerelease=True)],
        )

        with pytest.raises(RegistryMetadataError, match="No stable release"):
            client.latest_release(REPO)

    @responses.activate
    def test_not_a_list(self, client):
        """Test an unexpected document shape raises."""
        responses.add(responses.GET, RELEASES_URL, json={"message": "Not Found"})

        with pytest.raises(RegistryMetadataError):
            client.list_releases(REPO)

    @responses.activate
    def test_missing_tag_name(self, client):
        """Test a release without tag_name raises."""
        responses.add(responses.GET, RELEASES_URL, json=[{"assets": []}])

        with pytest.raises(RegistryMetadataError, match="tag_name"):
            client.list_releases(REPO)

    @responses.activate
    def test_server_error(self, client):
        """Test API failures raise RegistryFetchError."""
        responses.add(responses.GET, RELEASES_URL, status=503)

        with pytest.raises(RegistryFetchError) as exc_info:
            client.latest_release(REPO)

        assert exc_info.value.status_code == 503


class TestLatest:
    """Tests for asset resolution."""

    @responses.activate
    def test_exact_asset_match(self, client):
        """Test the asset with the exact name is chosen."""
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[
                release(
                    "3.1.2-1054",
                    [
                        "netcoredbg-linux-amd64.tar.gz.sha256",
                        "netcoredbg-linux-amd64.tar.gz",
                        "netcoredbg-win64.zip",
                    ],
                )
            ],
        )

        resolved = client.latest(REPO, "netcoredbg-linux-amd64.tar.gz")

        assert resolved == ResolvedVersion(
            tag="3.1.2-1054",
            download_url="https://dl/3.1.2-1054/netcoredbg-linux-amd64.tar.gz",
        )

    @responses.activate
    def test_asset_not_found(self, client):
        """Test a missing asset lists what is available."""
        responses.add(
            responses.GET,
            RELEASES_URL,
            json=[release("3.1.2", ["netcoredbg-win64.zip", "netcoredbg-osx-arm64.tar.gz"])],
        )

        with pytest.raises(AssetNotFoundForPlatformError) as exc_info:
            client.latest(REPO, "netcoredbg-linux-arm64.tar.gz")

        error = exc_info.value
        assert error.kind is ErrorKind.ASSET_NOT_FOUND_FOR_PLATFORM
        assert error.expected_name == "netcoredbg-linux-arm64.tar.gz"
        assert error.available_names == [
            "netcoredbg-win64.zip",
            "netcoredbg-osx-arm64.tar.gz",
        ]
        assert "Looking for: 'netcoredbg-linux-arm64.tar.gz'" in str(error)
        assert "netcoredbg-win64.zip, netcoredbg-osx-arm64.tar.gz" in str(error)


class TestAuthentication:
    """Tests for request headers."""

    @responses.activate
    def test_no_token(self, client):
        """Test no Authorization header without a token."""
        responses.add(responses.GET, RELEASES_URL, json=[release("1.0", ["a"])])

        client.latest_release(REPO)

        headers = responses.calls[0].request.headers
        assert "Authorization" not in headers
        assert headers["Accept"] == "application/vnd.github+json"

    @responses.activate
    def test_explicit_token(self, monkeypatch):
        """Test an explicit token is sent as a bearer token."""
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        responses.add(responses.GET, RELEASES_URL, json=[release("1.0", ["a"])])

        GitHubReleaseClient(token="explicit").latest_release(REPO)

        assert responses.calls[0].request.headers["Authorization"] == "Bearer explicit"

    @responses.activate
    def test_env_token(self, monkeypatch):
        """Test GITHUB_TOKEN is used when no token is given."""
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        responses.add(responses.GET, RELEASES_URL, json=[release("1.0", ["a"])])

        GitHubReleaseClient().latest_release(REPO)

        assert responses.calls[0].request.headers["Authorization"] == "Bearer from-env"

    @responses.activate
    def test_custom_api_base(self, client):
        """Test a GitHub Enterprise style API root."""
        url = f"https://ghe.example.com/api/v3/repos/{REPO}/releases?per_page=30"
        responses.add(responses.GET, url, json=[release("1.0", ["a"])])

        enterprise = GitHubReleaseClient(api_base="https://ghe.example.com/api/v3/")

        assert enterprise.latest_release(REPO).tag == "1.0"
