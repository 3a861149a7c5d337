"""Clients for the registries binaries are published to."""

from .github import GitHubReleaseClient, GitHubRelease, ReleaseAsset, ResolvedVersion
from .nuget import NuGetClient

__all__ = [
    "GitHubReleaseClient",
    "GitHubRelease",
    "ReleaseAsset",
    "ResolvedVersion",
    "NuGetClient",
]
