"""
csharp-language-server, a thin launcher around Roslyn published on GitHub.

Asset names follow ``csharp-language-server-{triple}.{ext}``, e.g.
``csharp-language-server-x86_64-unknown-linux-gnu.tar.gz``.
"""

from tooldepot.core.platform import archive_kind, resolve_target_triple
from tooldepot.tools.release import ReleaseToolManager

CSHARP_LS_REPOSITORY = "SofusA/csharp-language-server"


class CSharpLanguageServerManager(ReleaseToolManager):
    """Acquire the csharp-language-server binary."""

    name = "csharp-language-server"
    binary_name = "csharp-language-server"
    repository = CSHARP_LS_REPOSITORY
    version_separator = "-"
    extract_in_place = True

    def asset_name(self) -> str:
        triple = resolve_target_triple(self.platform)
        return f"{self.binary_name}-{triple}.{archive_kind(self.platform).value}"
