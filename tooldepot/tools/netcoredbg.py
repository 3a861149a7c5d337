"""
netcoredbg debug adapter.

Release assets:
    netcoredbg-linux-amd64.tar.gz
    netcoredbg-linux-arm64.tar.gz
    netcoredbg-osx-amd64.tar.gz
    netcoredbg-osx-arm64.tar.gz
    netcoredbg-win64.zip

Installs land in ``netcoredbg_v{tag}`` under the install root.
"""

from tooldepot.core.platform import resolve_asset_suffix
from tooldepot.tools.release import ReleaseToolManager

NETCOREDBG_REPOSITORY = "qwadrox/netcoredbg"


class NetcoredbgManager(ReleaseToolManager):
    """
    Acquire the netcoredbg binary.

    Example:
        >>> manager = NetcoredbgManager()
        >>> path = manager.get_binary_path()
    """

    name = "netcoredbg"
    binary_name = "netcoredbg"
    repository = NETCOREDBG_REPOSITORY
    version_separator = "_v"

    def asset_name(self) -> str:
        return f"netcoredbg-{resolve_asset_suffix(self.platform)}"
