"""
Managed tools.

Each tool manager resolves a runnable path for one external binary,
downloading and caching it as needed.
"""

from .base import ServerPath, ServerPathKind, ToolManager
from .release import ReleaseToolManager
from .netcoredbg import NetcoredbgManager
from .csharp_ls import CSharpLanguageServerManager
from .roslyn import RoslynManager

TOOL_MANAGERS = {
    NetcoredbgManager.name: NetcoredbgManager,
    RoslynManager.name: RoslynManager,
    CSharpLanguageServerManager.name: CSharpLanguageServerManager,
}

__all__ = [
    "ServerPath",
    "ServerPathKind",
    "ToolManager",
    "ReleaseToolManager",
    "NetcoredbgManager",
    "CSharpLanguageServerManager",
    "RoslynManager",
    "TOOL_MANAGERS",
]
