"""
tooldepot - acquire .NET debugger and language server binaries.

Resolves the latest published version of a tool, downloads the artifact for
the current platform, and caches the install on disk and in memory.
"""

__version__ = "0.1.0"
