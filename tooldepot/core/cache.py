"""
Acquisition cache for resolved binary paths.

Two layers:
- On disk, a version directory (e.g. ``netcoredbg_v3.1.2``) is both the cache
  key and the install marker. If the expected binary exists under it, the
  install is complete.
- In memory, a ``PathCache`` remembers the last resolved path for the
  process lifetime. It is injected into tool managers so it can be replaced
  with ``NullPathCache`` or a test double.

After a fresh install, ``prune_siblings`` removes older version directories;
``stale_siblings`` lists them without removing anything.
"""

import logging
import shutil
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class PathCache(ABC):
    """Single-assignment cell holding a resolved path."""

    @abstractmethod
    def get(self) -> Optional[Path]:
        """Return the cached path, or None if nothing was stored."""
        pass

    @abstractmethod
    def try_set(self, path: Path) -> bool:
        """
        Store ``path`` if the cell is empty.

        Returns:
            True if this call stored the value, False if a value was
            already present (the existing value is kept)
        """
        pass


class MemoryPathCache(PathCache):
    """
    Write-once, read-many path cell.

    Safe to share between threads: when two callers race to populate it, the
    first writer wins and the second call returns False without overwriting.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._path: Optional[Path] = None

    def get(self) -> Optional[Path]:
        return self._path

    def try_set(self, path: Path) -> bool:
        with self._lock:
            if self._path is not None:
                return False
            self._path = Path(path)
            return True


class NullPathCache(PathCache):
    """Cache that never stores anything."""

    def get(self) -> Optional[Path]:
        return None

    def try_set(self, path: Path) -> bool:
        return False


def stale_siblings(
    scan_dir: Union[str, Path], keep_name: str, prefix: Optional[str] = None
) -> List[Path]:
    """
    List the entries ``prune_siblings`` would remove, without removing them.

    An unreadable ``scan_dir`` yields an empty list (logged as a warning).
    """
    scan_dir = Path(scan_dir)

    try:
        entries = sorted(scan_dir.iterdir())
    except OSError as e:
        logger.warning(f"Failed to list {scan_dir} for stale versions: {e}")
        return []

    return [
        entry
        for entry in entries
        if entry.name != keep_name
        and (prefix is None or entry.name.startswith(prefix))
    ]


def prune_siblings(
    scan_dir: Union[str, Path], keep_name: str, prefix: Optional[str] = None
) -> List[Path]:
    """
    Remove every entry in ``scan_dir`` except ``keep_name``.

    Best effort: failures are logged and skipped, never raised.

    Args:
        scan_dir: Directory holding version directories
        keep_name: Name of the entry to keep (the fresh install)
        prefix: If given, only entries whose name starts with it are removed

    Returns:
        Paths that were removed

    Example:
        >>> prune_siblings("tools", "netcoredbg_v3.1.2", prefix="netcoredbg_v")
        [PosixPath('tools/netcoredbg_v3.0.0')]
    """
    removed: List[Path] = []

    for entry in stale_siblings(scan_dir, keep_name, prefix):
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as e:
            logger.warning(f"Failed to remove stale entry {entry}: {e}")
            continue

        logger.info(f"Removed stale version: {entry}")
        removed.append(entry)

    return removed
