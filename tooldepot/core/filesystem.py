"""
Filesystem utilities for tooldepot.

This module provides the disk-side building blocks of an acquisition:
- Archive extraction (zip, tar.gz) with directory traversal protection
- Scoped staging directories that are removed on every exit path
- Locating a binary inside an extracted tree of unknown layout
- Content copies and executable-bit handling
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import time
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional, TypeVar, Union

from tooldepot.core.exceptions import (
    ArchiveExtractionError,
    BinaryNotFoundError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)
from tooldepot.core.platform import ArchiveKind

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

T = TypeVar("T")


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked.",
            path=destination,
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    kind: Optional[ArchiveKind] = None,
) -> None:
    """
    Extract an archive to a destination directory.

    Validates all member paths to prevent directory traversal attacks.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (created if missing)
        kind: Archive format; detected from the file name when None.
            NuGet packages (.nupkg) are zip containers.

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('netcoredbg-linux-amd64.tar.gz', 'staging')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(
            f"Archive not found: {archive_path}", path=archive_path
        )

    if kind is None:
        kind = _detect_archive_kind(archive_path)

    destination.mkdir(parents=True, exist_ok=True)

    try:
        if kind is ArchiveKind.ZIP:
            _extract_zip(archive_path, destination)
        else:
            _extract_tar(archive_path, destination, "r:gz")
    except ArchiveExtractionError:
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
        raise ArchiveExtractionError(
            f"Failed to extract {archive_path}: {e}", path=archive_path
        ) from e


def _detect_archive_kind(archive_path: Path) -> ArchiveKind:
    name = archive_path.name.lower()
    if name.endswith((".zip", ".nupkg")):
        return ArchiveKind.ZIP
    if name.endswith((".tar.gz", ".tgz")):
        return ArchiveKind.TAR_GZ
    raise UnsupportedArchiveFormat(
        f"Unsupported archive format: {archive_path.name}. "
        "Supported: .zip, .nupkg, .tar.gz",
        path=archive_path,
    )


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        for member in members:
            _validate_archive_path(member, destination)

        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Staging Directories
# ============================================================================


@contextmanager
def staging_directory(
    prefix: str, parent: Optional[Union[str, Path]] = None
) -> Iterator[Path]:
    """
    Context manager for a disposable staging directory.

    The directory is named ``{prefix}{time_ns}`` under ``parent`` (the current
    working directory by default). It exists before the body runs and is
    removed recursively when the body exits, however it exits.

    Example:
        >>> with staging_directory("netcoredbg_v3.1.2_") as staging:
        ...     extract_archive("netcoredbg.tar.gz", staging)
    """
    base = Path(parent) if parent is not None else Path.cwd()
    staging = base / f"{prefix}{time.time_ns()}"

    try:
        staging.mkdir(parents=True)
    except OSError as e:
        raise FilesystemError(
            f"Failed to create staging directory {staging}: {e}", path=staging
        ) from e

    logger.debug(f"Created staging directory {staging}")
    try:
        yield staging
    finally:
        shutil.rmtree(staging, ignore_errors=True)
        logger.debug(f"Removed staging directory {staging}")


def with_staging_dir(
    prefix: str,
    fn: Callable[[Path], T],
    parent: Optional[Union[str, Path]] = None,
) -> T:
    """Run ``fn`` with a staging directory and return its result."""
    with staging_directory(prefix, parent) as staging:
        return fn(staging)


@contextmanager
def temporary_directory(prefix: str = "tooldepot_") -> Iterator[Path]:
    """Context manager for a system temp directory with automatic cleanup."""
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


# ============================================================================
# Binary Location
# ============================================================================


def find_named(root: Union[str, Path], name: str) -> Path:
    """
    Find the first file named exactly ``name`` under ``root``.

    Depth-first, using an explicit stack so deeply nested trees cannot exhaust
    the call stack. Returns as soon as a match is found; otherwise every
    directory is visited.

    Args:
        root: Directory to search
        name: Exact file name (e.g. 'netcoredbg.exe')

    Returns:
        Path to the first matching file

    Raises:
        BinaryNotFoundError: If no file matches
        FilesystemError: If a directory cannot be read

    Example:
        >>> find_named("staging", "netcoredbg")
        PosixPath('staging/netcoredbg/bin/netcoredbg')
    """
    root = Path(root)
    stack = [root]

    while stack:
        directory = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise FilesystemError(
                f"Failed to read directory {directory}: {e}", path=directory
            ) from e

        subdirectories = []
        for entry in entries:
            if entry.is_file() and entry.name == name:
                return entry
            if entry.is_dir() and not entry.is_symlink():
                subdirectories.append(entry)

        # Reversed so the first subdirectory is popped first.
        stack.extend(reversed(subdirectories))

    raise BinaryNotFoundError(
        f"Could not find {name} binary in extracted content at {root}",
        expected_name=name,
        path=root,
    )


def find_single_subdirectory(parent: Union[str, Path]) -> Path:
    """
    Return the only subdirectory of ``parent``.

    Raises:
        BinaryNotFoundError: If ``parent`` is missing or has zero or
            several subdirectories
    """
    parent = Path(parent)
    if not parent.is_dir():
        raise BinaryNotFoundError(
            f"Expected directory not found: {parent}", path=parent
        )

    subdirectories: List[Path] = sorted(p for p in parent.iterdir() if p.is_dir())
    if len(subdirectories) != 1:
        names = [p.name for p in subdirectories]
        if not names:
            message = f"No subdirectory found in {parent}"
        else:
            message = (
                f"Expected exactly one subdirectory in {parent}, "
                f"found {len(names)}: {', '.join(names)}"
            )
        raise BinaryNotFoundError(message, path=parent, candidates=names)

    return subdirectories[0]


# ============================================================================
# File Operations
# ============================================================================


def copy_directory_contents(
    source: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Copy the contents of ``source`` into ``destination``.

    The destination is created if needed; existing files are overwritten.

    Raises:
        FilesystemError: If the copy fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}", path=source)

    try:
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise FilesystemError(
            f"Failed to copy extracted content from {source}: {e}", path=source
        ) from e


def make_executable(path: Union[str, Path]) -> None:
    """
    Add execute permission for user, group and others.

    No-op on Windows.

    Raises:
        FilesystemError: If the mode cannot be changed
    """
    if IS_WINDOWS:
        return

    path = Path(path)
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(
            f"Failed to make file executable: {path}: {e}", path=path
        ) from e


__all__ = [
    "extract_archive",
    "staging_directory",
    "with_staging_dir",
    "temporary_directory",
    "find_named",
    "find_single_subdirectory",
    "copy_directory_contents",
    "make_executable",
]
