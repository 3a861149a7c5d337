"""
Pytest configuration and shared fixtures for tooldepot tests.
"""

import io
import tarfile
import zipfile
from typing import Callable, Dict

import pytest

from tooldepot.core.platform import Arch, Os, PlatformKey, clear_platform_cache


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Keep detect_platform() results from leaking between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def linux_x64() -> PlatformKey:
    return PlatformKey(Os.LINUX, Arch.X86_64)


@pytest.fixture
def windows_x64() -> PlatformKey:
    return PlatformKey(Os.WINDOWS, Arch.X86_64)


@pytest.fixture
def tar_gz_bytes() -> Callable[[Dict[str, bytes]], bytes]:
    """Build an in-memory .tar.gz from a {member name: content} mapping."""

    def build(files: Dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            for name, data in files.items():
                info = tarfile.TarInfo(name)
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
        return buffer.getvalue()

    return build


@pytest.fixture
def zip_bytes() -> Callable[[Dict[str, bytes]], bytes]:
    """Build an in-memory .zip from a {member name: content} mapping."""

    def build(files: Dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for name, data in files.items():
                zf.writestr(name, data)
        return buffer.getvalue()

    return build
