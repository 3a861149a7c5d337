"""
Unit tests for the path cache and stale version cleanup.
"""

import shutil
import threading
from pathlib import Path
from unittest.mock import patch

from tooldepot.core.cache import (
    MemoryPathCache,
    NullPathCache,
    prune_siblings,
    stale_siblings,
)


class TestMemoryPathCache:
    """Tests for MemoryPathCache."""

    def test_empty(self):
        """Test a new cache holds nothing."""
        assert MemoryPathCache().get() is None

    def test_first_writer_wins(self):
        """Test a second try_set leaves the first value in place."""
        cache = MemoryPathCache()

        assert cache.try_set(Path("/a")) is True
        assert cache.try_set(Path("/b")) is False
        assert cache.get() == Path("/a")

    def test_concurrent_writers(self):
        """Test exactly one of many racing writers succeeds."""
        cache = MemoryPathCache()
        results = []
        barrier = threading.Barrier(8)

        def writer(i):
            barrier.wait()
            results.append(cache.try_set(Path(f"/p{i}")))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert cache.get() in {Path(f"/p{i}") for i in range(8)}


class TestNullPathCache:
    """Tests for NullPathCache."""

    def test_never_stores(self):
        """Test values are discarded."""
        cache = NullPathCache()

        assert cache.try_set(Path("/a")) is False
        assert cache.get() is None


class TestPruneSiblings:
    """Tests for prune_siblings() and stale_siblings()."""

    def test_keeps_only_named_entry(self, tmp_path):
        """Test older versions are removed and the kept one survives."""
        for name in ("comp_v1.0.0", "comp_v1.5.0", "comp_v2.0.0"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "comp").write_text("bin")

        removed = prune_siblings(tmp_path, "comp_v2.0.0")

        assert sorted(p.name for p in removed) == ["comp_v1.0.0", "comp_v1.5.0"]
        assert [p.name for p in tmp_path.iterdir()] == ["comp_v2.0.0"]

    def test_removes_files(self, tmp_path):
        """Test plain files are unlinked."""
        (tmp_path / "keep").mkdir()
        (tmp_path / "stray.tar.gz").write_bytes(b"x")

        prune_siblings(tmp_path, "keep")

        assert not (tmp_path / "stray.tar.gz").exists()

    def test_prefix_filter(self, tmp_path):
        """Test entries of other components are left alone."""
        for name in ("netcoredbg_v1.0.0", "netcoredbg_v2.0.0", "roslyn-4.0.0"):
            (tmp_path / name).mkdir()

        prune_siblings(tmp_path, "netcoredbg_v2.0.0", prefix="netcoredbg_v")

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "netcoredbg_v2.0.0",
            "roslyn-4.0.0",
        ]

    def test_missing_scan_dir(self, tmp_path):
        """Test a missing directory is not an error."""
        assert prune_siblings(tmp_path / "missing", "keep") == []

    def test_failures_are_skipped(self, tmp_path):
        """Test a failed removal is logged and the rest still go."""
        for name in ("a", "b", "keep"):
            (tmp_path / name).mkdir()

        real_rmtree = shutil.rmtree

        def flaky_rmtree(path, *args, **kwargs):
            if Path(path).name == "a":
                raise PermissionError("locked")
            return real_rmtree(path, *args, **kwargs)

        with patch("tooldepot.core.cache.shutil.rmtree", side_effect=flaky_rmtree):
            removed = prune_siblings(tmp_path, "keep")

        assert [p.name for p in removed] == ["b"]
        assert (tmp_path / "a").exists()
        assert not (tmp_path / "b").exists()

    def test_stale_siblings_does_not_remove(self, tmp_path):
        """Test listing leaves everything in place."""
        for name in ("comp_v1.0.0", "comp_v2.0.0"):
            (tmp_path / name).mkdir()

        stale = stale_siblings(tmp_path, "comp_v2.0.0", prefix="comp_v")

        assert [p.name for p in stale] == ["comp_v1.0.0"]
        assert (tmp_path / "comp_v1.0.0").exists()
