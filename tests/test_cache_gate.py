"""
Tests for the cache gate.
"""

import threading

import pytest

from noaa_archive.data.cache import CacheDecision, CacheGate
from noaa_archive.data.resolution import ResolvedLocation


@pytest.fixture
def gate():
    return CacheGate()


@pytest.fixture
def location(tmp_path):
    return ResolvedLocation(
        remote_url="https://example.test/basin/Basin.WP.csv",
        local_path=tmp_path / "storms" / "basin" / "Basin.WP.csv",
    )


class TestCacheGate:
    """Tests for CacheGate.ensure."""

    def test_missing_file_fetches(self, gate, location):
        """Test cache miss creates parent directories."""
        assert not location.local_path.parent.exists()
        assert gate.ensure(location, overwrite=False) is CacheDecision.FETCH
        assert location.local_path.parent.is_dir()
        assert not location.local_path.exists()
        assert gate.misses == 1

    def test_existing_file_reused(self, gate, location):
        """Test cache hit."""
        location.local_path.parent.mkdir(parents=True)
        location.local_path.write_text("cached")
        assert gate.ensure(location, overwrite=False) is CacheDecision.REUSE
        assert gate.hits == 1
        assert location.local_path.read_text() == "cached"

    def test_overwrite_forces_fetch(self, gate, location):
        """Test overwrite on an existing entry."""
        location.local_path.parent.mkdir(parents=True)
        location.local_path.write_text("cached")
        assert gate.ensure(location, overwrite=True) is CacheDecision.FETCH

    def test_mkdir_is_idempotent(self, gate, location):
        """Test repeated misses do not fail on existing directories."""
        gate.ensure(location)
        assert gate.ensure(location) is CacheDecision.FETCH

    def test_extracted_path_decides(self, gate, tmp_path):
        """Test that archives are checked by their extracted file."""
        zip_path = tmp_path / "Allstorms.zip"
        shp_path = tmp_path / "Allstorms.shp"
        location = ResolvedLocation(
            remote_url="https://example.test/Allstorms.zip",
            local_path=zip_path,
            extracted_path=shp_path,
        )
        zip_path.write_bytes(b"PK")
        assert gate.ensure(location) is CacheDecision.FETCH
        shp_path.write_bytes(b"shp")
        assert gate.ensure(location) is CacheDecision.REUSE


class TestCacheGateLocks:
    """Tests for per-path fetch locks."""

    def test_same_path_same_lock(self, gate, tmp_path):
        """Test lock identity per path."""
        assert gate.lock(tmp_path / "a.csv") is gate.lock(str(tmp_path / "a.csv"))
        assert gate.lock(tmp_path / "a.csv") is not gate.lock(tmp_path / "b.csv")

    def test_lock_serializes_fetches(self, gate, location):
        """Test that only one thread fetches a missing path."""
        fetches = []

        def worker():
            with gate.lock(location.local_path):
                if gate.ensure(location) is CacheDecision.FETCH:
                    fetches.append(1)
                    location.local_path.write_text("data")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(fetches) == 1
        assert gate.hits == 7
