"""
Cache gate: the fetch-vs-reuse decision for resolved locations.

The cache is a plain directory tree keyed by resolved path. Entries are
never evicted or revalidated; a stale entry stays until the caller asks
for ``overwrite`` or removes it out of band.
"""

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Union

from noaa_archive.data.resolution import ResolvedLocation

logger = logging.getLogger(__name__)


class CacheDecision(Enum):
    """Outcome of a cache check."""

    REUSE = "reuse"  # Cached file exists and may be read as-is
    FETCH = "fetch"  # File must be (re)downloaded


class CacheGate:
    """
    Decides whether a resolved location must be fetched.

    Also hands out one lock per cache path so that concurrent callers in
    the same process fetch a given file one at a time. Locks are never
    released from the registry, so it grows with the number of distinct
    paths a gate has seen over its lifetime.

    Example:
        gate = CacheGate()
        with gate.lock(location.local_path):
            if gate.ensure(location, overwrite=False) is CacheDecision.FETCH:
                fetcher.fetch(location)
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def ensure(self, location: ResolvedLocation, overwrite: bool = False) -> CacheDecision:
        """
        Decide between reuse and fetch.

        ``REUSE`` iff the cached file exists and ``overwrite`` is false.
        On ``FETCH`` all missing parent directories of the download path
        are created.
        """
        if location.cached_path.exists() and not overwrite:
            self.hits += 1
            logger.debug(f"Cache hit: {location.cached_path}")
            return CacheDecision.REUSE

        self.misses += 1
        location.local_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(
            f"Cache {'refresh' if overwrite else 'miss'}: {location.local_path}"
        )
        return CacheDecision.FETCH

    def lock(self, path: Union[str, Path]) -> threading.Lock:
        """Return the lock guarding fetches of ``path``."""
        key = str(Path(path).resolve())
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock
