"""
Local file cache for archive downloads.

Example usage:
    from noaa_archive.data.cache import CacheDecision, CacheGate

    gate = CacheGate()
    if gate.ensure(location, overwrite=False) is CacheDecision.FETCH:
        fetcher.fetch(location)
"""

from noaa_archive.data.cache.gate import CacheDecision, CacheGate

__all__ = [
    "CacheDecision",
    "CacheGate",
]
