"""
Data layer: selectors, resolution, cache, discovery and ingestion.
"""

from noaa_archive.data.selectors import (
    BUOY_DATASETS,
    STORM_BASINS,
    BuoySelector,
    StormSelector,
    StormSlice,
    normalize_buoy_selector,
    normalize_dataset,
    normalize_storm_selector,
)

from noaa_archive.data.resolution import (
    BuoyResolver,
    NeedsListing,
    ResolvedLocation,
    StormResolver,
)

__all__ = [
    # Selectors
    "BUOY_DATASETS",
    "STORM_BASINS",
    "BuoySelector",
    "StormSelector",
    "StormSlice",
    "normalize_buoy_selector",
    "normalize_dataset",
    "normalize_storm_selector",
    # Resolution
    "BuoyResolver",
    "NeedsListing",
    "ResolvedLocation",
    "StormResolver",
]
