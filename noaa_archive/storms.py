"""
IBTrACS storm-track retrieval.

International Best Track Archive for Climate Stewardship (IBTrACS) data is
published as CSV slices (all storms, per basin, per storm, per year) and
as zipped shapefiles of track points or lines.

Storm serial numbers have the form YYYYJJJHTTNNN:
- YYYY: year of the first recorded observation
- JJJ: day of year of the first recorded observation
- H: hemisphere, N or S
- TT: absolute rounded latitude of the first observation
- NNN: rounded longitude of the first observation (0-359)

For example ``1970143N19091`` started on May 23, 1970 near 19N 91E.

Example usage:
    from noaa_archive.storms import StormClient

    client = StormClient()
    table = client.get_storm_data(basin="WP")
    handle = client.get_storm_shapefile(year=1940, type="lines")
    tracks = handle.read()
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

import geopandas as gpd
import pandas as pd

from noaa_archive.config import ArchiveConfig, load_config
from noaa_archive.data.cache import CacheDecision, CacheGate
from noaa_archive.data.ingestion import (
    Fetcher,
    HttpTransport,
    ShapefileHandle,
    extract_shapefile,
    load_storm_table,
    read_shapefile,
)
from noaa_archive.data.resolution import ResolvedLocation, StormResolver
from noaa_archive.data.selectors import normalize_storm_selector
from noaa_archive.errors import RemovedParameterError

logger = logging.getLogger(__name__)

# Sentinel for the removed ``path`` parameter; any explicit value is rejected.
_REMOVED = object()
_STORM_DOCS = "help(noaa_archive.storms)"


def _reject_path(path) -> None:
    if path is not _REMOVED:
        raise RemovedParameterError("path", _STORM_DOCS)


class StormClient:
    """
    Retrieves IBTrACS slices through the local cache.

    Args:
        config: Archive configuration; cache root and endpoints
        transport: Object providing ``download(url, dest)``; defaults to
            an ``HttpTransport`` built from ``config``
        gate: Cache gate, shared between clients to share fetch locks
    """

    def __init__(
        self,
        config: Optional[ArchiveConfig] = None,
        transport=None,
        gate: Optional[CacheGate] = None,
    ):
        self.config = config or ArchiveConfig()
        self.transport = transport or HttpTransport(
            timeout_seconds=self.config.timeout_seconds,
            chunk_size_bytes=self.config.chunk_size_bytes,
            show_progress=self.config.show_progress,
        )
        self.gate = gate or CacheGate()
        self.fetcher = Fetcher(self.transport)
        self.resolver = StormResolver(
            self.config.storm_cache_dir, self.config.storm_base_url
        )

    def _sync(
        self,
        location: ResolvedLocation,
        overwrite: bool,
        after_fetch: Optional[Callable[[ResolvedLocation], None]] = None,
    ) -> CacheDecision:
        with self.gate.lock(location.local_path):
            decision = self.gate.ensure(location, overwrite)
            if decision is CacheDecision.FETCH:
                self.fetcher.fetch(location)
                if after_fetch is not None:
                    after_fetch(location)
        return decision

    def get_storm_data(
        self,
        basin: Optional[str] = None,
        storm: Optional[str] = None,
        year: Optional[int] = None,
        overwrite: bool = True,
        path=_REMOVED,
    ) -> pd.DataFrame:
        """
        Get tabular IBTrACS data for all storms, a basin, a storm or a year.

        Args:
            basin: One of EP, NA, NI, SA, SI, SP, WP
            storm: Storm serial number, e.g. ``1970143N19091``
            year: Season year
            overwrite: Refetch even if the slice is already cached

        Returns:
            One row per track observation

        Raises:
            RemovedParameterError: If ``path`` is passed
            AmbiguousSelectorError: If more than one of basin/storm/year is given
            TransportError: If the download fails
            ParseError: If the cached file is not a valid IBTrACS CSV
        """
        _reject_path(path)
        selector = normalize_storm_selector(basin, storm, year)
        location = self.resolver.resolve(selector)
        self._sync(location, overwrite)
        logger.info(f"<path>{location.local_path}")
        return load_storm_table(location.local_path, location.is_compressed)

    def get_storm_shapefile(
        self,
        basin: Optional[str] = None,
        storm: Optional[str] = None,
        year: Optional[int] = None,
        type: str = "points",
        overwrite: bool = True,
        path=_REMOVED,
    ) -> ShapefileHandle:
        """
        Download the shapefile for a slice and return a handle to it.

        Args:
            basin, storm, year: As for ``get_storm_data``
            type: ``points`` or ``lines``
            overwrite: Refetch even if the shapefile is already cached

        Returns:
            Handle whose ``read()`` loads the geometry
        """
        _reject_path(path)
        selector = normalize_storm_selector(basin, storm, year)
        location = self.resolver.resolve_shapefile(selector, type)
        self._sync(
            location,
            overwrite,
            after_fetch=lambda loc: extract_shapefile(loc.local_path, loc.extracted_path),
        )
        return ShapefileHandle(path=location.extracted_path, type=type)

    def read_storm_shapefile(
        self, handle: Union[ShapefileHandle, str, Path]
    ) -> gpd.GeoDataFrame:
        """Read a shapefile returned by ``get_storm_shapefile``."""
        if isinstance(handle, ShapefileHandle):
            return handle.read()
        return read_shapefile(handle)


_default_client: Optional[StormClient] = None


def _client() -> StormClient:
    global _default_client
    if _default_client is None:
        _default_client = StormClient(load_config())
    return _default_client


def get_storm_data(
    basin: Optional[str] = None,
    storm: Optional[str] = None,
    year: Optional[int] = None,
    overwrite: bool = True,
    path=_REMOVED,
) -> pd.DataFrame:
    """Module-level shortcut for ``StormClient.get_storm_data``."""
    _reject_path(path)
    return _client().get_storm_data(basin, storm, year, overwrite)


def get_storm_shapefile(
    basin: Optional[str] = None,
    storm: Optional[str] = None,
    year: Optional[int] = None,
    type: str = "points",
    overwrite: bool = True,
    path=_REMOVED,
) -> ShapefileHandle:
    """Module-level shortcut for ``StormClient.get_storm_shapefile``."""
    _reject_path(path)
    return _client().get_storm_shapefile(basin, storm, year, type, overwrite)


def read_storm_shapefile(handle: Union[ShapefileHandle, str, Path]) -> gpd.GeoDataFrame:
    """Module-level shortcut for ``StormClient.read_storm_shapefile``."""
    return _client().read_storm_shapefile(handle)
