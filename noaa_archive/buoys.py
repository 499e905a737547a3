"""
NDBC buoy data retrieval.

Buoy archives are served by the NDBC THREDDS server, one catalog per
dataset (stdmet, cwind, ocean, ...) and one folder per buoy. Files are
NetCDF, named ``<buoy><datatype-code><year>.nc`` (``9999`` marks the
current-year file), e.g. ``41001h1990.nc``.
"""

import logging
from typing import Optional, Union

import pandas as pd

from noaa_archive.config import ArchiveConfig, load_config
from noaa_archive.data.cache import CacheDecision, CacheGate
from noaa_archive.data.discovery import parse_catalog_files, parse_catalog_refs
from noaa_archive.data.ingestion import Fetcher, HttpTransport, load_buoy_table
from noaa_archive.data.resolution import BuoyResolver, NeedsListing, ResolvedLocation
from noaa_archive.data.selectors import normalize_buoy_selector, normalize_dataset

logger = logging.getLogger(__name__)


class BuoyClient:
    """
    Retrieves NDBC buoy files through the local cache.

    Args:
        config: Archive configuration; cache root and endpoints
        transport: Object providing ``download(url, dest)`` and
            ``get_text(url)``; defaults to an ``HttpTransport``
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
        self.resolver = BuoyResolver(
            self.config.buoy_cache_dir, self.config.buoy_base_url
        )

    def list_buoys(self, dataset: str) -> pd.DataFrame:
        """
        List the buoys available in a dataset.

        Returns:
            Table with columns ``id`` and ``url`` (the buoy's catalog)
        """
        name = normalize_dataset(dataset)
        url = self.resolver.catalog_url(name)
        refs = parse_catalog_refs(self.transport.get_text(url), url)
        logger.debug(f"{len(refs)} buoys in dataset {name}")
        return pd.DataFrame(
            {"id": [ref.name for ref in refs], "url": [ref.url for ref in refs]},
            columns=["id", "url"],
        )

    def resolve(self, selector) -> ResolvedLocation:
        """Resolve a buoy selector, listing the buoy's catalog if needed."""
        resolved = self.resolver.resolve(selector)
        if isinstance(resolved, NeedsListing):
            listing = self.transport.get_text(resolved.listing_url)
            files = parse_catalog_files(listing, resolved.listing_url)
            resolved = resolved.complete(files)
        return resolved

    def get_buoy(
        self,
        dataset: str,
        buoy_id: Union[str, int],
        year: Optional[int] = None,
        datatype: Optional[str] = None,
        overwrite: bool = False,
    ) -> pd.DataFrame:
        """
        Get data for one buoy.

        Without ``year`` and ``datatype`` the first file in the buoy's
        catalog is used; with only one of them, the first file matching it.

        Args:
            dataset: NDBC dataset, e.g. ``stdmet`` or ``cwind``
            buoy_id: Station identifier, e.g. ``41001``
            year: Year of data
            datatype: File type code, e.g. ``h`` (stdmet) or ``c`` (cwind)
            overwrite: Refetch even if the file is already cached

        Raises:
            InvalidSelectorError: For an unknown dataset or missing buoy id
            ArchiveNotFoundError: If no catalog file matches
            TransportError: If a download fails
            ParseError: If the cached file is not valid NetCDF
        """
        selector = normalize_buoy_selector(dataset, buoy_id, year, datatype)
        location = self.resolve(selector)
        with self.gate.lock(location.local_path):
            if self.gate.ensure(location, overwrite) is CacheDecision.FETCH:
                self.fetcher.fetch(location)
        logger.info(f"<path>{location.local_path}")
        return load_buoy_table(location.local_path)


_default_client: Optional[BuoyClient] = None


def _client() -> BuoyClient:
    global _default_client
    if _default_client is None:
        _default_client = BuoyClient(load_config())
    return _default_client


def list_buoys(dataset: str) -> pd.DataFrame:
    """Module-level shortcut for ``BuoyClient.list_buoys``."""
    return _client().list_buoys(dataset)


def get_buoy(
    dataset: str,
    buoy_id: Union[str, int],
    year: Optional[int] = None,
    datatype: Optional[str] = None,
    overwrite: bool = False,
) -> pd.DataFrame:
    """Module-level shortcut for ``BuoyClient.get_buoy``."""
    return _client().get_buoy(dataset, buoy_id, year, datatype, overwrite)
