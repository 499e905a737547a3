"""
noaa_archive - NOAA buoy and storm-track archive client.

Resolves queries (dataset, buoy id, year, storm serial number, basin) to
canonical remote files, caches them on local disk, and parses them into
pandas tables.

Example usage:
    import noaa_archive

    storms = noaa_archive.get_storm_data(basin="WP")
    buoys = noaa_archive.list_buoys("cwind")
    obs = noaa_archive.get_buoy("cwind", "41001", year=2008, datatype="c")
"""

__version__ = "0.1.0"

from noaa_archive.config import ArchiveConfig, load_config

from noaa_archive.errors import (
    AmbiguousSelectorError,
    ArchiveNotFoundError,
    InvalidSelectorError,
    NoaaArchiveError,
    ParseError,
    RemovedParameterError,
    TransportError,
)

from noaa_archive.storms import (
    StormClient,
    get_storm_data,
    get_storm_shapefile,
    read_storm_shapefile,
)

from noaa_archive.buoys import BuoyClient, get_buoy, list_buoys

__all__ = [
    "__version__",
    # Config
    "ArchiveConfig",
    "load_config",
    # Errors
    "AmbiguousSelectorError",
    "ArchiveNotFoundError",
    "InvalidSelectorError",
    "NoaaArchiveError",
    "ParseError",
    "RemovedParameterError",
    "TransportError",
    # Storms
    "StormClient",
    "get_storm_data",
    "get_storm_shapefile",
    "read_storm_shapefile",
    # Buoys
    "BuoyClient",
    "get_buoy",
    "list_buoys",
]
