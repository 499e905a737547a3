"""
Ingestion: fetching resolved locations and materializing cached files.

Components:
- HttpTransport / Fetcher: streaming downloads into the cache
- Materializers: CSV, NetCDF and shapefile loaders
"""

from noaa_archive.data.ingestion.transport import Fetcher, HttpTransport

from noaa_archive.data.ingestion.materialize import (
    ShapefileHandle,
    extract_shapefile,
    load_buoy_table,
    load_storm_table,
    read_shapefile,
)

__all__ = [
    # Transport
    "Fetcher",
    "HttpTransport",
    # Materialize
    "ShapefileHandle",
    "extract_shapefile",
    "load_buoy_table",
    "load_storm_table",
    "read_shapefile",
]
