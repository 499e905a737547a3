"""
Remote listing discovery (THREDDS catalogs).
"""

from noaa_archive.data.discovery.thredds import (
    CatalogRef,
    parse_catalog_files,
    parse_catalog_refs,
)

__all__ = [
    "CatalogRef",
    "parse_catalog_files",
    "parse_catalog_refs",
]
