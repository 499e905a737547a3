"""
noaa-archive CLI Commands

Commands:
    storms - IBTrACS storm-track data and shapefiles
    buoys  - NDBC buoy listings and data
"""

from noaa_archive.cli.commands import buoys, storms

__all__ = [
    "buoys",
    "storms",
]
