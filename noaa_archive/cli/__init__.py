"""
noaa-archive CLI Package

Command-line interface for the NOAA archive client.

Usage:
    noaa-archive storms data --basin WP
    noaa-archive storms shp --storm 1970143N19091
    noaa-archive buoys list stdmet
    noaa-archive buoys get stdmet 41001 --year 1990 --datatype h
"""

from noaa_archive.cli.main import app, main

__all__ = ["app", "main"]
