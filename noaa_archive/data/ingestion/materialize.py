"""
Materializers: turn cached files into in-memory tables or geometry.

- IBTrACS CSV slices (optionally gzipped) -> pandas.DataFrame
- NDBC NetCDF buoy files -> pandas.DataFrame via xarray
- Zipped storm shapefiles -> extracted .shp, read with geopandas

Nothing is validated beyond structural parseability; any structural
failure surfaces as ``ParseError`` so the caller can refetch with
``overwrite=True``.
"""

import logging
import re
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import geopandas as gpd
import pandas as pd
import xarray as xr

from noaa_archive.errors import ParseError

logger = logging.getLogger(__name__)

# IBTrACS v03 CSV: title line, column names, units line, then data.
IBTRACS_HEADER_LINE = 1
IBTRACS_DATA_START = 3

_CSV_ERRORS = (ValueError, EOFError, OSError, zlib.error)


def _clean_column_names(raw: List[object]) -> List[str]:
    names = []
    seen = {}
    for i, value in enumerate(raw):
        name = "" if pd.isna(value) else re.sub(r"\s", "", str(value)).lower()
        if not name:
            name = f"unnamed_{i}"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def load_storm_table(
    path: Union[str, Path],
    is_compressed: bool = False,
) -> pd.DataFrame:
    """
    Load an IBTrACS CSV slice.

    Column names come from the second line of the file with whitespace
    removed and lower-cased; the units line is skipped.

    Raises:
        ParseError: If the file is not a structurally valid IBTrACS CSV
    """
    compression = "gzip" if is_compressed else None
    try:
        header = pd.read_csv(
            path,
            compression=compression,
            header=None,
            skiprows=IBTRACS_HEADER_LINE,
            nrows=1,
            dtype=str,
        )
        names = _clean_column_names(list(header.iloc[0]))
        try:
            table = pd.read_csv(
                path,
                compression=compression,
                header=None,
                skiprows=IBTRACS_DATA_START,
                names=names,
                index_col=False,
                skipinitialspace=True,
                low_memory=False,
            )
        except pd.errors.EmptyDataError:
            # Slice with a header but no observations
            table = pd.DataFrame(columns=names)
    except _CSV_ERRORS as e:
        raise ParseError(path, str(e)) from e

    logger.debug(f"Loaded {len(table)} rows from {path}")
    return table


def load_buoy_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load an NDBC NetCDF file into a flat table.

    Dimension coordinates (time, latitude, longitude) become columns.

    Raises:
        ParseError: If the file cannot be opened as NetCDF
    """
    try:
        with xr.open_dataset(path) as ds:
            table = ds.to_dataframe().reset_index()
    except (OSError, ValueError, RuntimeError) as e:
        raise ParseError(path, str(e)) from e

    logger.debug(f"Loaded {len(table)} rows from {path}")
    return table


def extract_shapefile(
    zip_path: Union[str, Path],
    expected: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Unpack a zipped shapefile bundle next to the archive.

    Args:
        zip_path: Downloaded ``.zip`` bundle
        expected: The ``.shp`` the bundle must contain; defaults to the
            zip path with its suffix replaced

    Returns:
        Path to the extracted ``.shp`` file
    """
    zip_path = Path(zip_path)
    shp_path = Path(expected) if expected else zip_path.with_suffix(".shp")
    try:
        with zipfile.ZipFile(zip_path) as bundle:
            bundle.extractall(zip_path.parent)
            members = bundle.namelist()
    except (zipfile.BadZipFile, OSError) as e:
        raise ParseError(zip_path, str(e)) from e

    if not shp_path.exists():
        raise ParseError(
            zip_path, f"bundle does not contain {shp_path.name} (found {members})"
        )
    return shp_path


def read_shapefile(path: Union[str, Path]) -> gpd.GeoDataFrame:
    """Read a shapefile with geopandas."""
    path = Path(path)
    if not path.exists():
        raise ParseError(path, "shapefile does not exist")
    try:
        return gpd.read_file(path)
    except Exception as e:
        raise ParseError(path, str(e)) from e


@dataclass(frozen=True)
class ShapefileHandle:
    """
    A cached shapefile and the means to read it.

    Attributes:
        path: Path to the extracted ``.shp`` file
        type: Geometry flavour, ``points`` or ``lines``
    """

    path: Path
    type: str = "points"

    def read(self) -> gpd.GeoDataFrame:
        """Materialize the geometry."""
        return read_shapefile(self.path)

    def __str__(self) -> str:
        return f"<storm shapefile ({self.type})> {self.path}"
