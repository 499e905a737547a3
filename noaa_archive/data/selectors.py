"""
Query selectors and their normalization.

A selector is the immutable input to a query. Normalization strips absent
fields, canonicalizes the rest, and rejects ambiguous combinations before
any I/O is attempted.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from noaa_archive.errors import AmbiguousSelectorError, InvalidSelectorError

STORM_BASINS = ("EP", "NA", "NI", "SA", "SI", "SP", "WP")

# YYYYJJJHTTNNN, see noaa_archive.storms
STORM_SERIAL_PATTERN = re.compile(r"^\d{7}[NS]\d{5}$")
BUOY_ID_PATTERN = re.compile(r"^[a-z0-9]+$")
DATATYPE_PATTERN = re.compile(r"^[a-z]+$")

BUOY_DATASETS = (
    "adcp",
    "adcp2",
    "cwind",
    "dart",
    "mmbcur",
    "ocean",
    "oceansites",
    "pwind",
    "stdmet",
    "swden",
    "wlevel",
)


class StormSlice(Enum):
    """The four archive slices of the storm pipeline."""

    ALL = "all"
    BASIN = "basin"
    STORM = "storm"
    YEAR = "year"


@dataclass(frozen=True)
class StormSelector:
    """
    Normalized storm query. At most one field is set; none means all storms.

    Attributes:
        basin: Two-letter basin code
        storm: Storm serial number (YYYYJJJHTTNNN)
        year: Season year
    """

    basin: Optional[str] = None
    storm: Optional[str] = None
    year: Optional[int] = None

    @property
    def slice(self) -> StormSlice:
        if self.basin is not None:
            return StormSlice.BASIN
        if self.storm is not None:
            return StormSlice.STORM
        if self.year is not None:
            return StormSlice.YEAR
        return StormSlice.ALL

    @property
    def value(self) -> Optional[str]:
        """Value of the active dimension as it appears in file names."""
        for item in (self.basin, self.storm, self.year):
            if item is not None:
                return str(item)
        return None


@dataclass(frozen=True)
class BuoySelector:
    """
    Normalized buoy query.

    Attributes:
        dataset: NDBC THREDDS dataset name (stdmet, cwind, ...)
        buoy_id: Station identifier, lower-cased as in the catalog
        year: Optional year refinement
        datatype: Optional single-letter file type code (h, c, o, ...)
    """

    dataset: str
    buoy_id: str
    year: Optional[int] = None
    datatype: Optional[str] = None


def _coerce_year(year: Union[int, str]) -> int:
    if isinstance(year, bool):
        raise InvalidSelectorError("year", year, "expected an integer")
    try:
        value = int(year)
    except (TypeError, ValueError):
        raise InvalidSelectorError("year", year, "expected an integer") from None
    if isinstance(year, float) and year != value:
        raise InvalidSelectorError("year", year, "expected an integer")
    return value


def normalize_storm_selector(
    basin: Optional[str] = None,
    storm: Optional[str] = None,
    year: Optional[Union[int, str]] = None,
) -> StormSelector:
    """
    Validate and canonicalize storm selector fields.

    Raises:
        AmbiguousSelectorError: If more than one of basin, storm, year is given
        InvalidSelectorError: If the supplied value is malformed
    """
    supplied = {
        name: value
        for name, value in (("basin", basin), ("storm", storm), ("year", year))
        if value is not None
    }
    if len(supplied) > 1:
        raise AmbiguousSelectorError(list(supplied))
    if not supplied:
        return StormSelector()

    if basin is not None:
        code = str(basin).strip().upper()
        if code not in STORM_BASINS:
            raise InvalidSelectorError(
                "basin", basin, f"expected one of {', '.join(STORM_BASINS)}"
            )
        return StormSelector(basin=code)

    if storm is not None:
        serial = str(storm).strip().upper()
        if not serial:
            raise InvalidSelectorError("storm", storm, "serial number is empty")
        if not STORM_SERIAL_PATTERN.match(serial):
            raise InvalidSelectorError(
                "storm", storm, "expected a serial number like 1970143N19091"
            )
        return StormSelector(storm=serial)

    return StormSelector(year=_coerce_year(year))


def normalize_dataset(dataset: str) -> str:
    """Validate an NDBC dataset name and return it lower-cased."""
    if dataset is None or not str(dataset).strip():
        raise InvalidSelectorError("dataset", dataset, "a dataset is required")
    name = str(dataset).strip().lower()
    if name not in BUOY_DATASETS:
        raise InvalidSelectorError(
            "dataset", dataset, f"expected one of {', '.join(BUOY_DATASETS)}"
        )
    return name


def normalize_buoy_selector(
    dataset: str,
    buoy_id: Union[str, int],
    year: Optional[Union[int, str]] = None,
    datatype: Optional[str] = None,
) -> BuoySelector:
    """
    Validate and canonicalize buoy selector fields.

    ``dataset`` and ``buoy_id`` are required; ``year`` and ``datatype`` are
    optional refinements and may be combined.
    """
    name = normalize_dataset(dataset)

    if buoy_id is None or not str(buoy_id).strip():
        raise InvalidSelectorError("buoy_id", buoy_id, "a buoy id is required")
    station = str(buoy_id).strip().lower()
    if not BUOY_ID_PATTERN.match(station):
        raise InvalidSelectorError(
            "buoy_id", buoy_id, "expected letters and digits only, e.g. 41001"
        )

    code = None
    if datatype is not None:
        code = str(datatype).strip().lower()
        if not code:
            raise InvalidSelectorError("datatype", datatype, "code is empty")
        if not DATATYPE_PATTERN.match(code):
            raise InvalidSelectorError("datatype", datatype, "expected letters only")

    return BuoySelector(
        dataset=name,
        buoy_id=station,
        year=_coerce_year(year) if year is not None else None,
        datatype=code,
    )
