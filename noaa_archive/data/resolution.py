"""
Path resolution for archive queries.

Maps a normalized selector to the canonical remote URL and the canonical
local cache path. The mapping is pure: identical selectors always give
identical strings, which is what lets the cache gate use file existence
as a proxy for "already fetched".

Storm archive layout (IBTrACS v03r10):

    Allstorms.ibtracs_all.v03r10.csv.gz
    basin/Basin.WP.ibtracs_all.v03r10.csv
    storm/Storm.1970143N19091.ibtracs_all.v03r10.csv
    year/Year.1940.ibtracs_all.v03r10.csv

Only the full archive is gzipped and only the refined slices live in a
subdirectory; the local layout mirrors the remote one exactly.

Buoy files come from the NDBC THREDDS server. When the year and the
datatype code are both known the file name is computed directly;
otherwise resolution is two-phase and needs the buoy's catalog listing.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from noaa_archive.data.selectors import BuoySelector, StormSelector, StormSlice
from noaa_archive.errors import ArchiveNotFoundError, InvalidSelectorError

logger = logging.getLogger(__name__)

IBTRACS_VERSION = "v03r10"
STORM_SUFFIX = f".ibtracs_all.{IBTRACS_VERSION}.csv"
SHAPEFILE_TYPES = ("points", "lines")

_STORM_PREFIXES = {
    StormSlice.BASIN: "Basin",
    StormSlice.STORM: "Storm",
    StormSlice.YEAR: "Year",
}


@dataclass(frozen=True)
class ResolvedLocation:
    """
    Where a resource lives remotely and in the cache.

    Attributes:
        remote_url: Canonical remote URL
        local_path: Canonical cache path the download is written to
        is_compressed: Whether the file is gzip-compressed
        extracted_path: For archives that are unpacked after download, the
            file whose presence marks the entry as cached
    """

    remote_url: str
    local_path: Path
    is_compressed: bool = False
    extracted_path: Optional[Path] = None

    @property
    def cached_path(self) -> Path:
        """File checked by the cache gate."""
        return self.extracted_path or self.local_path


def _join_local(root: Path, relative: str) -> Path:
    return root.joinpath(*relative.split("/"))


def storm_stem(selector: StormSelector) -> str:
    """Return the archive path stem for a storm selector."""
    kind = selector.slice
    if kind is StormSlice.ALL:
        return "Allstorms"
    return f"{kind.value}/{_STORM_PREFIXES[kind]}.{selector.value}"


class StormResolver:
    """
    Resolves storm selectors against the IBTrACS archive.

    Args:
        cache_dir: Cache directory for storm files (``<cache-root>/storms``)
        base_url: Archive base URL
    """

    def __init__(self, cache_dir: Union[str, Path], base_url: str):
        self.cache_dir = Path(cache_dir)
        self.base_url = base_url.rstrip("/")

    def resolve(self, selector: StormSelector) -> ResolvedLocation:
        """Resolve a selector to the tabular CSV slice."""
        compressed = selector.slice is StormSlice.ALL
        name = storm_stem(selector) + STORM_SUFFIX
        if compressed:
            name += ".gz"
        return ResolvedLocation(
            remote_url=f"{self.base_url}/csv/{name}",
            local_path=_join_local(self.cache_dir, name),
            is_compressed=compressed,
        )

    def resolve_shapefile(
        self,
        selector: StormSelector,
        type: str = "points",
    ) -> ResolvedLocation:
        """Resolve a selector to the zipped shapefile bundle."""
        if type not in SHAPEFILE_TYPES:
            raise InvalidSelectorError(
                "type", type, f"expected one of {', '.join(SHAPEFILE_TYPES)}"
            )
        name = f"{storm_stem(selector)}.ibtracs_all_{type}.{IBTRACS_VERSION}.zip"
        local = _join_local(self.cache_dir, name)
        return ResolvedLocation(
            remote_url=f"{self.base_url}/shp/{name}",
            local_path=local,
            is_compressed=False,
            extracted_path=local.with_suffix(".shp"),
        )


@dataclass(frozen=True)
class NeedsListing:
    """
    Partial buoy resolution waiting for a catalog listing.

    Attributes:
        selector: The buoy selector being resolved
        listing_url: Catalog URL whose file names complete the resolution
        remote_dir: Remote directory files are served from
        local_dir: Cache directory for this buoy
    """

    selector: BuoySelector
    listing_url: str
    remote_dir: str
    local_dir: Path

    def _pattern(self) -> "re.Pattern":
        sel = self.selector
        code = re.escape(sel.datatype) if sel.datatype else "[a-z]+"
        year = str(sel.year) if sel.year is not None else r"\d{4}"
        return re.compile(rf"^{re.escape(sel.buoy_id)}{code}{year}\.nc$", re.I)

    def select(self, filenames: Iterable[str]) -> str:
        """Pick the first listed file matching the selector's refinements."""
        names: List[str] = [f for f in filenames if f]
        if not names:
            raise ArchiveNotFoundError(
                self.listing_url, f"no data files listed for buoy {self.selector.buoy_id}"
            )
        pattern = self._pattern()
        for name in names:
            if pattern.match(name):
                return name
        if self.selector.year is None and self.selector.datatype is None:
            # Files not following the usual naming still count as data.
            for name in names:
                if name.endswith(".nc"):
                    return name
        raise ArchiveNotFoundError(
            self.listing_url,
            f"no file for buoy {self.selector.buoy_id} matching "
            f"year={self.selector.year} datatype={self.selector.datatype}",
        )

    def complete(self, filenames: Iterable[str]) -> ResolvedLocation:
        """Finish resolution from the catalog's file names."""
        name = self.select(filenames)
        logger.debug(f"Selected {name} from {self.listing_url}")
        return ResolvedLocation(
            remote_url=f"{self.remote_dir}/{name}",
            local_path=self.local_dir / name,
        )


class BuoyResolver:
    """
    Resolves buoy selectors against the NDBC THREDDS server.

    Args:
        cache_dir: Cache directory for buoy files (``<cache-root>/buoy``)
        base_url: THREDDS server root, e.g. ``https://dods.ndbc.noaa.gov``
    """

    def __init__(self, cache_dir: Union[str, Path], base_url: str):
        self.cache_dir = Path(cache_dir)
        self.base_url = base_url.rstrip("/")

    def catalog_url(self, dataset: str, buoy_id: Optional[str] = None) -> str:
        """THREDDS catalog URL for a dataset, or one buoy within it."""
        parts = [self.base_url, "thredds", "catalog", "data", dataset]
        if buoy_id is not None:
            parts.append(buoy_id)
        return "/".join(parts) + "/catalog.xml"

    def file_dir(self, dataset: str, buoy_id: str) -> str:
        return f"{self.base_url}/thredds/fileServer/data/{dataset}/{buoy_id}"

    def resolve(
        self, selector: BuoySelector
    ) -> Union[ResolvedLocation, NeedsListing]:
        """
        Resolve a buoy selector.

        Returns a final location when both year and datatype are known,
        otherwise a ``NeedsListing`` to be completed from the catalog.
        """
        remote_dir = self.file_dir(selector.dataset, selector.buoy_id)
        local_dir = self.cache_dir / selector.dataset / selector.buoy_id

        if selector.year is not None and selector.datatype is not None:
            name = f"{selector.buoy_id}{selector.datatype}{selector.year}.nc"
            return ResolvedLocation(
                remote_url=f"{remote_dir}/{name}",
                local_path=local_dir / name,
            )

        return NeedsListing(
            selector=selector,
            listing_url=self.catalog_url(selector.dataset, selector.buoy_id),
            remote_dir=remote_dir,
            local_dir=local_dir,
        )
