"""
Pytest configuration and fixtures for noaa_archive tests.

Markers:
    @pytest.mark.storm - Storm pipeline tests
    @pytest.mark.buoy - Buoy pipeline tests
    @pytest.mark.integration - Tests that reach the real NOAA servers

Usage:
    pytest -m storm              # Run only storm tests
    pytest -m "not integration"  # Skip network tests
"""

import gzip
import io
import os
import sys
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Union

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from noaa_archive.config import ArchiveConfig
from noaa_archive.errors import ArchiveNotFoundError

STORM_BASE = "ftp://ibtracs.test/pub/ibtracs/v03r10/all"
BUOY_BASE = "https://buoys.test"

IBTRACS_HEADER = (
    "IBTrACS -- Version: v03r10\n"
    "Serial_Num,Season,Num,Basin,Sub_basin,Name,ISO_time,Nature,Latitude,Longitude,Wind(WMO),Pres(WMO)\n"
    " N/A,Year,#,BB,BB,N/A,YYYY-MM-DD HH:MM:SS,N/A,deg_north,deg_east,kt,mb\n"
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "storm: Storm pipeline tests")
    config.addinivalue_line("markers", "buoy: Buoy pipeline tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Auto-apply markers based on test file names; skip network tests by default."""
    run_network = os.environ.get("NOAA_ARCHIVE_NETWORK_TESTS")
    skip_network = pytest.mark.skip(reason="set NOAA_ARCHIVE_NETWORK_TESTS=1 to run")
    for item in items:
        if "storm" in item.fspath.basename:
            item.add_marker(pytest.mark.storm)
        if "buoy" in item.fspath.basename:
            item.add_marker(pytest.mark.buoy)
        if item.get_closest_marker("integration") and not run_network:
            item.add_marker(skip_network)


def ibtracs_csv(name: str = "NOT NAMED", rows: int = 2) -> str:
    """Build a small IBTrACS v03 CSV document."""
    lines = [IBTRACS_HEADER]
    for i in range(rows):
        lines.append(
            f"1970143N19091,1970,01, NI, BB,{name},1970-05-{22 + i:02d} 18:00:00,"
            f"NR,{19.0 + i * 0.3:.2f},{91.0 - i * 0.3:.2f},0.0,0.0\n"
        )
    return "".join(lines)


Payload = Union[bytes, Callable[[Path], None]]


class FakeTransport:
    """
    In-memory transport: serves registered payloads and records calls.

    A payload is either raw bytes or a callable that writes the file.
    Unknown URLs raise ``ArchiveNotFoundError``.
    """

    def __init__(self, payloads: Dict[str, Payload] = None):
        self.payloads: Dict[str, Payload] = dict(payloads or {})
        self.downloads: List[str] = []
        self.listings: List[str] = []

    def _payload(self, url: str) -> Payload:
        if url not in self.payloads:
            raise ArchiveNotFoundError(url, "not found", status=404)
        return self.payloads[url]

    def download(self, url, dest) -> int:
        self.downloads.append(url)
        payload = self._payload(url)
        dest = Path(dest)
        if callable(payload):
            payload(dest)
        else:
            dest.write_bytes(payload)
        return dest.stat().st_size

    def get_text(self, url) -> str:
        self.listings.append(url)
        payload = self._payload(url)
        return payload.decode("utf-8")


@pytest.fixture
def config(tmp_path):
    """Archive configuration rooted in a temporary cache directory."""
    return ArchiveConfig(
        cache_root=tmp_path / "cache",
        storm_base_url=STORM_BASE,
        buoy_base_url=BUOY_BASE,
    )


@pytest.fixture
def transport():
    """Empty fake transport; tests register payloads on it."""
    return FakeTransport()


@pytest.fixture
def storm_csv():
    """IBTrACS CSV content as bytes."""
    return ibtracs_csv().encode("utf-8")


@pytest.fixture
def storm_csv_gz():
    """Gzipped IBTrACS CSV content."""
    return gzip.compress(ibtracs_csv(rows=3).encode("utf-8"))


@pytest.fixture
def buoy_dataset():
    """Small NDBC-like xarray dataset."""
    import numpy as np
    import pandas as pd
    import xarray as xr

    times = pd.date_range("2008-01-01", periods=4, freq="h")
    return xr.Dataset(
        {
            "wind_spd": (("time", "latitude", "longitude"), np.arange(4.0).reshape(4, 1, 1)),
            "wind_dir": (("time", "latitude", "longitude"), np.full((4, 1, 1), 180.0)),
        },
        coords={"time": times, "latitude": [32.5], "longitude": [-75.4]},
    )


@pytest.fixture
def shapefile_zip(tmp_path):
    """Build a zipped point shapefile; returns a factory taking the bundle stem."""
    import geopandas as gpd
    from shapely.geometry import Point

    def build(stem: str) -> bytes:
        workdir = tmp_path / "shp_build" / stem
        workdir.mkdir(parents=True)
        frame = gpd.GeoDataFrame(
            {"serial_num": ["1940001N10100", "1940001N10100"], "wind": [35, 40]},
            geometry=[Point(100.0, 10.0), Point(100.5, 10.4)],
            crs="EPSG:4326",
        )
        frame.to_file(workdir / f"{stem}.shp", driver="ESRI Shapefile")
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as bundle:
            for part in sorted(workdir.iterdir()):
                bundle.write(part, arcname=part.name)
        return buffer.getvalue()

    return build
