"""
Tests for materializing cached files into tables and geometry.
"""

import gzip

import pandas as pd
import pytest

from noaa_archive.data.ingestion.materialize import (
    ShapefileHandle,
    extract_shapefile,
    load_buoy_table,
    load_storm_table,
    read_shapefile,
)
from noaa_archive.errors import ParseError

from conftest import IBTRACS_HEADER, ibtracs_csv


class TestLoadStormTable:
    """Tests for IBTrACS CSV loading."""

    def test_plain_csv(self, tmp_path, storm_csv):
        """Test column names and data rows."""
        path = tmp_path / "Storm.csv"
        path.write_bytes(storm_csv)

        table = load_storm_table(path)

        assert isinstance(table, pd.DataFrame)
        assert len(table) == 2
        assert list(table.columns[:4]) == ["serial_num", "season", "num", "basin"]
        assert "wind(wmo)" in table.columns
        assert table["basin"].tolist() == ["NI", "NI"]
        assert table["season"].tolist() == [1970, 1970]

    def test_gzipped_csv(self, tmp_path, storm_csv_gz):
        """Test transparent decompression."""
        path = tmp_path / "Allstorms.csv.gz"
        path.write_bytes(storm_csv_gz)

        table = load_storm_table(path, is_compressed=True)

        assert len(table) == 3
        assert table["serial_num"].iloc[0] == "1970143N19091"

    def test_header_only(self, tmp_path):
        """Test a slice with no observations gives an empty table."""
        path = tmp_path / "Year.1842.csv"
        path.write_text(IBTRACS_HEADER)

        table = load_storm_table(path)

        assert table.empty
        assert "serial_num" in table.columns

    def test_duplicate_and_blank_column_names(self, tmp_path):
        """Test column names are made unique."""
        path = tmp_path / "odd.csv"
        path.write_text("title\nName,Name,\nunits,units,units\na,b,c\n")

        table = load_storm_table(path)

        assert list(table.columns) == ["name", "name_1", "unnamed_2"]

    def test_empty_file(self, tmp_path):
        """Test an empty file is a parse error."""
        path = tmp_path / "empty.csv"
        path.write_bytes(b"")
        with pytest.raises(ParseError):
            load_storm_table(path)

    def test_truncated_gzip(self, tmp_path):
        """Test a truncated download is a parse error."""
        data = gzip.compress(ibtracs_csv(rows=200).encode("utf-8"))
        path = tmp_path / "Allstorms.csv.gz"
        path.write_bytes(data[: len(data) // 2])
        with pytest.raises(ParseError) as exc_info:
            load_storm_table(path, is_compressed=True)
        assert exc_info.value.path == path

    def test_not_gzip(self, tmp_path, storm_csv):
        """Test plain bytes flagged as compressed."""
        path = tmp_path / "Allstorms.csv.gz"
        path.write_bytes(storm_csv)
        with pytest.raises(ParseError):
            load_storm_table(path, is_compressed=True)


class TestLoadBuoyTable:
    """Tests for NetCDF buoy loading."""

    def test_netcdf(self, tmp_path, buoy_dataset):
        """Test coordinates become columns."""
        path = tmp_path / "41001c2008.nc"
        buoy_dataset.to_netcdf(path)

        table = load_buoy_table(path)

        assert len(table) == 4
        assert {"time", "latitude", "longitude", "wind_spd", "wind_dir"} <= set(table.columns)
        assert table["wind_spd"].tolist() == [0.0, 1.0, 2.0, 3.0]

    def test_not_netcdf(self, tmp_path):
        """Test garbage bytes are a parse error."""
        path = tmp_path / "41001c2008.nc"
        path.write_bytes(b"<html>Service unavailable</html>")
        with pytest.raises(ParseError):
            load_buoy_table(path)


class TestShapefiles:
    """Tests for shapefile extraction and reading."""

    STEM = "Year.1940.ibtracs_all_points.v03r10"

    def test_extract_and_read(self, tmp_path, shapefile_zip):
        """Test the bundle is unpacked next to the zip."""
        zip_path = tmp_path / "year" / f"{self.STEM}.zip"
        zip_path.parent.mkdir()
        zip_path.write_bytes(shapefile_zip(self.STEM))

        shp_path = extract_shapefile(zip_path)

        assert shp_path == zip_path.with_suffix(".shp")
        assert shp_path.exists()
        frame = ShapefileHandle(path=shp_path).read()
        assert len(frame) == 2
        assert frame.geometry.iloc[0].x == pytest.approx(100.0)

    def test_bad_zip(self, tmp_path):
        """Test a corrupt bundle."""
        zip_path = tmp_path / f"{self.STEM}.zip"
        zip_path.write_bytes(b"not a zip")
        with pytest.raises(ParseError):
            extract_shapefile(zip_path)

    def test_bundle_without_expected_shp(self, tmp_path, shapefile_zip):
        """Test a bundle whose contents do not match its name."""
        zip_path = tmp_path / f"{self.STEM}.zip"
        zip_path.write_bytes(shapefile_zip("Other.name"))
        with pytest.raises(ParseError, match="does not contain"):
            extract_shapefile(zip_path)

    def test_read_missing(self, tmp_path):
        """Test reading a shapefile that was never fetched."""
        with pytest.raises(ParseError):
            read_shapefile(tmp_path / "missing.shp")

    def test_handle_str(self, tmp_path):
        """Test handle display."""
        handle = ShapefileHandle(path=tmp_path / "a.shp", type="lines")
        assert str(handle).startswith("<storm shapefile (lines)>")
