"""
THREDDS catalog parsing.

NDBC publishes its buoy archives through a THREDDS Data Server. A dataset
catalog lists one ``catalogRef`` per buoy; a buoy catalog lists one
``dataset`` element per NetCDF file.
"""

import logging
from dataclasses import dataclass
from typing import List
from urllib.parse import urljoin
from xml.etree import ElementTree as ET

from noaa_archive.errors import ParseError

logger = logging.getLogger(__name__)

NAMESPACES = {
    "thredds": "http://www.unidata.ucar.edu/namespaces/thredds/InvCatalog/v1.0",
    "xlink": "http://www.w3.org/1999/xlink",
}

_XLINK_HREF = f"{{{NAMESPACES['xlink']}}}href"
_XLINK_TITLE = f"{{{NAMESPACES['xlink']}}}title"


@dataclass(frozen=True)
class CatalogRef:
    """A child catalog: its name and absolute catalog URL."""

    name: str
    url: str


def _parse(catalog_xml: str, catalog_url: str) -> ET.Element:
    try:
        return ET.fromstring(catalog_xml)
    except ET.ParseError as e:
        raise ParseError(catalog_url, f"invalid THREDDS catalog: {e}") from e


def parse_catalog_refs(catalog_xml: str, catalog_url: str) -> List[CatalogRef]:
    """
    Extract child catalogs (one per buoy) from a dataset catalog.

    Args:
        catalog_xml: Catalog document
        catalog_url: URL the document was fetched from, used to absolutize
            relative ``xlink:href`` values
    """
    root = _parse(catalog_xml, catalog_url)
    refs = []
    for elem in root.iterfind(".//thredds:catalogRef", NAMESPACES):
        href = elem.get(_XLINK_HREF)
        if not href:
            continue
        name = elem.get(_XLINK_TITLE) or href.split("/")[0]
        refs.append(CatalogRef(name=name.strip("/"), url=urljoin(catalog_url, href)))
    logger.debug(f"Found {len(refs)} catalog references in {catalog_url}")
    return refs


def parse_catalog_files(catalog_xml: str, catalog_url: str) -> List[str]:
    """Extract file names of datasets served by a buoy catalog, in listed order."""
    root = _parse(catalog_xml, catalog_url)
    files = []
    for elem in root.iterfind(".//thredds:dataset", NAMESPACES):
        url_path = elem.get("urlPath")
        if not url_path:
            continue
        files.append(elem.get("name") or url_path.rsplit("/", 1)[-1])
    logger.debug(f"Found {len(files)} files in {catalog_url}")
    return files
