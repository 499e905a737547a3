"""
Transport and fetching for archive files.

Key Components:
- HttpTransport: streaming GET over HTTP(S) via requests, RETR over FTP
- Fetcher: downloads a resolved location into the cache atomically

Example Usage:
    from noaa_archive.data.ingestion.transport import Fetcher, HttpTransport

    transport = HttpTransport(timeout_seconds=60)
    fetcher = Fetcher(transport)
    fetcher.fetch(location)
"""

import ftplib
import io
import logging
import os
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Union
from urllib.parse import unquote, urlparse

import requests
from tqdm import tqdm

from noaa_archive.data.resolution import ResolvedLocation
from noaa_archive.errors import ArchiveNotFoundError, TransportError

logger = logging.getLogger(__name__)

FTP_TRANSFER_COMPLETE = "226"
FTP_FILE_UNAVAILABLE = "550"


class HttpTransport:
    """
    Performs GET requests and writes response bodies to disk.

    HTTP(S) is handled with requests in streaming mode so large archives
    are never held in memory; ``ftp://`` URLs use ftplib. Failures are
    raised as ``TransportError`` without retrying.

    Args:
        timeout_seconds: Connect/read timeout
        chunk_size_bytes: Size of streamed chunks
        show_progress: Display a tqdm progress bar during downloads
        headers: Extra HTTP headers
        session: Optional requests session to reuse
    """

    def __init__(
        self,
        timeout_seconds: float = 60.0,
        chunk_size_bytes: int = 1024 * 1024,
        show_progress: bool = False,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.chunk_size_bytes = chunk_size_bytes
        self.show_progress = show_progress
        self.headers = headers or {}
        self.session = session or requests.Session()

    def download(self, url: str, dest: Union[str, Path]) -> int:
        """
        Stream ``url`` into ``dest``.

        Returns:
            Number of bytes written

        Raises:
            TransportError: On connection failures or a non-success status
        """
        dest = Path(dest)
        with open(dest, "wb") as f:
            if urlparse(url).scheme == "ftp":
                return self._ftp_retrieve(url, f)
            return self._http_stream(url, f)

    def get_text(self, url: str) -> str:
        """Fetch a small text resource such as a catalog listing."""
        buffer = io.BytesIO()
        if urlparse(url).scheme == "ftp":
            self._ftp_retrieve(url, buffer)
        else:
            self._http_stream(url, buffer)
        return buffer.getvalue().decode("utf-8", errors="replace")

    def _http_stream(self, url: str, out: BinaryIO) -> int:
        written = 0
        try:
            with self.session.get(
                url,
                headers=self.headers,
                stream=True,
                timeout=self.timeout_seconds,
            ) as response:
                if response.status_code == 404:
                    raise ArchiveNotFoundError(url, "not found", status=404)
                if not 200 <= response.status_code < 300:
                    raise TransportError(
                        url,
                        response.reason or "request failed",
                        status=response.status_code,
                    )

                total = int(response.headers.get("content-length", 0)) or None
                progress = self._progress(total, url)
                try:
                    for chunk in response.iter_content(chunk_size=self.chunk_size_bytes):
                        if chunk:  # Filter out keep-alive chunks
                            out.write(chunk)
                            written += len(chunk)
                            if progress is not None:
                                progress.update(len(chunk))
                finally:
                    if progress is not None:
                        progress.close()
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        logger.debug(f"Downloaded {written} bytes from {url}")
        return written

    def _ftp_retrieve(self, url: str, out: BinaryIO) -> int:
        parsed = urlparse(url)
        written = 0

        def write(block: bytes):
            nonlocal written
            out.write(block)
            written += len(block)

        try:
            with ftplib.FTP(timeout=self.timeout_seconds) as ftp:
                ftp.connect(parsed.hostname, parsed.port or 21)
                ftp.login(
                    unquote(parsed.username) if parsed.username else "anonymous",
                    unquote(parsed.password) if parsed.password else "",
                )
                reply = ftp.retrbinary(
                    f"RETR {unquote(parsed.path)}",
                    write,
                    blocksize=self.chunk_size_bytes,
                )
        except ftplib.error_perm as e:
            if str(e).startswith(FTP_FILE_UNAVAILABLE):
                raise ArchiveNotFoundError(url, str(e), status=550) from e
            raise TransportError(url, str(e)) from e
        except ftplib.all_errors as e:
            raise TransportError(url, str(e)) from e

        if not reply.startswith(FTP_TRANSFER_COMPLETE):
            raise TransportError(url, reply, status=_reply_code(reply))

        logger.debug(f"Retrieved {written} bytes from {url}")
        return written

    def _progress(self, total: Optional[int], url: str) -> Optional[tqdm]:
        if not self.show_progress:
            return None
        name = urlparse(url).path.rsplit("/", 1)[-1]
        return tqdm(total=total, desc=name, unit="B", unit_scale=True)


def _reply_code(reply: str) -> Optional[int]:
    head = reply[:3]
    return int(head) if head.isdigit() else None


class Fetcher:
    """
    Downloads resolved locations into the cache.

    The body is streamed to a ``.part`` sibling and renamed onto the
    cache path once complete, so a cache entry is never half-written.

    Args:
        transport: Object with ``download(url, dest)``
    """

    def __init__(self, transport):
        self.transport = transport

    def fetch(self, location: ResolvedLocation) -> Path:
        """
        Fetch ``location.remote_url`` into ``location.local_path``.

        Raises:
            TransportError: Propagated unchanged from the transport
        """
        dest = location.local_path
        temp_path = dest.with_name(dest.name + ".part")
        logger.info(f"Fetching {location.remote_url}")
        try:
            size = self.transport.download(location.remote_url, temp_path)
            os.replace(temp_path, dest)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

        logger.debug(f"Stored {size} bytes at {dest}")
        return dest
