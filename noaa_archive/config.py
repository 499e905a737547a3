"""
Configuration for archive retrieval.

Holds the cache root, remote endpoints and transport options. The cache
root is resolved once and passed into resolvers and the cache gate, so
tests can point everything at a temporary directory.
"""

import logging
import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

APP_NAME = "noaa_archive"
CACHE_DIR_ENV = "NOAA_ARCHIVE_CACHE_DIR"

BUOY_BASE_URL = "https://dods.ndbc.noaa.gov"
STORM_BASE_URL = "ftp://eclipse.ncdc.noaa.gov/pub/ibtracs/v03r10/all"


def default_cache_root() -> Path:
    """Return the per-user cache directory for this application."""
    root = os.environ.get(CACHE_DIR_ENV)
    if root:
        return Path(root)

    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / APP_NAME
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_NAME

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".cache" / APP_NAME


@dataclass
class ArchiveConfig:
    """
    Configuration for archive clients.

    Attributes:
        cache_root: Root directory for cached files
        buoy_base_url: NDBC THREDDS server
        storm_base_url: IBTrACS v03r10 archive base
        timeout_seconds: Transport timeout
        chunk_size_bytes: Streaming chunk size for downloads
        show_progress: Show a progress bar while downloading
    """

    cache_root: Path = field(default_factory=default_cache_root)
    buoy_base_url: str = BUOY_BASE_URL
    storm_base_url: str = STORM_BASE_URL
    timeout_seconds: float = 60.0
    chunk_size_bytes: int = 1024 * 1024
    show_progress: bool = False

    def __post_init__(self):
        """Validate configuration."""
        self.cache_root = Path(self.cache_root).expanduser()
        self.buoy_base_url = self.buoy_base_url.rstrip("/")
        self.storm_base_url = self.storm_base_url.rstrip("/")
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}"
            )
        if self.chunk_size_bytes < 1024:
            raise ValueError(
                f"chunk_size_bytes must be >= 1024, got {self.chunk_size_bytes}"
            )

    @property
    def storm_cache_dir(self) -> Path:
        return self.cache_root / "storms"

    @property
    def buoy_cache_dir(self) -> Path:
        return self.cache_root / "buoy"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cache_root": str(self.cache_root),
            "buoy_base_url": self.buoy_base_url,
            "storm_base_url": self.storm_base_url,
            "timeout_seconds": self.timeout_seconds,
            "chunk_size_bytes": self.chunk_size_bytes,
            "show_progress": self.show_progress,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ArchiveConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)


def load_config(path: Optional[Union[str, Path]] = None) -> ArchiveConfig:
    """
    Load configuration from ``path`` or the default locations.

    Without an explicit path, ``./noaa_archive.yaml`` and
    ``~/.noaa_archive/config.yaml`` are tried in order; if neither exists
    the defaults are used.
    """
    if path is not None:
        logger.debug(f"Loading config from {path}")
        return ArchiveConfig.from_yaml(path)

    default_paths = [
        Path.cwd() / "noaa_archive.yaml",
        Path.home() / ".noaa_archive" / "config.yaml",
    ]
    for candidate in default_paths:
        if candidate.exists():
            logger.debug(f"Loading config from {candidate}")
            return ArchiveConfig.from_yaml(candidate)

    return ArchiveConfig()
