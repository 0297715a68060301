"""
Configuration models for RepoClip downloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .locator import DEFAULT_ARCHIVE_HOST, DEFAULT_REF


@dataclass
class DownloadConfig:
    """
    Unified configuration for archive downloads.

    Covers the archive host, network limits, scratch storage and
    how existing files in the destination are treated.
    """

    # Network settings
    archive_host: str = DEFAULT_ARCHIVE_HOST
    chunk_size: int = 8192
    timeout: int = 300  # Archives of large repositories take minutes

    # Reference used when a locator names none
    default_ref: str = DEFAULT_REF

    # Scratch directory for the downloaded archive, None for the system default
    temp_dir: Optional[Path] = None

    # Advisory only: archives larger than this log a warning
    large_archive_threshold: int = 1 << 30

    # File handling settings
    overwrite_existing: bool = False

    verbose: bool = False

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.large_archive_threshold <= 0:
            raise ValueError("large_archive_threshold must be positive")
        if not self.default_ref:
            raise ValueError("default_ref must not be empty")

        parsed_host = urlparse(self.archive_host)
        if not parsed_host.scheme or not parsed_host.netloc:
            raise ValueError(f"Invalid archive host: {self.archive_host}")

        if self.temp_dir is not None:
            self.temp_dir = Path(self.temp_dir)


__all__ = [
    "DownloadConfig",
]
