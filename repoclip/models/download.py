"""
Download domain models for RepoClip.

This module contains data classes and enums describing a downloaded
archive, the entries extracted from it and the outcome of a download.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from .locator import DownloadRequest

if TYPE_CHECKING:
    from ..infrastructure.error_handler import DownloadError


class DownloadStatus(Enum):
    """Status enumeration for download operations."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class EntryKind(Enum):
    """Kind of an archive entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class ArchiveHandle:
    """A downloaded archive sitting in scratch storage."""

    path: Path
    url: str
    declared_size: Optional[int] = None  # Content-Length, when the server sent one
    bytes_written: int = 0


@dataclass(frozen=True)
class ExtractedEntry:
    """Per-entry state while walking an archive."""

    archive_path: str
    relative_path: str
    destination: Path
    kind: EntryKind
    mode: int

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass
class ExtractionResult:
    """What a single extraction pass did."""

    selection_prefix: str
    target_dir: Path
    matched_entries: int = 0
    extracted_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.extracted_files)


@dataclass
class DownloadResult:
    """Result of a download operation."""

    request: DownloadRequest
    status: DownloadStatus

    # Results
    extracted_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    archive_url: Optional[str] = None
    selection_prefix: Optional[str] = None
    archive_bytes: int = 0

    # Metadata
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    error: Optional["DownloadError"] = None
    error_message: Optional[str] = None

    # Statistics
    total_download_time: Optional[float] = None

    @property
    def file_count(self) -> int:
        return len(self.extracted_files)

    @property
    def is_successful(self) -> bool:
        return self.status == DownloadStatus.COMPLETED and self.error is None

    def mark_completed(self) -> None:
        self.status = DownloadStatus.COMPLETED
        self._finish()

    def mark_failed(self, error: "DownloadError", status: DownloadStatus = DownloadStatus.FAILED) -> None:
        self.status = status
        self.error = error
        self.error_message = str(error)
        self._finish()

    def _finish(self) -> None:
        self.completed_at = datetime.now()
        self.total_download_time = (self.completed_at - self.started_at).total_seconds()


__all__ = [
    "DownloadStatus",
    "EntryKind",
    "ArchiveHandle",
    "ExtractedEntry",
    "ExtractionResult",
    "DownloadResult",
]
