"""
Core data models API surface for RepoClip.

Re-exports model classes from the domain-specific modules so callers can
write `from repoclip.models import X`.
"""

from .locator import (
    LOCATOR_SCHEME,
    DEFAULT_REF,
    DEFAULT_ARCHIVE_HOST,
    build_archive_url,
    build_selection_prefix,
    Locator,
    DownloadRequest,
)
from .download import (
    DownloadStatus,
    EntryKind,
    ArchiveHandle,
    ExtractedEntry,
    ExtractionResult,
    DownloadResult,
)
from .config import DownloadConfig

__all__ = [
    # Locator models
    "LOCATOR_SCHEME",
    "DEFAULT_REF",
    "DEFAULT_ARCHIVE_HOST",
    "build_archive_url",
    "build_selection_prefix",
    "Locator",
    "DownloadRequest",
    # Download models
    "DownloadStatus",
    "EntryKind",
    "ArchiveHandle",
    "ExtractedEntry",
    "ExtractionResult",
    "DownloadResult",
    # Config models
    "DownloadConfig",
]
