"""
Extraction engine: materializes the selected subset of a repository
archive inside a target directory.

Archive entries are untrusted input. Every destination is resolved and
checked against the target directory before anything is written.
"""

import os
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator, Optional

from ..models import ArchiveHandle, EntryKind, ExtractedEntry, ExtractionResult
from ..infrastructure.error_handler import (
    DownloadCancelledError,
    ExtractIOError,
    InvalidSelectionError,
    PathNotFoundInArchiveError,
    PathTraversalError,
)
from ..infrastructure.logger import logger


DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


def normalize_entry_path(name: str) -> str:
    """Forward slashes only, no trailing slash."""
    return name.replace("\\", "/").rstrip("/")


def path_matches(entry_path: str, selection_prefix: str) -> bool:
    """
    True when ``entry_path`` is the selection itself or lies under it.

    Matching is per path segment: ``repo-main/src`` does not match
    ``repo-main/source-file.txt``.
    """

    entry_path = normalize_entry_path(entry_path)
    selection_prefix = normalize_entry_path(selection_prefix)
    return entry_path == selection_prefix or entry_path.startswith(selection_prefix + "/")


def relative_path(entry_path: str, selection_prefix: str) -> str:
    """
    Path of ``entry_path`` relative to the selection root.

    Returns an empty string for the selection root itself. Must only be
    called on entries accepted by ``path_matches``.
    """

    entry_path = normalize_entry_path(entry_path)
    selection_prefix = normalize_entry_path(selection_prefix)

    if entry_path == selection_prefix:
        return ""
    if entry_path.startswith(selection_prefix + "/"):
        return entry_path[len(selection_prefix) + 1:]

    raise InvalidSelectionError(
        f"Entry {entry_path!r} is not under selection {selection_prefix!r}"
    )


def is_within_directory(directory: Path, candidate: Path) -> bool:
    """Both paths are resolved; ``candidate`` must be ``directory`` or below it."""

    directory = Path(os.path.realpath(directory))
    candidate = Path(os.path.realpath(candidate))
    return candidate == directory or str(candidate).startswith(str(directory) + os.sep)


def _entry_mode(info: zipfile.ZipInfo, is_dir: bool) -> int:
    mode = stat.S_IMODE(info.external_attr >> 16)
    if mode == 0:
        return DEFAULT_DIR_MODE if is_dir else DEFAULT_FILE_MODE
    return mode


####
##      EXTRACTION ENGINE
#####
class ExtractionEngine:
    """
    Walks a zip archive and writes out the entries under a selection prefix.
    """

    def __init__(
        self,
        chunk_size: int = 8192,
        overwrite_existing: bool = False
    ):
        self.chunk_size = chunk_size
        self.overwrite_existing = overwrite_existing

    def extract(
        self,
        handle: ArchiveHandle,
        selection_prefix: str,
        target_dir: Path,
        overwrite_existing: Optional[bool] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> ExtractionResult:
        """
        Extract every entry at or below ``selection_prefix`` into ``target_dir``.

        Args:
            handle: Downloaded archive
            selection_prefix: In-archive path to extract, e.g. ``repo-main/src``
            target_dir: Local directory receiving the files
            overwrite_existing: Overrides the engine default when given
            should_cancel: Polled before each entry; a true result aborts

        Returns:
            ExtractionResult listing materialized and skipped files

        Raises:
            PathNotFoundInArchiveError: nothing matched the selection
            PathTraversalError: an entry would land outside ``target_dir``
            ExtractIOError: the archive is unreadable or a write failed
        """

        overwrite = self.overwrite_existing if overwrite_existing is None else overwrite_existing
        selection_prefix = normalize_entry_path(selection_prefix)
        target_dir = Path(target_dir)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractIOError(f"Failed to create target directory {target_dir}", e) from e

        result = ExtractionResult(selection_prefix=selection_prefix, target_dir=target_dir)

        try:
            archive = zipfile.ZipFile(handle.path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ExtractIOError(f"Failed to open archive {handle.path}", e) from e

        with archive:
            for info, entry in self._iter_selected(archive, selection_prefix, target_dir):
                if should_cancel is not None and should_cancel():
                    raise DownloadCancelledError("Extraction cancelled")
                result.matched_entries += 1

                if entry is None:
                    continue

                if entry.is_directory:
                    self._make_directory(entry)
                    continue

                if entry.destination.exists() and not overwrite:
                    logger.debug(f"Skipping existing file: {entry.relative_path}")
                    result.skipped_files.append(self._display_path(entry))
                    continue

                self._write_file(archive, info, entry)
                result.extracted_files.append(self._display_path(entry))
                logger.debug(f"Extracted {entry.archive_path} -> {entry.destination}")

        if result.matched_entries == 0:
            raise PathNotFoundInArchiveError(selection_prefix)

        if result.file_count:
            logger.info(f"Extracted {result.file_count} files")
        if result.skipped_files:
            logger.info(f"Skipped {len(result.skipped_files)} existing files")

        return result

    def _iter_selected(
        self,
        archive: zipfile.ZipFile,
        selection_prefix: str,
        target_dir: Path
    ) -> Iterator[tuple]:
        """
        Yield ``(info, entry)`` for every matching archive member.

        ``entry`` is None for the selection root directory, which counts
        as a match but has nothing to materialize.
        """

        for info in archive.infolist():
            entry_path = normalize_entry_path(info.filename)
            if not path_matches(entry_path, selection_prefix):
                continue

            rel_path = relative_path(entry_path, selection_prefix)
            is_dir = info.is_dir()

            if not rel_path and is_dir:
                yield info, None
                continue

            if rel_path:
                destination = Path(os.path.normpath(target_dir / rel_path))
            else:
                destination = target_dir / PurePosixPath(entry_path).name

            if not is_within_directory(target_dir, destination):
                raise PathTraversalError(info.filename, str(destination))

            yield info, ExtractedEntry(
                archive_path=entry_path,
                relative_path=rel_path,
                destination=destination,
                kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
                mode=_entry_mode(info, is_dir),
            )

    def _make_directory(self, entry: ExtractedEntry) -> None:
        try:
            entry.destination.mkdir(mode=entry.mode, parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractIOError(f"Failed to create directory {entry.destination}", e) from e

    def _write_file(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, entry: ExtractedEntry) -> None:
        destination = entry.destination
        try:
            destination.parent.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
            if destination.is_symlink() or destination.exists():
                destination.unlink()

            fd = os.open(destination, os.O_WRONLY | os.O_CREAT | os.O_EXCL, entry.mode)
            with archive.open(info) as source, os.fdopen(fd, "wb") as target:
                shutil.copyfileobj(source, target, self.chunk_size)
        except (OSError, zipfile.BadZipFile) as e:
            raise ExtractIOError(f"Failed to extract file {entry.archive_path}", e) from e

    @staticmethod
    def _display_path(entry: ExtractedEntry) -> str:
        return entry.relative_path or entry.destination.name


__all__ = [
    "normalize_entry_path",
    "path_matches",
    "relative_path",
    "is_within_directory",
    "ExtractionEngine",
]
