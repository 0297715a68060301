"""
Locator and request models for RepoClip.

A locator names a slice of a repository: owner, repository, an optional
path inside it and the git reference (branch, tag or commit) to read.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional


LOCATOR_SCHEME = "github:"
DEFAULT_REF = "main"
DEFAULT_ARCHIVE_HOST = "https://github.com"


def build_archive_url(owner: str, repo: str, ref: str, host: str = DEFAULT_ARCHIVE_HOST) -> str:
    """Return the zip archive URL for ``owner/repo`` at ``ref``."""
    return f"{host.rstrip('/')}/{owner}/{repo}/archive/{ref}.zip"


def build_selection_prefix(repo: str, ref: str, path: str = "") -> str:
    """
    Return the in-archive prefix selecting ``path``.

    Archives wrap the repository in a synthetic top-level directory
    named ``{repo}-{ref}``; an empty path selects that whole directory.
    ``./`` segments and repeated slashes are cleaned; a path climbing
    above the root keeps its leading ``..`` segments.
    """

    root = f"{repo}-{ref}"
    path = path.strip("/")
    if not path:
        return root
    path = posixpath.normpath(path)
    if path == ".":
        return root
    return f"{root}/{path}"


@dataclass(frozen=True)
class Locator:
    """Immutable, parsed form of a ``github:owner/repo[/path][@ref]`` string."""

    owner: str
    repo: str
    path: str = ""
    ref: str = DEFAULT_REF

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValueError("Locator owner and repo are required")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_file(self) -> bool:
        """
        Best-effort guess that the path names a single file.

        A trailing slash means directory; otherwise a dot in the last
        segment means file. Extensionless files are reported as
        directories. Only the archive contents are authoritative.
        """

        if not self.path or self.path.endswith("/"):
            return False
        file_name = self.path.rsplit("/", 1)[-1]
        return "." in file_name

    @property
    def is_directory(self) -> bool:
        return not self.is_file

    @property
    def selection_prefix(self) -> str:
        return build_selection_prefix(self.repo, self.ref, self.path)

    def archive_url(self, host: str = DEFAULT_ARCHIVE_HOST) -> str:
        return build_archive_url(self.owner, self.repo, self.ref, host)

    def __str__(self) -> str:
        base = f"{LOCATOR_SCHEME}{self.owner}/{self.repo}"
        if self.path and self.ref != DEFAULT_REF:
            return f"{base}@{self.ref}/{self.path}"
        if self.path:
            return f"{base}/{self.path}"
        if self.ref != DEFAULT_REF:
            return f"{base}@{self.ref}"
        return base


@dataclass
class DownloadRequest:
    """One end-to-end download: what to fetch and where to put it."""

    owner: str
    repo: str
    destination: Path
    path: str = ""
    ref: Optional[str] = None
    overwrite_existing: bool = False

    # Metadata
    request_id: str = field(default_factory=lambda: f"req_{datetime.now().strftime('%Y%m%d_%H%M%S')}")
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValueError("Repository owner and name are required")
        if not self.destination:
            raise ValueError("Destination path is required")
        self.destination = Path(self.destination)

    @property
    def display_name(self) -> str:
        return f'{self.owner}/{self.repo}'

    @classmethod
    def from_locator(
        cls,
        locator: Locator,
        destination: Path,
        overwrite_existing: bool = False
    ) -> "DownloadRequest":
        return cls(
            owner=locator.owner,
            repo=locator.repo,
            path=locator.path,
            ref=locator.ref,
            destination=Path(destination),
            overwrite_existing=overwrite_existing,
        )


__all__ = [
    "LOCATOR_SCHEME",
    "DEFAULT_REF",
    "DEFAULT_ARCHIVE_HOST",
    "build_archive_url",
    "build_selection_prefix",
    "Locator",
    "DownloadRequest",
]
