import io
import zipfile
from pathlib import Path

import pytest

from repoclip.models import ArchiveHandle


REPO_FILES = {
    "repo-main/README.md": "# Test Repository\n",
    "repo-main/src/main.ext": "entry point\n",
    "repo-main/docs/guide.md": "# Guide\n\nThis is a guide.\n",
}


def build_zip_bytes(files, directories=()):
    """Build an in-memory zip; ``files`` maps entry name to text content."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name in directories:
            archive.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), "")
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_archive(tmp_path):
    """Write a zip archive into tmp_path and return an ArchiveHandle for it."""

    def _make(files=None, directories=(), name="archive.zip"):
        path = tmp_path / name
        path.write_bytes(build_zip_bytes(REPO_FILES if files is None else files, directories))
        return ArchiveHandle(path=path, url=f"https://example.test/{name}")

    return _make


@pytest.fixture
def repo_archive(make_archive):
    """The standard three-file repository archive, with directory entries."""
    return make_archive(directories=["repo-main", "repo-main/src", "repo-main/docs"])
