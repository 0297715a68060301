import dataclasses

import pytest

from repoclip.core.locator import parse_locator, split_reference
from repoclip.infrastructure.error_handler import (
    LocatorError, MalformedLocatorError, MissingOwnerError, MissingRepoError
)
from repoclip.models import DownloadRequest, Locator


@pytest.mark.parametrize("value, expected", [
    ("github:owner/repo", Locator("owner", "repo", "", "main")),
    ("github:owner/repo/path/to/file.txt", Locator("owner", "repo", "path/to/file.txt", "main")),
    ("github:owner/repo@develop", Locator("owner", "repo", "", "develop")),
    ("github:owner/repo@v1.0.0", Locator("owner", "repo", "", "v1.0.0")),
    ("github:owner/repo@abc123def", Locator("owner", "repo", "", "abc123def")),
    ("github:owner/repo@v1.0.0/src/main.go", Locator("owner", "repo", "src/main.go", "v1.0.0")),
    ("github:owner/repo/src/main.go@v1.0.0", Locator("owner", "repo", "src/main.go", "v1.0.0")),
    ("github:owner/repo/docs/", Locator("owner", "repo", "docs/", "main")),
    ("github:owner/repo@", Locator("owner", "repo", "", "main")),
])
def test_parse_valid_locators(value, expected):
    assert parse_locator(value) == expected


def test_ref_before_and_after_path_are_equivalent():
    """owner/repo/path@ref and owner/repo@ref/path parse identically"""
    assert parse_locator("github:o/r/a/b/c.md@feature") == parse_locator("github:o/r@feature/a/b/c.md")


def test_parse_is_deterministic():
    value = "github:owner/repo/src@main"
    assert parse_locator(value) == parse_locator(value)


@pytest.mark.parametrize("value, error", [
    ("bad-scheme:x/y", MalformedLocatorError),
    ("owner/repo", MalformedLocatorError),
    ("github:", MalformedLocatorError),
    ("github:onlyowner", MissingRepoError),
    ("github:owner/", MissingRepoError),
    ("github:/repo", MissingOwnerError),
    ("github:/", MissingOwnerError),
])
def test_parse_invalid_locators(value, error):
    with pytest.raises(error):
        parse_locator(value)


def test_locator_errors_share_a_base():
    with pytest.raises(LocatorError):
        parse_locator("gitlab:owner/repo")


def test_custom_default_ref():
    assert parse_locator("github:owner/repo", default_ref="master").ref == "master"
    assert parse_locator("github:owner/repo@dev", default_ref="master").ref == "dev"


def test_split_reference_moves_trailing_path():
    assert split_reference("owner/repo@v2/docs/index.md") == ("owner/repo/docs/index.md", "v2")
    assert split_reference("owner/repo/docs") == ("owner/repo/docs", "")


@pytest.mark.parametrize("path, is_file", [
    ("", False),
    ("docs/", False),
    ("docs", False),
    ("Makefile", False),  # extensionless files look like directories
    ("README.md", True),
    ("src/main.go", True),
    ("config.d/settings", False),
])
def test_file_or_directory_guess(path, is_file):
    locator = Locator("owner", "repo", path)
    assert locator.is_file is is_file
    assert locator.is_directory is not is_file


def test_default_archive_url_ends_with_main_zip():
    locator = parse_locator("github:owner/repo")
    assert locator.archive_url() == "https://github.com/owner/repo/archive/main.zip"
    assert locator.archive_url().endswith("/main.zip")


def test_selection_prefix():
    assert parse_locator("github:owner/repo").selection_prefix == "repo-main"
    assert parse_locator("github:owner/repo/src@v1").selection_prefix == "repo-v1/src"
    assert parse_locator("github:owner/repo/docs/").selection_prefix == "repo-main/docs"


@pytest.mark.parametrize("value, expected", [
    ("github:owner/repo/./src", "repo-main/src"),
    ("github:owner/repo/src//main.go", "repo-main/src/main.go"),
    ("github:owner/repo/src/./lib/", "repo-main/src/lib"),
    ("github:owner/repo/src/../docs", "repo-main/docs"),
    ("github:owner/repo/.", "repo-main"),
    ("github:owner/repo/../escape", "repo-main/../escape"),
])
def test_selection_prefix_cleans_path_segments(value, expected):
    assert parse_locator(value).selection_prefix == expected


@pytest.mark.parametrize("value", [
    "github:owner/repo",
    "github:owner/repo/src/main.go",
    "github:owner/repo@v1.0.0",
    "github:owner/repo@v1.0.0/src/main.go",
])
def test_string_form_round_trips(value):
    locator = parse_locator(value)
    assert str(locator) == value
    assert parse_locator(str(locator)) == locator


def test_locator_is_immutable():
    locator = parse_locator("github:owner/repo")
    with pytest.raises(dataclasses.FrozenInstanceError):
        locator.ref = "other"
    assert locator.full_name == "owner/repo"


def test_download_request_from_locator(tmp_path):
    locator = parse_locator("github:owner/repo/src@dev")
    request = DownloadRequest.from_locator(locator, str(tmp_path), overwrite_existing=True)

    assert (request.owner, request.repo, request.path, request.ref) == ("owner", "repo", "src", "dev")
    assert request.destination == tmp_path
    assert request.overwrite_existing is True
    assert request.display_name == "owner/repo"
