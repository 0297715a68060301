"""
Parser for compact repository locators.

Accepted forms, all with the ``github:`` scheme::

    github:owner/repo
    github:owner/repo/path/to/file
    github:owner/repo@ref
    github:owner/repo@ref/path/to/file
    github:owner/repo/path/to/file@ref

The last two forms are equivalent. ``ref`` may be a branch, a tag or a
commit; it is not validated here.
"""

from ..models import LOCATOR_SCHEME, DEFAULT_REF, Locator
from ..infrastructure.error_handler import (
    MalformedLocatorError, MissingOwnerError, MissingRepoError
)


def split_reference(remainder: str):
    """
    Split ``owner/repo/path@ref`` into ``(owner/repo/path, ref)``.

    Anything after a slash in the reference part is a path that was
    written after the ref and is moved back in front of it.
    """

    repo_part, sep, ref = remainder.partition("@")
    if not sep:
        return repo_part, ""

    ref, slash, trailing_path = ref.partition("/")
    if slash:
        repo_part = f"{repo_part}/{trailing_path}"

    return repo_part, ref


def parse_locator(value: str, default_ref: str = DEFAULT_REF) -> Locator:
    """
    Parse a locator string into a Locator.

    Raises:
        MalformedLocatorError: missing scheme or fewer than two segments
        MissingOwnerError: empty owner segment
        MissingRepoError: empty repository segment
    """

    if not isinstance(value, str) or not value.startswith(LOCATOR_SCHEME):
        raise MalformedLocatorError(
            f"Invalid locator {value!r}: expected '{LOCATOR_SCHEME}owner/repo[/path][@ref]'"
        )

    repo_part, ref = split_reference(value[len(LOCATOR_SCHEME):])

    parts = repo_part.split("/", 2)
    if len(parts) < 2:
        if parts[0]:
            raise MissingRepoError(f"Repository is required in locator {value!r}")
        raise MalformedLocatorError(f"Invalid locator {value!r}")

    owner, repo = parts[0], parts[1]
    path = parts[2] if len(parts) > 2 else ""

    if not owner:
        raise MissingOwnerError(f"Owner is required in locator {value!r}")
    if not repo:
        raise MissingRepoError(f"Repository is required in locator {value!r}")

    return Locator(owner=owner, repo=repo, path=path, ref=ref or default_ref)


__all__ = [
    "split_reference",
    "parse_locator",
]
