"""
Error taxonomy and network error mapping for RepoClip.

Errors fall into three families that mirror the stages of a download:
locator parsing, archive acquisition and archive extraction.
"""

import functools
import inspect
from typing import Any, Callable, List, Optional

import httpx

from .logger import logger


####
##      BASE ERROR
#####
class DownloadError(Exception):
    """Base exception for every failure raised by RepoClip."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        self.warnings: List[str] = []
        super().__init__(self.message)

    def add_warning(self, warning: str) -> None:
        """Attach a non-fatal note without replacing the error itself."""
        self.warnings.append(warning)

    def __str__(self) -> str:
        if self.original_error is not None:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class DownloadCancelledError(DownloadError):
    """Raised when a download is cancelled while in flight."""


####
##      LOCATOR ERRORS
#####
class LocatorError(DownloadError):
    """Raised when a locator string cannot be parsed."""


class MalformedLocatorError(LocatorError):
    pass


class MissingOwnerError(LocatorError):
    pass


class MissingRepoError(LocatorError):
    pass


####
##      ACQUISITION ERRORS
#####
class AcquireError(DownloadError):
    """Raised when the repository archive cannot be fetched."""


class ReferenceOrRepositoryNotFoundError(AcquireError):
    """The repository, or the branch/tag/commit requested, does not exist."""


class UnexpectedResponseError(AcquireError):
    """The archive host answered with a status other than 200 or 404."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Unexpected status code {status_code} for {url or 'archive request'}")


class NetworkFailureError(AcquireError):
    pass


####
##      EXTRACTION ERRORS
#####
class ExtractError(DownloadError):
    """Raised when the downloaded archive cannot be extracted."""


class PathNotFoundInArchiveError(ExtractError):
    """Nothing in the archive lives at or under the selection prefix."""

    def __init__(self, selection_prefix: str):
        self.selection_prefix = selection_prefix
        super().__init__(f"Path '{selection_prefix}' not found in repository archive")


class PathTraversalError(ExtractError):
    """An archive entry would be written outside the target directory."""

    def __init__(self, entry_name: str, destination: str = ""):
        self.entry_name = entry_name
        self.destination = destination
        super().__init__(f"Path traversal attempt in archive entry: {entry_name}")


class InvalidSelectionError(ExtractError):
    """A relative path was requested for an entry outside the selection."""


class ExtractIOError(ExtractError):
    pass


####
##      NETWORK ERROR MAPPING
#####
def _map_network_error(func_name: str, error: httpx.HTTPError) -> NetworkFailureError:
    if isinstance(error, httpx.TimeoutException):
        return NetworkFailureError(f"Timed out in {func_name}", error)
    return NetworkFailureError(f"Network error in {func_name}", error)


def handle_network_error(func: Callable) -> Callable:
    """
    Decorator that converts transport-level failures into
    NetworkFailureError. RepoClip errors are re-raised unchanged.

    Works for both plain and coroutine functions.
    """

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except DownloadError:
                raise
            except httpx.HTTPError as e:
                mapped = _map_network_error(func.__name__, e)
                logger.debug(f"{func.__name__} failed: {mapped}")
                raise mapped from e

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DownloadError:
            raise
        except httpx.HTTPError as e:
            mapped = _map_network_error(func.__name__, e)
            logger.debug(f"{func.__name__} failed: {mapped}")
            raise mapped from e

    return wrapper


__all__ = [
    "DownloadError",
    "DownloadCancelledError",
    "LocatorError",
    "MalformedLocatorError",
    "MissingOwnerError",
    "MissingRepoError",
    "AcquireError",
    "ReferenceOrRepositoryNotFoundError",
    "UnexpectedResponseError",
    "NetworkFailureError",
    "ExtractError",
    "PathNotFoundInArchiveError",
    "PathTraversalError",
    "InvalidSelectionError",
    "ExtractIOError",
    "handle_network_error",
]
