"""
Archive acquisition: streams a repository zip archive to scratch storage.

This is the only part of RepoClip that talks to the network.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

import httpx

from ..models import ArchiveHandle, DownloadConfig, build_archive_url
from ..infrastructure.error_handler import (
    AcquireError,
    DownloadCancelledError,
    ReferenceOrRepositoryNotFoundError,
    UnexpectedResponseError,
    handle_network_error,
)
from ..infrastructure.logger import logger


TEMP_FILE_PREFIX = "repoclip-download-"
TEMP_FILE_SUFFIX = ".zip"


class ArchiveAcquirer:
    """
    Downloads repository archives over HTTPS into uniquely named temp files.

    The HTTP client and host are injected so callers (and tests) decide
    where requests actually go.
    """

    def __init__(self, http_client: httpx.AsyncClient, config: Optional[DownloadConfig] = None):
        self.http_client = http_client
        self.config = config or DownloadConfig()

    @property
    def archive_host(self) -> str:
        return self.config.archive_host

    def archive_url(self, owner: str, repo: str, ref: str) -> str:
        return build_archive_url(owner, repo, ref, self.archive_host)

    @handle_network_error
    async def acquire(
        self,
        archive_url: str,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> ArchiveHandle:
        """
        Stream ``archive_url`` into a new temporary file.

        Args:
            archive_url: Full URL of the zip archive
            should_cancel: Polled between chunks; a true result aborts the download

        Returns:
            ArchiveHandle pointing at the downloaded file

        Raises:
            ReferenceOrRepositoryNotFoundError: the host answered 404
            UnexpectedResponseError: any other non-200 status
            NetworkFailureError: transport failure or timeout
            AcquireError: the temp file could not be written
        """

        logger.debug(f"Downloading archive {archive_url}")

        async with self.http_client.stream(
            "GET",
            archive_url,
            timeout=self.config.timeout,
            follow_redirects=True
        ) as response:
            if response.status_code == 404:
                raise ReferenceOrRepositoryNotFoundError(
                    f"Repository or reference not found (404): {archive_url}"
                )
            if response.status_code != 200:
                raise UnexpectedResponseError(response.status_code, archive_url)

            declared_size = self._declared_size(response)
            if declared_size is not None:
                self.warn_if_large(declared_size)

            temp_path = self._create_temp_file()
            try:
                bytes_written = await self._stream_to_file(response, temp_path, should_cancel)
            except BaseException:
                self._discard(temp_path)
                raise

        logger.debug(f"Saved {bytes_written} bytes to {temp_path}")
        return ArchiveHandle(
            path=temp_path,
            url=archive_url,
            declared_size=declared_size,
            bytes_written=bytes_written,
        )

    def release(self, handle: ArchiveHandle) -> None:
        """Delete a downloaded archive. Raises OSError if removal fails."""
        handle.path.unlink(missing_ok=True)
        logger.debug(f"Removed temporary archive {handle.path}")

    def warn_if_large(self, size: int) -> bool:
        """Log an advisory warning for unusually large archives."""

        if size > self.config.large_archive_threshold:
            logger.warning(
                f"Downloading large repository archive ({size / (1 << 20):.1f} MB)"
            )
            return True
        return False

    async def _stream_to_file(
        self,
        response: httpx.Response,
        temp_path: Path,
        should_cancel: Optional[Callable[[], bool]]
    ) -> int:
        bytes_written = 0
        try:
            with open(temp_path, "wb") as archive_file:
                async for chunk in response.aiter_bytes(self.config.chunk_size):
                    if should_cancel is not None and should_cancel():
                        raise DownloadCancelledError("Archive download cancelled")
                    archive_file.write(chunk)
                    bytes_written += len(chunk)
        except OSError as e:
            raise AcquireError(f"Failed to write archive to {temp_path}", e) from e

        return bytes_written

    def _create_temp_file(self) -> Path:
        temp_dir = self.config.temp_dir
        try:
            fd, name = tempfile.mkstemp(
                prefix=TEMP_FILE_PREFIX,
                suffix=TEMP_FILE_SUFFIX,
                dir=str(temp_dir) if temp_dir is not None else None
            )
            os.close(fd)
        except OSError as e:
            raise AcquireError(f"Failed to create temporary file in {temp_dir or tempfile.gettempdir()}", e) from e

        return Path(name)

    @staticmethod
    def _declared_size(response: httpx.Response) -> Optional[int]:
        content_length = response.headers.get("content-length")
        if content_length is None:
            return None
        try:
            return int(content_length)
        except ValueError:
            return None

    @staticmethod
    def _discard(temp_path: Path) -> None:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove partial archive {temp_path}: {e}")


__all__ = [
    "TEMP_FILE_PREFIX",
    "build_archive_url",
    "ArchiveAcquirer",
]
