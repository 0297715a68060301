"""
Python API for RepoClip.

Example:

    async with RepoClipper() as clipper:
        result = await clipper.download("github:owner/repo/docs@v1.0", "./docs")
        print(result.file_count)
"""

import logging
from pathlib import Path
from typing import Optional, Union

import httpx

from ..core.locator import parse_locator
from ..core.orchestrator import DownloadOrchestrator
from ..models import DownloadConfig, DownloadRequest, DownloadResult, Locator
from ..services import ArchiveAcquirer
from ..infrastructure.logger import logger


class RepoClipper:
    """
    High-level entry point: parse a locator, download the archive and
    extract the requested part of the repository.
    """

    def __init__(
        self,
        config: Optional[DownloadConfig] = None,
        verbose: Optional[bool] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            config: Download configuration, defaults to DownloadConfig()
            verbose: Enable debug logging, overrides ``config.verbose``
            http_client: Client used for archive requests; one is created
                (and closed by ``aclose``) when omitted
        """

        self.config = config or DownloadConfig()
        self.verbose = self.config.verbose if verbose is None else verbose
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

        self.acquirer = ArchiveAcquirer(self.http_client, self.config)
        self.orchestrator = DownloadOrchestrator(self.acquirer, config=self.config)

        self.set_verbose(self.verbose)

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def parse(self, locator: str) -> Locator:
        """Parse a locator string, applying the configured default ref."""
        return parse_locator(locator, default_ref=self.config.default_ref)

    async def download(
        self,
        locator: Union[str, Locator],
        destination: Union[str, Path],
        overwrite: Optional[bool] = None
    ) -> DownloadResult:
        """
        Download the part of a repository named by ``locator``.

        Args:
            locator: ``github:owner/repo[/path][@ref]`` string or parsed Locator
            destination: Local directory, created when missing
            overwrite: Replace existing files; defaults to config.overwrite_existing

        Returns:
            DownloadResult for the operation

        Raises:
            LocatorError: the locator string is invalid (nothing is downloaded)
        """

        if isinstance(locator, str):
            locator = self.parse(locator)

        request = DownloadRequest.from_locator(
            locator,
            Path(destination),
            overwrite_existing=self.config.overwrite_existing if overwrite is None else overwrite
        )

        logger.debug(f"Downloading {locator} to {request.destination}")
        return await self.orchestrator.execute_download(request)

    def cancel_current_download(self) -> Optional[DownloadResult]:
        return self.orchestrator.cancel()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "RepoClipper":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = [
    "RepoClipper",
    "DownloadConfig",
]
