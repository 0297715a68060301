"""
Orchestrator for the complete download process:
acquire the archive, extract the selection, release the archive.
"""

import asyncio
import threading
from typing import Optional

from ..models import (
    ArchiveHandle, DownloadConfig, DownloadRequest, DownloadResult, DownloadStatus,
    ExtractionResult,
    build_selection_prefix
)
from ..services import ArchiveAcquirer
from ..infrastructure.error_handler import DownloadCancelledError, DownloadError
from ..infrastructure.logger import logger
from .extractor import ExtractionEngine


####
##      DOWNLOAD ORCHESTRATOR
#####
class DownloadOrchestrator:
    """
    Runs one download at a time: archive acquisition followed by
    extraction, with the temporary archive removed on every exit path.
    """

    def __init__(
        self,
        acquirer: ArchiveAcquirer,
        engine: Optional[ExtractionEngine] = None,
        config: Optional[DownloadConfig] = None
    ):
        self.acquirer = acquirer
        self.config = config or acquirer.config
        self.engine = engine or ExtractionEngine(
            chunk_size=self.config.chunk_size,
            overwrite_existing=self.config.overwrite_existing
        )

        # Set from the event loop, read from the extraction thread
        self._cancellation_event = threading.Event()
        self._current_result: Optional[DownloadResult] = None

    async def execute_download(self, request: DownloadRequest) -> DownloadResult:
        """
        Execute the complete download process.

        Args:
            request: Download request

        Returns:
            DownloadResult; on failure ``status`` is FAILED (or CANCELLED)
            and ``error`` holds the first terminal error
        """

        ref = request.ref or self.config.default_ref
        archive_url = self.acquirer.archive_url(request.owner, request.repo, ref)
        selection_prefix = build_selection_prefix(request.repo, ref, request.path)

        logger.debug(
            f"Starting download for {request.display_name}@{ref} "
            f"(selection: {selection_prefix})"
        )

        result = DownloadResult(
            request=request,
            status=DownloadStatus.IN_PROGRESS,
            archive_url=archive_url,
            selection_prefix=selection_prefix
        )
        self._current_result = result
        handle: Optional[ArchiveHandle] = None

        try:
            handle = await self.acquirer.acquire(archive_url, should_cancel=self.is_cancelled)
            result.archive_bytes = handle.bytes_written

            extraction = await self._run_extraction(handle, selection_prefix, request)

            result.extracted_files = extraction.extracted_files
            result.skipped_files = extraction.skipped_files
            result.mark_completed()

            logger.info(
                f"Successfully downloaded {request.display_name} to {request.destination}"
            )

        except DownloadCancelledError as e:
            logger.info("Download operation was cancelled")
            result.mark_failed(e, DownloadStatus.CANCELLED)

        except DownloadError as e:
            logger.error(f"Download failed: {e}")
            result.mark_failed(e)

        except Exception as e:
            logger.error(f"Download failed: {e}")
            result.mark_failed(DownloadError("Download failed", e))

        finally:
            if handle is not None:
                self._release(handle, result)
            self.reset_state()

        return result

    async def _run_extraction(
        self,
        handle: ArchiveHandle,
        selection_prefix: str,
        request: DownloadRequest
    ) -> ExtractionResult:
        """
        Run the extraction engine in a worker thread.

        A thread cannot be interrupted, so when the calling task is cancelled
        the cancellation flag is raised and the worker is awaited until it
        stops at the next entry. Nothing is written after this returns.
        """

        worker = asyncio.ensure_future(asyncio.to_thread(
            self.engine.extract,
            handle,
            selection_prefix,
            request.destination,
            request.overwrite_existing,
            self.is_cancelled
        ))

        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            self._cancellation_event.set()
            await asyncio.wait({worker})
            if not worker.cancelled() and worker.exception() is not None:
                logger.debug(f"Extraction stopped: {worker.exception()}")
            raise

    def _release(self, handle: ArchiveHandle, result: DownloadResult) -> None:
        """Remove the temporary archive; failures become warnings."""

        try:
            self.acquirer.release(handle)
        except OSError as e:
            warning = f"Failed to clean up archive {handle.path}: {e}"
            logger.warning(warning)
            result.warnings.append(warning)
            if result.error is not None:
                result.error.add_warning(warning)

    def is_cancelled(self) -> bool:
        return self._cancellation_event.is_set()

    def cancel(self) -> Optional[DownloadResult]:
        """
        Cancel the current download operation.

        Returns:
            Current DownloadResult marked as cancelled, or None if no active download
        """
        if self._current_result is None:
            logger.warning("No active download to cancel")
            return None

        self._cancellation_event.set()
        self._current_result.status = DownloadStatus.CANCELLED

        logger.info("Download cancelled by user")
        return self._current_result

    def reset_state(self) -> None:
        """Clear per-download state after completion or failure."""
        self._current_result = None
        self._cancellation_event.clear()
