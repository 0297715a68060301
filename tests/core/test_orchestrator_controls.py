"""
Tests for DownloadOrchestrator cancellation control.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from repoclip.core.orchestrator import DownloadOrchestrator
from repoclip.infrastructure.error_handler import DownloadCancelledError
from repoclip.models import DownloadConfig, DownloadRequest, DownloadStatus
from repoclip.services.archive import ArchiveAcquirer

from conftest import build_zip_bytes


@pytest.fixture
def orchestrator(tmp_path):
    archive = build_zip_bytes({"repo-main/a.txt": "a", "repo-main/b.txt": "b"})
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, content=archive))
    )
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return DownloadOrchestrator(ArchiveAcquirer(client, DownloadConfig(temp_dir=scratch)))


def test_cancel_without_active_download_returns_none(orchestrator):
    with patch('repoclip.core.orchestrator.logger') as mock_logger:
        assert orchestrator.cancel() is None
        mock_logger.warning.assert_called_with("No active download to cancel")
    assert orchestrator.is_cancelled() is False


def test_cancel_sets_flag_and_logs(orchestrator):
    orchestrator._current_result = MagicMock()

    with patch('repoclip.core.orchestrator.logger') as mock_logger:
        result = orchestrator.cancel()
        mock_logger.info.assert_called_with("Download cancelled by user")

    assert orchestrator.is_cancelled() is True
    assert result.status == DownloadStatus.CANCELLED


def test_reset_state_clears_cancellation(orchestrator):
    orchestrator._current_result = MagicMock()
    orchestrator.cancel()
    orchestrator.reset_state()

    assert orchestrator.is_cancelled() is False
    assert orchestrator._current_result is None


@pytest.mark.asyncio
async def test_cancel_during_extraction_stops_and_cleans_up(orchestrator, tmp_path):
    request = DownloadRequest(owner="owner", repo="repo", ref="main", destination=tmp_path / "out")
    real_extract = orchestrator.engine.extract

    def cancel_then_extract(*args, **kwargs):
        orchestrator.cancel()
        return real_extract(*args, **kwargs)

    orchestrator.engine.extract = cancel_then_extract
    result = await orchestrator.execute_download(request)

    assert result.status == DownloadStatus.CANCELLED
    assert isinstance(result.error, DownloadCancelledError)
    assert list((tmp_path / "scratch").iterdir()) == []
    assert not (tmp_path / "out" / "a.txt").exists()
    # A fresh download after cancellation runs normally
    assert orchestrator.is_cancelled() is False


@pytest.mark.asyncio
async def test_download_after_cancelled_run_succeeds(orchestrator, tmp_path):
    orchestrator._current_result = MagicMock()
    orchestrator.cancel()
    orchestrator.reset_state()

    request = DownloadRequest(owner="owner", repo="repo", destination=tmp_path / "out")
    result = await orchestrator.execute_download(request)

    assert result.is_successful
    assert sorted(result.extracted_files) == ["a.txt", "b.txt"]
