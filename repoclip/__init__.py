"""
RepoClip: copy part of a GitHub repository from its archive download.
"""

from .interfaces.api import RepoClipper
from .core.locator import parse_locator
from .models import DownloadConfig, DownloadResult, DownloadStatus, Locator

__version__ = "0.1.0"

__all__ = [
    "RepoClipper",
    "parse_locator",
    "DownloadConfig",
    "DownloadResult",
    "DownloadStatus",
    "Locator",
]
