"""
Service layer for RepoClip.
"""

from .archive import ArchiveAcquirer

__all__ = [
    "ArchiveAcquirer",
]
