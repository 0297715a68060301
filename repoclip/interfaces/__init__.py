"""
Public interfaces for RepoClip.
"""

from .api import RepoClipper

__all__ = [
    "RepoClipper",
]
