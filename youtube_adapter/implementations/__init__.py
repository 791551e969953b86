"""
Implementations Package

Concrete video service backends.
"""

from youtube_adapter.implementations.mock_service import (
    MockTokenRefresher,
    MockVideoService,
)
from youtube_adapter.implementations.youtube_service import YouTubeService

__all__ = [
    "MockTokenRefresher",
    "MockVideoService",
    "YouTubeService",
]
