"""
Controllers Package

High-level coordinators for YouTube operations and token acquisition.
"""

from youtube_adapter.controllers.token_controller import TokenController, TokenResponse
from youtube_adapter.controllers.youtube_controller import YouTubeController

__all__ = [
    "TokenController",
    "TokenResponse",
    "YouTubeController",
]
