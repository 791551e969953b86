"""
Interfaces Package

Abstract interfaces for service backends, credential storage and refresh.
"""

from youtube_adapter.interfaces.auth_interface import CredentialStore, TokenRefresher
from youtube_adapter.interfaces.video_service_interface import (
    ResumableSession,
    VideoServiceInterface,
)

__all__ = [
    "CredentialStore",
    "ResumableSession",
    "TokenRefresher",
    "VideoServiceInterface",
]
