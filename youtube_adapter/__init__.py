"""
YouTube Adapter

Thin adapter over the YouTube Data and Analytics APIs with OAuth token
handling and resumable chunked uploads.

Public API:
    - YouTubeController: Upload, metadata, playlist and report operations
    - TokenController: Fetch-or-redirect OAuth token acquisition
    - TokenGuard: Access token validation/refresh
    - ChunkedUploader: Resumable chunked upload loop
    - create_controller: Factory function

Usage:
    from youtube_adapter import create_controller

    controller = create_controller()
    descriptor = controller.upload(
        "/path/to/video.mp4",
        {"title": "My video", "tags": ["demo"]},
        privacy_status="unlisted",
    )
"""

from youtube_adapter.auth.token_guard import TokenGuard
from youtube_adapter.controllers.token_controller import TokenController, TokenResponse
from youtube_adapter.controllers.youtube_controller import YouTubeController
from youtube_adapter.errors import (
    AuthError,
    NotFoundError,
    RemoteServiceError,
    UploadError,
    YouTubeAdapterError,
)
from youtube_adapter.factory import ServiceFactory, create_controller
from youtube_adapter.media.chunked_uploader import ChunkedUploader
from youtube_adapter.models import (
    Credential,
    OperationResult,
    ResourceDescriptor,
    UploadSession,
)

# Public API
__all__ = [
    "AuthError",
    "ChunkedUploader",
    "Credential",
    "NotFoundError",
    "OperationResult",
    "RemoteServiceError",
    "ResourceDescriptor",
    "ServiceFactory",
    "TokenController",
    "TokenGuard",
    "TokenResponse",
    "UploadError",
    "UploadSession",
    "YouTubeAdapterError",
    "YouTubeController",
    "create_controller",
]
