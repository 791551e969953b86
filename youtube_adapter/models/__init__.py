"""
Models Package

Data classes shared across the adapter.
"""

from youtube_adapter.models.credential import Credential
from youtube_adapter.models.metadata import PlaylistMetadata, VideoMetadata
from youtube_adapter.models.resources import (
    OperationResult,
    ResourceDescriptor,
    UploadSession,
)

__all__ = [
    "Credential",
    "OperationResult",
    "PlaylistMetadata",
    "ResourceDescriptor",
    "UploadSession",
    "VideoMetadata",
]
