"""
Media Package

Chunked resumable uploads and upload sources.
"""

from youtube_adapter.media.chunked_uploader import ChunkedUploader, SessionFactory
from youtube_adapter.media.sources import open_source

__all__ = [
    "ChunkedUploader",
    "SessionFactory",
    "open_source",
]
