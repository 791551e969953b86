"""
Video Service Interface

Explicit capability interface listing the YouTube operations the adapter
needs. Controllers depend on this abstraction, not on googleapiclient, so
the real service and the in-memory mock are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from youtube_adapter.models.credential import Credential


class ResumableSession(ABC):
    """
    One resumable upload session on the server.

    The chunk loop pushes consecutive chunks; the session answers with
    None while more data is expected and with the final response body
    once the server has the whole file.
    """

    @abstractmethod
    def next_chunk(self, chunk: bytes) -> Optional[Dict[str, Any]]:
        """
        Send the next chunk.

        Args:
            chunk: Bytes following the previously sent chunk

        Returns:
            None if more chunks are needed, else the final response

        Raises:
            RemoteServiceError: If the server rejects the chunk
        """


class VideoServiceInterface(ABC):
    """
    Abstract base class for YouTube service backends.

    Every method raises RemoteServiceError when the platform reports a
    failure; the message is kept verbatim.
    """

    # =========================================================================
    # CLIENT STATE
    # =========================================================================

    @abstractmethod
    def authorize(self, credential: Credential) -> None:
        """Use this credential for subsequent requests"""

    @abstractmethod
    def set_defer(self, defer: bool) -> None:
        """
        Switch between build-only (deferred) and immediate execution.

        Upload sessions can only be started while deferred.
        """

    @property
    @abstractmethod
    def is_deferred(self) -> bool:
        """True while the client is in build-only mode"""

    # =========================================================================
    # MEDIA UPLOADS
    # =========================================================================

    @abstractmethod
    def start_video_upload(
        self,
        body: Dict[str, Any],
        parts: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        """Open a resumable videos.insert session"""

    @abstractmethod
    def start_thumbnail_upload(
        self,
        video_id: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        """Open a resumable thumbnails.set session"""

    # =========================================================================
    # VIDEOS
    # =========================================================================

    @abstractmethod
    def list_videos(self, video_ids: List[str], parts: str) -> List[Dict[str, Any]]:
        """videos.list by ID; returns an empty list when nothing matches"""

    @abstractmethod
    def list_my_videos(self, max_results: int) -> List[Dict[str, Any]]:
        """Videos owned by the authorized channel"""

    @abstractmethod
    def update_video(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        """videos.update"""

    @abstractmethod
    def delete_video(self, video_id: str) -> None:
        """videos.delete"""

    # =========================================================================
    # PLAYLISTS
    # =========================================================================

    @abstractmethod
    def insert_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        """playlists.insert"""

    @abstractmethod
    def update_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        """playlists.update"""

    @abstractmethod
    def list_playlists(
        self,
        parts: str,
        playlist_ids: Optional[List[str]] = None,
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        """playlists.list by ID, or the authorized channel's playlists"""

    @abstractmethod
    def delete_playlist(self, playlist_id: str) -> None:
        """playlists.delete"""

    @abstractmethod
    def insert_playlist_item(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        """playlistItems.insert"""

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    @abstractmethod
    def query_report(self, **params: Any) -> Dict[str, Any]:
        """youtubeAnalytics reports.query"""
