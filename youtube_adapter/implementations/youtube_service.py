"""
YouTube Service Implementation

Concrete VideoServiceInterface for YouTube Data API v3 and YouTube
Analytics API v2, built on googleapiclient.
"""

import logging
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from youtube_adapter.constants import (
    YOUTUBE_ANALYTICS_SERVICE_NAME,
    YOUTUBE_ANALYTICS_VERSION,
    YOUTUBE_API_SERVICE_NAME,
    YOUTUBE_API_VERSION,
)
from youtube_adapter.errors import AuthError
from youtube_adapter.implementations.http_errors import (
    TRANSPORT_ERRORS,
    translate_http_error,
    translate_transport_error,
)
from youtube_adapter.implementations.resumable_session import (
    ChunkFeedUpload,
    GoogleResumableSession,
)
from youtube_adapter.interfaces.video_service_interface import (
    ResumableSession,
    VideoServiceInterface,
)
from youtube_adapter.models.credential import Credential


class YouTubeService(VideoServiceInterface):
    """
    YouTube backend using googleapiclient.

    Requests are executed immediately unless the service is deferred.
    While deferred (during an upload), only upload sessions can be built;
    other calls are refused so no request runs outside the chunk loop.
    """

    def __init__(self, credential: Optional[Credential] = None):
        """
        Args:
            credential: Initial credential (can also be set with authorize)
        """
        self.logger = logging.getLogger(__name__)
        self.credential: Optional[Credential] = None
        self._youtube = None
        self._analytics = None
        self._defer = False

        if credential is not None:
            self.authorize(credential)

    # =========================================================================
    # CLIENT STATE
    # =========================================================================

    def authorize(self, credential: Credential) -> None:
        if self.credential is not None and credential == self.credential:
            return

        google_credentials = credential.to_google_credentials()
        self._youtube = build(
            YOUTUBE_API_SERVICE_NAME,
            YOUTUBE_API_VERSION,
            credentials=google_credentials,
            cache_discovery=False,
        )
        # Analytics client is built on first use
        self._analytics = None
        self.credential = credential
        self.logger.debug("YouTube API service initialized")

    def set_defer(self, defer: bool) -> None:
        self._defer = defer

    @property
    def is_deferred(self) -> bool:
        return self._defer

    @property
    def youtube(self):
        if self._youtube is None:
            raise AuthError("YouTube service used before authorization")
        return self._youtube

    @property
    def analytics(self):
        if self.credential is None:
            raise AuthError("YouTube Analytics used before authorization")
        if self._analytics is None:
            self._analytics = build(
                YOUTUBE_ANALYTICS_SERVICE_NAME,
                YOUTUBE_ANALYTICS_VERSION,
                credentials=self.credential.to_google_credentials(),
                cache_discovery=False,
            )
        return self._analytics

    def _execute(self, request) -> Any:
        if self._defer:
            raise RuntimeError(
                "Client is in deferred mode; requests can only be executed "
                "once the upload session has finished"
            )
        try:
            return request.execute()
        except HttpError as e:
            raise translate_http_error(e) from e
        except TRANSPORT_ERRORS as e:
            raise translate_transport_error(e) from e

    def _start_session(self, build_request, mime_type: str, total_size: int):
        if not self._defer:
            raise RuntimeError("Upload sessions must be started in deferred mode")

        media = ChunkFeedUpload(mime_type, total_size)
        request = build_request(media)
        return GoogleResumableSession(request, media)

    # =========================================================================
    # MEDIA UPLOADS
    # =========================================================================

    def start_video_upload(
        self,
        body: Dict[str, Any],
        parts: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        self.logger.debug(
            f"Building videos.insert session ({total_size} bytes, "
            f"{chunk_size} byte chunks)",
        )
        return self._start_session(
            lambda media: self.youtube.videos().insert(
                part=parts,
                body=body,
                media_body=media,
            ),
            mime_type,
            total_size,
        )

    def start_thumbnail_upload(
        self,
        video_id: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        self.logger.debug(f"Building thumbnails.set session for {video_id}")
        return self._start_session(
            lambda media: self.youtube.thumbnails().set(
                videoId=video_id,
                media_body=media,
            ),
            mime_type,
            total_size,
        )

    # =========================================================================
    # VIDEOS
    # =========================================================================

    def list_videos(self, video_ids: List[str], parts: str) -> List[Dict[str, Any]]:
        response = self._execute(
            self.youtube.videos().list(part=parts, id=",".join(video_ids)),
        )
        return response.get("items", [])

    def list_my_videos(self, max_results: int) -> List[Dict[str, Any]]:
        response = self._execute(
            self.youtube.search().list(
                part="snippet",
                forMine=True,
                type="video",
                maxResults=max_results,
            ),
        )
        return response.get("items", [])

    def update_video(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        return self._execute(self.youtube.videos().update(part=parts, body=body))

    def delete_video(self, video_id: str) -> None:
        self._execute(self.youtube.videos().delete(id=video_id))

    # =========================================================================
    # PLAYLISTS
    # =========================================================================

    def insert_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        return self._execute(self.youtube.playlists().insert(part=parts, body=body))

    def update_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        return self._execute(self.youtube.playlists().update(part=parts, body=body))

    def list_playlists(
        self,
        parts: str,
        playlist_ids: Optional[List[str]] = None,
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        if playlist_ids:
            request = self.youtube.playlists().list(
                part=parts,
                id=",".join(playlist_ids),
                maxResults=max_results,
            )
        else:
            request = self.youtube.playlists().list(
                part=parts,
                mine=True,
                maxResults=max_results,
            )
        return self._execute(request).get("items", [])

    def delete_playlist(self, playlist_id: str) -> None:
        self._execute(self.youtube.playlists().delete(id=playlist_id))

    def insert_playlist_item(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        return self._execute(
            self.youtube.playlistItems().insert(part=parts, body=body),
        )

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def query_report(self, **params: Any) -> Dict[str, Any]:
        return self._execute(self.analytics.reports().query(**params))
