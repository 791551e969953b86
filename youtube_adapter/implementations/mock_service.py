"""
Mock Video Service

In-memory VideoServiceInterface for tests and development without YouTube
credentials. Follows the YouTube response shapes closely enough for the
controllers to run unchanged.
"""

import copy
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional
from uuid import uuid4

from youtube_adapter.constants import AuthFailure
from youtube_adapter.errors import AuthError, RemoteServiceError
from youtube_adapter.interfaces.auth_interface import TokenRefresher
from youtube_adapter.interfaces.video_service_interface import (
    ResumableSession,
    VideoServiceInterface,
)
from youtube_adapter.models.credential import Credential, utcnow


class MockResumableSession(ResumableSession):
    """Collects chunks and returns the final resource once all bytes arrive"""

    def __init__(self, total_size: int, on_complete, fail_after: Optional[int] = None):
        self.total_size = total_size
        self.on_complete = on_complete
        self.fail_after = fail_after
        self.chunks: List[bytes] = []

    @property
    def bytes_received(self) -> int:
        return sum(len(chunk) for chunk in self.chunks)

    def next_chunk(self, chunk: bytes) -> Optional[Dict[str, Any]]:
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise RemoteServiceError("Simulated upload failure", status_code=503)

        self.chunks.append(bytes(chunk))
        if self.bytes_received >= self.total_size:
            return self.on_complete(self)
        return None


class MockVideoService(VideoServiceInterface):
    """
    Mock YouTube backend.

    Useful for:
    - Unit tests
    - Development without YouTube credentials
    - CI/CD pipelines
    """

    def __init__(self, fail_upload_after: Optional[int] = None):
        """
        Args:
            fail_upload_after: Make upload sessions fail after this many chunks
        """
        self.logger = logging.getLogger(__name__)
        self.fail_upload_after = fail_upload_after

        self.credential: Optional[Credential] = None
        self.videos: Dict[str, Dict[str, Any]] = {}
        self.playlists: Dict[str, Dict[str, Any]] = {}
        self.playlist_items: List[Dict[str, Any]] = []
        self.thumbnails: Dict[str, str] = {}
        self.sessions: List[MockResumableSession] = []

        # Track calls for testing: (operation, args)
        self.calls: List[tuple] = []
        self.defer_history: List[bool] = []
        self.report_rows: List[List[Any]] = []
        self._defer = False

        self.logger.info("Mock Video Service initialized")

    # =========================================================================
    # CLIENT STATE
    # =========================================================================

    def authorize(self, credential: Credential) -> None:
        self.credential = credential

    def set_defer(self, defer: bool) -> None:
        self._defer = defer
        self.defer_history.append(defer)

    @property
    def is_deferred(self) -> bool:
        return self._defer

    def _record(self, operation: str, *args: Any) -> None:
        if self._defer:
            raise RuntimeError(f"{operation} executed while client is deferred")
        self.calls.append((operation, args))

    # =========================================================================
    # MEDIA UPLOADS
    # =========================================================================

    def _open_session(self, on_complete, total_size: int) -> MockResumableSession:
        if not self._defer:
            raise RuntimeError("Upload sessions must be started in deferred mode")
        session = MockResumableSession(
            total_size,
            on_complete,
            fail_after=self.fail_upload_after,
        )
        self.sessions.append(session)
        return session

    def start_video_upload(
        self,
        body: Dict[str, Any],
        parts: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        def complete(session: MockResumableSession) -> Dict[str, Any]:
            video_id = f"mock_{uuid4().hex[:11]}"
            resource = {
                "kind": "youtube#video",
                "id": video_id,
                "snippet": copy.deepcopy(body.get("snippet", {})),
                "status": {
                    **copy.deepcopy(body.get("status", {})),
                    "uploadStatus": "uploaded",
                },
            }
            self.videos[video_id] = resource
            self.logger.info(f"[MOCK] Upload complete: {video_id}")
            return copy.deepcopy(resource)

        return self._open_session(complete, total_size)

    def start_thumbnail_upload(
        self,
        video_id: str,
        total_size: int,
        chunk_size: int,
        mime_type: str,
    ) -> ResumableSession:
        def complete(session: MockResumableSession) -> Dict[str, Any]:
            if video_id not in self.videos:
                raise RemoteServiceError(
                    f"The video identified by the videoId parameter "
                    f"{video_id} could not be found.",
                    status_code=404,
                )
            url = f"https://i.ytimg.com/vi/{video_id}/default.jpg"
            self.thumbnails[video_id] = url
            return {
                "kind": "youtube#thumbnailSetResponse",
                "items": [{"default": {"url": url, "width": 120, "height": 90}}],
            }

        return self._open_session(complete, total_size)

    # =========================================================================
    # VIDEOS
    # =========================================================================

    def list_videos(self, video_ids: List[str], parts: str) -> List[Dict[str, Any]]:
        self._record("list_videos", video_ids, parts)
        return [
            _select_parts(self.videos[video_id], parts)
            for video_id in video_ids
            if video_id in self.videos
        ]

    def list_my_videos(self, max_results: int) -> List[Dict[str, Any]]:
        self._record("list_my_videos", max_results)
        return [
            {
                "kind": "youtube#searchResult",
                "id": {"kind": "youtube#video", "videoId": video_id},
                "snippet": copy.deepcopy(video.get("snippet", {})),
            }
            for video_id, video in list(self.videos.items())[:max_results]
        ]

    def update_video(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        self._record("update_video", body, parts)
        video = self._require(self.videos, body.get("id"), "video")
        for part in parts.split(","):
            if part in body:
                video[part] = copy.deepcopy(body[part])
        return copy.deepcopy(video)

    def delete_video(self, video_id: str) -> None:
        self._record("delete_video", video_id)
        self._require(self.videos, video_id, "video")
        del self.videos[video_id]

    # =========================================================================
    # PLAYLISTS
    # =========================================================================

    def insert_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        self._record("insert_playlist", body, parts)
        playlist_id = f"PLmock{uuid4().hex[:16]}"
        playlist = {"kind": "youtube#playlist", "id": playlist_id}
        playlist.update(copy.deepcopy(body))
        playlist["id"] = playlist_id
        self.playlists[playlist_id] = playlist
        return copy.deepcopy(playlist)

    def update_playlist(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        self._record("update_playlist", body, parts)
        playlist = self._require(self.playlists, body.get("id"), "playlist")
        for part in parts.split(","):
            if part in body:
                playlist[part] = copy.deepcopy(body[part])
        return copy.deepcopy(playlist)

    def list_playlists(
        self,
        parts: str,
        playlist_ids: Optional[List[str]] = None,
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        self._record("list_playlists", parts, playlist_ids)
        ids = playlist_ids if playlist_ids else list(self.playlists)
        return [
            _select_parts(self.playlists[playlist_id], parts)
            for playlist_id in ids[:max_results]
            if playlist_id in self.playlists
        ]

    def delete_playlist(self, playlist_id: str) -> None:
        self._record("delete_playlist", playlist_id)
        self._require(self.playlists, playlist_id, "playlist")
        del self.playlists[playlist_id]

    def insert_playlist_item(self, body: Dict[str, Any], parts: str) -> Dict[str, Any]:
        self._record("insert_playlist_item", body, parts)
        snippet = body.get("snippet", {})
        self._require(self.playlists, snippet.get("playlistId"), "playlist")
        item = {
            "kind": "youtube#playlistItem",
            "id": f"PLI{uuid4().hex[:16]}",
            "snippet": copy.deepcopy(snippet),
        }
        self.playlist_items.append(item)
        return copy.deepcopy(item)

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def query_report(self, **params: Any) -> Dict[str, Any]:
        self._record("query_report", params)
        headers = [
            name
            for name in (params.get("dimensions") or "").split(",")
            + params.get("metrics", "").split(",")
            if name
        ]
        return {
            "kind": "youtubeAnalytics#resultTable",
            "columnHeaders": [{"name": name} for name in headers],
            "rows": copy.deepcopy(self.report_rows),
        }

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def add_fake_video(self, title: str = "Fake video", **snippet: Any) -> str:
        """Insert a video directly, bypassing the upload loop"""
        video_id = f"mock_{uuid4().hex[:11]}"
        self.videos[video_id] = {
            "kind": "youtube#video",
            "id": video_id,
            "snippet": {"title": title, **snippet},
            "status": {"privacyStatus": "private", "uploadStatus": "processed"},
        }
        return video_id

    def calls_to(self, operation: str) -> List[tuple]:
        return [args for name, args in self.calls if name == operation]

    @staticmethod
    def _require(store: Dict[str, Dict[str, Any]], resource_id: Optional[str], kind: str):
        if resource_id not in store:
            raise RemoteServiceError(
                f"The {kind} identified by the id parameter {resource_id} "
                f"could not be found.",
                status_code=404,
            )
        return store[resource_id]


def _select_parts(resource: Dict[str, Any], parts: str) -> Dict[str, Any]:
    selected = {"kind": resource.get("kind"), "id": resource.get("id")}
    for part in parts.split(","):
        if part in resource:
            selected[part] = copy.deepcopy(resource[part])
    return selected


class MockTokenRefresher(TokenRefresher):
    """Issues fake access tokens and counts refresh calls"""

    def __init__(self, lifetime_seconds: int = 3600, fail: bool = False):
        self.lifetime_seconds = lifetime_seconds
        self.fail = fail
        self.refresh_calls: List[str] = []

    def refresh(self, refresh_token: str) -> Credential:
        self.refresh_calls.append(refresh_token)
        if self.fail:
            raise AuthError(
                "Token has been expired or revoked.",
                reason=AuthFailure.REFRESH_FAILED,
            )
        return Credential(
            access_token=f"mock-access-token-{len(self.refresh_calls)}",
            expires_at=utcnow() + timedelta(seconds=self.lifetime_seconds),
        )
