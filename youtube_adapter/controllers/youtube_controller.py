"""
YouTube Controller

High-level entry point for the surrounding application (CLI, web routes,
workers). Every operation validates the access token first, then forwards
to the video service.

Error policy:
- AuthError and UploadError propagate immediately
- delete_video / delete_playlist raise NotFoundError for missing targets
- Remote failures in metadata, list and report operations are returned as
  OperationResult(success=False) with the platform's message preserved
"""

import logging
import os
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from youtube_adapter.auth.token_guard import TokenGuard
from youtube_adapter.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_PRIVACY_STATUS,
    DEFAULT_REPORT_IDS,
    DEFAULT_THUMBNAIL_MIME_TYPE,
    MAX_RESULTS,
    VIDEO_INSERT_PARTS,
    VIDEO_MIME_TYPE,
    OperationStatus,
    UploadFailure,
)
from youtube_adapter.errors import NotFoundError, RemoteServiceError, UploadError
from youtube_adapter.interfaces.auth_interface import CredentialStore
from youtube_adapter.interfaces.video_service_interface import VideoServiceInterface
from youtube_adapter.media.chunked_uploader import ChunkedUploader
from youtube_adapter.media.sources import UploadSource, is_remote
from youtube_adapter.models.credential import Credential
from youtube_adapter.models.metadata import (
    PlaylistMetadata,
    VideoMetadata,
    playlist_item_body,
)
from youtube_adapter.models.resources import OperationResult, ResourceDescriptor


class YouTubeController:
    """
    YouTube operations for one channel credential.

    Usage:
        controller = YouTubeController(service, store, guard)

        descriptor = controller.upload(
            "/videos/intro.mp4",
            {"title": "Intro", "tags": ["demo"]},
            privacy_status="unlisted",
        )
        controller.with_thumbnail("/videos/intro.png")

        result = controller.update_video(descriptor.resource_id, {"title": "New"})
        if not result.success:
            print(result.error_message)
    """

    def __init__(
        self,
        service: VideoServiceInterface,
        credential_store: CredentialStore,
        token_guard: TokenGuard,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        default_privacy_status: str = DEFAULT_PRIVACY_STATUS,
    ):
        """
        Args:
            service: Video service backend (real or mock)
            credential_store: Where the channel's credential lives
            token_guard: Validates/refreshes the credential before each call
            chunk_size: Chunk size for video and thumbnail uploads
            default_privacy_status: Privacy used when upload() gets none
        """
        self.logger = logging.getLogger(__name__)
        self.service = service
        self.credential_store = credential_store
        self.token_guard = token_guard
        self.uploader = ChunkedUploader(service, chunk_size=chunk_size)
        self.default_privacy_status = default_privacy_status

        # State of the most recent upload
        self.video_id: Optional[str] = None
        self.snippet: Optional[Dict[str, Any]] = None
        self.thumbnail_url: Optional[str] = None
        self.last_upload: Optional[ResourceDescriptor] = None

        self.logger.info(f"YouTube Controller initialized ({type(service).__name__})")

    # =========================================================================
    # ACCESS TOKEN
    # =========================================================================

    def handle_access_token(self) -> Credential:
        """
        Ensure a valid access token before talking to the API.

        A refreshed credential is written back to the credential store and
        handed to the service.

        Raises:
            AuthError: If no usable credential is available
        """
        credential = self.credential_store.load()
        valid = self.token_guard.ensure_valid(credential)

        if valid is not credential:
            self.credential_store.save(valid)
            self.logger.debug("Refreshed credential saved")

        self.service.authorize(valid)
        return valid

    def get_access_token(self) -> Optional[Credential]:
        """Current credential (may have been refreshed since it was set)"""
        return self.credential_store.load()

    def set_access_token(
        self,
        credential: Union[Credential, Mapping[str, Any]],
    ) -> "YouTubeController":
        if not isinstance(credential, Credential):
            credential = Credential.from_mapping(credential)
        self.credential_store.save(credential)
        return self

    def set_chunk_size(self, chunk_size: int) -> "YouTubeController":
        self.uploader.set_chunk_size(chunk_size)
        return self

    # =========================================================================
    # UPLOADS
    # =========================================================================

    def upload(
        self,
        path: UploadSource,
        data: Optional[Mapping[str, Any]] = None,
        privacy_status: Optional[str] = None,
    ) -> ResourceDescriptor:
        """
        Upload a video.

        Args:
            path: Local path, http(s) URL or binary stream
            data: Metadata (title, description, tags, category_id, ...);
                "filesize" is required when the source cannot be stat'ed
            privacy_status: public, private or unlisted

        Returns:
            Descriptor of the uploaded video

        Raises:
            AuthError: If no usable credential is available
            UploadError: If the upload fails
            ValueError: If metadata is invalid
        """
        self.handle_access_token()

        data = dict(data or {})
        total_size = self._resolve_size(path, data.pop("filesize", None))

        data["privacy_status"] = (
            privacy_status or data.get("privacy_status") or self.default_privacy_status
        )
        body = VideoMetadata.from_mapping(data).to_body()

        self.logger.info(f"Starting upload: {path} ({total_size} bytes)")
        descriptor = self.uploader.upload(
            path,
            total_size,
            lambda total, chunk: self.service.start_video_upload(
                body,
                VIDEO_INSERT_PARTS,
                total,
                chunk,
                VIDEO_MIME_TYPE,
            ),
        )

        self.video_id = descriptor.resource_id
        self.snippet = descriptor.snippet
        self.last_upload = descriptor

        self.logger.info(f"Upload successful: {self.video_id}")
        return descriptor

    def with_thumbnail(
        self,
        image_path: UploadSource,
        size_hint: Optional[int] = None,
        mime_type: str = DEFAULT_THUMBNAIL_MIME_TYPE,
        video_id: Optional[str] = None,
    ) -> str:
        """
        Set a custom thumbnail on a video.

        Args:
            image_path: Local path, http(s) URL or binary stream
            size_hint: Image size in bytes (required for remote sources)
            mime_type: Image MIME type
            video_id: Target video (default: the last uploaded video)

        Returns:
            URL of the default thumbnail

        Raises:
            ValueError: If there is no target video
        """
        target = video_id or self.video_id
        if not target:
            raise ValueError("No video to attach a thumbnail to; upload first or pass video_id")

        self.handle_access_token()
        total_size = self._resolve_size(image_path, size_hint)

        descriptor = self.uploader.upload(
            image_path,
            total_size,
            lambda total, chunk: self.service.start_thumbnail_upload(
                target,
                total,
                chunk,
                mime_type,
            ),
        )

        self.thumbnail_url = descriptor.thumbnail_url
        self.logger.info(f"Thumbnail set for {target}: {self.thumbnail_url}")
        return self.thumbnail_url

    def get_video_id(self) -> Optional[str]:
        return self.video_id

    def get_snippet(self) -> Optional[Dict[str, Any]]:
        return self.snippet

    def get_thumbnail_url(self) -> Optional[str]:
        return self.thumbnail_url

    # =========================================================================
    # VIDEOS
    # =========================================================================

    def exists(self, video_id: str) -> bool:
        """
        Check whether a video exists.

        Returns:
            False when the list call returns no items

        Raises:
            RemoteServiceError: If the list call itself fails
        """
        self.handle_access_token()
        return bool(self.service.list_videos([video_id], "status"))

    def delete_video(self, video_id: str) -> OperationResult:
        """
        Delete a video.

        Raises:
            NotFoundError: If the video does not exist (no delete is sent)
        """
        self.handle_access_token()

        try:
            found = self.exists(video_id)
        except RemoteServiceError as e:
            return self._failure("check video", e)

        if not found:
            raise NotFoundError(
                f'A video matching id "{video_id}" could not be found.',
                resource_id=video_id,
            )

        try:
            self.service.delete_video(video_id)
        except RemoteServiceError as e:
            return self._failure("delete video", e)

        self.logger.info(f"Video deleted: {video_id}")
        return OperationResult.ok(video_id)

    def update_video(self, video_id: str, fields: Mapping[str, Any]) -> OperationResult:
        """
        Update video metadata.

        Only the keys present in `fields` change; the parts they belong to
        form the update's field mask.
        """
        self.handle_access_token()

        metadata = VideoMetadata.from_mapping(fields)
        if metadata.is_empty:
            self.logger.warning(f"No metadata fields to update for {video_id}")
            return OperationResult.ok(None)

        parts = ",".join(metadata.parts)
        try:
            items = self.service.list_videos([video_id], parts)
            if not items:
                return self._not_found("video", video_id)

            updated = self.service.update_video(metadata.apply_to(items[0]), parts)
        except RemoteServiceError as e:
            return self._failure("update video", e)

        self.logger.info(f"Video updated: {video_id} ({parts})")
        return OperationResult.ok(updated)

    def get_status(self, video_id: str) -> OperationResult:
        """Status part of a video (privacy, upload and processing state)"""
        self.handle_access_token()

        try:
            items = self.service.list_videos([video_id], "status")
        except RemoteServiceError as e:
            return self._failure("get video status", e)

        if not items:
            return self._not_found("video", video_id)
        return OperationResult.ok(items[0].get("status", {}))

    def list_videos(self, max_results: int = MAX_RESULTS) -> OperationResult:
        """Videos owned by the authorized channel"""
        self.handle_access_token()

        try:
            return OperationResult.ok(self.service.list_my_videos(max_results))
        except RemoteServiceError as e:
            return self._failure("list videos", e)

    # =========================================================================
    # PLAYLISTS
    # =========================================================================

    def create_playlist(self, fields: Mapping[str, Any]) -> OperationResult:
        """
        Create a playlist.

        Raises:
            ValueError: If no title is given
        """
        metadata = PlaylistMetadata.from_mapping(fields)
        if not metadata.get("title"):
            raise ValueError("A playlist title is required")

        self.handle_access_token()

        try:
            playlist = self.service.insert_playlist(
                metadata.to_body(),
                ",".join(metadata.parts),
            )
        except RemoteServiceError as e:
            return self._failure("create playlist", e)

        self.logger.info(f"Playlist created: {playlist.get('id')}")
        return OperationResult.ok(playlist)

    def modify_playlist(self, playlist_id: str, fields: Mapping[str, Any]) -> OperationResult:
        """Update only the playlist fields present in `fields`"""
        self.handle_access_token()

        metadata = PlaylistMetadata.from_mapping(fields)
        if metadata.is_empty:
            self.logger.warning(f"No playlist fields to update for {playlist_id}")
            return OperationResult.ok(None)

        parts = ",".join(metadata.parts)
        try:
            items = self.service.list_playlists(parts, playlist_ids=[playlist_id])
            if not items:
                return self._not_found("playlist", playlist_id)

            updated = self.service.update_playlist(metadata.apply_to(items[0]), parts)
        except RemoteServiceError as e:
            return self._failure("modify playlist", e)

        return OperationResult.ok(updated)

    def fetch_playlist(self, playlist_id: str) -> OperationResult:
        self.handle_access_token()

        try:
            items = self.service.list_playlists("snippet,status", playlist_ids=[playlist_id])
        except RemoteServiceError as e:
            return self._failure("fetch playlist", e)

        if not items:
            return self._not_found("playlist", playlist_id)
        return OperationResult.ok(items[0])

    def list_playlists(self, max_results: int = MAX_RESULTS) -> OperationResult:
        self.handle_access_token()

        try:
            return OperationResult.ok(
                self.service.list_playlists("snippet,status", max_results=max_results),
            )
        except RemoteServiceError as e:
            return self._failure("list playlists", e)

    def delete_playlist(self, playlist_id: str) -> OperationResult:
        """
        Delete a playlist.

        Raises:
            NotFoundError: If the playlist does not exist (no delete is sent)
        """
        self.handle_access_token()

        try:
            items = self.service.list_playlists("id", playlist_ids=[playlist_id])
        except RemoteServiceError as e:
            return self._failure("check playlist", e)

        if not items:
            raise NotFoundError(
                f'A playlist matching id "{playlist_id}" could not be found.',
                resource_id=playlist_id,
            )

        try:
            self.service.delete_playlist(playlist_id)
        except RemoteServiceError as e:
            return self._failure("delete playlist", e)

        self.logger.info(f"Playlist deleted: {playlist_id}")
        return OperationResult.ok(playlist_id)

    def add_video_to_playlist(
        self,
        playlist_id: str,
        video_id: str,
        position: Optional[int] = None,
    ) -> OperationResult:
        self.handle_access_token()

        try:
            item = self.service.insert_playlist_item(
                playlist_item_body(playlist_id, video_id, position),
                "snippet",
            )
        except RemoteServiceError as e:
            return self._failure("add video to playlist", e)

        self.logger.info(f"Added video {video_id} to playlist {playlist_id}")
        return OperationResult.ok(item)

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def query_report(
        self,
        start_date: Union[str, date],
        end_date: Union[str, date],
        metrics: Union[str, List[str]],
        dimensions: Optional[Union[str, List[str]]] = None,
        filters: Optional[str] = None,
        ids: str = DEFAULT_REPORT_IDS,
        sort: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> OperationResult:
        """
        Run a YouTube Analytics report.

        Returns:
            OperationResult whose data is a list of row dicts keyed by
            column name
        """
        self.handle_access_token()

        params: Dict[str, Any] = {
            "ids": ids,
            "startDate": _format_date(start_date),
            "endDate": _format_date(end_date),
            "metrics": _join(metrics),
        }
        if dimensions:
            params["dimensions"] = _join(dimensions)
        if filters:
            params["filters"] = filters
        if sort:
            params["sort"] = sort
        if max_results is not None:
            params["maxResults"] = max_results

        try:
            response = self.service.query_report(**params)
        except RemoteServiceError as e:
            return self._failure("query report", e)

        headers = [header["name"] for header in response.get("columnHeaders", [])]
        rows = [dict(zip(headers, row)) for row in response.get("rows") or []]
        return OperationResult.ok(rows)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_size(self, source: UploadSource, declared: Optional[int]) -> int:
        if declared is not None:
            return int(declared)

        if isinstance(source, (str, os.PathLike)) and not is_remote(source):
            try:
                return os.path.getsize(source)
            except OSError as e:
                raise UploadError(
                    f'Error opening source "{source}": {e}',
                    reason=UploadFailure.CANNOT_OPEN_SOURCE,
                ) from e

        raise ValueError(
            f"Size of {source!r} cannot be determined; pass it explicitly",
        )

    def _failure(self, action: str, error: RemoteServiceError) -> OperationResult:
        self.logger.error(f"Failed to {action}: {error}")
        return OperationResult.failed(str(error), status=error.status)

    def _not_found(self, kind: str, resource_id: str) -> OperationResult:
        message = f'A {kind} matching id "{resource_id}" could not be found.'
        self.logger.warning(message)
        return OperationResult.failed(message, status=OperationStatus.NOT_FOUND)


def _format_date(value: Union[str, date]) -> str:
    return value.isoformat() if isinstance(value, date) else value


def _join(value: Union[str, List[str]]) -> str:
    return value if isinstance(value, str) else ",".join(value)
