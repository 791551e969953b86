"""
YouTube Controller Tests

Runs the controller against MockVideoService.

Tests cover:
1. Access token handling (validation, refresh write-back)
2. Video and thumbnail uploads
3. exists / delete semantics
4. Partial metadata updates
5. Playlists and reports
6. Remote failures reported as OperationResult
"""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

from youtube_adapter.auth.credential_store import MemoryCredentialStore
from youtube_adapter.auth.token_guard import TokenGuard
from youtube_adapter.constants import AuthFailure, OperationStatus, UploadFailure
from youtube_adapter.controllers.youtube_controller import YouTubeController
from youtube_adapter.errors import AuthError, NotFoundError, RemoteServiceError, UploadError
from youtube_adapter.implementations.mock_service import MockTokenRefresher, MockVideoService
from youtube_adapter.models.credential import Credential, utcnow

MIB = 1024 * 1024

# =============================================================================
# ACCESS TOKEN
# =============================================================================


class TestAccessToken:
    """Token validation before every operation"""

    def test_valid_token_authorizes_service(self, controller, mock_service, valid_credential):
        controller.handle_access_token()

        assert mock_service.credential == valid_credential

    def test_expired_token_refreshed_and_saved(self, mock_service, expired_credential):
        store = MemoryCredentialStore()
        store.save(expired_credential)
        refresher = MockTokenRefresher()
        controller = YouTubeController(mock_service, store, TokenGuard(refresher))

        controller.exists("anything")

        assert refresher.refresh_calls == ["refresh-token"]
        saved = store.load()
        assert saved.access_token == "mock-access-token-1"
        assert saved.refresh_token == "refresh-token"
        assert mock_service.credential.access_token == "mock-access-token-1"

    def test_valid_token_not_rewritten(self, mock_service, valid_credential):
        store = Mock()
        store.load.return_value = valid_credential
        controller = YouTubeController(mock_service, store, TokenGuard(MockTokenRefresher()))

        controller.handle_access_token()

        store.save.assert_not_called()

    def test_missing_token_blocks_operations(self, mock_service, refresher):
        controller = YouTubeController(mock_service, MemoryCredentialStore(), TokenGuard(refresher))

        with pytest.raises(AuthError) as exc_info:
            controller.exists("abc")

        assert exc_info.value.reason == AuthFailure.MISSING
        assert mock_service.calls == []

    def test_set_access_token_from_mapping(self, controller):
        expiry = (utcnow() + timedelta(hours=1)).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

        controller.set_access_token({"token": "from-web", "expiry": expiry})

        assert controller.get_access_token().access_token == "from-web"

    def test_set_access_token_credential(self, controller):
        credential = Credential("direct", utcnow() + timedelta(hours=1))

        controller.set_access_token(credential)

        assert controller.get_access_token() == credential


# =============================================================================
# UPLOADS
# =============================================================================


class TestUpload:
    """Video uploads through the chunk loop"""

    def test_upload_local_file(self, controller, mock_service, video_file):
        descriptor = controller.upload(
            str(video_file),
            {"title": "Intro", "description": "First video", "tags": "a, b"},
        )

        session = mock_service.sessions[0]
        assert [len(c) for c in session.chunks] == [MIB, MIB, MIB // 2]
        assert descriptor.resource_id in mock_service.videos
        assert descriptor.snippet["title"] == "Intro"
        assert descriptor.snippet["tags"] == ["a", "b"]
        assert controller.get_video_id() == descriptor.resource_id
        assert controller.get_snippet() == descriptor.snippet

    def test_default_privacy(self, controller, mock_service, video_file):
        descriptor = controller.upload(str(video_file), {"title": "T"})

        assert mock_service.videos[descriptor.resource_id]["status"]["privacyStatus"] == "public"

    def test_explicit_privacy(self, controller, mock_service, video_file):
        descriptor = controller.upload(str(video_file), {"title": "T"}, privacy_status="unlisted")

        assert mock_service.videos[descriptor.resource_id]["status"]["privacyStatus"] == "unlisted"

    def test_invalid_privacy(self, controller, video_file):
        with pytest.raises(ValueError):
            controller.upload(str(video_file), {"title": "T"}, privacy_status="secret")

    def test_stream_with_filesize(self, controller, mock_service, make_stream):
        stream = make_stream(b"s" * 3000)

        controller.upload(stream, {"title": "Stream", "filesize": 3000})

        assert mock_service.sessions[0].bytes_received == 3000
        assert stream.close_count == 1

    def test_stream_without_filesize(self, controller, make_stream):
        with pytest.raises(ValueError):
            controller.upload(make_stream(b"s" * 10), {"title": "Stream"})

    def test_missing_file(self, controller, tmp_path):
        with pytest.raises(UploadError) as exc_info:
            controller.upload(str(tmp_path / "nope.mp4"), {"title": "T"})

        assert exc_info.value.reason == UploadFailure.CANNOT_OPEN_SOURCE

    def test_empty_file(self, controller, mock_service, tmp_path):
        empty = tmp_path / "empty.mp4"
        empty.write_bytes(b"")

        with pytest.raises(UploadError) as exc_info:
            controller.upload(str(empty), {"title": "T"})

        assert exc_info.value.reason == UploadFailure.TRUNCATED_SOURCE
        assert mock_service.sessions == []
        assert not mock_service.is_deferred

    def test_truncated_declared_size(self, controller, mock_service, make_stream):
        with pytest.raises(UploadError) as exc_info:
            controller.upload(make_stream(b"s" * 100), {"title": "T", "filesize": 200})

        assert exc_info.value.reason == UploadFailure.TRUNCATED_SOURCE
        assert mock_service.videos == {}

    def test_transfer_failure(self, valid_credential, video_file):
        service = MockVideoService(fail_upload_after=1)
        store = MemoryCredentialStore()
        store.save(valid_credential)
        controller = YouTubeController(service, store, TokenGuard(MockTokenRefresher()), chunk_size=MIB)

        with pytest.raises(UploadError) as exc_info:
            controller.upload(str(video_file), {"title": "T"})

        assert exc_info.value.reason == UploadFailure.TRANSFER_FAILED
        assert controller.get_video_id() is None
        assert not service.is_deferred

    def test_set_chunk_size(self, controller, mock_service, video_file):
        controller.set_chunk_size(2 * MIB)

        controller.upload(str(video_file), {"title": "T"})

        assert len(mock_service.sessions[0].chunks) == 2


class TestThumbnail:
    """Thumbnail uploads"""

    def test_thumbnail_after_upload(self, controller, mock_service, video_file, tmp_path):
        image = tmp_path / "thumb.png"
        image.write_bytes(b"\x89PNG" + b"i" * 2000)
        descriptor = controller.upload(str(video_file), {"title": "T"})

        url = controller.with_thumbnail(str(image))

        assert url == f"https://i.ytimg.com/vi/{descriptor.resource_id}/default.jpg"
        assert controller.get_thumbnail_url() == url
        assert mock_service.thumbnails[descriptor.resource_id] == url

    def test_thumbnail_for_explicit_video(self, controller, mock_service, make_stream):
        video_id = mock_service.add_fake_video()

        url = controller.with_thumbnail(make_stream(b"i" * 500), size_hint=500, video_id=video_id)

        assert video_id in url

    def test_thumbnail_without_video(self, controller, make_stream):
        with pytest.raises(ValueError):
            controller.with_thumbnail(make_stream(b"i" * 10), size_hint=10)

    def test_thumbnail_for_missing_video(self, controller, make_stream):
        with pytest.raises(UploadError) as exc_info:
            controller.with_thumbnail(make_stream(b"i" * 10), size_hint=10, video_id="gone")

        assert exc_info.value.reason == UploadFailure.TRANSFER_FAILED


# =============================================================================
# VIDEOS
# =============================================================================


class TestExistsAndDelete:
    """exists() and delete_video()"""

    def test_exists_true(self, controller, mock_service):
        video_id = mock_service.add_fake_video()

        assert controller.exists(video_id) is True

    def test_exists_false(self, controller):
        assert controller.exists("doesNotExist") is False

    def test_exists_propagates_remote_errors(self, controller, mock_service):
        mock_service.list_videos = Mock(side_effect=RemoteServiceError("Quota exceeded", 403))

        with pytest.raises(RemoteServiceError):
            controller.exists("abc")

    def test_delete_existing(self, controller, mock_service):
        video_id = mock_service.add_fake_video()

        result = controller.delete_video(video_id)

        assert result.success
        assert result.data == video_id
        assert video_id not in mock_service.videos

    def test_delete_missing_sends_no_delete(self, controller, mock_service):
        with pytest.raises(NotFoundError) as exc_info:
            controller.delete_video("doesNotExist")

        assert exc_info.value.resource_id == "doesNotExist"
        assert mock_service.calls_to("delete_video") == []

    def test_delete_remote_failure(self, controller, mock_service):
        video_id = mock_service.add_fake_video()
        mock_service.delete_video = Mock(
            side_effect=RemoteServiceError("Insufficient Permission", status_code=403)
        )

        result = controller.delete_video(video_id)

        assert not result.success
        assert result.status == OperationStatus.AUTH_ERROR
        assert result.error_message == "Insufficient Permission"


class TestUpdateVideo:
    """Partial metadata updates"""

    def test_title_only(self, controller, mock_service):
        video_id = mock_service.add_fake_video(
            title="Old", description="Keep me", tags=["x"], categoryId="22"
        )

        result = controller.update_video(video_id, {"title": "New"})

        assert result.success
        body, parts = mock_service.calls_to("update_video")[0]
        assert parts == "snippet"
        assert "status" not in body
        snippet = mock_service.videos[video_id]["snippet"]
        assert snippet == {
            "title": "New",
            "description": "Keep me",
            "tags": ["x"],
            "categoryId": "22",
        }
        assert mock_service.videos[video_id]["status"]["privacyStatus"] == "private"

    def test_status_only(self, controller, mock_service):
        video_id = mock_service.add_fake_video(title="Keep")

        controller.update_video(video_id, {"privacy_status": "public"})

        _, parts = mock_service.calls_to("update_video")[0]
        assert parts == "status"
        assert mock_service.videos[video_id]["snippet"]["title"] == "Keep"
        assert mock_service.videos[video_id]["status"]["privacyStatus"] == "public"
        assert mock_service.videos[video_id]["status"]["uploadStatus"] == "processed"

    def test_both_parts(self, controller, mock_service):
        video_id = mock_service.add_fake_video()

        controller.update_video(video_id, {"title": "T", "embeddable": 0})

        _, parts = mock_service.calls_to("update_video")[0]
        assert parts == "snippet,status"
        assert mock_service.videos[video_id]["status"]["embeddable"] is False

    def test_empty_fields_no_remote_call(self, controller, mock_service):
        result = controller.update_video("abc", {"unknown": 1})

        assert result.success
        assert result.data is None
        assert mock_service.calls == []

    def test_missing_video(self, controller):
        result = controller.update_video("gone", {"title": "T"})

        assert not result.success
        assert result.status == OperationStatus.NOT_FOUND

    def test_remote_failure_preserves_message(self, controller, mock_service):
        video_id = mock_service.add_fake_video()
        mock_service.update_video = Mock(
            side_effect=RemoteServiceError("The request metadata is invalid.", status_code=400)
        )

        result = controller.update_video(video_id, {"title": "T"})

        assert not result.success
        assert result.status == OperationStatus.REMOTE_ERROR
        assert result.error_message == "The request metadata is invalid."


class TestVideoQueries:
    def test_get_status(self, controller, mock_service):
        video_id = mock_service.add_fake_video()

        result = controller.get_status(video_id)

        assert result.success
        assert result.data["uploadStatus"] == "processed"

    def test_get_status_missing(self, controller):
        assert controller.get_status("gone").status == OperationStatus.NOT_FOUND

    def test_list_videos(self, controller, mock_service):
        first = mock_service.add_fake_video("One")
        mock_service.add_fake_video("Two")

        result = controller.list_videos(max_results=1)

        assert result.success
        assert [item["id"]["videoId"] for item in result.data] == [first]

    def test_list_videos_quota(self, controller, mock_service):
        mock_service.list_my_videos = Mock(
            side_effect=RemoteServiceError("Too many requests", status_code=429)
        )

        result = controller.list_videos()

        assert result.status == OperationStatus.QUOTA_EXCEEDED


# =============================================================================
# PLAYLISTS
# =============================================================================


class TestPlaylists:
    """Playlist passthroughs"""

    def test_create(self, controller, mock_service):
        result = controller.create_playlist({"title": "Talks", "privacy_status": "private"})

        assert result.success
        playlist_id = result.data["id"]
        assert mock_service.playlists[playlist_id]["snippet"]["title"] == "Talks"
        _, parts = mock_service.calls_to("insert_playlist")[0]
        assert parts == "snippet,status"

    def test_create_requires_title(self, controller, mock_service):
        with pytest.raises(ValueError):
            controller.create_playlist({"description": "No title"})

        assert mock_service.calls == []

    def test_modify_only_present_fields(self, controller, mock_service):
        playlist_id = controller.create_playlist(
            {"title": "Talks", "description": "Conference talks"}
        ).data["id"]

        result = controller.modify_playlist(playlist_id, {"title": "Talks 2025"})

        assert result.success
        assert mock_service.playlists[playlist_id]["snippet"] == {
            "title": "Talks 2025",
            "description": "Conference talks",
        }

    def test_modify_missing(self, controller):
        result = controller.modify_playlist("PLgone", {"title": "T"})

        assert result.status == OperationStatus.NOT_FOUND

    def test_fetch_and_list(self, controller):
        playlist_id = controller.create_playlist({"title": "A"}).data["id"]
        controller.create_playlist({"title": "B"})

        fetched = controller.fetch_playlist(playlist_id)
        listed = controller.list_playlists()

        assert fetched.data["snippet"]["title"] == "A"
        assert len(listed.data) == 2

    def test_fetch_missing(self, controller):
        assert controller.fetch_playlist("PLgone").status == OperationStatus.NOT_FOUND

    def test_delete(self, controller, mock_service):
        playlist_id = controller.create_playlist({"title": "A"}).data["id"]

        result = controller.delete_playlist(playlist_id)

        assert result.success
        assert playlist_id not in mock_service.playlists

    def test_delete_missing(self, controller, mock_service):
        with pytest.raises(NotFoundError):
            controller.delete_playlist("PLgone")

        assert mock_service.calls_to("delete_playlist") == []

    def test_add_video(self, controller, mock_service):
        playlist_id = controller.create_playlist({"title": "A"}).data["id"]
        video_id = mock_service.add_fake_video()

        result = controller.add_video_to_playlist(playlist_id, video_id, position=0)

        assert result.success
        snippet = mock_service.playlist_items[0]["snippet"]
        assert snippet["resourceId"] == {"kind": "youtube#video", "videoId": video_id}
        assert snippet["position"] == 0

    def test_add_video_missing_playlist(self, controller):
        result = controller.add_video_to_playlist("PLgone", "abc")

        assert result.status == OperationStatus.NOT_FOUND


# =============================================================================
# ANALYTICS
# =============================================================================


class TestReports:
    """Analytics report passthrough"""

    def test_rows_keyed_by_column(self, controller, mock_service):
        mock_service.report_rows = [["2025-01-01", 120, 3], ["2025-01-02", 80, 1]]

        result = controller.query_report(
            date(2025, 1, 1),
            date(2025, 1, 2),
            metrics=["views", "likes"],
            dimensions="day",
        )

        assert result.success
        assert result.data == [
            {"day": "2025-01-01", "views": 120, "likes": 3},
            {"day": "2025-01-02", "views": 80, "likes": 1},
        ]
        (params,) = mock_service.calls_to("query_report")[0]
        assert params == {
            "ids": "channel==MINE",
            "startDate": "2025-01-01",
            "endDate": "2025-01-02",
            "metrics": "views,likes",
            "dimensions": "day",
        }

    def test_optional_params(self, controller, mock_service):
        controller.query_report(
            "2025-01-01",
            "2025-01-31",
            "views",
            filters="video==abc",
            sort="-views",
            max_results=10,
        )

        (params,) = mock_service.calls_to("query_report")[0]
        assert params["filters"] == "video==abc"
        assert params["sort"] == "-views"
        assert params["maxResults"] == 10
        assert "dimensions" not in params

    def test_no_rows(self, controller):
        result = controller.query_report("2025-01-01", "2025-01-31", "views")

        assert result.success
        assert result.data == []

    def test_remote_failure(self, controller, mock_service):
        mock_service.query_report = Mock(
            side_effect=RemoteServiceError("Unknown identifier (foo) given in field parameters.", 400)
        )

        result = controller.query_report("2025-01-01", "2025-01-31", "foo")

        assert not result.success
        assert "Unknown identifier" in result.error_message
