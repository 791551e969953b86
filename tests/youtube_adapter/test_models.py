"""
Model Tests

Tests cover:
1. Credential serialization (google-auth and raw OAuth layouts)
2. Credential stores
3. Metadata builders (partial bodies, field masks)
4. Upload session accounting and results
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from youtube_adapter.auth.credential_store import JsonFileCredentialStore, MemoryCredentialStore
from youtube_adapter.constants import AuthFailure, OperationStatus
from youtube_adapter.errors import AuthError, RemoteServiceError
from youtube_adapter.models.credential import Credential, utcnow
from youtube_adapter.models.metadata import PlaylistMetadata, VideoMetadata, playlist_item_body
from youtube_adapter.models.resources import OperationResult, ResourceDescriptor, UploadSession

EXPIRY = datetime(2025, 10, 12, 19, 30, 45, 123456)


# =============================================================================
# CREDENTIAL
# =============================================================================


class TestCredential:
    def test_google_layout(self):
        credential = Credential.from_mapping(
            {
                "token": "abc",
                "refresh_token": "ref",
                "expiry": "2025-10-12T19:30:45.123456Z",
                "scopes": ["https://www.googleapis.com/auth/youtube"],
                "client_id": "ignored",
            }
        )

        assert credential.access_token == "abc"
        assert credential.refresh_token == "ref"
        assert credential.expires_at == EXPIRY
        assert credential.scopes == ["https://www.googleapis.com/auth/youtube"]

    def test_oauth_response_layout(self):
        created = int(datetime(2025, 10, 12, 18, 0, tzinfo=timezone.utc).timestamp())

        credential = Credential.from_mapping(
            {
                "access_token": "abc",
                "expires_in": 3599,
                "created": created,
                "scope": "a b",
            }
        )

        assert credential.expires_at == datetime(2025, 10, 12, 18, 59, 59)
        assert credential.scopes == ["a", "b"]
        assert credential.refresh_token is None

    def test_aware_expiry_normalized(self):
        credential = Credential.from_mapping(
            {"token": "abc", "expiry": "2025-10-12T21:30:45+02:00"}
        )

        assert credential.expires_at == datetime(2025, 10, 12, 19, 30, 45)

    def test_round_trip(self):
        credential = Credential("abc", EXPIRY, "ref", ["scope"])

        assert Credential.from_mapping(credential.to_mapping()) == credential

    def test_to_mapping_layout(self):
        data = Credential("abc", EXPIRY, "ref").to_mapping()

        assert data == {
            "token": "abc",
            "refresh_token": "ref",
            "expiry": "2025-10-12T19:30:45.123456Z",
        }

    @pytest.mark.parametrize("data", [{}, {"token": ""}, {"refresh_token": "r"}, "abc", None])
    def test_missing_access_token(self, data):
        with pytest.raises(AuthError) as exc_info:
            Credential.from_mapping(data)

        assert exc_info.value.reason == AuthFailure.MISSING

    def test_invalid_expiry(self):
        with pytest.raises(AuthError):
            Credential.from_mapping({"token": "abc", "expiry": "tomorrow"})

    def test_expiry_checks(self):
        credential = Credential("abc", EXPIRY)

        assert not credential.is_expired(EXPIRY - timedelta(minutes=5))
        assert credential.is_expired(EXPIRY - timedelta(seconds=5))
        assert credential.is_expired(EXPIRY + timedelta(minutes=5))
        assert Credential("abc").is_expired(EXPIRY)

    def test_with_refreshed_token(self):
        credential = Credential("old", EXPIRY, "ref", ["scope"])

        updated = credential.with_refreshed_token("new", EXPIRY + timedelta(hours=1))

        assert updated.access_token == "new"
        assert updated.refresh_token == "ref"
        assert updated.scopes == ["scope"]
        assert credential.access_token == "old"

    def test_google_credentials_are_bearer_only(self):
        google_credentials = Credential("abc", EXPIRY, "ref").to_google_credentials()

        assert google_credentials.token == "abc"
        assert google_credentials.expiry is None
        assert google_credentials.refresh_token is None

    @pytest.mark.parametrize("seconds_left", [31, 120, 220])
    def test_google_credentials_valid_while_guard_accepts(self, seconds_left):
        """google-auth must not try to refresh a token the guard let through"""
        credential = Credential("abc", utcnow() + timedelta(seconds=seconds_left), "ref")

        google_credentials = credential.to_google_credentials()

        assert not credential.is_expired()
        assert google_credentials.valid
        assert not google_credentials.expired


class TestCredentialStores:
    def test_json_store_missing_file(self, tmp_path):
        assert JsonFileCredentialStore(str(tmp_path / "token.json")).load() is None

    def test_json_store_round_trip(self, tmp_path):
        store = JsonFileCredentialStore(str(tmp_path / "nested" / "token.json"))
        credential = Credential("abc", EXPIRY, "ref")

        store.save(credential)

        assert store.load() == credential

    def test_json_store_preserves_client_fields(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text(
            json.dumps(
                {
                    "token": "old",
                    "expiry": "2020-01-01T00:00:00.000000Z",
                    "refresh_token": "ref",
                    "client_id": "cid",
                    "token_uri": "https://oauth2.googleapis.com/token",
                }
            )
        )
        store = JsonFileCredentialStore(str(path))

        store.save(Credential("new", EXPIRY, "ref"))

        data = json.loads(path.read_text())
        assert data["token"] == "new"
        assert data["expiry"] == "2025-10-12T19:30:45.123456Z"
        assert data["client_id"] == "cid"
        assert data["token_uri"] == "https://oauth2.googleapis.com/token"

    def test_json_store_drops_stale_keys(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text(json.dumps({"access_token": "old", "expires_in": 3600, "created": 1}))
        store = JsonFileCredentialStore(str(path))

        store.save(Credential("new"))

        assert json.loads(path.read_text()) == {"token": "new"}

    def test_json_store_clear(self, tmp_path):
        path = tmp_path / "token.json"
        store = JsonFileCredentialStore(str(path))
        store.save(Credential("abc"))

        store.clear()

        assert not path.exists()
        store.clear()

    def test_memory_store_uses_caller_mapping(self):
        session = {}
        store = MemoryCredentialStore(session, key="yt")

        store.save(Credential("abc", EXPIRY))

        assert session["yt"]["token"] == "abc"
        assert store.load() == Credential("abc", EXPIRY)

    def test_memory_store_accepts_credential_object(self):
        credential = Credential("abc")
        store = MemoryCredentialStore({"token": credential})

        assert store.load() is credential

    def test_memory_store_clear(self):
        store = MemoryCredentialStore()
        store.save(Credential("abc"))

        store.clear()

        assert store.load() is None


# =============================================================================
# METADATA
# =============================================================================


class TestVideoMetadata:
    def test_only_present_fields(self):
        metadata = VideoMetadata.from_mapping({"title": "T", "unknown": "x"})

        assert metadata.parts == ["snippet"]
        assert metadata.to_body() == {"snippet": {"title": "T"}}

    def test_full_body(self):
        metadata = VideoMetadata.from_mapping(
            {
                "title": "T",
                "description": "D",
                "tags": ["a", " b "],
                "category_id": "22",
                "privacy_status": "private",
                "publish_at": datetime(2025, 11, 1, 12, 0),
            }
        )

        assert metadata.parts == ["snippet", "status"]
        assert metadata.to_body("vid") == {
            "id": "vid",
            "snippet": {
                "title": "T",
                "description": "D",
                "tags": ["a", "b"],
                "categoryId": "22",
            },
            "status": {
                "privacyStatus": "private",
                "publishAt": "2025-11-01T12:00:00.000Z",
            },
        }

    def test_comma_separated_tags(self):
        metadata = VideoMetadata.from_mapping({"tags": "one, two,,three"})

        assert metadata.get("tags") == ["one", "two", "three"]

    def test_invalid_privacy(self):
        with pytest.raises(ValueError):
            VideoMetadata.from_mapping({"privacy_status": "hidden"})

    def test_empty(self):
        assert VideoMetadata.from_mapping(None).is_empty
        assert VideoMetadata.from_mapping({}).parts == []

    def test_apply_to_merges_touched_parts_only(self):
        resource = {
            "id": "vid",
            "snippet": {"title": "Old", "description": "Keep", "categoryId": "22"},
            "status": {"privacyStatus": "public"},
            "statistics": {"viewCount": "10"},
        }

        body = VideoMetadata.from_mapping({"description": "New"}).apply_to(resource)

        assert body == {
            "id": "vid",
            "snippet": {"title": "Old", "description": "New", "categoryId": "22"},
        }
        assert resource["snippet"]["description"] == "Keep"


class TestPlaylistMetadata:
    def test_fields(self):
        metadata = PlaylistMetadata.from_mapping(
            {"title": "P", "privacy_status": "unlisted", "category_id": "ignored"}
        )

        assert metadata.to_body() == {
            "snippet": {"title": "P"},
            "status": {"privacyStatus": "unlisted"},
        }

    def test_playlist_item_body(self):
        assert playlist_item_body("PL1", "vid") == {
            "snippet": {
                "playlistId": "PL1",
                "resourceId": {"kind": "youtube#video", "videoId": "vid"},
            }
        }
        assert playlist_item_body("PL1", "vid", position=3)["snippet"]["position"] == 3


# =============================================================================
# RESOURCES
# =============================================================================


class TestUploadSession:
    def test_accounting(self):
        session = UploadSession(total_size=10, chunk_size=4)

        assert session.next_read_size() == 4
        session.record_chunk(4)
        session.record_chunk(4)
        assert session.next_read_size() == 2
        assert session.remaining == 2
        assert session.progress == pytest.approx(0.8)
        assert not session.is_complete

        session.record_chunk(2)
        session.complete({"id": "x"})

        assert session.is_complete
        assert session.chunks_sent == 3
        assert session.next_read_size() == 0

    def test_cannot_exceed_declared_size(self):
        session = UploadSession(total_size=5, chunk_size=4)
        session.record_chunk(4)

        with pytest.raises(ValueError):
            session.record_chunk(4)

    def test_single_final_result(self):
        session = UploadSession(total_size=1, chunk_size=1)
        session.complete({"id": "x"})

        with pytest.raises(ValueError):
            session.complete({"id": "y"})

    @pytest.mark.parametrize("total_size,chunk_size", [(0, 1), (1, 0), (-5, 4)])
    def test_invalid_sizes(self, total_size, chunk_size):
        with pytest.raises(ValueError):
            UploadSession(total_size=total_size, chunk_size=chunk_size)


class TestResults:
    def test_descriptor_from_video(self):
        descriptor = ResourceDescriptor.from_response(
            {"kind": "youtube#video", "id": "vid", "snippet": {"title": "T"}}
        )

        assert descriptor.resource_id == "vid"
        assert descriptor.snippet == {"title": "T"}
        assert descriptor.thumbnail_url is None

    def test_descriptor_thumbnail_url(self):
        descriptor = ResourceDescriptor.from_response(
            {"items": [{"default": {"url": "https://i.ytimg.com/vi/vid/default.jpg"}}]}
        )

        assert descriptor.resource_id is None
        assert descriptor.thumbnail_url == "https://i.ytimg.com/vi/vid/default.jpg"

    def test_operation_result(self):
        assert OperationResult.ok([1]).success
        failed = OperationResult.failed("boom", OperationStatus.REMOTE_ERROR)
        assert not failed.success
        assert failed.error_message == "boom"

    @pytest.mark.parametrize(
        "status_code,expected",
        [
            (401, OperationStatus.AUTH_ERROR),
            (403, OperationStatus.AUTH_ERROR),
            (404, OperationStatus.NOT_FOUND),
            (429, OperationStatus.QUOTA_EXCEEDED),
            (500, OperationStatus.REMOTE_ERROR),
            (None, OperationStatus.REMOTE_ERROR),
        ],
    )
    def test_remote_error_status(self, status_code, expected):
        assert RemoteServiceError("x", status_code).status == expected
