"""
YouTube Adapter Test Configuration and Fixtures

Shared fakes for credentials, streams and the mock video service.

To use pytest:
    pip install -e .[test]
    pytest tests/youtube_adapter/
"""

from datetime import timedelta

import pytest

from youtube_adapter.auth.credential_store import MemoryCredentialStore
from youtube_adapter.auth.token_guard import TokenGuard
from youtube_adapter.controllers.youtube_controller import YouTubeController
from youtube_adapter.implementations.mock_service import (
    MockTokenRefresher,
    MockVideoService,
)
from youtube_adapter.models.credential import Credential, utcnow

MIB = 1024 * 1024


# =============================================================================
# FAKE STREAMS
# =============================================================================


class FakeStream:
    """
    In-memory binary stream that fails the test on a second close().

    Optionally limits how many bytes one read() returns, like a socket, and
    raises read_error once fail_at bytes have been read.
    """

    def __init__(self, data: bytes, max_read: int = None, read_error=None, fail_at: int = 0):
        self.data = data
        self.position = 0
        self.max_read = max_read
        self.read_error = read_error
        self.fail_at = fail_at
        self.close_count = 0
        self.reads = []

    def read(self, size: int = -1) -> bytes:
        assert self.close_count == 0, "read() after close()"
        if self.read_error is not None and self.position >= self.fail_at:
            raise self.read_error
        if size is None or size < 0:
            size = len(self.data) - self.position
        if self.max_read is not None:
            size = min(size, self.max_read)
        chunk = self.data[self.position : self.position + size]
        self.position += len(chunk)
        self.reads.append(len(chunk))
        return chunk

    def close(self) -> None:
        self.close_count += 1
        assert self.close_count == 1, "stream closed more than once"

    @property
    def closed(self) -> bool:
        return self.close_count > 0


# =============================================================================
# CREDENTIAL FIXTURES
# =============================================================================


@pytest.fixture
def valid_credential():
    """Credential that expires in one hour"""
    return Credential(
        access_token="valid-token",
        expires_at=utcnow() + timedelta(hours=1),
        refresh_token="refresh-token",
    )


@pytest.fixture
def expired_credential():
    """Expired credential with a refresh token"""
    return Credential(
        access_token="expired-token",
        expires_at=utcnow() - timedelta(hours=1),
        refresh_token="refresh-token",
    )


@pytest.fixture
def refresher():
    return MockTokenRefresher()


# =============================================================================
# SERVICE / CONTROLLER FIXTURES
# =============================================================================


@pytest.fixture
def mock_service():
    """Provide a fresh MockVideoService for each test"""
    return MockVideoService()


@pytest.fixture
def credential_store(valid_credential):
    store = MemoryCredentialStore()
    store.save(valid_credential)
    return store


@pytest.fixture
def controller(mock_service, credential_store, refresher):
    """Controller on the mock backend with a valid credential and 1 MiB chunks"""
    return YouTubeController(
        service=mock_service,
        credential_store=credential_store,
        token_guard=TokenGuard(refresher),
        chunk_size=MIB,
    )


@pytest.fixture
def video_file(tmp_path):
    """2.5 MiB file on disk"""
    path = tmp_path / "video.mp4"
    path.write_bytes(b"v" * (5 * MIB // 2))
    return path


@pytest.fixture
def make_stream():
    """Factory for FakeStream instances"""
    return FakeStream
