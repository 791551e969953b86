"""
Google Resumable Session

ResumableSession backed by googleapiclient's resumable upload protocol.
The insert/set request is built in deferred mode (never executed
directly); each pushed chunk is served to googleapiclient through a
MediaUpload that only ever holds the current chunk, so the source is read
sequentially and never seeked.
"""

import logging
from typing import Any, Dict, Optional

from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest, MediaUpload

from youtube_adapter.errors import RemoteServiceError
from youtube_adapter.implementations.http_errors import (
    TRANSPORT_ERRORS,
    translate_http_error,
    translate_transport_error,
)
from youtube_adapter.interfaces.video_service_interface import ResumableSession


class ChunkFeedUpload(MediaUpload):
    """
    MediaUpload fed one chunk at a time.

    The declared size is known up front; the bytes are supplied by the
    chunk loop rather than read from a file.
    """

    def __init__(self, mimetype: str, total_size: int):
        super().__init__()
        self._mimetype = mimetype
        self._size = total_size
        self._offset = 0
        self._pending = b""
        self._window_start = 0

    def feed(self, offset: int, chunk: bytes) -> None:
        """Make `chunk` (starting at stream offset `offset`) available"""
        self._offset = offset
        self._pending = chunk
        self._window_start = offset

    def set_window_start(self, position: int) -> None:
        """Position the server has acknowledged up to"""
        self._window_start = position

    def chunksize(self) -> int:
        # Whatever is left of the current chunk: googleapiclient treats a
        # read shorter than chunksize() as end of file
        return self._offset + len(self._pending) - self._window_start

    def mimetype(self) -> str:
        return self._mimetype

    def size(self) -> int:
        return self._size

    def resumable(self) -> bool:
        return True

    def has_stream(self) -> bool:
        return False

    def getbytes(self, begin: int, length: int) -> bytes:
        start = begin - self._offset
        if start < 0 or start > len(self._pending):
            raise RemoteServiceError(
                f"Server requested bytes from offset {begin}, outside the "
                f"current chunk ({self._offset}-{self._offset + len(self._pending)})"
            )
        return self._pending[start : start + length]


class GoogleResumableSession(ResumableSession):
    """
    Drives an unexecuted googleapiclient request chunk by chunk.

    Usage:
        media = ChunkFeedUpload("video/*", total_size)
        request = youtube.videos().insert(part=..., body=..., media_body=media)
        session = GoogleResumableSession(request, media)
        session.next_chunk(first_chunk)
    """

    def __init__(self, request: HttpRequest, media: ChunkFeedUpload):
        self.logger = logging.getLogger(__name__)
        self.request = request
        self.media = media
        self.bytes_fed = 0

    def next_chunk(self, chunk: bytes) -> Optional[Dict[str, Any]]:
        self.media.feed(self.bytes_fed, chunk)
        self.bytes_fed += len(chunk)

        while True:
            before = self.request.resumable_progress
            self.media.set_window_start(before)
            try:
                _, response = self.request.next_chunk()
            except HttpError as e:
                raise translate_http_error(e) from e
            except TRANSPORT_ERRORS as e:
                raise translate_transport_error(e) from e

            if response is not None:
                return response

            if self.request.resumable_progress >= self.bytes_fed:
                return None

            if self.request.resumable_progress <= before:
                raise RemoteServiceError(
                    f"Upload stalled at byte {before}: server accepted no data",
                )

            # Server kept only part of the chunk; resend the remainder
            self.logger.debug(
                f"Server acknowledged {self.request.resumable_progress} of "
                f"{self.bytes_fed} bytes, resending remainder",
            )
