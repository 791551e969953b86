"""
Chunked Uploader

Drives a resumable upload: reads the source in fixed-size chunks and
pushes them one at a time to a resumable session until the server returns
the final resource.

One request per chunk, strictly sequential. The source stream is closed
and the API client is taken out of deferred mode on every exit path.
"""

import logging
from typing import Callable, Optional

from youtube_adapter.constants import DEFAULT_CHUNK_SIZE, UploadFailure
from youtube_adapter.errors import RemoteServiceError, UploadError
from youtube_adapter.interfaces.video_service_interface import (
    ResumableSession,
    VideoServiceInterface,
)
from youtube_adapter.media.sources import (
    READ_ERRORS,
    UploadSource,
    open_source,
    read_chunk,
)
from youtube_adapter.models.resources import ResourceDescriptor, UploadSession

# (total_size, chunk_size) -> session
SessionFactory = Callable[[int, int], ResumableSession]


class ChunkedUploader:
    """
    Resumable chunked upload loop.

    Usage:
        uploader = ChunkedUploader(service, chunk_size=1024 * 1024)
        descriptor = uploader.upload(
            "video.mp4",
            total_size=size,
            session_factory=lambda total, chunk: service.start_video_upload(
                body, "snippet,status", total, chunk, "video/*"
            ),
        )
    """

    def __init__(
        self,
        service: Optional[VideoServiceInterface] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Args:
            service: Client switched to deferred mode during uploads
            chunk_size: Bytes per chunk (positive; YouTube wants 256 KB
                multiples for every chunk but the last)
        """
        self.logger = logging.getLogger(__name__)
        self.service = service
        self.chunk_size = DEFAULT_CHUNK_SIZE
        self.set_chunk_size(chunk_size)

        # Session of the most recent upload, kept for inspection
        self.last_session: Optional[UploadSession] = None

    def set_chunk_size(self, chunk_size: int) -> "ChunkedUploader":
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}")
        self.chunk_size = chunk_size
        return self

    def upload(
        self,
        source: UploadSource,
        total_size: int,
        session_factory: SessionFactory,
    ) -> ResourceDescriptor:
        """
        Upload a source through a resumable session.

        Args:
            source: Path, URL, stream opener or open binary stream
            total_size: Declared size in bytes (required, sources may be
                remote and cannot be stat'ed)
            session_factory: Opens the resumable session on the server

        Returns:
            Descriptor built from the server's final response

        Raises:
            UploadError: CANNOT_OPEN_SOURCE, TRUNCATED_SOURCE (also for an
                empty source) or TRANSFER_FAILED
        """
        stream = open_source(source)
        try:
            if total_size <= 0:
                raise UploadError(
                    f'Source "{source}" is empty ({total_size} bytes declared)',
                    reason=UploadFailure.TRUNCATED_SOURCE,
                )
            session = UploadSession(total_size=total_size, chunk_size=self.chunk_size)
            self.last_session = session

            self._set_defer(True)
            try:
                self._transfer(stream, session, session_factory)
            finally:
                self._set_defer(False)
        finally:
            stream.close()

        self.logger.info(
            f"Upload complete: {session.bytes_sent} bytes in {session.chunks_sent} chunks",
        )
        return ResourceDescriptor.from_response(session.final_result)

    def _transfer(
        self,
        stream,
        session: UploadSession,
        session_factory: SessionFactory,
    ) -> None:
        try:
            resumable = session_factory(session.total_size, session.chunk_size)
        except RemoteServiceError as e:
            raise UploadError(
                f"Could not start upload session: {e}",
                reason=UploadFailure.TRANSFER_FAILED,
            ) from e

        last_progress = 0

        while not session.is_complete:
            read_size = session.next_read_size()
            if read_size == 0:
                raise UploadError(
                    f"All {session.total_size} bytes sent but the server "
                    f"returned no final resource",
                    reason=UploadFailure.TRANSFER_FAILED,
                )

            try:
                chunk = read_chunk(stream, read_size)
            except READ_ERRORS as e:
                raise UploadError(
                    f"Reading source failed after {session.bytes_sent} bytes: {e}",
                    reason=UploadFailure.TRANSFER_FAILED,
                ) from e

            if len(chunk) < read_size:
                raise UploadError(
                    f"Source ended after {session.bytes_sent + len(chunk)} of "
                    f"{session.total_size} declared bytes",
                    reason=UploadFailure.TRUNCATED_SOURCE,
                )

            try:
                result = resumable.next_chunk(chunk)
            except RemoteServiceError as e:
                raise UploadError(str(e), reason=UploadFailure.TRANSFER_FAILED) from e
            except Exception as e:
                self.logger.error(f"Chunk {session.chunks_sent + 1} failed: {e}")
                raise UploadError(
                    f"Chunk {session.chunks_sent + 1} upload failed: {e}",
                    reason=UploadFailure.TRANSFER_FAILED,
                ) from e

            session.record_chunk(len(chunk))
            self.logger.debug(
                f"Chunk {session.chunks_sent} sent "
                f"({session.bytes_sent}/{session.total_size} bytes)",
            )

            if result is not None:
                session.complete(result)
                continue

            progress = int(session.progress * 100)
            if progress >= last_progress + 10:  # Log every 10%
                self.logger.info(f"Upload progress: {progress}%")
                last_progress = progress

    def _set_defer(self, defer: bool) -> None:
        if self.service is not None:
            self.service.set_defer(defer)
