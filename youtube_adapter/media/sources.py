"""
Upload Sources

Opens the byte stream an upload reads from. Sources may be remote, so
nothing here stats or seeks the stream.
"""

import logging
import os
from typing import BinaryIO, Callable, Union

import requests
import urllib3

from youtube_adapter.constants import REMOTE_SOURCE_TIMEOUT, UploadFailure
from youtube_adapter.errors import UploadError

UploadSource = Union[str, "os.PathLike[str]", Callable[[], BinaryIO], BinaryIO]

# Failures while reading an open source (local file or streamed response)
READ_ERRORS = (OSError, requests.RequestException, urllib3.exceptions.HTTPError)

logger = logging.getLogger(__name__)


def is_remote(source: UploadSource) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def open_source(source: UploadSource) -> BinaryIO:
    """
    Open an upload source for sequential reading.

    Args:
        source: Local path, http(s) URL, zero-argument callable returning
            a binary stream, or an already open binary stream

    Returns:
        Readable binary stream; the caller must close it

    Raises:
        UploadError: CANNOT_OPEN_SOURCE if the source cannot be opened
    """
    try:
        if hasattr(source, "read"):
            return source  # type: ignore[return-value]

        if is_remote(source):
            return _open_remote(source)  # type: ignore[arg-type]

        if callable(source):
            return source()

        return open(source, "rb")

    except UploadError:
        raise
    except (OSError, requests.RequestException) as e:
        raise UploadError(
            f'Error opening source "{source}": {e}',
            reason=UploadFailure.CANNOT_OPEN_SOURCE,
        ) from e


def _open_remote(url: str) -> BinaryIO:
    logger.debug(f"Opening remote source: {url}")
    response = requests.get(url, stream=True, timeout=REMOTE_SOURCE_TIMEOUT)
    try:
        response.raise_for_status()
    except requests.HTTPError:
        response.close()
        raise

    response.raw.decode_content = True
    return response.raw


def read_chunk(stream: BinaryIO, size: int) -> bytes:
    """
    Read exactly `size` bytes unless the stream ends first.

    Network streams may return short reads mid-stream, so reads are
    repeated until the chunk is full or EOF is reached.
    """
    buffer = bytearray()
    while len(buffer) < size:
        data = stream.read(size - len(buffer))
        if not data:
            break
        buffer.extend(data)
    return bytes(buffer)
