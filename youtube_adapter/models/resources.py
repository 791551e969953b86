"""
Resource Models

Data classes describing upload progress, upload results and the outcome of
metadata operations.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from youtube_adapter.constants import OperationStatus


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Resource returned by the server when an upload completes.

    Attributes:
        resource_id: Video ID (None for thumbnail responses)
        kind: API resource kind, e.g. "youtube#video"
        snippet: Snippet of the uploaded video
        raw: Full response body
    """

    resource_id: Optional[str]
    kind: Optional[str] = None
    snippet: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "ResourceDescriptor":
        return cls(
            resource_id=response.get("id"),
            kind=response.get("kind"),
            snippet=dict(response.get("snippet") or {}),
            raw=dict(response),
        )

    @property
    def thumbnail_url(self) -> Optional[str]:
        """Default thumbnail URL from a thumbnails.set response"""
        try:
            return self.raw["items"][0]["default"]["url"]
        except (KeyError, IndexError, TypeError):
            return None


@dataclass
class UploadSession:
    """
    Progress of a single chunked upload.

    Created when an upload starts and discarded when the chunk loop ends.
    """

    total_size: int
    chunk_size: int
    bytes_sent: int = 0
    chunks_sent: int = 0
    final_result: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.total_size <= 0:
            raise ValueError(f"total_size must be positive, got {self.total_size}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @property
    def remaining(self) -> int:
        return self.total_size - self.bytes_sent

    @property
    def is_complete(self) -> bool:
        return self.final_result is not None

    @property
    def progress(self) -> float:
        """Fraction of declared bytes sent (0.0 to 1.0)"""
        return self.bytes_sent / self.total_size

    def next_read_size(self) -> int:
        """Bytes to read for the next chunk, never past the declared size"""
        return min(self.chunk_size, self.remaining)

    def record_chunk(self, size: int) -> None:
        if self.bytes_sent + size > self.total_size:
            raise ValueError(
                f"Chunk of {size} bytes exceeds declared size "
                f"({self.bytes_sent}/{self.total_size} sent)"
            )
        self.bytes_sent += size
        self.chunks_sent += 1

    def complete(self, result: Dict[str, Any]) -> None:
        if self.final_result is not None:
            raise ValueError("Upload session already completed")
        self.final_result = result


@dataclass
class OperationResult:
    """
    Result of a metadata, list or report operation.

    Remote failures are reported here instead of being raised, with the
    platform's message preserved in error_message.
    """

    success: bool
    data: Any = None
    status: OperationStatus = OperationStatus.SUCCESS
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(
        cls,
        error_message: str,
        status: OperationStatus = OperationStatus.FAILED,
    ) -> "OperationResult":
        return cls(success=False, status=status, error_message=error_message)
