"""
Adapter Exceptions

Every error raised by the adapter derives from YouTubeAdapterError and
carries a status enum so callers can branch without parsing messages.
"""

from typing import Optional

from youtube_adapter.constants import AuthFailure, OperationStatus, UploadFailure


class YouTubeAdapterError(Exception):
    """Base class for adapter errors"""


class AuthError(YouTubeAdapterError):
    """
    Raised when no usable access credential is available.

    Examples:
    - No credential stored
    - Access token expired and no refresh token
    - Refresh request rejected by Google
    """

    def __init__(self, message: str, reason: AuthFailure = AuthFailure.MISSING):
        super().__init__(message)
        self.reason = reason


class UploadError(YouTubeAdapterError):
    """
    Raised when a chunked upload cannot be completed.

    Examples:
    - Source file/URL cannot be opened
    - Source ends before the declared size
    - Remote session rejected a chunk
    """

    def __init__(
        self,
        message: str,
        reason: UploadFailure = UploadFailure.TRANSFER_FAILED,
    ):
        super().__init__(message)
        self.reason = reason


class NotFoundError(YouTubeAdapterError):
    """Raised when an operation targets a remote resource that does not exist"""

    def __init__(self, message: str, resource_id: Optional[str] = None):
        super().__init__(message)
        self.resource_id = resource_id


class RemoteServiceError(YouTubeAdapterError):
    """
    Opaque failure reported by the YouTube platform.

    The message is kept verbatim for diagnostics.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def status(self) -> OperationStatus:
        """Map the HTTP status to an operation status code"""
        if self.status_code in (401, 403):
            return OperationStatus.AUTH_ERROR
        if self.status_code == 404:
            return OperationStatus.NOT_FOUND
        if self.status_code == 429:
            return OperationStatus.QUOTA_EXCEEDED
        return OperationStatus.REMOTE_ERROR
