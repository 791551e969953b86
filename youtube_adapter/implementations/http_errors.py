"""
HTTP Error Translation

Turns googleapiclient and transport errors into RemoteServiceError, keeping
the platform's message verbatim.
"""

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from youtube_adapter.errors import RemoteServiceError

# Raised below googleapiclient: connection resets, timeouts, TLS and
# credential failures inside the authorized transport
TRANSPORT_ERRORS = (httplib2.HttpLib2Error, OSError, GoogleAuthError)


def translate_http_error(error: HttpError) -> RemoteServiceError:
    """
    Build a RemoteServiceError from an HttpError.

    Args:
        error: HTTP error from the YouTube API

    Returns:
        RemoteServiceError carrying the reason and HTTP status
    """
    status_code = getattr(error.resp, "status", None)
    message = error.reason or str(error)
    return RemoteServiceError(message, status_code=status_code)


def translate_transport_error(error: Exception) -> RemoteServiceError:
    """Build a RemoteServiceError (no HTTP status) from a transport failure"""
    return RemoteServiceError(f"{type(error).__name__}: {error}")
