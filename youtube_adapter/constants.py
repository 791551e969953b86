"""
YouTube Adapter Constants

Centralized configuration for the YouTube adapter.
Values that can be overridden per deployment live in config/settings.py.
"""

from enum import Enum

# =============================================================================
# YOUTUBE API CONFIGURATION
# =============================================================================

# OAuth 2.0 scopes required for YouTube operations
# https://developers.google.com/youtube/v3/guides/authentication
YOUTUBE_SCOPES = [
    "https://www.googleapis.com/auth/youtube.upload",
    "https://www.googleapis.com/auth/youtube",
    "https://www.googleapis.com/auth/yt-analytics.readonly",
]

# YouTube API service details
YOUTUBE_API_SERVICE_NAME = "youtube"
YOUTUBE_API_VERSION = "v3"

# YouTube Analytics API service details
YOUTUBE_ANALYTICS_SERVICE_NAME = "youtubeAnalytics"
YOUTUBE_ANALYTICS_VERSION = "v2"

# Google OAuth endpoints
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Seconds before the real expiry at which an access token counts as expired
TOKEN_EXPIRY_LEEWAY = 30

# =============================================================================
# UPLOAD CONFIGURATION
# =============================================================================

# Chunk size for resumable uploads (in bytes)
# YouTube requires multiples of 256 KB for every chunk but the last
DEFAULT_CHUNK_SIZE = 1 * 1024 * 1024  # 1 MB

VIDEO_MIME_TYPE = "video/*"
DEFAULT_THUMBNAIL_MIME_TYPE = "image/png"

# Parts sent with videos.insert
VIDEO_INSERT_PARTS = "status,snippet"

# Timeout for opening remote (http/https) upload sources, in seconds
REMOTE_SOURCE_TIMEOUT = 30

# =============================================================================
# VIDEO METADATA CONFIGURATION
# =============================================================================

# Options: "public", "private", "unlisted"
DEFAULT_PRIVACY_STATUS = "public"
PRIVACY_STATUSES = ("public", "private", "unlisted")

# Maximum page size accepted by list endpoints
MAX_RESULTS = 50

# Default analytics report target
DEFAULT_REPORT_IDS = "channel==MINE"

# =============================================================================
# STATUS CODES
# =============================================================================


class AuthFailure(Enum):
    """Reasons an access credential cannot be used"""

    MISSING = "missing"
    EXPIRED_NO_REFRESH = "expired_no_refresh"
    REFRESH_FAILED = "refresh_failed"
    STATE_MISMATCH = "state_mismatch"


class UploadFailure(Enum):
    """Reasons a chunked upload was aborted"""

    CANNOT_OPEN_SOURCE = "cannot_open_source"
    TRUNCATED_SOURCE = "truncated_source"
    TRANSFER_FAILED = "transfer_failed"


class OperationStatus(Enum):
    """Outcome codes for metadata, list and report operations"""

    SUCCESS = "success"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    AUTH_ERROR = "auth_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    REMOTE_ERROR = "remote_error"
