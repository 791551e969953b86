"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (client secret, tokens) should be in .env, NOT here
- Import these settings in modules: from config.settings import YOUTUBE_TOKEN_PATH
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# BACKEND SELECTION
# =============================================================================

# "auto" (YouTube if configured, else mock), "youtube" or "mock"
YOUTUBE_BACKEND = os.getenv("YOUTUBE_BACKEND", "auto")

# =============================================================================
# UPLOAD CONFIGURATION
# =============================================================================

UPLOAD_CHUNK_SIZE = int(os.getenv("YOUTUBE_CHUNK_SIZE", str(1 * 1024 * 1024)))  # 1 MB
DEFAULT_PRIVACY_STATUS = os.getenv("YOUTUBE_DEFAULT_PRIVACY", "public")

# =============================================================================
# OAUTH CONFIGURATION
# =============================================================================

# Must match an authorized redirect URI of the OAuth client
YOUTUBE_REDIRECT_URI = os.getenv(
    "YOUTUBE_REDIRECT_URI",
    "http://localhost:8000/youtube/token",
)

# Comma separated; empty means the defaults in youtube_adapter.constants
YOUTUBE_SCOPES = [
    scope.strip()
    for scope in os.getenv("YOUTUBE_SCOPES", "").split(",")
    if scope.strip()
]

# =============================================================================
# SECRETS (loaded from .env)
# =============================================================================
# IMPORTANT: These should NEVER be committed to version control!
# Create a .env file in the project root with these values

YOUTUBE_CLIENT_ID = os.getenv("YOUTUBE_CLIENT_ID", "")
YOUTUBE_CLIENT_SECRET = os.getenv("YOUTUBE_CLIENT_SECRET", "")

# Desktop flow (setup_youtube_auth.py) reads the downloaded client file
YOUTUBE_CLIENT_SECRET_PATH = os.getenv(
    "YOUTUBE_CLIENT_SECRET_PATH",
    "credentials/client_secret.json",
)
YOUTUBE_TOKEN_PATH = os.getenv("YOUTUBE_TOKEN_PATH", "credentials/token.json")

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
