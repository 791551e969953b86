"""
Authentication Package

OAuth 2.0 authentication, token validation and credential storage.
"""

from youtube_adapter.auth.credential_store import (
    JsonFileCredentialStore,
    MemoryCredentialStore,
)
from youtube_adapter.auth.oauth_manager import OAuthManager, run_initial_auth
from youtube_adapter.auth.token_guard import TokenGuard

__all__ = [
    "JsonFileCredentialStore",
    "MemoryCredentialStore",
    "OAuthManager",
    "TokenGuard",
    "run_initial_auth",
]
