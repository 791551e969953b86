"""
YouTube Adapter Factory

Builds controllers wired to the real YouTube backend or the in-memory mock.
Configuration comes from config/settings.py (environment / .env).
"""

import logging
import os
from datetime import timedelta
from typing import Literal, Optional

from config import settings
from youtube_adapter.auth.credential_store import (
    JsonFileCredentialStore,
    MemoryCredentialStore,
)
from youtube_adapter.auth.oauth_manager import OAuthManager
from youtube_adapter.auth.token_guard import TokenGuard
from youtube_adapter.controllers.token_controller import TokenController
from youtube_adapter.controllers.youtube_controller import YouTubeController
from youtube_adapter.implementations.mock_service import (
    MockTokenRefresher,
    MockVideoService,
)
from youtube_adapter.implementations.youtube_service import YouTubeService
from youtube_adapter.interfaces.auth_interface import CredentialStore
from youtube_adapter.models.credential import Credential, utcnow

# Type alias
BackendMode = Literal["auto", "youtube", "mock"]


class ServiceFactory:
    """
    Factory for YouTube controllers.

    Reads configuration from config.settings:
    - YOUTUBE_CLIENT_ID / YOUTUBE_CLIENT_SECRET: OAuth client
    - YOUTUBE_REDIRECT_URI: Web OAuth callback
    - YOUTUBE_TOKEN_PATH: token.json location
    - YOUTUBE_BACKEND: auto, youtube or mock

    Usage:
        # Auto-detect from environment
        controller = ServiceFactory.create_controller()

        # Force mock for testing
        controller = ServiceFactory.create_controller(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_controller(
        cls,
        mode: Optional[BackendMode] = None,
        credential_store: Optional[CredentialStore] = None,
        chunk_size: Optional[int] = None,
    ) -> YouTubeController:
        """
        Create a controller.

        Args:
            mode: "auto" (from env), "youtube" (force real), "mock" (force sim);
                defaults to YOUTUBE_BACKEND
            credential_store: Where the token lives (default: token.json)
            chunk_size: Override UPLOAD_CHUNK_SIZE

        Raises:
            RuntimeError: If mode="youtube" but the OAuth client is not configured
        """
        mode = mode or settings.YOUTUBE_BACKEND
        chunk_size = chunk_size or settings.UPLOAD_CHUNK_SIZE

        if mode == "mock":
            cls._logger.info("Creating Mock YouTube controller (forced)")
            return cls._create_mock_controller(credential_store, chunk_size)

        if mode == "youtube":
            try:
                controller = cls._create_youtube_controller(credential_store, chunk_size)
                cls._logger.info("Creating YouTube controller (forced)")
                return controller
            except ValueError as e:
                raise RuntimeError(f"YouTube backend requested but not available: {e}") from e

        # mode == "auto" - try YouTube first, fall back to mock
        try:
            if credential_store is None and not os.path.exists(settings.YOUTUBE_TOKEN_PATH):
                raise ValueError(f"token file not found: {settings.YOUTUBE_TOKEN_PATH}")
            controller = cls._create_youtube_controller(credential_store, chunk_size)
            cls._logger.info("Creating YouTube controller (auto-detected)")
            return controller
        except ValueError as e:
            cls._logger.warning(f"YouTube backend not available ({e}), using mock backend")
            return cls._create_mock_controller(credential_store, chunk_size)

    @classmethod
    def create_oauth_manager(cls) -> OAuthManager:
        """
        OAuth client from settings.

        Raises:
            ValueError: If client_id or client_secret is missing
        """
        return OAuthManager(
            client_id=settings.YOUTUBE_CLIENT_ID,
            client_secret=settings.YOUTUBE_CLIENT_SECRET,
            redirect_uri=settings.YOUTUBE_REDIRECT_URI,
            scopes=settings.YOUTUBE_SCOPES or None,
        )

    @classmethod
    def create_token_controller(
        cls,
        credential_store: Optional[CredentialStore] = None,
    ) -> TokenController:
        """Token controller for the web OAuth route"""
        return TokenController(cls.create_oauth_manager(), credential_store)

    @classmethod
    def _create_youtube_controller(
        cls,
        credential_store: Optional[CredentialStore],
        chunk_size: int,
    ) -> YouTubeController:
        oauth_manager = cls.create_oauth_manager()
        store = credential_store or JsonFileCredentialStore(settings.YOUTUBE_TOKEN_PATH)

        return YouTubeController(
            service=YouTubeService(),
            credential_store=store,
            token_guard=TokenGuard(oauth_manager),
            chunk_size=chunk_size,
            default_privacy_status=settings.DEFAULT_PRIVACY_STATUS,
        )

    @classmethod
    def _create_mock_controller(
        cls,
        credential_store: Optional[CredentialStore],
        chunk_size: int,
    ) -> YouTubeController:
        store = credential_store
        if store is None:
            store = MemoryCredentialStore()
            store.save(
                Credential(
                    access_token="mock-access-token",
                    expires_at=utcnow() + timedelta(hours=1),
                    refresh_token="mock-refresh-token",
                ),
            )

        return YouTubeController(
            service=MockVideoService(),
            credential_store=store,
            token_guard=TokenGuard(MockTokenRefresher()),
            chunk_size=chunk_size,
            default_privacy_status=settings.DEFAULT_PRIVACY_STATUS,
        )

    @classmethod
    def is_youtube_available(cls) -> bool:
        """
        Check if the real backend can be created.

        Returns:
            True if the OAuth client is configured and token.json exists
        """
        try:
            cls.create_oauth_manager()
        except ValueError:
            return False
        return os.path.exists(settings.YOUTUBE_TOKEN_PATH)


# Convenience function for quick creation
def create_controller(
    force_mock: bool = False,
    credential_store: Optional[CredentialStore] = None,
) -> YouTubeController:
    """
    Quick controller creation with simple mock override.

    Example:
        controller = create_controller()
        controller = create_controller(force_mock=True)
    """
    mode = "mock" if force_mock else None
    return ServiceFactory.create_controller(mode=mode, credential_store=credential_store)
