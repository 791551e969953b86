"""
Token Guard

Precondition checked at the top of every remote operation: returns a
credential whose access token is usable, refreshing it when it has expired
and a refresh token is available.

The guard never persists anything. When the returned credential is not the
one passed in, the caller must save it.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from youtube_adapter.constants import AuthFailure
from youtube_adapter.errors import AuthError
from youtube_adapter.interfaces.auth_interface import TokenRefresher
from youtube_adapter.models.credential import Credential, utcnow


class TokenGuard:
    """
    Validates and refreshes access credentials.

    Usage:
        guard = TokenGuard(refresher=oauth_manager)
        credential = guard.ensure_valid(store.load())
    """

    def __init__(
        self,
        refresher: TokenRefresher,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            refresher: OAuth collaborator used to refresh expired tokens
            clock: Returns the current naive UTC time
        """
        self.logger = logging.getLogger(__name__)
        self.refresher = refresher
        self.clock = clock

    def ensure_valid(self, credential: Optional[Credential]) -> Credential:
        """
        Return a non-expired credential.

        Args:
            credential: Current credential (None if none is stored)

        Returns:
            The same credential if still valid, else a refreshed copy

        Raises:
            AuthError: MISSING if there is no access token,
                EXPIRED_NO_REFRESH if expired without a refresh token,
                REFRESH_FAILED if the provider rejects the refresh
        """
        if credential is None or not credential.access_token:
            raise AuthError("An access token is required.", reason=AuthFailure.MISSING)

        if not credential.is_expired(self.clock()):
            return credential

        if not credential.can_refresh:
            raise AuthError(
                "Access token expired and no refresh token is available. "
                "Re-authorize to obtain a new token.",
                reason=AuthFailure.EXPIRED_NO_REFRESH,
            )

        self.logger.info("Access token expired, refreshing...")
        refreshed = self.refresher.refresh(credential.refresh_token)

        updated = credential.with_refreshed_token(
            access_token=refreshed.access_token,
            expires_at=refreshed.expires_at,
            refresh_token=refreshed.refresh_token,
        )
        self.logger.info("Access token refreshed successfully")
        return updated
