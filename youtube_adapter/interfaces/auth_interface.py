"""
Authentication Interfaces

Abstractions for token persistence and token refresh. The token guard and
controllers receive these explicitly; nothing reads ambient session state.
"""

from abc import ABC, abstractmethod
from typing import Optional

from youtube_adapter.models.credential import Credential


class CredentialStore(ABC):
    """
    Storage for the current credential.

    The caller owns the store's lifecycle (file, web session, database).
    """

    @abstractmethod
    def load(self) -> Optional[Credential]:
        """Return the stored credential, or None if nothing is stored"""

    @abstractmethod
    def save(self, credential: Credential) -> None:
        """Replace the stored credential"""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored credential"""


class TokenRefresher(ABC):
    """Exchanges a refresh token for a new access token"""

    @abstractmethod
    def refresh(self, refresh_token: str) -> Credential:
        """
        Obtain a fresh access token.

        Returns:
            Credential with the new access token and expiry

        Raises:
            AuthError: If the provider rejects the refresh token
        """
