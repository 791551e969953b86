"""
OAuth Manager

Handles Google OAuth 2.0 for the YouTube API:
- Builds authorization URLs (offline access, forced consent)
- Exchanges authorization codes for credentials
- Refreshes expired access tokens (TokenRefresher for the token guard)

Flow:
1. Web: redirect to authorization_url(), then exchange_code() on callback
2. Desktop: run setup_youtube_auth.py once to generate token.json
3. Runtime: the token guard calls refresh() when the access token expires
"""

import logging
from typing import List, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow, InstalledAppFlow

from youtube_adapter.constants import (
    GOOGLE_AUTH_URI,
    GOOGLE_TOKEN_URI,
    YOUTUBE_SCOPES,
    AuthFailure,
)
from youtube_adapter.errors import AuthError
from youtube_adapter.interfaces.auth_interface import TokenRefresher
from youtube_adapter.models.credential import Credential


class OAuthManager(TokenRefresher):
    """
    Google OAuth 2.0 client for a web application.

    Usage:
        oauth = OAuthManager(
            client_id="...apps.googleusercontent.com",
            client_secret="...",
            redirect_uri="https://example.com/youtube/token",
        )
        url = oauth.authorization_url(state="random-state")
        credential = oauth.exchange_code(code)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: Optional[str] = None,
        scopes: Optional[List[str]] = None,
        token_uri: str = GOOGLE_TOKEN_URI,
    ):
        """
        Initialize OAuth manager.

        Raises:
            ValueError: If client_id or client_secret is missing
        """
        self.logger = logging.getLogger(__name__)

        if not client_id or not client_secret:
            raise ValueError('A Google "client_id" and "client_secret" must be configured.')

        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = list(scopes or YOUTUBE_SCOPES)
        self.token_uri = token_uri

        self.logger.info("OAuth Manager initialized")

    @property
    def client_config(self) -> dict:
        config = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "auth_uri": GOOGLE_AUTH_URI,
            "token_uri": self.token_uri,
        }
        if self.redirect_uri:
            config["redirect_uris"] = [self.redirect_uri]
        return {"web": config}

    def _create_flow(self, state: Optional[str] = None) -> Flow:
        if not self.redirect_uri:
            raise ValueError("A redirect URI must be configured for the web OAuth flow")

        return Flow.from_client_config(
            self.client_config,
            scopes=self.scopes,
            redirect_uri=self.redirect_uri,
            state=state,
            # authorize and callback run on separate Flow instances
            autogenerate_code_verifier=False,
        )

    def authorization_url(self, state: str) -> str:
        """
        Build the Google consent URL.

        access_type='offline' ensures a refresh token is issued and
        prompt='consent' forces one on every authorization.

        Args:
            state: Opaque value echoed back on the callback

        Returns:
            URL to redirect the user to
        """
        flow = self._create_flow(state=state)
        url, _ = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",
        )
        return url

    def exchange_code(self, code: str) -> Credential:
        """
        Exchange an authorization code for a credential.

        Raises:
            AuthError: If Google rejects the code
        """
        flow = self._create_flow()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            self.logger.error(f"Authorization code exchange failed: {e}")
            raise AuthError(
                f"Authorization code exchange failed: {e}",
                reason=AuthFailure.MISSING,
            ) from e

        self.logger.info("Authorization code exchanged for access token")
        return Credential.from_google_credentials(flow.credentials)

    def refresh(self, refresh_token: str) -> Credential:
        """
        Exchange a refresh token for a new access token.

        Raises:
            AuthError: REFRESH_FAILED if Google rejects the refresh token
        """
        google_credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=self.token_uri,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.scopes,
        )

        try:
            google_credentials.refresh(Request())
        except RefreshError as e:
            self.logger.error(f"Failed to refresh access token: {e}")
            raise AuthError(
                f"Failed to refresh access token: {e}",
                reason=AuthFailure.REFRESH_FAILED,
            ) from e

        return Credential.from_google_credentials(google_credentials)


def run_initial_auth(
    client_secret_path: str,
    token_path: str,
    port: int = 8080,
    scopes: Optional[List[str]] = None,
) -> bool:
    """
    Run the desktop OAuth flow and save token.json.

    Standalone function for the setup script. Opens a browser for the user
    to grant permissions.

    Args:
        client_secret_path: Path to client_secret.json
        token_path: Where to save token.json
        port: Local port for OAuth callback (default: 8080)
        scopes: Scopes to request (default: YOUTUBE_SCOPES)

    Returns:
        True if authentication successful
    """
    logger = logging.getLogger(__name__)

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            client_secret_path,
            scopes or YOUTUBE_SCOPES,
        )

        logger.info(f"Starting OAuth flow on port {port}...")
        logger.info("A browser window will open for authentication")

        credentials = flow.run_local_server(
            port=port,
            access_type="offline",
            prompt="consent",
        )

        with open(token_path, "w") as token_file:
            token_file.write(credentials.to_json())

        logger.info(f"Authentication successful! Token saved to: {token_path}")
        return True

    except Exception as e:
        logger.error(f"Authentication failed: {e}")
        return False
