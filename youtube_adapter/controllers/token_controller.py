"""
Token Controller

Fetch-or-redirect entry point for obtaining a channel's OAuth token from
a web route:

1. No token in the session: store a random state, return the Google
   authorization URL to redirect to
2. Callback with ?code=...&state=...: check the state, exchange the code,
   store the credential and return it
3. Token already in the session: return it (unless reset is requested)

The web framework's session is passed in as a plain mapping; the route
that calls fetch() must be the redirect URI registered with Google.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from youtube_adapter.auth.credential_store import MemoryCredentialStore
from youtube_adapter.auth.oauth_manager import OAuthManager
from youtube_adapter.constants import AuthFailure
from youtube_adapter.errors import AuthError
from youtube_adapter.interfaces.auth_interface import CredentialStore
from youtube_adapter.models.credential import Credential

SESSION_STATE_KEY = "state"
SESSION_TOKEN_KEY = "token"


@dataclass
class TokenResponse:
    """Either a credential to show/store, or a URL to redirect to"""

    credential: Optional[Credential] = None
    redirect_url: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None


class TokenController:
    """
    Obtains channel tokens through the web OAuth flow.

    Usage (inside a route handler):
        response = token_controller.fetch(
            session,
            code=request.args.get("code"),
            state=request.args.get("state"),
            reset=request.args.get("reset") == "1",
        )
        if response.is_redirect:
            return redirect(response.redirect_url)
        return jsonify(response.credential.to_mapping())
    """

    def __init__(
        self,
        oauth_manager: OAuthManager,
        credential_store: Optional[CredentialStore] = None,
    ):
        """
        Args:
            oauth_manager: Google OAuth client
            credential_store: Optional long-term store that also receives
                newly issued credentials (e.g. the channel's token file)
        """
        self.logger = logging.getLogger(__name__)
        self.oauth_manager = oauth_manager
        self.credential_store = credential_store

    def fetch(
        self,
        session: MutableMapping[str, Any],
        code: Optional[str] = None,
        state: Optional[str] = None,
        reset: bool = False,
    ) -> TokenResponse:
        """
        Return the session's token or an authorization redirect.

        Args:
            session: Per-user session mapping owned by the caller
            code: Authorization code from the OAuth callback
            state: State echoed back by Google on the callback
            reset: Ignore a token already in the session

        Raises:
            AuthError: STATE_MISMATCH if the callback state does not match
        """
        session_store = MemoryCredentialStore(session, key=SESSION_TOKEN_KEY)

        if code:
            expected = session.get(SESSION_STATE_KEY)
            if expected is None or str(expected) != str(state):
                self.logger.warning("OAuth callback state did not match the session")
                raise AuthError(
                    "The session state did not match.",
                    reason=AuthFailure.STATE_MISMATCH,
                )
            session.pop(SESSION_STATE_KEY, None)

            credential = self.oauth_manager.exchange_code(code)
            session_store.save(credential)
            if self.credential_store is not None:
                self.credential_store.save(credential)

            self.logger.info("Channel token obtained")
            return TokenResponse(credential=credential)

        if not reset:
            credential = session_store.load()
            if credential is not None:
                return TokenResponse(credential=credential)

        new_state = secrets.token_urlsafe(16)
        session[SESSION_STATE_KEY] = new_state
        self.logger.debug("Redirecting to Google for authorization")
        return TokenResponse(redirect_url=self.oauth_manager.authorization_url(new_state))
