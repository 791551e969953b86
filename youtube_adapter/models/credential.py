"""
Credential Model

The single representation of an OAuth access credential used throughout the
adapter. Stored on disk in the google-auth "authorized user" JSON layout so
token files written by google-auth tools load unchanged.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

from google.oauth2.credentials import Credentials

from youtube_adapter.constants import AuthFailure, TOKEN_EXPIRY_LEEWAY
from youtube_adapter.errors import AuthError

# google-auth stores expiry as naive UTC in ISO format with a trailing "Z"
EXPIRY_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utcnow() -> datetime:
    """Current time as naive UTC (the convention google-auth uses)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class Credential:
    """
    OAuth access credential.

    Attributes:
        access_token: Bearer token sent with API requests
        expires_at: Naive UTC expiry time; None means unknown and is
            treated as already expired
        refresh_token: Long-lived token used to obtain a new access token
        scopes: Scopes granted with the token
    """

    access_token: str
    expires_at: Optional[datetime] = None
    refresh_token: Optional[str] = None
    scopes: List[str] = field(default_factory=list)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the access token has expired (with leeway)"""
        if self.expires_at is None:
            return True
        now = now or utcnow()
        return now >= self.expires_at - timedelta(seconds=TOKEN_EXPIRY_LEEWAY)

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)

    def with_refreshed_token(
        self,
        access_token: str,
        expires_at: Optional[datetime],
        refresh_token: Optional[str] = None,
    ) -> "Credential":
        """
        Return a copy carrying a new access token.

        Google does not always rotate refresh tokens, so the current one is
        kept unless a new one is supplied.
        """
        return replace(
            self,
            access_token=access_token,
            expires_at=expires_at,
            refresh_token=refresh_token or self.refresh_token,
        )

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Credential":
        """
        Build a credential from a stored token mapping.

        Accepts the google-auth layout ("token", "expiry") and the raw OAuth
        token response layout ("access_token", "expires_in", "created").

        Raises:
            AuthError: If the mapping carries no access token
        """
        if not isinstance(data, Mapping):
            raise AuthError(
                f"Token must be a mapping, got {type(data).__name__}",
                reason=AuthFailure.MISSING,
            )

        access_token = data.get("token") or data.get("access_token")
        if not access_token:
            raise AuthError(
                "An access token is required.",
                reason=AuthFailure.MISSING,
            )

        expires_at = None
        if data.get("expiry"):
            expires_at = _parse_expiry(data["expiry"])
        elif data.get("expires_in") is not None:
            created = data.get("created")
            issued = (
                datetime.fromtimestamp(int(created), timezone.utc).replace(tzinfo=None)
                if created is not None
                else utcnow()
            )
            expires_at = issued + timedelta(seconds=int(data["expires_in"]))

        scopes = data.get("scopes") or data.get("scope") or []
        if isinstance(scopes, str):
            scopes = scopes.split()

        return cls(
            access_token=access_token,
            expires_at=expires_at,
            refresh_token=data.get("refresh_token") or None,
            scopes=list(scopes),
        )

    def to_mapping(self) -> Dict[str, Any]:
        """Serialize in the google-auth authorized-user layout"""
        data: Dict[str, Any] = {"token": self.access_token}
        if self.refresh_token:
            data["refresh_token"] = self.refresh_token
        if self.expires_at is not None:
            data["expiry"] = self.expires_at.strftime(EXPIRY_FORMAT)
        if self.scopes:
            data["scopes"] = list(self.scopes)
        return data

    @classmethod
    def from_google_credentials(cls, credentials: Credentials) -> "Credential":
        """Convert google-auth credentials (after a flow or refresh)"""
        if not credentials.token:
            raise AuthError(
                "Google returned no access token",
                reason=AuthFailure.MISSING,
            )
        return cls(
            access_token=credentials.token,
            expires_at=credentials.expiry,
            refresh_token=credentials.refresh_token,
            scopes=list(credentials.scopes or []),
        )

    def to_google_credentials(self) -> Credentials:
        """
        Build bearer-only google-auth credentials for API clients.

        No refresh data and no expiry are included: google-auth treats a
        token as expired minutes before its expiry and would try to refresh
        it inside the transport. Refreshing is the token guard's job.
        """
        return Credentials(token=self.access_token)


def _parse_expiry(value: Any) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    text = str(value).rstrip("Z")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise AuthError(
            f"Invalid token expiry: {value}",
            reason=AuthFailure.MISSING,
        ) from e
    return _parse_expiry(parsed)
