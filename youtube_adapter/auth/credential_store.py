"""
Credential Stores

Concrete CredentialStore implementations:
- JsonFileCredentialStore: token.json on disk (google-auth layout)
- MemoryCredentialStore: per-process or per-web-session storage
"""

import json
import logging
import os
from typing import Any, MutableMapping, Optional

from youtube_adapter.interfaces.auth_interface import CredentialStore
from youtube_adapter.models.credential import Credential

# Keys replaced on every save; anything else in the file is preserved
TOKEN_KEYS = (
    "token",
    "access_token",
    "refresh_token",
    "expiry",
    "expires_in",
    "created",
    "scopes",
)


class JsonFileCredentialStore(CredentialStore):
    """
    Stores the credential in a JSON token file.

    The file uses the same layout as google-auth's Credentials.to_json(),
    so token files produced by setup_youtube_auth.py load directly.
    """

    def __init__(self, token_path: str):
        self.logger = logging.getLogger(__name__)
        self.token_path = token_path

    def load(self) -> Optional[Credential]:
        if not os.path.exists(self.token_path):
            self.logger.debug(f"No token file at {self.token_path}")
            return None

        with open(self.token_path) as token_file:
            data = json.load(token_file)

        return Credential.from_mapping(data)

    def save(self, credential: Credential) -> None:
        token_dir = os.path.dirname(self.token_path)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        # Keep fields we do not model (client_id, token_uri, ...)
        data: dict = {}
        if os.path.exists(self.token_path):
            try:
                with open(self.token_path) as token_file:
                    data = json.load(token_file)
            except (OSError, ValueError) as e:
                self.logger.warning(f"Existing token file unreadable, overwriting: {e}")
                data = {}

        for key in TOKEN_KEYS:
            data.pop(key, None)
        data.update(credential.to_mapping())

        with open(self.token_path, "w") as token_file:
            json.dump(data, token_file, indent=2)
        self.logger.debug(f"Credentials saved to {self.token_path}")

    def clear(self) -> None:
        if os.path.exists(self.token_path):
            os.remove(self.token_path)
            self.logger.info(f"Token file removed: {self.token_path}")


class MemoryCredentialStore(CredentialStore):
    """
    Keeps the credential in a mapping owned by the caller.

    Pass a web framework's session dict to store the token per user;
    without one, a private dict is used.
    """

    def __init__(
        self,
        storage: Optional[MutableMapping[str, Any]] = None,
        key: str = "token",
    ):
        self.storage = storage if storage is not None else {}
        self.key = key

    def load(self) -> Optional[Credential]:
        data = self.storage.get(self.key)
        if data is None:
            return None
        if isinstance(data, Credential):
            return data
        return Credential.from_mapping(data)

    def save(self, credential: Credential) -> None:
        self.storage[self.key] = credential.to_mapping()

    def clear(self) -> None:
        self.storage.pop(self.key, None)
