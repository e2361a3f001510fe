"""
Hawk credentials held by a single client instance.
"""

import base64
import threading
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_ALGORITHM
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Credentials:
    """Identifier, shared secret and MAC algorithm used to sign requests."""
    identifier: str
    secret: str
    algorithm: str = DEFAULT_ALGORITHM


class CredentialStore:
    """
    Lazily builds and memoizes the Credentials for one client.

    The first call to get_credentials() builds the value under a lock;
    every later call returns that same object.
    """

    def __init__(self, identifier: str, secret: str, algorithm: str = DEFAULT_ALGORITHM):
        if not identifier:
            raise ConfigurationError("identifier cannot be empty")
        if not secret:
            raise ConfigurationError("secret cannot be empty")

        self._identifier = identifier
        self._secret = secret
        self._algorithm = algorithm
        self._credentials: Optional[Credentials] = None
        self._lock = threading.Lock()

    @classmethod
    def from_api_key(cls, key: str, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> "CredentialStore":
        """
        Build a store from a merchant application key and secret.

        Tunai identifies merchants by base64("api:<key>:<secret>").

        Args:
            key: Application key
            secret: Application secret
            algorithm: MAC hash algorithm

        Raises:
            ConfigurationError: If key or secret is empty
        """
        if not key:
            raise ConfigurationError("key cannot be empty")
        if not secret:
            raise ConfigurationError("secret cannot be empty")

        identifier = base64.b64encode(f"api:{key}:{secret}".encode('utf-8')).decode('ascii')
        return cls(identifier, secret, algorithm)

    def get_credentials(self) -> Credentials:
        if self._credentials is None:
            with self._lock:
                if self._credentials is None:
                    self._credentials = Credentials(
                        identifier=self._identifier,
                        secret=self._secret,
                        algorithm=self._algorithm,
                    )
        return self._credentials
