"""
Hawk request signing for the Tunai API.

This module builds the normalized string both client and server compute
a MAC over, signs it with the shared credentials and formats the
resulting Authorization header.

Normalized string (one field per line, every line terminated by "\\n"):

    hawk.1.header
    <timestamp>
    <nonce>
    <METHOD>
    <path>
    <host>
    <port>
    <payload hash or empty>
    <ext or empty>

The query string is never part of the path line. Query parameters are
bound to the MAC through ext instead, so the server must resolve the
resource the same way or authentication fails.
"""

import base64
import hashlib
import hmac
import re
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union
from urllib.parse import urlsplit

from .constants import (
    DEFAULT_PORTS,
    HAWK_HEADER_TAG,
    HAWK_PAYLOAD_TAG,
    HAWK_SCHEME,
    NONCE_BYTES,
    SUPPORTED_ALGORITHMS
)
from .credentials import Credentials
from .exceptions import SigningError

# Characters Hawk servers accept inside a quoted header attribute
HEADER_ATTRIBUTE_PATTERN = re.compile(r"[ \w!#$%&'()*+,\-./:;<=>?@\[\]^`{|}~]*", re.ASCII)


@dataclass(frozen=True)
class SignedRequestContext:
    """Everything that goes into the MAC for a single request."""
    method: str
    url: str
    timestamp: int
    nonce: str
    payload: Union[bytes, str] = b''
    content_type: str = ''
    ext: str = ''


@dataclass(frozen=True)
class AuthorizationHeader:
    """Parsed form of a Hawk Authorization header."""
    id: str
    ts: str
    nonce: str
    mac: str
    hash: Optional[str] = None
    ext: Optional[str] = None
    scheme: str = HAWK_SCHEME

    def field_value(self) -> str:
        """
        Serialize to the Authorization header value.

        Raises:
            SigningError: If an attribute holds a quote, backslash or
                control character
        """
        for name in ("id", "ts", "nonce", "mac", "hash", "ext"):
            attribute = getattr(self, name) or ""
            if not HEADER_ATTRIBUTE_PATTERN.fullmatch(attribute):
                raise SigningError(f"invalid characters in header attribute {name!r}")

        value = (
            f'{self.scheme} id="{self.id}", ts="{self.ts}", '
            f'nonce="{self.nonce}", mac="{self.mac}"'
        )
        if self.hash:
            value += f', hash="{self.hash}"'
        if self.ext:
            value += f', ext="{self.ext}"'
        return value

    def __str__(self) -> str:
        return self.field_value()


def generate_nonce() -> str:
    """Return a URL-safe random nonce from the OS CSPRNG."""
    return secrets.token_urlsafe(NONCE_BYTES)


def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, bytes):
        return data
    return data.encode('utf-8')


def _digestmod(algorithm: str):
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise SigningError(f"unsupported algorithm: {algorithm!r}")
    return getattr(hashlib, algorithm)


def normalize_content_type(content_type: str) -> str:
    """Lower-case media type with any parameters (charset etc.) removed."""
    if not content_type:
        return ''
    return content_type.split(';', 1)[0].strip().lower()


def calculate_payload_hash(payload: Union[bytes, str], content_type: str, algorithm: str) -> str:
    """
    Hash a request payload the way Hawk servers do.

    Args:
        payload: Raw request body
        content_type: Content-Type header of the body
        algorithm: Hash algorithm name (sha1 or sha256)

    Returns:
        Base64-encoded digest of the normalized payload

    Raises:
        SigningError: If algorithm is unsupported
    """
    digest = _digestmod(algorithm)()
    digest.update(f"{HAWK_PAYLOAD_TAG}\n".encode('utf-8'))
    digest.update(f"{normalize_content_type(content_type)}\n".encode('utf-8'))
    digest.update(_to_bytes(payload))
    digest.update(b"\n")
    return base64.b64encode(digest.digest()).decode('ascii')


def normalize_string(context: SignedRequestContext, payload_hash: Optional[str] = None) -> str:
    """
    Build the normalized string that is MAC'd for a request.

    Hash and ext lines are always present, empty when unused.
    """
    parts = urlsplit(context.url)
    host = (parts.hostname or '').lower()
    port = parts.port or DEFAULT_PORTS.get(parts.scheme.lower(), '')
    ext = (context.ext or '').replace('\\', '\\\\').replace('\n', '\\n')

    lines = [
        HAWK_HEADER_TAG,
        str(context.timestamp),
        context.nonce,
        context.method.upper(),
        parts.path or '/',
        host,
        str(port),
        payload_hash or '',
        ext,
    ]
    return '\n'.join(lines) + '\n'


class Signer:
    """
    Signs SignedRequestContext values with Credentials.

    The clock and nonce source are injectable so tests can pin them; in
    production they are time.time and the OS CSPRNG.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        nonce_generator: Optional[Callable[[], str]] = None
    ):
        self.clock = clock or time.time
        self.nonce_generator = nonce_generator or generate_nonce

    def new_context(
        self,
        method: str,
        url: str,
        payload: Union[bytes, str] = b'',
        content_type: str = '',
        ext: str = ''
    ) -> SignedRequestContext:
        """Create a context with a fresh timestamp and nonce."""
        return SignedRequestContext(
            method=method,
            url=url,
            timestamp=int(self.clock()),
            nonce=self.nonce_generator(),
            payload=payload,
            content_type=content_type,
            ext=ext,
        )

    def _check_credentials(self, credentials: Credentials):
        if not credentials.secret:
            raise SigningError("secret cannot be empty")
        _digestmod(credentials.algorithm)

    def calculate_mac(
        self,
        context: SignedRequestContext,
        credentials: Credentials,
        payload_hash: Optional[str] = None
    ) -> str:
        """
        Compute the base64 HMAC of the normalized string.

        Raises:
            SigningError: If the algorithm is unsupported or the secret is empty
        """
        self._check_credentials(credentials)
        normalized = normalize_string(context, payload_hash)
        mac = hmac.new(
            credentials.secret.encode('utf-8'),
            normalized.encode('utf-8'),
            _digestmod(credentials.algorithm)
        )
        return base64.b64encode(mac.digest()).decode('ascii')

    def sign(self, context: SignedRequestContext, credentials: Credentials) -> AuthorizationHeader:
        """
        Sign a request context.

        Args:
            context: Request to sign
            credentials: Credentials to sign with

        Returns:
            AuthorizationHeader for the request

        Raises:
            SigningError: If the algorithm is unsupported or the secret is empty
        """
        self._check_credentials(credentials)

        payload_hash = None
        if context.payload:
            payload_hash = calculate_payload_hash(
                context.payload,
                context.content_type,
                credentials.algorithm
            )

        return AuthorizationHeader(
            id=credentials.identifier,
            ts=str(context.timestamp),
            nonce=context.nonce,
            mac=self.calculate_mac(context, credentials, payload_hash),
            hash=payload_hash,
            ext=context.ext or None,
        )

    def verify(self, context: SignedRequestContext, credentials: Credentials, mac: str) -> bool:
        """Check a MAC against a context using a constant-time comparison."""
        expected = self.sign(context, credentials).mac
        return hmac.compare_digest(expected, mac)
