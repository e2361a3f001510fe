"""
Tunai Invoice Client Library

A Python client library for the Tunai.id invoice API. Requests are
authenticated with Hawk signatures derived from the merchant's
application key and secret.

Example usage:
    from tunai_client import InvoiceClient

    client = InvoiceClient("your-key", "your-secret")
    response = client.get_by_ref("order-1001")
"""

from .client import InvoiceClient
from .credentials import Credentials, CredentialStore
from .exceptions import (
    TunaiClientError,
    ConfigurationError,
    SigningError,
    TransportError
)
from .hawk import (
    AuthorizationHeader,
    SignedRequestContext,
    Signer,
    calculate_payload_hash,
    generate_nonce,
    normalize_string
)
from .request import RequestAssembler, RequestDescriptor, RequestOptions
from .constants import (
    TUNAI_URL,
    DEFAULT_CONFIG,
    DEFAULT_ALGORITHM,
    SUPPORTED_ALGORITHMS
)

__version__ = "1.0.0"
__all__ = [
    "InvoiceClient",
    "Credentials",
    "CredentialStore",
    "TunaiClientError",
    "ConfigurationError",
    "SigningError",
    "TransportError",
    "AuthorizationHeader",
    "SignedRequestContext",
    "Signer",
    "calculate_payload_hash",
    "generate_nonce",
    "normalize_string",
    "RequestAssembler",
    "RequestDescriptor",
    "RequestOptions",
    "TUNAI_URL",
    "DEFAULT_CONFIG",
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS"
]
