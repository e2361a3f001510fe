"""
Custom exceptions for the Tunai invoice client library.
"""


class TunaiClientError(Exception):
    """Base exception for Tunai client errors."""
    pass


class ConfigurationError(TunaiClientError):
    """Raised when client configuration or credentials are invalid."""
    pass


class SigningError(TunaiClientError):
    """Raised when a request cannot be signed."""
    pass


class TransportError(TunaiClientError):
    """Raised when the HTTP request fails before a response is received."""
    pass
