"""
Constants for the Tunai invoice client library.
Values here are part of the Hawk wire contract with the Tunai API.
"""

# Tunai.id production root url
TUNAI_URL = "https://api.tunai.id/v1"

# Hawk protocol (header scheme and normalized string version tags)
HAWK_SCHEME = "Hawk"
HAWK_VERSION = 1
HAWK_HEADER_TAG = f"hawk.{HAWK_VERSION}.header"
HAWK_PAYLOAD_TAG = f"hawk.{HAWK_VERSION}.payload"

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
CONTENT_TYPE_JSON = "application/json"

# MAC algorithms accepted by Hawk servers
SUPPORTED_ALGORITHMS = ("sha1", "sha256")
DEFAULT_ALGORITHM = "sha256"

# Random bytes drawn per nonce
NONCE_BYTES = 8

# Default configuration values
DEFAULT_CONFIG = {
    'algorithm': DEFAULT_ALGORITHM,
    'timeout': 30,              # HTTP timeout in seconds
    'verify_tls': True,         # certificate verification, opt out explicitly
}

# Default ports used in the normalized string when the url has none
DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}
