"""
Tunai.id invoice API client.

This module provides the merchant-facing operations on the Invoice
endpoints. Every request is signed with Hawk using the merchant's
application key and secret.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from .constants import (
    CONTENT_TYPE_JSON,
    DEFAULT_CONFIG,
    SUPPORTED_ALGORITHMS,
    TUNAI_URL
)
from .credentials import CredentialStore
from .exceptions import ConfigurationError, TransportError
from .hawk import Signer
from .request import RequestAssembler, RequestDescriptor, RequestOptions

logger = logging.getLogger(__name__)


class InvoiceClient:
    """
    Client for the Tunai invoice endpoints.

    Responses are returned as requests.Response objects whatever their
    status code; a 404 from get_by_ref is business data, not an error.
    """

    def __init__(
        self,
        key: str,
        secret: str,
        root_url: str = TUNAI_URL,
        signer: Optional[Signer] = None,
        **config
    ):
        """
        Initialize invoice client.

        Args:
            key: Application key
            secret: Application secret
            root_url: Root url of the Tunai API
            signer: Signer to use, a default one when omitted
            **config: Configuration options (algorithm, timeout, verify_tls)
        """
        self.root_url = root_url.rstrip('/')

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}
        self._validate_config()

        self.credential_store = CredentialStore.from_api_key(
            key,
            secret,
            self.config['algorithm']
        )
        self.assembler = RequestAssembler(
            self.root_url,
            self.credential_store,
            signer=signer,
            timeout=self.config['timeout'],
            verify_tls=self.config['verify_tls']
        )

        self.session = requests.Session()

    def _validate_config(self):
        """Validate client configuration."""
        if not self.root_url:
            raise ConfigurationError("root_url cannot be empty")

        if self.config['algorithm'] not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(
                f"algorithm must be one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )

        timeout = self.config['timeout']
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        if not self.config['verify_tls']:
            logger.warning("TLS certificate verification is disabled for %s", self.root_url)

    def get_by_ref(self, ref: str, options: Optional[RequestOptions] = None) -> requests.Response:
        """
        Get an invoice by the merchant's reference id.

        Args:
            ref: Reference id of an invoice
            options: Per-request transport options
        """
        return self._make_request('GET', f'/invoices/by-ref/{quote(str(ref), safe="")}', options=options)

    def get_by_id(self, invoice_id: str, options: Optional[RequestOptions] = None) -> requests.Response:
        """Get an invoice by its Tunai id."""
        return self._make_request('GET', f'/invoices/{quote(str(invoice_id), safe="")}', options=options)

    def create(self, invoice: Dict[str, Any], options: Optional[RequestOptions] = None) -> requests.Response:
        """
        Create an invoice.

        Args:
            invoice: Invoice data, sent as a JSON object
            options: Per-request transport options
        """
        body = json.dumps(invoice, separators=(',', ':')).encode('utf-8')
        return self._make_request(
            'POST',
            '/invoices',
            payload=body,
            content_type=CONTENT_TYPE_JSON,
            options=options
        )

    def get_by_ref_or_create(self, invoice: Dict[str, Any], options: Optional[RequestOptions] = None) -> requests.Response:
        """
        Get an invoice by its refId, creating it when it does not exist.

        Only a 404 leads to creation. Any other response from the lookup,
        including other errors, is returned unchanged. Nothing is retried.
        The create call reuses only the transport fields of options
        (verify_tls, headers); query_params apply to the lookup alone.

        Args:
            invoice: Invoice data; must contain "refId"

        Raises:
            KeyError: If invoice has no refId
        """
        response = self.get_by_ref(invoice['refId'], options=options)
        if response.status_code != 404:
            return response

        logger.debug("Invoice %s not found, creating it", invoice['refId'])
        create_options = None
        if options is not None:
            create_options = RequestOptions(verify_tls=options.verify_tls, headers=options.headers)
        return self.create(invoice, options=create_options)

    def _send(self, descriptor: RequestDescriptor) -> requests.Response:
        try:
            response = self.session.request(
                descriptor.method,
                descriptor.url,
                **descriptor.as_kwargs()
            )
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        logger.debug("%s %s -> %s", descriptor.method, descriptor.url, response.status_code)
        return response

    def _make_request(
        self,
        method: str,
        path: str,
        payload: bytes = b'',
        content_type: str = '',
        options: Optional[RequestOptions] = None
    ) -> requests.Response:
        """
        Make a Hawk-signed HTTP request.

        Raises:
            SigningError: If the request cannot be signed
            TransportError: If the request fails
        """
        descriptor = self.assembler.assemble(
            method,
            path,
            payload=payload,
            content_type=content_type,
            options=options
        )
        return self._send(descriptor)

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
