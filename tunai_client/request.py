"""
Assembly of signed HTTP requests.

RequestAssembler turns (method, path, payload, options) into a
RequestDescriptor carrying everything the transport needs. It performs
no I/O; the only side effects are the clock read and nonce draw done by
the Signer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

from .constants import CONTENT_TYPE_JSON, HEADER_AUTHORIZATION, HEADER_CONTENT_TYPE
from .credentials import CredentialStore
from .hawk import Signer

logger = logging.getLogger(__name__)


@dataclass
class RequestOptions:
    """
    Per-request transport options.

    verify_tls disables certificate verification when False and falls
    back to the client setting when None. Disabling it is
    insecure and only meant for test servers with self-signed certificates.
    query_params keep their insertion order, which is also the order they
    are encoded into the signed ext value.
    """
    verify_tls: Optional[bool] = None
    query_params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass
class RequestDescriptor:
    """A fully signed request ready for the transport layer."""
    method: str
    url: str
    headers: Dict[str, str]
    body: bytes = b''
    params: Dict[str, Any] = field(default_factory=dict)
    verify: bool = True
    timeout: Optional[float] = None

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for requests.Session.request(method, url, ...)."""
        kwargs = {
            'headers': self.headers,
            'verify': self.verify,
            'timeout': self.timeout,
        }
        if self.params:
            kwargs['params'] = self.params
        if self.body:
            kwargs['data'] = self.body
        return kwargs


class RequestAssembler:
    """Builds signed RequestDescriptors against a root url."""

    def __init__(
        self,
        root_url: str,
        credential_store: CredentialStore,
        signer: Optional[Signer] = None,
        timeout: Optional[float] = None,
        verify_tls: bool = True
    ):
        self.root_url = root_url.rstrip('/')
        self.credential_store = credential_store
        self.signer = signer or Signer()
        self.timeout = timeout
        self.verify_tls = verify_tls

    def build_url(self, path: str) -> str:
        if not path.startswith('/'):
            path = '/' + path
        return self.root_url + path

    def assemble(
        self,
        method: str,
        path: str,
        payload: Union[bytes, str] = b'',
        content_type: str = '',
        options: Optional[RequestOptions] = None
    ) -> RequestDescriptor:
        """
        Sign a request and describe it for the transport.

        Args:
            method: HTTP method
            path: Path relative to the root url
            payload: Request body, empty for none
            content_type: Content type of payload
            options: Transport options, client defaults when omitted

        Returns:
            RequestDescriptor with the Authorization header attached

        Raises:
            SigningError: If the credentials cannot sign
        """
        if options is None:
            options = RequestOptions()
        verify = self.verify_tls if options.verify_tls is None else options.verify_tls

        method = method.upper()
        url = self.build_url(path)
        body = payload.encode('utf-8') if isinstance(payload, str) else payload
        if body and not content_type:
            content_type = CONTENT_TYPE_JSON

        ext = urlencode(list(options.query_params.items())) if options.query_params else ''

        context = self.signer.new_context(
            method,
            url,
            payload=body,
            content_type=content_type,
            ext=ext
        )
        authorization = self.signer.sign(context, self.credential_store.get_credentials())

        headers = dict(options.headers)
        headers[HEADER_AUTHORIZATION] = authorization.field_value()
        if body:
            headers[HEADER_CONTENT_TYPE] = content_type

        if not verify:
            logger.warning("TLS certificate verification disabled for %s %s", method, url)

        return RequestDescriptor(
            method=method,
            url=url,
            headers=headers,
            body=body,
            params=dict(options.query_params),
            verify=verify,
            timeout=self.timeout,
        )
