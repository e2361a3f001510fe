"""
Unit tests for signed request assembly.
"""

import logging
import re

import pytest

from tunai_client import (
    CredentialStore,
    RequestAssembler,
    RequestDescriptor,
    RequestOptions,
    Signer,
    calculate_payload_hash
)

HEADER_PATTERN = re.compile(
    r'^Hawk id="(?P<id>[^"]+)", ts="(?P<ts>\d+)", nonce="(?P<nonce>[^"]+)", '
    r'mac="(?P<mac>[^"]+)"(, hash="(?P<hash>[^"]+)")?(, ext="(?P<ext>[^"]+)")?$'
)


class TestRequestAssembler:
    """Test RequestAssembler output."""

    @pytest.fixture
    def store(self):
        return CredentialStore.from_api_key("KEY", "SECRET")

    @pytest.fixture
    def signer(self):
        return Signer(clock=lambda: 1700000000, nonce_generator=lambda: "n1")

    @pytest.fixture
    def assembler(self, store, signer):
        return RequestAssembler("https://api.tunai.id/v1/", store, signer=signer, timeout=30)

    def test_assemble_get(self, assembler, store):
        """Test a GET request gets an Authorization header and no body."""
        descriptor = assembler.assemble('get', '/invoices/by-ref/abc123')

        assert descriptor.method == 'GET'
        assert descriptor.url == "https://api.tunai.id/v1/invoices/by-ref/abc123"
        assert descriptor.body == b''
        assert descriptor.verify is True
        assert descriptor.timeout == 30
        assert 'Content-Type' not in descriptor.headers

        match = HEADER_PATTERN.match(descriptor.headers['Authorization'])
        assert match is not None
        assert match.group('id') == store.get_credentials().identifier
        assert match.group('ts') == "1700000000"
        assert match.group('nonce') == "n1"
        assert match.group('hash') is None
        assert match.group('ext') is None

    def test_assemble_matches_signer(self, assembler, signer, store):
        """Test the header is exactly what the signer produces."""
        descriptor = assembler.assemble('GET', '/invoices/42')
        context = signer.new_context('GET', "https://api.tunai.id/v1/invoices/42")
        expected = signer.sign(context, store.get_credentials()).field_value()

        assert descriptor.headers['Authorization'] == expected

    def test_assemble_post_payload(self, assembler):
        """Test a payload sets JSON content type and a payload hash."""
        body = b'{"refId":"abc123","amount":1000}'
        descriptor = assembler.assemble('POST', '/invoices', payload=body, content_type='application/json')

        assert descriptor.body == body
        assert descriptor.headers['Content-Type'] == 'application/json'

        match = HEADER_PATTERN.match(descriptor.headers['Authorization'])
        assert match.group('hash') == calculate_payload_hash(body, 'application/json', 'sha256')

    def test_assemble_payload_defaults_json(self, assembler):
        """Test a payload without content type is sent as JSON."""
        descriptor = assembler.assemble('POST', '/invoices', payload='{"a":1}')

        assert descriptor.body == b'{"a":1}'
        assert descriptor.headers['Content-Type'] == 'application/json'

    def test_assemble_query_bound_to_ext(self, assembler):
        """Test query params travel as params and are signed through ext."""
        options = RequestOptions(query_params={'page': 2, 'status': 'paid'})
        descriptor = assembler.assemble('GET', '/invoices', options=options)

        assert descriptor.params == {'page': 2, 'status': 'paid'}
        assert '?' not in descriptor.url
        match = HEADER_PATTERN.match(descriptor.headers['Authorization'])
        assert match.group('ext') == 'page=2&status=paid'

    def test_assemble_extra_headers(self, assembler):
        """Test caller headers are kept and cannot replace Authorization."""
        options = RequestOptions(headers={'X-Request-Id': 'r1', 'Authorization': 'Bearer x'})
        descriptor = assembler.assemble('GET', '/invoices/1', options=options)

        assert descriptor.headers['X-Request-Id'] == 'r1'
        assert descriptor.headers['Authorization'].startswith('Hawk ')

    def test_assemble_verify_tls_opt_out(self, assembler, caplog):
        """Test disabling TLS verification is explicit and logged."""
        with caplog.at_level(logging.WARNING, logger='tunai_client.request'):
            descriptor = assembler.assemble('GET', '/invoices/1', options=RequestOptions(verify_tls=False))

        assert descriptor.verify is False
        assert "TLS certificate verification disabled" in caplog.text

    def test_assemble_client_verify_default(self, store, signer):
        """Test the assembler-level verify setting applies without options."""
        assembler = RequestAssembler("https://api.tunai.id/v1", store, signer=signer, verify_tls=False)

        assert assembler.assemble('GET', '/invoices/1').verify is False

    def test_options_without_verify_inherit_default(self, store, signer):
        """Test options that leave verify_tls unset use the assembler setting."""
        assembler = RequestAssembler("https://api.tunai.id/v1", store, signer=signer, verify_tls=False)
        descriptor = assembler.assemble('GET', '/invoices/1', options=RequestOptions(headers={'X-Request-Id': 'r1'}))

        assert descriptor.verify is False

    def test_options_verify_overrides_default(self, store, signer):
        """Test an explicit verify_tls wins over the assembler setting."""
        assembler = RequestAssembler("https://api.tunai.id/v1", store, signer=signer, verify_tls=False)
        descriptor = assembler.assemble('GET', '/invoices/1', options=RequestOptions(verify_tls=True))

        assert descriptor.verify is True

    def test_build_url_adds_slash(self, assembler):
        """Test relative paths are joined with a single slash."""
        assert assembler.build_url('invoices') == "https://api.tunai.id/v1/invoices"


class TestRequestDescriptor:
    """Test conversion to transport keyword arguments."""

    def test_as_kwargs_minimal(self):
        descriptor = RequestDescriptor('GET', 'https://x/y', {'Authorization': 'Hawk'})

        assert descriptor.as_kwargs() == {
            'headers': {'Authorization': 'Hawk'},
            'verify': True,
            'timeout': None,
        }

    def test_as_kwargs_full(self):
        descriptor = RequestDescriptor(
            'POST', 'https://x/y', {}, body=b'{}', params={'a': 1}, verify=False, timeout=5
        )
        kwargs = descriptor.as_kwargs()

        assert kwargs['data'] == b'{}'
        assert kwargs['params'] == {'a': 1}
        assert kwargs['verify'] is False
        assert kwargs['timeout'] == 5
