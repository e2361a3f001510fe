#!/usr/bin/env python3
"""
Basic usage examples for the Tunai invoice client library.

Reads TUNAI_KEY, TUNAI_SECRET and optionally TUNAI_URL from the
environment.
"""

import logging
import os
import sys
import uuid

from tunai_client import InvoiceClient, Signer, TunaiClientError, TUNAI_URL


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.DEBUG)

    key = os.environ.get("TUNAI_KEY")
    secret = os.environ.get("TUNAI_SECRET")
    root_url = os.environ.get("TUNAI_URL", TUNAI_URL)
    if not key or not secret:
        print("Set TUNAI_KEY and TUNAI_SECRET to run the examples")
        sys.exit(1)

    print("=== Tunai Invoice Client Examples ===\n")

    print("1. Signing a request locally...")
    client = InvoiceClient(key, secret, root_url)
    descriptor = client.assembler.assemble('GET', '/invoices/by-ref/example')
    print(f"   {descriptor.method} {descriptor.url}")
    print(f"   Authorization: {descriptor.headers['Authorization'][:60]}...\n")

    invoice = {"refId": f"example-{uuid.uuid4().hex[:8]}", "amount": 1000}

    try:
        print("2. Looking up an invoice by ref...")
        response = client.get_by_ref(invoice["refId"])
        print(f"   Status: {response.status_code}\n")

        print("3. Fetching or creating the invoice...")
        response = client.get_by_ref_or_create(invoice)
        print(f"   Status: {response.status_code}")
        print(f"   Body: {response.text}\n")

        if response.ok:
            invoice_id = response.json().get("id")
            if invoice_id:
                print("4. Fetching the invoice by id...")
                response = client.get_by_id(invoice_id)
                print(f"   Status: {response.status_code}\n")

    except TunaiClientError as e:
        print(f"Tunai Client Error: {e}")
        sys.exit(1)
    finally:
        client.close()


def demonstrate_pinned_signer():
    """Show that a fixed clock and nonce give a reproducible header."""
    signer = Signer(clock=lambda: 1700000000, nonce_generator=lambda: "n1")
    with InvoiceClient("KEY", "SECRET", signer=signer) as client:
        first = client.assembler.assemble('GET', '/invoices/abc123')
        second = client.assembler.assemble('GET', '/invoices/abc123')
        print(f"Reproducible: {first.headers == second.headers}")


if __name__ == "__main__":
    demonstrate_pinned_signer()
    main()
