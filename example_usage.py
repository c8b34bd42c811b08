#!/usr/bin/env python3
"""
Basic usage examples for CSB Python client library.

This script shows how to sign parameters by hand and how to make signed
calls through a CSB gateway.

Set CSB_URL, CSB_ACCESS_KEY and CSB_SECRET_KEY to point it at a gateway.
"""

import logging
import os
import sys

import structlog

from csb_client import (
    CSBClient,
    CSBClientError,
    CSBServiceError,
    SIGNATURE_KEY,
    canonicalize,
    sign_params,
)


def demonstrate_signing():
    """Sign a parameter set without sending anything."""

    print("=== Offline Signing Example ===\n")

    params = {"foo": "bar"}
    headers = sign_params(params, "echo", "1.0", "AK123", "SK456", timestamp=1700000000000)

    print(f"   Parameters: {params}")
    print(f"   Canonical string (without metadata): {canonicalize(params)}")
    for key, value in headers.items():
        print(f"   {key}: {value}")
    print("   Expected signature: OUGfgY4lbqw44ewd7ojnxN6FYOk=")
    print(f"   Match: {'✓' if headers[SIGNATURE_KEY] == 'OUGfgY4lbqw44ewd7ojnxN6FYOk=' else '✗'}")
    print()


def main():
    """Run calls against a real gateway."""

    url = os.environ.get("CSB_URL")
    access_key = os.environ.get("CSB_ACCESS_KEY")
    secret_key = os.environ.get("CSB_SECRET_KEY")

    if not (url and access_key and secret_key):
        print("CSB_URL, CSB_ACCESS_KEY and CSB_SECRET_KEY must be set to call a gateway.")
        sys.exit(1)

    print("=== CSB Gateway Examples ===\n")

    with CSBClient(url, access_key, secret_key, timeout=10) as client:
        try:
            print("1. Signed GET request...")
            response = client.get("echo", "1.0", query_params={"name": "csb"})
            print(f"   ✓ {response.status_code} ({response.kind.value}): {response.data}")
            print()

            print("2. Signed POST request with form data...")
            response = client.post("echo", "1.0", form_params={"message": "hello"})
            print(f"   ✓ {response.status_code} ({response.kind.value}): {response.data}")
            print()

            print("3. Signed POST request with a JSON body...")
            response = client.post(
                "echo", "1.0",
                content_type="application/json",
                body='{"message": "hello"}',
            )
            print(f"   ✓ {response.status_code} ({response.kind.value}): {response.data}")
            print()
        except CSBServiceError as e:
            print(f"   ✗ Gateway rejected the call: {e}")
            sys.exit(1)
        except CSBClientError as e:
            print(f"CSB Client Error: {e}")
            sys.exit(1)


if __name__ == "__main__":
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    )

    demonstrate_signing()
    main()
