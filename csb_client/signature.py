"""
Request signing compatible with the CSB gateway.

The gateway recomputes the signature from the headers and parameters it
receives, so the canonical string built here has to match its own byte for
byte: keys sorted by their UTF-8 bytes, ``key=value`` pairs joined with
``&``, and no escaping of either.
"""

import base64
import hashlib
import hmac
import time
from typing import Dict, Mapping, Optional

import structlog

from .constants import (
    API_NAME_KEY,
    VERSION_KEY,
    ACCESS_KEY,
    TIMESTAMP_KEY,
    SECRET_KEY,
    SIGNATURE_KEY,
)

logger = structlog.get_logger(__name__)


def current_millis() -> int:
    """Wall-clock time in integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def canonicalize(params: Mapping[str, str]) -> str:
    """
    Build the canonical string for a parameter set.

    Args:
        params: Parameter names mapped to their already serialized values

    Returns:
        ``k1=v1&k2=v2...`` with keys in byte-wise ascending order
    """
    keys = sorted(params, key=lambda k: k.encode('utf-8'))
    return "&".join(f"{k}={params[k]}" for k in keys)


def compute_signature(canonical: str, secret_key: str) -> str:
    """Base64 encoded HMAC-SHA1 of the canonical string."""
    mac = hmac.new(
        secret_key.encode('utf-8'),
        canonical.encode('utf-8'),
        hashlib.sha1
    )
    return base64.b64encode(mac.digest()).decode('ascii')


def sign_params(
    params: Optional[Mapping[str, str]],
    api_name: str,
    api_version: str,
    access_key: str,
    secret_key: str,
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """
    Sign a parameter set and return the CSB header set.

    The caller's mapping is left untouched; the metadata fields are added
    to a private copy.

    Args:
        params: Query and form parameters merged into one mapping
        api_name: Target API name
        api_version: Target API version
        access_key: Public access key
        secret_key: HMAC key, never included in the output
        timestamp: Milliseconds since the epoch, defaults to now

    Returns:
        Dict with the api name, api version, timestamp, access key and
        signature fields
    """
    signed = dict(params or {})
    headers = {}

    signed[API_NAME_KEY] = headers[API_NAME_KEY] = api_name
    signed[VERSION_KEY] = headers[VERSION_KEY] = api_version

    if timestamp is None:
        timestamp = current_millis()
    signed[TIMESTAMP_KEY] = headers[TIMESTAMP_KEY] = str(timestamp)

    signed[ACCESS_KEY] = headers[ACCESS_KEY] = access_key

    signed.pop(SECRET_KEY, None)
    signed.pop(SIGNATURE_KEY, None)

    headers[SIGNATURE_KEY] = compute_signature(canonicalize(signed), secret_key)

    logger.debug(
        "request_signed",
        api_name=api_name,
        api_version=api_version,
        timestamp=headers[TIMESTAMP_KEY],
        signed_keys=len(signed),
    )

    return headers
