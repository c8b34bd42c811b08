"""
CSB Client Library

A Python client library that signs requests for the CSB API gateway.
Every call carries an HMAC-SHA1 signature over the request parameters,
the API name and version, the access key and a millisecond timestamp.

Example usage:
    from csb_client import CSBClient

    client = CSBClient("http://csb.example.com:8086/CSB", "ak", "sk")
    response = client.get("echo", "1.0", query_params={"foo": "bar"})
"""

from .client import CSBClient
from .exceptions import (
    CSBClientError,
    ConfigurationError,
    ValidationError,
    TransportError,
    DecodeError,
    CSBServiceError
)
from .constants import (
    API_NAME_KEY,
    VERSION_KEY,
    ACCESS_KEY,
    TIMESTAMP_KEY,
    SECRET_KEY,
    SIGNATURE_KEY,
    DEFAULT_CONFIG,
    CSB_SDK_VERSION
)
from .request import CSBRequest, validate_request
from .response import CSBResponse, ContentKind, classify_content_type, decode_body
from .signature import canonicalize, compute_signature, sign_params

__version__ = CSB_SDK_VERSION
__all__ = [
    "CSBClient",
    "CSBRequest",
    "CSBResponse",
    "ContentKind",
    "CSBClientError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "DecodeError",
    "CSBServiceError",
    "API_NAME_KEY",
    "VERSION_KEY",
    "ACCESS_KEY",
    "TIMESTAMP_KEY",
    "SECRET_KEY",
    "SIGNATURE_KEY",
    "DEFAULT_CONFIG",
    "canonicalize",
    "compute_signature",
    "sign_params",
    "validate_request",
    "classify_content_type",
    "decode_body"
]
