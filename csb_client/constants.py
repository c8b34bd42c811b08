"""
Constants for CSB client library.
Compatible with the CSB gateway signature protocol.
"""

# Signed protocol fields, sent as headers and included in the canonical string
API_NAME_KEY = "_api_name"
VERSION_KEY = "_api_version"
ACCESS_KEY = "_api_access_key"
TIMESTAMP_KEY = "_api_timestamp"

# Never signed: stripped from the parameter set before canonicalization
SECRET_KEY = "_api_secret_key"
SIGNATURE_KEY = "_api_signature"

SIGNED_HEADER_KEYS = (
    API_NAME_KEY,
    VERSION_KEY,
    TIMESTAMP_KEY,
    ACCESS_KEY,
    SIGNATURE_KEY,
)

SUPPORTED_METHODS = ("get", "post")

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': 30,  # HTTP timeout in seconds
    'verify': True,  # TLS certificate verification
}

CSB_SDK_VERSION = "1.1.0"
