"""
Custom exceptions for CSB client library.
"""


class CSBClientError(Exception):
    """Base exception for CSB client errors."""
    pass


class ConfigurationError(CSBClientError):
    """Raised when client configuration is invalid."""
    pass


class ValidationError(CSBClientError):
    """Raised when a request fails its preconditions."""
    pass


class TransportError(CSBClientError):
    """Raised when the HTTP request cannot be sent or completed."""
    pass


class DecodeError(CSBClientError):
    """Raised when a response body cannot be decoded."""
    pass


class CSBServiceError(CSBClientError):
    """Raised when the gateway answers with an error status."""

    def __init__(self, message: str, request_id: str = "", status_code: int = 0):
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self):
        return (
            f"csb: service returned error: ErrorMessage={self.message}, "
            f"RequestId={self.request_id}, CauseErr={self.__cause__}"
        )
