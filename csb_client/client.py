"""
CSB client library.

This module sends requests through the CSB gateway, signing every call with
the gateway's HMAC-SHA1 parameter signature and decoding the response body
according to its content type.
"""

from typing import Dict, Mapping, Optional, Union

import requests
import structlog

from .constants import DEFAULT_CONFIG
from .exceptions import (
    ConfigurationError,
    CSBServiceError,
    DecodeError,
    TransportError,
)
from .request import CSBRequest
from .response import CSBResponse, decode_body, error_fields
from .signature import sign_params

logger = structlog.get_logger(__name__)


def _declared_charset(content_type: Optional[str]) -> Optional[str]:
    """Charset named in the Content-Type header, or None when it names none."""
    if not content_type or 'charset' not in content_type.lower():
        return None
    return requests.utils.get_encoding_from_headers({'content-type': content_type})


class CSBClient:
    """
    Client for making signed requests through the CSB gateway.

    The gateway URL and credentials given here are defaults for the requests
    built with :meth:`build_request`; a :class:`CSBRequest` built elsewhere
    carries its own.
    """

    def __init__(self, url: Optional[str] = None, access_key: Optional[str] = None,
                 secret_key: Optional[str] = None, **config):
        """
        Initialize CSB client.

        Args:
            url: Default gateway URL
            access_key: Default access key
            secret_key: Default secret key
            **config: Configuration options (timeout, verify)
        """
        self.url = url
        self.access_key = access_key
        self.secret_key = secret_key

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.session = requests.Session()
        self.session.verify = self.config['verify']

    def _validate_config(self):
        """Validate client configuration."""
        timeout = self.config['timeout']
        if timeout is None or timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    def build_request(self, api_name: str, api_version: str, method: str = "get",
                      **fields) -> CSBRequest:
        """
        Build a validated request using this client's defaults.

        Args:
            api_name: Target API name
            api_version: Target API version
            method: 'get' or 'post'
            **fields: Any other CSBRequest field (url, content_type, headers,
                query_params, form_params, body, access_key, secret_key)

        Raises:
            ValidationError: If the request fails its preconditions
        """
        fields.setdefault('url', self.url)
        fields.setdefault('access_key', self.access_key)
        fields.setdefault('secret_key', self.secret_key)
        return CSBRequest(
            api_name=api_name,
            api_version=api_version,
            method=method,
            **fields
        )

    def _build_headers(self, request: CSBRequest) -> Dict[str, str]:
        """Content-Type, then caller headers, then the signed header set."""
        headers = {'Content-Type': request.content_type}
        headers.update(request.headers)
        headers.update(sign_params(
            request.merged_params(),
            request.api_name,
            request.api_version,
            request.access_key,
            request.secret_key,
        ))
        return headers

    @staticmethod
    def _request_body(request: CSBRequest) -> Optional[Union[bytes, Mapping[str, str]]]:
        """Explicit body if set, otherwise the form parameters."""
        if isinstance(request.body, str):
            return request.body.encode('utf-8')
        if request.body is not None:
            return request.body
        if request.form_params:
            return dict(request.form_params)
        return None

    def do(self, request: CSBRequest, timeout: Optional[float] = None) -> CSBResponse:
        """
        Send a signed request and decode the response.

        Args:
            request: The call to make
            timeout: Seconds to wait for the gateway, defaults to the
                configured timeout

        Returns:
            CSBResponse with the decoded body

        Raises:
            TransportError: If the request cannot be sent or times out
            DecodeError: If the body does not parse as its content type
            CSBServiceError: If the gateway answers with an error status
        """
        headers = self._build_headers(request)
        method = request.method.upper()

        logger.debug(
            "csb_request",
            method=method,
            url=request.url,
            api_name=request.api_name,
            api_version=request.api_version,
        )

        try:
            response = self.session.request(
                method,
                request.url,
                params=dict(request.query_params) or None,
                data=self._request_body(request),
                headers=headers,
                timeout=timeout or self.config['timeout'],
            )
        except requests.RequestException as e:
            logger.warning(
                "csb_request_failed",
                method=method,
                url=request.url,
                error=str(e),
            )
            raise TransportError(f"failed to request http {request.method}: {e}") from e

        logger.debug(
            "csb_response",
            method=method,
            url=request.url,
            status_code=response.status_code,
        )

        content_type = response.headers.get('Content-Type')
        encoding = _declared_charset(content_type) or 'utf-8'

        if not 200 <= response.status_code < 300:
            cause = None
            try:
                message, request_id = error_fields(
                    *decode_body(content_type, response.content, encoding)
                )
            except DecodeError as e:
                message, request_id = "", ""
                cause = e
            logger.info(
                "csb_service_error",
                api_name=request.api_name,
                status_code=response.status_code,
                request_id=request_id,
            )
            raise CSBServiceError(
                message or response.reason or f"HTTP {response.status_code}",
                request_id=request_id,
                status_code=response.status_code,
            ) from cause

        kind, data = decode_body(content_type, response.content, encoding)

        return CSBResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            kind=kind,
            data=data,
        )

    def call(self, api_name: str, api_version: str, method: str = "get",
             timeout: Optional[float] = None, **fields) -> CSBResponse:
        """Build and send a request in one step."""
        return self.do(self.build_request(api_name, api_version, method, **fields), timeout=timeout)

    def get(self, api_name: str, api_version: str, **kwargs) -> CSBResponse:
        """Make signed GET request."""
        return self.call(api_name, api_version, 'get', **kwargs)

    def post(self, api_name: str, api_version: str, **kwargs) -> CSBResponse:
        """Make signed POST request."""
        return self.call(api_name, api_version, 'post', **kwargs)

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
