"""
Request description and precondition checks.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from .constants import SUPPORTED_METHODS
from .exceptions import ValidationError


def validate_request(
    method: str,
    access_key: Optional[str],
    secret_key: Optional[str],
    api_name: Optional[str],
    api_version: Optional[str],
    content_type: Optional[str],
):
    """
    Check the preconditions of a CSB call.

    Raises:
        ValidationError: On the first failing check
    """
    if (method or "").lower() not in SUPPORTED_METHODS:
        raise ValidationError("bad method, only support 'get' or 'post'")

    if not access_key or not secret_key:
        raise ValidationError(
            "bad request params, accessKey and secretKey must defined together"
        )

    if not api_name or not api_version:
        raise ValidationError("bad request params, api or version not defined")

    if not content_type:
        raise ValidationError("content-type must defined")


def _frozen(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class CSBRequest:
    """
    One call through the CSB gateway.

    Built once per call and validated on construction. Mapping fields are
    copied, so later changes to the caller's dicts do not leak in.
    """

    url: str
    api_name: str
    api_version: str
    access_key: str
    secret_key: str = field(repr=False)
    method: str = "get"
    content_type: str = "application/x-www-form-urlencoded"
    headers: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, str] = field(default_factory=dict)
    form_params: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Union[bytes, str]] = None

    # Mapping fields are not hashable
    __hash__ = None

    def __post_init__(self):
        validate_request(
            self.method,
            self.access_key,
            self.secret_key,
            self.api_name,
            self.api_version,
            self.content_type,
        )

        object.__setattr__(self, 'method', self.method.lower())
        object.__setattr__(self, 'headers', _frozen(self.headers))
        object.__setattr__(self, 'query_params', _frozen(self.query_params))
        object.__setattr__(self, 'form_params', _frozen(self.form_params))

    def merged_params(self) -> Dict[str, str]:
        """Query and form parameters in one dict, form values winning."""
        params = dict(self.query_params)
        params.update(self.form_params)
        return params
