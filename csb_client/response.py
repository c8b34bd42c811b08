"""
Response body decoding dispatched on the declared content type.
"""

import enum
import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from .exceptions import DecodeError


class ContentKind(enum.Enum):
    JSON = "json"
    XML = "xml"
    PLAIN = "plain"


def classify_content_type(content_type: Optional[str]) -> ContentKind:
    """Map a Content-Type header value to the decoder that handles it."""
    content_type = content_type or ""
    if "application/json" in content_type:
        return ContentKind.JSON
    if "text/xml" in content_type:
        return ContentKind.XML
    return ContentKind.PLAIN


def decode_body(content_type: Optional[str], body: bytes, encoding: str = 'utf-8') -> Tuple[ContentKind, Any]:
    """
    Decode a response body.

    Args:
        content_type: Response Content-Type header
        body: Raw response body
        encoding: Charset used for plain text bodies

    Returns:
        Tuple of (kind, data) where data is the parsed JSON value, the XML
        root element or the body text

    Raises:
        DecodeError: If the body does not parse as its declared type
    """
    kind = classify_content_type(content_type)

    if kind is ContentKind.JSON:
        try:
            return kind, json.loads(body)
        except ValueError as e:
            raise DecodeError("json unmarshal failed") from e

    if kind is ContentKind.XML:
        try:
            return kind, ET.fromstring(body)
        except ET.ParseError as e:
            raise DecodeError("xml unmarshal failed") from e

    try:
        return kind, body.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise DecodeError("read response body failed") from e


def error_fields(kind: ContentKind, data: Any) -> Tuple[str, str]:
    """Extract the gateway's (Message, RequestId) pair from a decoded error body."""
    if kind is ContentKind.XML:
        return (
            (data.findtext("Message") or "").strip(),
            (data.findtext("RequestId") or "").strip(),
        )
    if kind is ContentKind.JSON and isinstance(data, dict):
        return str(data.get("Message") or ""), str(data.get("RequestId") or "")
    return "", ""


@dataclass(frozen=True)
class CSBResponse:
    """Decoded response of a CSB call."""

    status_code: int
    headers: Mapping[str, str]
    kind: ContentKind
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
