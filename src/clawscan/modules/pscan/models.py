"""Data models for passive scan messages, evidence and alerts."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any
from urllib.parse import parse_qsl

import httpx

FORM_URLENCODED = "application/x-www-form-urlencoded"


class Risk(IntEnum):
    """Severity attached to an alert."""

    INFO = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Confidence(IntEnum):
    """Certainty attached to an alert."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CONFIRMED = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class AlertThreshold(str, Enum):
    """Strictness dial trading recall for precision."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "str | AlertThreshold | None") -> "AlertThreshold":
        """Parse a threshold name; ``None`` and ``default`` map to MEDIUM."""
        if isinstance(value, AlertThreshold):
            return value
        if value is None:
            return cls.MEDIUM
        normalized = str(value).strip().lower()
        if normalized in ("", "default"):
            return cls.MEDIUM
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown alert threshold: {value!r} (expected {valid})") from None


class ParameterOrigin(str, Enum):
    """Where a request parameter was found."""

    FORM = "form"
    URL = "url"


@dataclass(frozen=True, order=True)
class Parameter:
    """A request parameter; ordering and equality cover all three fields."""

    name: str
    value: str
    origin: ParameterOrigin = ParameterOrigin.URL


@dataclass(frozen=True)
class HtmlAttribute:
    """One attribute occurrence found while walking a parsed response body."""

    element_tag: str
    attribute_name: str
    attribute_value: str


@dataclass(frozen=True)
class HeaderField:
    """A header name/value pair. An empty name stands for the response body."""

    name: str
    value: str


@dataclass(frozen=True)
class EvidenceMatch:
    """A substring found by a detector and where it was found."""

    text: str
    source_location: str = ""


@dataclass(frozen=True)
class Alert:
    """A structured passive scan finding."""

    plugin_id: int
    name: str
    risk: Risk
    confidence: Confidence
    description: str = ""
    solution: str = ""
    reference: str = ""
    cwe_id: int = 0
    wasc_id: int = 0
    evidence: str = ""
    param: str = ""
    other_info: str = ""
    alert_ref: str = ""
    uri: str = ""
    tags: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the alert to plain JSON-compatible values."""
        return {
            "pluginId": self.plugin_id,
            "alertRef": self.alert_ref or str(self.plugin_id),
            "name": self.name,
            "risk": self.risk.label,
            "confidence": self.confidence.label,
            "description": self.description,
            "solution": self.solution,
            "reference": self.reference,
            "cweId": self.cwe_id,
            "wascId": self.wasc_id,
            "evidence": self.evidence,
            "param": self.param,
            "otherInfo": self.other_info,
            "uri": self.uri,
            "tags": dict(self.tags),
        }


def _header_bytes(value: Any) -> bytes:
    return value if isinstance(value, bytes) else str(value).encode("utf-8")


def encode_headers(headers: Any) -> list[tuple[bytes, bytes]]:
    """Header pairs as UTF-8 bytes, duplicates kept.

    httpx encodes ``str`` headers as ASCII; passing bytes lets non-ASCII
    captured values through, and ``Headers.encoding`` decodes them again.
    """
    if not headers:
        return []
    if isinstance(headers, httpx.Headers):
        return list(headers.raw)
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    return [(_header_bytes(name), _header_bytes(value)) for name, value in pairs]


@dataclass(frozen=True)
class HttpMessage:
    """A captured request/response pair, read-only during inspection."""

    request: httpx.Request
    response: httpx.Response

    @classmethod
    def build(
        cls,
        url: str,
        method: str = "GET",
        request_headers: Any = None,
        request_body: str | bytes = b"",
        status_code: int = 200,
        response_headers: Any = None,
        response_body: str | bytes = b"",
    ) -> "HttpMessage":
        """Create a message from plain values.

        Headers may be a mapping or a list of ``(name, value)`` pairs; the
        latter keeps repeated headers such as multiple ``Cache-Control`` lines.
        The response body must already be decoded; ``Content-Encoding`` is
        dropped so it is not decoded a second time.
        """
        if isinstance(request_body, str):
            request_body = request_body.encode()
        if isinstance(response_body, str):
            response_body = response_body.encode()
        response_headers = [
            (name, value)
            for name, value in encode_headers(response_headers)
            if name.lower() != b"content-encoding"
        ]
        request = httpx.Request(
            method.upper(),
            url,
            headers=encode_headers(request_headers),
            content=request_body or None,
        )
        response = httpx.Response(
            status_code,
            headers=response_headers,
            content=response_body or None,
            request=request,
        )
        return cls(request=request, response=response)

    @property
    def url(self) -> str:
        return str(self.request.url)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def is_secure(self) -> bool:
        return self.request.url.scheme == "https"

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def response_body(self) -> str:
        """Decoded response body; undecodable bytes are replaced."""
        if not self.response.content:
            return ""
        return self.response.text

    def response_header(self, name: str) -> str | None:
        return self.response.headers.get(name)

    def response_header_values(self, name: str) -> list[str]:
        return self.response.headers.get_list(name)

    def response_header_fields(self) -> list[HeaderField]:
        """Response headers in wire order, original case, duplicates kept."""
        encoding = self.response.headers.encoding
        return [
            HeaderField(name.decode(encoding), value.decode(encoding))
            for name, value in self.response.headers.raw
        ]

    def response_headers_as_string(self) -> str:
        return "".join(
            f"{header.name}: {header.value}\r\n" for header in self.response_header_fields()
        )

    def url_params(self) -> list[Parameter]:
        return [
            Parameter(name, value, ParameterOrigin.URL)
            for name, value in self.request.url.params.multi_items()
        ]

    def form_params(self) -> list[Parameter]:
        """Parameters from a urlencoded request body."""
        content_type = self.request.headers.get("Content-Type", "")
        if FORM_URLENCODED not in content_type.lower() or not self.request.content:
            return []
        body = self.request.content.decode("utf-8", errors="replace")
        return [
            Parameter(name, value, ParameterOrigin.FORM)
            for name, value in parse_qsl(body, keep_blank_values=True)
        ]

    def params(self) -> list[Parameter]:
        """Deduplicated, sorted union of form and URL parameters."""
        return sorted(set(self.form_params()) | set(self.url_params()))
