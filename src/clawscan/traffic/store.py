"""Captured request/response storage."""

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from clawscan.modules.pscan.models import HttpMessage

HeaderList = list[tuple[str, str]]


def _header_pairs(headers: Any) -> HeaderList:
    """Normalise a header mapping or pair list, keeping repeated names."""
    if not headers:
        return []
    if isinstance(headers, dict):
        return [(str(key), str(value)) for key, value in headers.items()]
    return [(str(key), str(value)) for key, value in headers]


def _encode_body(body: bytes) -> dict[str, str]:
    """Text bodies are stored as-is, anything else as base64 (like HAR content)."""
    try:
        return {"response_body": body.decode("utf-8")}
    except UnicodeDecodeError:
        return {
            "response_body": base64.b64encode(body).decode("ascii"),
            "response_body_encoding": "base64",
        }


def _decode_body(data: dict[str, Any]) -> bytes | str:
    body = data.get("response_body", "")
    if data.get("response_body_encoding") == "base64":
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Invalid base64 response body in traffic export") from None
    return body


@dataclass
class ProxyEntry:
    """Single captured request/response pair."""

    id: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    # Request
    method: str = "GET"
    url: str = ""
    request_headers: HeaderList = field(default_factory=list)
    request_body: str = ""

    # Response
    status_code: int = 0
    response_headers: HeaderList = field(default_factory=list)
    response_body: bytes = b""
    response_time: float = 0.0

    def __post_init__(self) -> None:
        self.request_headers = _header_pairs(self.request_headers)
        self.response_headers = _header_pairs(self.response_headers)
        if isinstance(self.response_body, str):
            self.response_body = self.response_body.encode()

    def to_message(self) -> HttpMessage:
        """Convert the entry into a message the detectors can inspect."""
        return HttpMessage.build(
            url=self.url,
            method=self.method,
            request_headers=self.request_headers,
            request_body=self.request_body,
            status_code=self.status_code,
            response_headers=self.response_headers,
            response_body=self.response_body,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "method": self.method,
            "url": self.url,
            "request_headers": [list(pair) for pair in self.request_headers],
            "request_body": self.request_body,
            "status_code": self.status_code,
            "response_headers": [list(pair) for pair in self.response_headers],
            **_encode_body(self.response_body),
            "response_time": self.response_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProxyEntry":
        timestamp = data.get("timestamp")
        return cls(
            id=int(data.get("id", 0)),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(UTC),
            method=data.get("method", "GET"),
            url=data.get("url", ""),
            request_headers=data.get("request_headers") or [],
            request_body=data.get("request_body", ""),
            status_code=int(data.get("status_code", 0)),
            response_headers=data.get("response_headers") or [],
            response_body=_decode_body(data),
            response_time=float(data.get("response_time", 0.0)),
        )


class ProxyStore:
    """In-memory store for captured proxy traffic."""

    def __init__(self, max_entries: int = 5000):
        self._entries: list[ProxyEntry] = []
        self._next_id: int = 1
        self.max_entries = max_entries

    @property
    def entries(self) -> list[ProxyEntry]:
        """Return a shallow copy of all entries."""
        return list(self._entries)

    def add(self, entry: ProxyEntry) -> ProxyEntry:
        """Store an entry and assign it an auto-incremented id."""
        entry.id = self._next_id
        self._next_id += 1
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            self._entries = self._entries[-self.max_entries :]
        return entry

    def get(self, entry_id: int) -> ProxyEntry | None:
        """Retrieve a single entry by id."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def search(
        self,
        url_pattern: str = "",
        method: str = "",
        status_code: int | None = None,
    ) -> list[ProxyEntry]:
        """Filter entries by one or more criteria."""
        results = self._entries
        if url_pattern:
            results = [e for e in results if url_pattern in e.url]
        if method:
            results = [e for e in results if e.method.upper() == method.upper()]
        if status_code is not None:
            results = [e for e in results if e.status_code == status_code]
        return results

    def messages(self) -> list[HttpMessage]:
        return [entry.to_message() for entry in self._entries]

    def clear(self) -> int:
        """Remove all entries.  Returns the count removed."""
        count = len(self._entries)
        self._entries.clear()
        self._next_id = 1
        return count

    def export(self) -> list[dict[str, Any]]:
        """Serialise entries to plain dicts."""
        return [entry.to_dict() for entry in self._entries]

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(self.export(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path, max_entries: int = 5000) -> "ProxyStore":
        """Load a store from a JSON export (a list of entry dicts)."""
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{path} is not a traffic export (expected a JSON list)")
        store = cls(max_entries=max_entries)
        for item in data:
            store.add(ProxyEntry.from_dict(item))
        return store

    def __len__(self) -> int:
        return len(self._entries)
