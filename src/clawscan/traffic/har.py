"""HTTP Archive (HAR 1.2) import."""

import base64
import binascii
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .store import ProxyEntry, ProxyStore

logger = logging.getLogger(__name__)


def _pairs(items: list[dict[str, Any]] | None) -> list[tuple[str, str]]:
    return [
        (item.get("name", ""), item.get("value", "")) for item in items or [] if item.get("name")
    ]


def _response_body(content: dict[str, Any]) -> bytes:
    text = content.get("text") or ""
    if content.get("encoding") == "base64":
        try:
            return base64.b64decode(text)
        except (binascii.Error, ValueError):
            logger.debug("Skipping undecodable base64 response body")
            return b""
    return text.encode()


def _started(value: str | None) -> datetime:
    if not value:
        return datetime.now(UTC)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(UTC)


def har_entry_to_proxy_entry(item: dict[str, Any]) -> ProxyEntry:
    """Convert one ``log.entries`` item into a proxy entry."""
    request = item.get("request") or {}
    response = item.get("response") or {}
    post_data = request.get("postData") or {}

    request_headers = _pairs(request.get("headers"))
    mime_type = post_data.get("mimeType")
    if mime_type and not any(name.lower() == "content-type" for name, _ in request_headers):
        request_headers.append(("Content-Type", mime_type))

    return ProxyEntry(
        timestamp=_started(item.get("startedDateTime")),
        method=request.get("method", "GET"),
        url=request.get("url", ""),
        request_headers=request_headers,
        request_body=post_data.get("text") or "",
        status_code=int(response.get("status") or 0),
        response_headers=_pairs(response.get("headers")),
        response_body=_response_body(response.get("content") or {}),
        response_time=float(item.get("time") or 0.0) / 1000,
    )


def load_har(path: Path, max_entries: int = 5000) -> ProxyStore:
    """Load a HAR file into a store. Entries without a URL are skipped."""
    data = json.loads(path.read_text(encoding="utf-8"))
    try:
        entries = data["log"]["entries"]
    except (KeyError, TypeError):
        raise ValueError(f"{path} is not a HAR file (missing log.entries)") from None

    store = ProxyStore(max_entries=max_entries)
    for item in entries:
        entry = har_entry_to_proxy_entry(item)
        if not entry.url:
            logger.debug("Skipping HAR entry without a request URL")
            continue
        store.add(entry)
    return store
