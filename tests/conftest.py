"""Test configuration and fixtures for ClawScan."""

import tempfile
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from clawscan.modules.pscan import HttpMessage

# 2024-06-01, a few months after the 1704114087 (2024-01-01) sample timestamp.
FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def isolated_config(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> Path:
    """Point the home directory and cwd at an empty temp dir and clear env overrides."""
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    monkeypatch.chdir(temp_dir)
    monkeypatch.delenv("CLAWSCAN_ALERT_THRESHOLD", raising=False)
    monkeypatch.delenv("CLAWSCAN_CONFIG", raising=False)
    return temp_dir


def build_message(
    url: str = "https://example.com/",
    method: str = "GET",
    status_code: int = 200,
    response_headers: Any = None,
    response_body: str | bytes = "",
    request_headers: Any = None,
    request_body: str | bytes = "",
) -> HttpMessage:
    return HttpMessage.build(
        url=url,
        method=method,
        request_headers=request_headers,
        request_body=request_body,
        status_code=status_code,
        response_headers=response_headers,
        response_body=response_body,
    )


@pytest.fixture
def make_message() -> Callable[..., HttpMessage]:
    """Factory for captured messages."""
    return build_message


@pytest.fixture
def html_message() -> Callable[..., HttpMessage]:
    """Factory for a 200 text/html response."""

    def factory(body: str = "<html><body>ok</body></html>", **kwargs: Any) -> HttpMessage:
        headers = kwargs.pop("response_headers", None) or {}
        if isinstance(headers, dict):
            headers = {"Content-Type": "text/html; charset=utf-8", **headers}
        return build_message(response_headers=headers, response_body=body, **kwargs)

    return factory
