"""Message catalog used by detectors to render alert text."""

from collections.abc import Mapping
from functools import lru_cache
from importlib import resources
from typing import Any, Protocol

import yaml

DEFAULT_CATALOG_RESOURCE = "messages.yml"


class MessageCatalog(Protocol):
    """Anything that can render the text for a key with positional arguments."""

    def get(self, key: str, *args: Any) -> str: ...

    def __contains__(self, key: object) -> bool: ...


class YamlMessageCatalog:
    """Catalog backed by a nested YAML mapping flattened to dotted keys."""

    def __init__(self, messages: Mapping[str, str]):
        self._messages = dict(messages)

    @classmethod
    def from_text(cls, text: str) -> "YamlMessageCatalog":
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Message catalog must be a YAML mapping")
        return cls(_flatten(data))

    def get(self, key: str, *args: Any) -> str:
        """Return the message for ``key`` with ``{0}``-style arguments applied.

        Raises ``KeyError`` for unknown keys so missing text is caught when
        detectors are registered rather than rendered as a placeholder.
        """
        template = self._messages[key]
        return template.format(*args) if args else template

    def __contains__(self, key: object) -> bool:
        return key in self._messages


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = str(value).rstrip("\n")
    return flat


@lru_cache(maxsize=1)
def default_catalog() -> YamlMessageCatalog:
    """The bundled English catalog, loaded once per process."""
    text = (
        resources.files("clawscan.resources")
        .joinpath(DEFAULT_CATALOG_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return YamlMessageCatalog.from_text(text)
